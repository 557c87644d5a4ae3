"""Pydantic models for analysis findings and reports."""

from pydantic import BaseModel, Field


class BlockRef(BaseModel):
    start_line: int
    type: str  # function-declaration | class-method | arrow-function
    name: str


class LineMapping(BaseModel):
    block1_lines: list[int]
    block2_lines: list[int]
    code: list[str]


class DuplicateDetail(BaseModel):
    """Structured evidence attached to a duplicate-code finding."""

    block1: BlockRef
    block2: BlockRef
    similarity: float
    similar_lines: list[LineMapping] = Field(default_factory=list)
    message: str = ""


class Finding(BaseModel):
    file: str
    line: int
    smell: str
    description: str
    fix: str
    details: DuplicateDetail | None = None


class ParseDiagnostic(BaseModel):
    """A unit whose syntax tree could not be built or whose text could not be read."""

    file: str
    message: str


class AnalysisReport(BaseModel):
    """Aggregated results from analyzing a file or a directory."""

    root: str
    files_analyzed: int = 0
    findings: list[Finding] = Field(default_factory=list)
    diagnostics: list[ParseDiagnostic] = Field(default_factory=list)
    duration_seconds: float = 0.0

    def files_with_findings(self) -> dict[str, list[Finding]]:
        """Group findings by file, preserving report order."""
        grouped: dict[str, list[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.file, []).append(finding)
        return grouped
