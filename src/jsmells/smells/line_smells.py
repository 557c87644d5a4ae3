"""Smells detected from raw lines with regular expressions.

These never need a syntax tree, so they still run on files that fail to
parse.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from jsmells.smells.base import Occurrence, Smell

if TYPE_CHECKING:
    from jsmells.ast_tracker.types import SourceUnit
    from jsmells.config import Config

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_CLASS_ATTR_RE: Final = re.compile(r"class(?:Name)?=(?:\{?`[^`]*`|\{[^}]*\}|\"[^\"]*\")")
_ROUTE_TAG_RE: Final = re.compile(r"<Route\s[^>]*>")
_COMMENT_LINE_RE: Final = re.compile(r"^\s*(?://.*|/\*.*?\*/|\{/\*.*?\*/\})\s*$")

_PARAMS_RE: Final = re.compile(r"function\s+\w*\s*\(([^)]*)\)|\(([^)]*)\)\s*=>")

_EMPTY_CATCH_RE: Final = re.compile(r"catch\s*(?:\(\s*\w+(?:\s*:\s*\w+)?\s*\))?\s*\{([\s\S]*?)\}")

_SWITCH_RE: Final = re.compile(r"switch\s*\(([^)]+)\)\s*\{([^}]*?)\}")
_DEFAULT_CASE_RE: Final = re.compile(r"\bdefault\s*:")

_OBJECT_LITERAL_RE: Final = re.compile(r"const\s+\w+\s*=\s*\{([^}]+)\}")

_SENSITIVE_PATTERNS: Final = (
    (
        re.compile(r"(?:api[_\-\s]?key|token|secret)[^a-zA-Z0-9]*['\":]?\s*['\"]?[\w\-]{32,}['\"]?", re.I),
        "Hard-coded API key, token, or secret detected.",
    ),
    (
        re.compile(r"password\s*['\":]?\s*['\"]?[\w\-]{6,}['\"]?", re.I),
        "Hard-coded password detected.",
    ),
    (
        re.compile(r"private[_\-\s]?key\s*['\":]?\s*['\"]?[\w\-]{32,}['\"]?", re.I),
        "Hard-coded private key detected.",
    ),
    (
        re.compile(r"access[_\-\s]?key\s*['\":]?\s*['\"]?[\w\-]{20,}['\"]?", re.I),
        "Hard-coded access key detected.",
    ),
    (
        re.compile(r"process\.env\.[a-zA-Z_][a-zA-Z0-9_]*", re.I),
        "Environment variable access detected.",
    ),
)

_DEBUG_CODE_RE: Final = re.compile(r"console\.log|console\.debug|console\.error|alert\(")
_QUOTE_RE: Final = re.compile(r"['\"`]")
_INLINE_COMMENT_RE: Final = re.compile(r"//|/\*.*\*/")

_UPLOAD_LIBRARY_RE: Final = re.compile(r"multer|express-fileupload|busboy")
_UPLOAD_CALL_RE: Final = re.compile(r"\.(?:single|any|array|file)\(")
_VALIDATION_RE: Final = re.compile(r"validate\(|sanitize\(")


def _line_of(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_lengthy_lines(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for idx, line in enumerate(unit.lines, start=1):
        if _CLASS_ATTR_RE.search(line) or _ROUTE_TAG_RE.search(line) or _COMMENT_LINE_RE.match(line):
            continue
        length = len(line)
        if length > config.max_line_length:
            issues.append(
                Occurrence(
                    line=idx,
                    description=(
                        f"Line exceeds {config.max_line_length} characters ({length} characters). "
                        "Consider breaking it into multiple lines for better readability."
                    ),
                )
            )
        elif length > config.line_length_warning:
            issues.append(
                Occurrence(
                    line=idx,
                    description=(
                        f"Line exceeds {config.line_length_warning} characters ({length} characters). "
                        "This is a warning; consider shortening it."
                    ),
                )
            )
    return issues


def check_long_parameter_list(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for idx, line in enumerate(unit.lines, start=1):
        match = _PARAMS_RE.search(line)
        if match is None:
            continue
        params = (match.group(1) or match.group(2) or "").split(",")
        if len(params) > config.max_parameters:
            issues.append(
                Occurrence(
                    line=idx,
                    description=(
                        f"Function has {len(params)} parameters, which exceeds the recommended "
                        f"limit of {config.max_parameters}. Consider refactoring the function to "
                        "use a single configuration object or simplifying the function's "
                        "responsibilities."
                    ),
                )
            )
    return issues


def check_empty_catch(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for match in _EMPTY_CATCH_RE.finditer(unit.text):
        content = match.group(1).strip()
        if not content or content.startswith("//"):
            issues.append(
                Occurrence(
                    line=_line_of(unit.text, match.start()),
                    description="Empty catch block found. Consider handling or logging the error.",
                )
            )
    return issues


def check_missing_default(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for match in _SWITCH_RE.finditer(unit.text):
        if _DEFAULT_CASE_RE.search(match.group(2)):
            continue
        issues.append(
            Occurrence(
                line=_line_of(unit.text, match.start()),
                description=(
                    "Missing default case in the switch statement. Consider adding a default "
                    "case to handle unexpected input."
                ),
            )
        )
    return issues


def check_large_objects(unit: SourceUnit, config: Config) -> list[Occurrence]:
    threshold = config.large_object_properties
    issues: list[Occurrence] = []
    for match in _OBJECT_LITERAL_RE.finditer(unit.text):
        # A trailing comma does not add a property.
        properties = sum(1 for part in match.group(1).split(",") if part.strip())
        if properties >= threshold:
            issues.append(
                Occurrence(
                    line=_line_of(unit.text, match.start()),
                    description=(
                        f"Object has too many properties ({properties} properties). Consider "
                        "breaking it into smaller objects to reduce complexity and potential "
                        "security risks."
                    ),
                )
            )
    return issues


def check_sensitive_information(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for idx, line in enumerate(unit.lines, start=1):
        for pattern, description in _SENSITIVE_PATTERNS:
            if pattern.search(line):
                issues.append(Occurrence(line=idx, description=description))
    return issues


def check_debugging_code(unit: SourceUnit, config: Config) -> list[Occurrence]:
    issues: list[Occurrence] = []
    for idx, line in enumerate(unit.lines, start=1):
        # Lines quoting a comment marker are too ambiguous to judge.
        if _QUOTE_RE.search(line) and _INLINE_COMMENT_RE.search(line):
            continue
        for match in _DEBUG_CODE_RE.finditer(line):
            issues.append(
                Occurrence(
                    line=idx,
                    description=(
                        f"Active debugging code detected: {match.group(0)}. "
                        "Consider removing or disabling in production."
                    ),
                )
            )
    return issues


def check_insecure_file_handling(unit: SourceUnit, config: Config) -> list[Occurrence]:
    """Upload handlers called without validation, in files using an upload library."""
    if not _UPLOAD_LIBRARY_RE.search(unit.text):
        return []
    return [
        Occurrence(
            line=idx,
            description=(
                "Insecure file handling detected. The file upload is not validated or "
                "sanitized. This can lead to security vulnerabilities."
            ),
        )
        for idx, line in enumerate(unit.lines, start=1)
        if _UPLOAD_CALL_RE.search(line) and not _VALIDATION_RE.search(line)
    ]


# ---------------------------------------------------------------------------
# Smell definitions
# ---------------------------------------------------------------------------

LENGTHY_LINES = Smell(
    name="Lengthy Lines",
    description="Lines longer than the configured warning and error limits.",
    fix="Break lengthy lines into multiple shorter lines or refactor the code for better readability.",
    check=check_lengthy_lines,
)

LONG_PARAMETER_LIST = Smell(
    name="Long Parameter List",
    description="Functions declaring more parameters than recommended.",
    fix=(
        "Refactor the function to use a single configuration object for its parameters "
        "or split it into smaller, more specific functions."
    ),
    check=check_long_parameter_list,
)

EMPTY_CATCH_BLOCK = Smell(
    name="Empty Catch Block",
    description="catch blocks that are empty or only hold a comment.",
    fix=(
        "Ensure that catch blocks handle the error appropriately, either by logging, "
        "rethrowing, or taking other action. Avoid leaving empty catch blocks that could "
        "obscure issues."
    ),
    check=check_empty_catch,
)

MISSING_DEFAULT_CASE = Smell(
    name="Missing Default in Case Statement",
    description="switch statements without a default case.",
    fix=(
        "Add a default case in the switch statement to handle all potential input values, "
        "ensuring proper error handling and preventing undefined behavior."
    ),
    check=check_missing_default,
)

SENSITIVE_INFORMATION = Smell(
    name="Hard-Coded Sensitive Information",
    description="Passwords, keys, tokens or environment lookups written into the source.",
    fix=(
        "Never hard-code sensitive information like passwords, API keys, or private keys "
        "directly in the code. Store them in environment variables or external "
        "configuration files and inject secrets at runtime from a secrets manager."
    ),
    check=check_sensitive_information,
)

DEBUGGING_CODE = Smell(
    name="Active Debugging Code",
    description="console.log, console.debug, console.error and alert() calls.",
    fix=(
        "Ensure that all debugging statements (console.log, console.debug, console.error, "
        "alert) are removed or disabled in production code. Use environment variables to "
        "conditionally enable debugging only in non-production environments."
    ),
    check=check_debugging_code,
)

LARGE_OBJECTS = Smell(
    name="Large Objects",
    description="const object literals declaring too many properties.",
    fix=(
        "Refactor large objects by breaking them into smaller, more manageable objects. "
        "This will reduce complexity and make the code easier to maintain and less prone "
        "to security vulnerabilities."
    ),
    check=check_large_objects,
)

INSECURE_FILE_HANDLING = Smell(
    name="Insecure File Handling",
    description="multer, express-fileupload or busboy uploads accepted without validation.",
    fix=(
        "Validate uploaded files before use: restrict accepted MIME types and extensions, "
        "cap file size and count, and sanitize file names before writing them to disk."
    ),
    check=check_insecure_file_handling,
)
