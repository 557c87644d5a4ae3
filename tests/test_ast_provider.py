"""Tests for SyntaxTreeProvider and load_unit: languages, tagging, child slots, failures."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from textwrap import dedent

import pytest

from jsmells.ast_tracker import (
    NodeKind,
    ParseFailure,
    SyntaxNode,
    UnsupportedLanguageError,
    load_unit,
)
from jsmells.ast_tracker.provider import (
    SyntaxTreeProvider,
    get_provider,
    language_for_path,
    regenerate_text,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _walk(node: SyntaxNode) -> Iterator[SyntaxNode]:
    yield node
    for child in node.iter_children():
        yield from _walk(child)


def _build(source: str, language: str = "javascript") -> SyntaxNode:
    return SyntaxTreeProvider().build_tree(source, language)


def _first(tree: SyntaxNode, kind: NodeKind) -> SyntaxNode:
    return next(n for n in _walk(tree) if n.kind is kind)


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------


class TestLanguages:
    @pytest.mark.parametrize(
        ("path", "language"),
        [
            ("src/app.js", "javascript"),
            ("src/App.jsx", "javascript"),
            ("lib/index.mjs", "javascript"),
            ("lib/index.cjs", "javascript"),
            ("src/api.ts", "typescript"),
            ("src/api.mts", "typescript"),
            ("src/View.tsx", "tsx"),
            ("SRC/UPPER.JS", "javascript"),
        ],
    )
    def test_language_for_path(self, path, language):
        assert language_for_path(path) == language

    def test_unsupported_extension_raises(self):
        with pytest.raises(UnsupportedLanguageError, match="Unsupported file type"):
            language_for_path("notes.txt")

    def test_unsupported_error_is_value_error(self):
        with pytest.raises(ValueError):
            _build("x;", language="cobol")

    def test_typescript_syntax_needs_typescript_grammar(self):
        """Type annotations parse as TypeScript but fail as JavaScript."""
        source = "let total: number = 1;\n"
        assert _build(source, "typescript").kind is NodeKind.OTHER
        with pytest.raises(ParseFailure):
            _build(source, "javascript")

    def test_tsx_parses_jsx(self):
        tree = _build("const View = () => <div>{1}</div>;\n", "tsx")
        assert _first(tree, NodeKind.ARROW_FUNCTION).line == 1


# ---------------------------------------------------------------------------
# Node tagging and child slots
# ---------------------------------------------------------------------------


class TestTagging:
    def test_program_body_is_a_sequence(self):
        tree = _build("a();\nb();\n")
        assert tree.type == "program"
        assert isinstance(tree.body, tuple)
        assert [n.line for n in tree.body] == [1, 2]

    def test_function_declaration(self):
        tree = _build("function foo() { return 1; }\n")
        func = tree.body[0]
        assert func.kind is NodeKind.FUNCTION_DECLARATION
        assert func.name == "foo"
        assert func.line == 1
        assert func.text == "function foo() { return 1; }"
        assert func.body.type == "statement_block"

    def test_function_expression_and_arrow(self):
        tree = _build("const f = function () { return 1; };\nconst g = (x) => x * 2;\n")
        expr = _first(tree, NodeKind.FUNCTION_EXPRESSION)
        arrow = _first(tree, NodeKind.ARROW_FUNCTION)
        assert expr.line == 1
        assert arrow.line == 2
        assert arrow.name is None
        assert arrow.text == "(x) => x * 2"

    def test_arrow_expression_body_is_single_node(self):
        arrow = _first(_build("const f = a => b => a + b;\n"), NodeKind.ARROW_FUNCTION)
        assert isinstance(arrow.body, SyntaxNode)
        assert arrow.body.kind is NodeKind.ARROW_FUNCTION

    def test_class_method_named_by_key(self):
        source = dedent("""\
            class Store {
              save(item) {
                return item;
              }
            }
        """)
        method = _first(_build(source), NodeKind.CLASS_METHOD)
        assert method.name == "save"
        assert method.line == 2

    def test_object_literal_method_is_not_class_method(self):
        tree = _build("const o = { run() { return 1; } };\n")
        assert all(n.kind is not NodeKind.CLASS_METHOD for n in _walk(tree))

    def test_call_arguments_in_their_own_slot(self):
        call = _first(_build("run(() => 1, 2);\n"), NodeKind.CALL_EXPRESSION)
        assert [a.kind for a in call.arguments] == [NodeKind.ARROW_FUNCTION, NodeKind.OTHER]
        assert call.arguments[1].type == "number"
        assert all(c.type != "arguments" for c in call.children)

    def test_tagged_template_has_no_arguments(self):
        call = _first(_build("const q = sql`select 1`;\n"), NodeKind.CALL_EXPRESSION)
        assert call.arguments == ()

    def test_comments_are_skipped(self):
        tree = _build("// leading\nfoo(); /* trailing */\n")
        assert [n.type for n in tree.body] == ["expression_statement"]


# ---------------------------------------------------------------------------
# Text regeneration
# ---------------------------------------------------------------------------


class TestRegenerateText:
    def test_single_line_is_trimmed(self):
        assert regenerate_text("x => x   ") == "x => x"

    def test_continuation_lines_are_dedented(self):
        raw = "function f() {\n    return 1;\n  }"
        assert regenerate_text(raw) == "function f() {\n  return 1;\n}"

    def test_nested_method_matches_top_level_function(self):
        """The same body written at different indentation yields the same text."""
        top = _first(_build("function f() {\n  return 1;\n}\n"), NodeKind.FUNCTION_DECLARATION)
        nested = _first(
            _build("if (x) {\n  function f() {\n    return 1;\n  }\n}\n"),
            NodeKind.FUNCTION_DECLARATION,
        )
        assert top.text == nested.text


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_syntax_error_reports_line(self):
        with pytest.raises(ParseFailure, match="line 3"):
            _build("a();\nb();\nfunction {\n")

    def test_load_unit_records_parse_error(self):
        unit = load_unit("broken.js", "function {\n")
        assert unit.tree is None
        assert unit.parse_error.startswith("Syntax error near line")

    def test_load_unit_without_parse(self):
        unit = load_unit("broken.js", "function {\n", parse=False)
        assert unit.tree is None
        assert unit.parse_error is None

    def test_load_unit_normalizes_line_endings(self):
        unit = load_unit("a.js", "a();\r\nb();")
        assert unit.lines == ["a();", "b();"]
        assert unit.tree is not None

    def test_load_unit_reads_from_disk(self, tmp_path):
        path = tmp_path / "main.ts"
        path.write_text("export const n: number = 1;\n")
        unit = load_unit(str(path))
        assert unit.language == "typescript"
        assert unit.tree is not None

    def test_load_unit_rejects_unknown_extension(self):
        with pytest.raises(UnsupportedLanguageError):
            load_unit("style.css", "a {}")


# ---------------------------------------------------------------------------
# Per-thread providers
# ---------------------------------------------------------------------------


class TestProviderThreads:
    def test_same_thread_reuses_provider(self):
        assert get_provider() is get_provider()

    def test_threads_get_distinct_providers(self):
        seen = []
        thread = threading.Thread(target=lambda: seen.append(get_provider()))
        thread.start()
        thread.join()
        assert seen[0] is not get_provider()
