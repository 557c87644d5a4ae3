"""Tests for the smell registry, tree-based smells and line-based smells."""

from __future__ import annotations

from textwrap import dedent

import pytest

from jsmells.ast_tracker import load_unit
from jsmells.smells import ALL_SMELLS, UnknownSmellError, get_smell, select_smells
from jsmells.smells.ast_smells import DUPLICATE_CODE, LONG_FUNCTION, NESTED_CALLBACKS
from jsmells.smells.line_smells import (
    DEBUGGING_CODE,
    EMPTY_CATCH_BLOCK,
    INSECURE_FILE_HANDLING,
    LARGE_OBJECTS,
    LENGTHY_LINES,
    LONG_PARAMETER_LIST,
    MISSING_DEFAULT_CASE,
    SENSITIVE_INFORMATION,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(smell, source, config, file_path="example.js"):
    unit = load_unit(file_path, source, parse=smell.uses_tree)
    return smell.run(unit, config)


def _lines(findings):
    return [f.line for f in findings]


def _function(name, body_lines):
    body = "".join(f"  step{i}();\n" for i in range(body_lines))
    return f"function {name}() {{\n{body}}}\n"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_select_all(self):
        assert select_smells() == list(ALL_SMELLS)

    def test_select_keeps_registry_order(self):
        selected = select_smells(["Duplicate Code", "Lengthy Lines"])
        assert selected == [LENGTHY_LINES, DUPLICATE_CODE]

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownSmellError):
            select_smells(["Lengthy Lines", "Spaghetti"])

    def test_unknown_smell_is_key_error(self):
        with pytest.raises(KeyError):
            get_smell("Spaghetti")

    def test_names_are_unique(self):
        names = [s.name for s in ALL_SMELLS]
        assert len(names) == len(set(names))

    def test_only_tree_smells_need_a_tree(self):
        assert {s.name for s in ALL_SMELLS if s.uses_tree} == {
            NESTED_CALLBACKS.name,
            DUPLICATE_CODE.name,
            LONG_FUNCTION.name,
        }


# ---------------------------------------------------------------------------
# Tree-based smells
# ---------------------------------------------------------------------------


class TestTreeSmells:
    def test_nested_callbacks_message(self, tmp_config):
        findings = _run(NESTED_CALLBACKS, "const f = a => b => c => d => {};\n", tmp_config)
        assert len(findings) == 1
        assert findings[0].line == 1
        assert findings[0].smell == "Nested Callbacks (Callback Hell)"
        assert findings[0].description == (
            "Function nesting exceeds the maximum allowed depth of 3. Current depth: 4."
        )

    def test_nested_callbacks_respects_config(self, tmp_config):
        tmp_config.max_nesting_depth = 4
        assert _run(NESTED_CALLBACKS, "const f = a => b => c => d => {};\n", tmp_config) == []

    def test_duplicate_code_finding(self, tmp_config):
        source = dedent("""\
            function first(list) {
              const seen = new Set();
              for (const item of list) {
                seen.add(item);
              }
              return seen.size;
            }

            function second(list) {
              const seen = new Set();
              for (const item of list) {
                seen.add(item);
              }
              return seen.size;
            }
        """)
        findings = _run(DUPLICATE_CODE, source, tmp_config)
        assert len(findings) == 1

        finding = findings[0]
        assert finding.line == 1
        assert finding.description.startswith("Duplicate code detected with ")
        assert finding.description.endswith("% similarity.")

        details = finding.details
        assert details.block1.start_line == 1
        assert details.block2.start_line == 9
        assert details.block1.type == "function-declaration"
        assert details.block1.name == "first"
        assert details.similar_lines[0].block1_lines == [2, 3, 4, 5, 6, 7]
        assert details.message.startswith("Found 1 similar code segments:")
        assert "- Lines 2,3,4,5,6,7 match lines 2,3,4,5,6,7:" in details.message

    def test_duplicate_percentage_rounds_half_up(self, tmp_config):
        tmp_config.min_duplicate_length = 2
        tmp_config.similarity_threshold = 0.5
        source = "const a = (x) => x + 1;\nconst b = (x) => x + 2;\n"
        findings = _run(DUPLICATE_CODE, source, tmp_config)
        # "(x) => x + 1" vs "(x) => x + 2": 11 of 12 characters match.
        assert findings[0].description == "Duplicate code detected with 92% similarity."

    def test_long_function_is_flagged(self, tmp_config):
        findings = _run(LONG_FUNCTION, _function("process", 22) + _function("short", 20), tmp_config)
        assert _lines(findings) == [1]
        assert findings[0].smell == "Long Method/Function"
        assert findings[0].description == (
            "Function 'process' exceeds 20 lines. Consider refactoring it into smaller functions."
        )

    def test_long_function_respects_config(self, tmp_config):
        tmp_config.max_function_lines = 25
        assert _run(LONG_FUNCTION, _function("process", 22), tmp_config) == []

    def test_long_arrow_and_method(self, tmp_config):
        body = "".join(f"    step{i}();\n" for i in range(21))
        source = (
            "const handler = () => {\n" + body + "};\n"
            "class Worker {\n  run() {\n" + body + "  }\n}\n"
        )
        findings = _run(LONG_FUNCTION, source, tmp_config)
        assert _lines(findings) == [1, 25]
        assert "'Anonymous Function'" in findings[0].description
        assert "'run'" in findings[1].description

    def test_tree_smells_skip_unparsed_units(self, tmp_config):
        unit = load_unit("broken.js", "function {\n")
        assert NESTED_CALLBACKS.run(unit, tmp_config) == []
        assert DUPLICATE_CODE.run(unit, tmp_config) == []
        assert LONG_FUNCTION.run(unit, tmp_config) == []


# ---------------------------------------------------------------------------
# Line-based smells
# ---------------------------------------------------------------------------


class TestLengthyLines:
    def test_error_and_warning(self, tmp_config):
        long_line = "const v = " + "1 + " * 25 + "1;"
        warn_line = "const w = " + "2 + " * 18 + "2;"
        findings = _run(LENGTHY_LINES, f"{long_line}\n{warn_line}\nok();\n", tmp_config)
        assert _lines(findings) == [1, 2]
        assert findings[0].description.startswith(
            f"Line exceeds 100 characters ({len(long_line)} characters)."
        )
        assert findings[1].description.startswith(
            f"Line exceeds 80 characters ({len(warn_line)} characters). This is a warning"
        )

    def test_comment_lines_are_skipped(self, tmp_config):
        source = "// " + "x" * 120 + "\n"
        assert _run(LENGTHY_LINES, source, tmp_config) == []

    def test_class_attributes_are_skipped(self, tmp_config):
        source = '<div className="' + "p-4 " * 30 + '">\n'
        assert _run(LENGTHY_LINES, source, tmp_config) == []

    def test_long_string_lines_are_checked(self, tmp_config):
        source = "const msg = '" + "y" * 120 + "';\n"
        assert _lines(_run(LENGTHY_LINES, source, tmp_config)) == [1]


class TestLineChecks:
    def test_long_parameter_list(self, tmp_config):
        source = dedent("""\
            function build(a, b, c) {}
            const pair = (a, b) => a + b;
            const triple = (a, b, c) => a + b + c;
        """)
        findings = _run(LONG_PARAMETER_LIST, source, tmp_config)
        assert _lines(findings) == [1, 3]
        assert findings[0].description.startswith("Function has 3 parameters")

    def test_empty_catch(self, tmp_config):
        source = dedent("""\
            try { a(); } catch (e) {}
            try { b(); } catch (err) {
              // ignored
            }
            try { c(); } catch {}
            try { d(); } catch (e) { log(e); }
        """)
        findings = _run(EMPTY_CATCH_BLOCK, source, tmp_config)
        assert _lines(findings) == [1, 2, 5]

    def test_missing_default(self, tmp_config):
        source = dedent("""\
            switch (kind) {
              case 1: run(); break;
            }
            switch (kind) {
              case 1: run(); break;
              default: stop();
            }
        """)
        findings = _run(MISSING_DEFAULT_CASE, source, tmp_config)
        assert _lines(findings) == [1]

    def test_sensitive_information(self, tmp_config):
        source = dedent("""\
            const creds = { password: "hunter22" };
            const url = process.env.DATABASE_URL;
            const name = "alice";
        """)
        findings = _run(SENSITIVE_INFORMATION, source, tmp_config)
        assert _lines(findings) == [1, 2]
        assert findings[0].description == "Hard-coded password detected."
        assert findings[1].description == "Environment variable access detected."

    def test_debugging_code(self, tmp_config):
        source = dedent("""\
            console.log(value);
            alert(message);
            logger.info(value);
            console.log("see http://example.com // docs");
        """)
        findings = _run(DEBUGGING_CODE, source, tmp_config)
        assert _lines(findings) == [1, 2]
        assert findings[0].description.startswith("Active debugging code detected: console.log.")

    def test_large_objects(self, tmp_config):
        ten = ", ".join(f"k{i}: {i}" for i in range(10))
        nine = ",\n".join(f"  k{i}: {i}" for i in range(9))
        source = f"const settings = {{ {ten} }};\nconst small = {{\n{nine},\n}};\n"
        findings = _run(LARGE_OBJECTS, source, tmp_config)
        assert _lines(findings) == [1]
        assert findings[0].description.startswith("Object has too many properties (10 properties).")

    def test_large_objects_respects_config(self, tmp_config):
        tmp_config.large_object_properties = 3
        assert _lines(_run(LARGE_OBJECTS, "const p = { x: 1, y: 2, z: 3 };\n", tmp_config)) == [1]

    def test_insecure_file_handling(self, tmp_config):
        source = dedent("""\
            const multer = require("multer");
            const upload = multer({ dest: "uploads/" });
            app.post("/avatar", upload.single("avatar"), save);
            app.post("/docs", validate(rules), upload.array("docs"), save);
        """)
        findings = _run(INSECURE_FILE_HANDLING, source, tmp_config)
        assert _lines(findings) == [3]
        assert findings[0].description.startswith("Insecure file handling detected.")

    def test_upload_calls_need_an_upload_library(self, tmp_config):
        source = 'app.post("/avatar", upload.single("avatar"), save);\n'
        assert _run(INSECURE_FILE_HANDLING, source, tmp_config) == []

    def test_line_smells_run_without_tree(self, tmp_config):
        unit = load_unit("broken.js", "console.log(1);\nfunction {\n")
        assert unit.tree is None
        assert _lines(DEBUGGING_CODE.run(unit, tmp_config)) == [1]
