"""Shared fixtures for all test modules."""

from textwrap import dedent

import pytest

from jsmells.config import Config
from jsmells.logging.logger import RunLogger


@pytest.fixture
def tmp_config(tmp_path):
    """Config pointing to a temp directory with two workers."""
    config = Config(base_dir=tmp_path / ".jsmells", workers=2)
    config.ensure_dirs()
    return config


@pytest.fixture
def run_logger(tmp_config):
    """RunLogger writing to temp dir."""
    return RunLogger(tmp_config.log_dir)


@pytest.fixture
def project_dir(tmp_path):
    """Small JS project: one smelly file, one broken file, ignored files."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)

    (root / "src" / "app.js").write_text(
        dedent("""\
            function load(path, options, callback) {
              console.log(path);
            }
        """)
    )
    (root / "src" / "broken.js").write_text(
        dedent("""\
            console.debug("start");
            function {
        """)
    )
    (root / "src" / "clean.ts").write_text("export const one = (): number => 1;\n")
    (root / "src" / "vendor.min.js").write_text("console.log(1);\n")
    (root / "node_modules" / "lib" / "index.js").write_text("console.log(1);\n")
    (root / "README.md").write_text("# project\n")
    return root
