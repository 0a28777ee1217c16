from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def test_project_metadata_declares_runtime_stack():
    with open(ROOT / "pyproject.toml", "rb") as fh:
        project = tomllib.load(fh)["project"]
    assert "readme" not in project
    assert {"numpy>=1.24", "numba>=0.58", "PySide6>=6.5"} <= set(project["dependencies"])
