"""
Shared pytest fixtures for report tests.

Provides:
- a default WorkflowContext
- factories for module meta.yml and legacy versions.yml files
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if SRC_ROOT.is_dir():
    sys.path.insert(0, str(SRC_ROOT))

from nfcore_report.context import WorkflowContext  # noqa: E402


@pytest.fixture
def samtools_info() -> dict[str, Any]:
    return {
        "doi": "10.1093/x",
        "author": "Li H",
        "year": 2009,
        "title": "SAMtools",
        "journal": "Bioinformatics",
        "homepage": "https://htslib.org",
    }


@pytest.fixture
def workflow_context() -> WorkflowContext:
    return WorkflowContext(
        name="testpipe",
        version="1.0.0",
        runtime_version="23.10.0",
        manifest={"name": "testpipe", "version": "1.0.0"},
    )


@pytest.fixture
def write_meta(tmp_path: Path) -> Callable[..., Path]:
    """Write ``modules/<module>/meta.yml`` with the given tools list."""

    def _write(module: str, tools: list[dict[str, Any]]) -> Path:
        path = tmp_path / "modules" / module / "meta.yml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump({"name": module, "tools": tools}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_versions(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a legacy versions.yml with literal text."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / "versions" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
