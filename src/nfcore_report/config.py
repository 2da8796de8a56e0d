from __future__ import annotations

import dataclasses
import json
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator, FormatChecker

from nfcore_report.context import WorkflowContext
from nfcore_report.exceptions import ConfigValidationError
from nfcore_report.io import describe_source, load_yaml_text, read_text_source

_FALLBACK_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

_LITERAL_SECTIONS = ("topic_versions", "legacy_versions")
_LITERAL_WORKFLOW_KEYS = ("version", "runtime_version", "commit_id")


def _load_schema_from_package(schema_name: str) -> dict[str, Any] | None:
    try:
        schema_path = resources.files("nfcore_report").joinpath(
            "schemas",
            f"{schema_name}.schema.json",
        )
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, ModuleNotFoundError, AttributeError):
        return None


@cache
def load_schema(schema_name: str) -> dict[str, Any]:
    schema = _load_schema_from_package(schema_name)
    if schema is not None:
        return schema
    schema_path = _FALLBACK_SCHEMA_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    return json.loads(schema_path.read_text(encoding="utf-8"))


def validate_config(
    config: Any, schema_name: str, *, config_path: Path | str | None = None
) -> None:
    schema = load_schema(schema_name)
    validator = Draft7Validator(schema, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(config), key=lambda exc: [str(p) for p in exc.path])
    if not errors:
        return
    location = str(config_path) if config_path else "<config>"
    lines = [f"Schema validation failed for {location} ({schema_name})."]
    error_details: list[dict[str, str]] = []
    for error in errors[:10]:
        path = ".".join(str(p) for p in error.path) if error.path else "<root>"
        lines.append(f"- {path}: {error.message}")
        error_details.append({"path": path, "message": error.message})
    if len(errors) > 10:
        lines.append(f"... and {len(errors) - 10} more errors.")
    raise ConfigValidationError(
        "\n".join(lines),
        context={
            "path": location,
            "schema": schema_name,
            "errors": error_details,
            "truncated": len(errors) > 10,
        },
    )


@dataclasses.dataclass
class ReportConfig:
    """Inputs for one CLI report run, with paths already resolved."""

    context: WorkflowContext
    topic_versions: list[list[Any]] = dataclasses.field(default_factory=list)
    legacy_versions: list[Any] = dataclasses.field(default_factory=list)
    meta_files: list[Path] = dataclasses.field(default_factory=list)
    citations: list[list[Any]] = dataclasses.field(default_factory=list)
    methods_template: Path | None = None
    outdir: Path | None = None
    summary_params: dict[str, Any] = dataclasses.field(default_factory=dict)


def _resolve(base_dir: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def _resolve_legacy(base_dir: Path, entry: Any) -> Any:
    # Multi-line strings are inline YAML, everything else names a versions file
    if isinstance(entry, str) and "\n" not in entry and ": " not in entry:
        return _resolve(base_dir, entry)
    return entry


def _with_literal_versions(typed: Any, literal: Any) -> Any:
    """Swap the version-bearing sections of ``typed`` for their string-preserving parse."""
    if not isinstance(typed, dict) or not isinstance(literal, dict):
        return typed
    merged = dict(typed)
    for key in _LITERAL_SECTIONS:
        if key in literal and typed.get(key) is not None:
            merged[key] = literal[key]
    workflow, literal_workflow = typed.get("workflow"), literal.get("workflow")
    if isinstance(workflow, dict) and isinstance(literal_workflow, dict):
        workflow = dict(workflow)
        for key in _LITERAL_WORKFLOW_KEYS:
            if workflow.get(key) is not None:
                workflow[key] = literal_workflow[key]
        manifest, literal_manifest = workflow.get("manifest"), literal_workflow.get("manifest")
        if isinstance(manifest, dict) and isinstance(literal_manifest, dict):
            if manifest.get("version") is not None:
                workflow["manifest"] = {**manifest, "version": literal_manifest["version"]}
        merged["workflow"] = workflow
    return merged


def read_report_config(path: Path) -> dict[str, Any]:
    """
    Parse a report configuration file.

    Version-bearing values keep the literal text that was written, so an
    unquoted ``1.10`` stays ``"1.10"``. Everything else is typed as usual.
    """
    text = read_text_source(path)
    source = describe_source(path)
    typed = load_yaml_text(text, source=source)
    literal = load_yaml_text(text, source=source, preserve_scalars=True)
    data = _with_literal_versions(typed, literal)
    return {} if data is None else data


def load_report_config(path: Path) -> ReportConfig:
    data = read_report_config(path)
    validate_config(data, "report_config", config_path=path)
    base_dir = path.resolve().parent
    template = data.get("methods_template")
    outdir = data.get("outdir")
    return ReportConfig(
        context=WorkflowContext.from_mapping(data.get("workflow")),
        topic_versions=[list(item) for item in data.get("topic_versions") or []],
        legacy_versions=[
            _resolve_legacy(base_dir, item) for item in data.get("legacy_versions") or []
        ],
        meta_files=[_resolve(base_dir, item) for item in data.get("meta_files") or []],
        citations=[list(item) for item in data.get("citations") or []],
        methods_template=_resolve(base_dir, template) if template else None,
        outdir=_resolve(base_dir, outdir) if outdir else None,
        summary_params=dict(data.get("summary_params") or {}),
    )
