"""
Workflow identity passed explicitly into every report operation.

A ``WorkflowContext`` is the read-only view of the running pipeline that the
aggregators need: its name, version, commit and the version of the runtime
executing it. It replaces any lookup of an ambient session object.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

UNKNOWN = "unknown"


def format_workflow_version(version: str | None, commit_id: str | None = None) -> str:
    """
    Format a pipeline version for display.

    ``"1.0.0"`` becomes ``"v1.0.0"``; a version already starting with ``v`` is
    kept as-is. When a commit id is known the short sha is appended as
    ``-g<sha7>``.
    """
    version_string = ""
    if version:
        version = str(version)
        prefix = "" if version.startswith("v") else "v"
        version_string += f"{prefix}{version}"
    if commit_id:
        version_string += f"-g{str(commit_id)[:7]}"
    return version_string


@dataclasses.dataclass(frozen=True)
class WorkflowContext:
    name: str | None = None
    version: str | None = None
    commit_id: str | None = None
    runtime_version: str | None = None
    manifest: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    metadata: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> WorkflowContext:
        data = dict(data or {})
        manifest = dict(data.get("manifest") or {})
        name = data.get("name") or manifest.get("name")
        version = data.get("version") or manifest.get("version")
        if name and "name" not in manifest:
            manifest["name"] = name
        if version and "version" not in manifest:
            manifest["version"] = version
        return cls(
            name=_optional_str(name),
            version=_optional_str(version),
            commit_id=_optional_str(data.get("commit_id")),
            runtime_version=_optional_str(data.get("runtime_version")),
            manifest=manifest,
            metadata=dict(data.get("metadata") or {}),
        )

    def version_string(self) -> str:
        return format_workflow_version(self.version, self.commit_id)

    def template_variables(self) -> dict[str, Any]:
        """Variables visible to the methods-description template."""
        workflow: dict[str, Any] = dict(self.metadata)
        workflow.setdefault("manifest", dict(self.manifest))
        workflow.setdefault("nextflow", {"version": self.runtime_version or UNKNOWN})
        if self.commit_id:
            workflow.setdefault("commitId", self.commit_id)
        workflow.setdefault("revision", self.version)
        return {
            "workflow": workflow,
            "manifest_map": dict(self.manifest),
        }


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
