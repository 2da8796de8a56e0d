"""
Software version aggregation.

Pipeline steps report tool versions in several shapes, depending on how old
the module emitting them is:

- topic tuples ``(process, tool, version)`` from the ``versions`` topic
- inline YAML text, either flat (``tool: 1.0``) or nested
  (``PROCESS:\\n  tool: 1.0``), including the legacy ``prefix:tool: 1.0`` keys
- a path or open handle to a ``versions.yml`` file holding such YAML
- an already-parsed mapping

Each shape is normalised into ``VersionRecord`` objects, which are folded
into a ``VersionReport`` keyed by process display name and tool name.

Conflict policy: when two entries describe the same ``(process, tool)``, the
entry that comes later in the supplied sequence wins. The orchestrator lists
topic entries before legacy entries, so legacy file data overrides topic data.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import IO, Any, Union

import yaml

from nfcore_report.context import UNKNOWN, format_workflow_version
from nfcore_report.exceptions import EntryTypeError, ReportError
from nfcore_report.io import describe_source, load_yaml_text, read_text_source
from nfcore_report.logging_config import log_event

logger = logging.getLogger(__name__)

SOFTWARE_BUCKET = "Software"
WORKFLOW_BUCKET = "Workflow"
RUNTIME_TOOL = "Nextflow"

_YAML_SUFFIXES = (".yml", ".yaml")


def display_name(key: Any) -> str:
    """Last ``:``-delimited segment, e.g. ``NFCORE:PIPE:FASTQC`` -> ``FASTQC``."""
    text = str(key)
    segments = [segment for segment in text.split(":") if segment]
    return segments[-1].strip() if segments else text.strip()


def _version_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclasses.dataclass(frozen=True)
class VersionRecord:
    process: str
    tool: str
    version: str

    @property
    def process_name(self) -> str:
        return display_name(self.process)


def _records_from_mapping(data: Mapping[Any, Any]) -> Iterator[VersionRecord]:
    for key, value in data.items():
        if isinstance(value, Mapping):
            process = str(key)
            for tool, version in value.items():
                if isinstance(version, Mapping):
                    logger.warning(
                        "Skipping nested version value for %s/%s: expected a scalar",
                        process,
                        tool,
                    )
                    continue
                yield VersionRecord(process, display_name(tool), _version_string(version))
        else:
            yield VersionRecord(SOFTWARE_BUCKET, display_name(key), _version_string(value))


@dataclasses.dataclass(frozen=True)
class TopicVersion:
    """``(process, tool, version)`` emitted on the versions topic."""

    process: Any
    tool: Any
    version: Any

    def records(self) -> list[VersionRecord]:
        tool = "" if self.tool is None else str(self.tool).strip()
        if not tool:
            logger.warning("Skipping topic version entry without a tool name: %r", self)
            return []
        return [VersionRecord(str(self.process), tool, _version_string(self.version))]


@dataclasses.dataclass(frozen=True)
class VersionMapping:
    """A versions document that has already been parsed into a mapping."""

    data: Mapping[Any, Any]

    def records(self) -> list[VersionRecord]:
        return [record for record in _records_from_mapping(self.data) if record.tool]


@dataclasses.dataclass(frozen=True)
class YamlVersionText:
    """Inline YAML text in the flat, nested or legacy ``prefix:tool`` layout."""

    text: str
    source: str = "<string>"

    def records(self) -> list[VersionRecord]:
        data = load_yaml_text(self.text, source=self.source, preserve_scalars=True)
        if data is None:
            return []
        if not isinstance(data, Mapping):
            logger.warning(
                "Skipping versions document from %s: expected a mapping, got %s",
                self.source,
                type(data).__name__,
            )
            return []
        return VersionMapping(data).records()


@dataclasses.dataclass(frozen=True)
class YamlVersionFile:
    """A ``versions.yml`` given as a path, path-like object or open handle."""

    source: Union[str, "os.PathLike[str]", IO[str]]

    def records(self) -> list[VersionRecord]:
        text = read_text_source(self.source)
        return YamlVersionText(text, source=describe_source(self.source)).records()


VersionEntry = Union[TopicVersion, YamlVersionText, YamlVersionFile, VersionMapping]


def _looks_like_path(text: str) -> bool:
    if "\n" in text:
        return False
    stripped = text.strip()
    try:
        if Path(stripped).is_file():
            return True
    except (OSError, ValueError):
        return False
    return ": " not in stripped and stripped.endswith(_YAML_SUFFIXES)


def classify_version_entry(entry: Any) -> VersionEntry | None:
    """Map a loosely typed entry onto one of the supported shapes, or ``None``."""
    if isinstance(entry, (TopicVersion, YamlVersionText, YamlVersionFile, VersionMapping)):
        return entry
    if isinstance(entry, (list, tuple)):
        if len(entry) >= 3:
            return TopicVersion(entry[0], entry[1], entry[2])
        return None
    if isinstance(entry, os.PathLike) or hasattr(entry, "read"):
        return YamlVersionFile(entry)
    if isinstance(entry, str):
        if _looks_like_path(entry):
            return YamlVersionFile(entry.strip())
        return YamlVersionText(entry)
    if isinstance(entry, Mapping):
        return VersionMapping(entry)
    return None


def parse_version_entry(entry: Any) -> list[VersionRecord]:
    """
    Normalise one entry into version records.

    Never raises for bad data: unreadable files, malformed YAML and unknown
    shapes are logged and contribute no records.
    """
    variant = classify_version_entry(entry)
    if variant is None:
        logger.warning("Skipping unsupported version entry of type %s", type(entry).__name__)
        return []
    try:
        return variant.records()
    except ReportError as exc:
        log_event(logger, "Skipping version entry", level=logging.WARNING, **exc.as_log_fields())
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning("Skipping version entry %r: %s", entry, exc)
    return []


@dataclasses.dataclass
class VersionReport:
    """``process display name -> {tool: version}`` with the ``Workflow`` bucket."""

    processes: dict[str, dict[str, str]] = dataclasses.field(default_factory=dict)

    def add(self, record: VersionRecord) -> None:
        self.processes.setdefault(record.process_name, {})[record.tool] = record.version

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {
            process: {tool: tools[tool] for tool in sorted(tools)}
            for process, tools in sorted(self.processes.items())
        }

    def to_yaml(self) -> str:
        text = yaml.safe_dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
        )
        return text.rstrip()

    def tools(self) -> dict[str, str]:
        """Flatten to ``tool -> version``; later processes in sort order win."""
        flat: dict[str, str] = {}
        for tools in self.to_dict().values():
            flat.update(tools)
        return flat


def _ensure_entry_sequence(entries: Any, argument: str) -> list[Any]:
    if entries is None:
        return []
    if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
        raise EntryTypeError(
            f"{argument} must be a sequence of entries, got {type(entries).__name__}",
            received=type(entries),
        )
    return list(entries)


def aggregate_versions(
    entries: Iterable[Any],
    workflow_name: str | None,
    workflow_version: str | None,
    runtime_version: str | None,
    *,
    commit_id: str | None = None,
) -> VersionReport:
    """
    Fold version entries into a report and append the ``Workflow`` bucket.

    Entries are applied in order and later entries overwrite earlier ones for
    the same ``(process, tool)`` key.
    """
    report = VersionReport()
    for entry in _ensure_entry_sequence(entries, "entries"):
        for record in parse_version_entry(entry):
            report.add(record)
    for record in workflow_version_records(
        workflow_name, workflow_version, runtime_version, commit_id=commit_id
    ):
        report.add(record)
    return report


def workflow_version_records(
    workflow_name: str | None,
    workflow_version: str | None,
    runtime_version: str | None,
    *,
    commit_id: str | None = None,
) -> list[VersionRecord]:
    """The synthesized ``Workflow`` entries, in topic-tuple form."""
    return [
        VersionRecord(
            WORKFLOW_BUCKET,
            workflow_name or UNKNOWN,
            format_workflow_version(workflow_version, commit_id),
        ),
        VersionRecord(WORKFLOW_BUCKET, RUNTIME_TOOL, _version_string(runtime_version) or UNKNOWN),
    ]


def software_versions_report(
    topic_versions: Iterable[Any] | None,
    legacy_versions: Iterable[Any] | None,
    workflow_name: str | None,
    workflow_version: str | None,
    runtime_version: str | None,
    *,
    commit_id: str | None = None,
) -> VersionReport:
    """Topic entries first, legacy entries after them."""
    entries = [
        *_ensure_entry_sequence(topic_versions, "topic_versions"),
        *_ensure_entry_sequence(legacy_versions, "legacy_versions"),
    ]
    return aggregate_versions(
        entries, workflow_name, workflow_version, runtime_version, commit_id=commit_id
    )


def software_versions_to_yaml(
    topic_versions: Iterable[Any] | None,
    legacy_versions: Iterable[Any] | None,
    workflow_name: str | None,
    workflow_version: str | None,
    runtime_version: str | None,
    *,
    commit_id: str | None = None,
) -> str:
    return software_versions_report(
        topic_versions,
        legacy_versions,
        workflow_name,
        workflow_version,
        runtime_version,
        commit_id=commit_id,
    ).to_yaml()
