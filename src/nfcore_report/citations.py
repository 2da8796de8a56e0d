"""
Tool citation collection and rendering.

Citation data comes from module ``meta.yml`` files (a ``tools:`` list of
``{tool_name: {doi, description, author, year, title, journal, homepage}}``
maps) or from ``(module, tool, citation_data)`` tuples on the citation topic.
Both are normalised into ``CitationRecord`` objects and merged by tool name,
later sources overwriting earlier ones.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from nfcore_report.config import validate_config
from nfcore_report.exceptions import EntryTypeError, ReportError
from nfcore_report.io import describe_source, read_yaml
from nfcore_report.logging_config import log_event

logger = logging.getLogger(__name__)

NO_TOOLS_TEXT = "No tools used in the workflow."
NO_BIBLIOGRAPHY_TEXT = "No bibliography entries found."
UNKNOWN_MODULE = "UNKNOWN_MODULE"

# Top-level keys of a module meta.yml; a mapping with any of them is a meta document
META_DOCUMENT_KEYS = frozenset(
    {"name", "description", "keywords", "tools", "input", "output", "authors", "maintainers"}
)

CitationReport = dict[str, "CitationRecord"]


@dataclasses.dataclass(frozen=True)
class CitationRecord:
    tool: str
    citation: str
    bibliography: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"citation": self.citation, "bibliography": self.bibliography}


def _field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item)
    return str(value).strip()


def format_citation(tool: str, data: Mapping[str, Any]) -> str:
    doi = _field(data, "doi")
    if doi:
        return f"{tool} (DOI: {doi})"
    description = _field(data, "description")
    if description:
        return f"{tool} ({description})"
    return tool


def format_bibliography(tool: str, data: Mapping[str, Any]) -> str:
    doi = _field(data, "doi")
    parts = [
        _field(data, "author"),
        _field(data, "year"),
        _field(data, "title") or tool,
        _field(data, "journal"),
        f"doi: {doi}" if doi else "",
    ]
    entry = ". ".join(part for part in parts if part)
    homepage = _field(data, "homepage")
    if homepage:
        entry += f". <a href='{homepage}'>{homepage}</a>"
    return f"<li>{entry}</li>"


def tool_record(tool: Any, info: Any) -> CitationRecord:
    """Citation for one entry of a ``meta.yml`` ``tools:`` list."""
    name = str(tool)
    if isinstance(info, Mapping):
        return CitationRecord(name, format_citation(name, info), format_bibliography(name, info))
    if info is None:
        return CitationRecord(name, name, None)
    return CitationRecord(name, name, f"<li>{name}</li>")


def topic_record(module: Any, tool: Any, data: Any) -> CitationRecord:
    """Citation for a ``(module, tool, citation_data)`` topic tuple."""
    name = str(tool)
    if isinstance(data, Mapping):
        return tool_record(name, data)
    if data is None:
        return CitationRecord(name, name, None)
    return CitationRecord(name, str(data), f"<li>{data}</li>")


def _tool_items(meta: Mapping[str, Any]) -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for tool_entry in meta.get("tools") or []:
        for tool_name, tool_info in tool_entry.items():
            items.append((str(tool_name), tool_info))
    return items


def load_module_meta(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read and validate a module ``meta.yml``."""
    meta = read_yaml(path)
    validate_config(meta, "module_meta", config_path=describe_source(path))
    return meta


def parse_module_meta(path: str | os.PathLike[str]) -> list[CitationRecord]:
    """Citation records for every tool a module's ``meta.yml`` declares."""
    meta = load_module_meta(path)
    return [tool_record(name, info) for name, info in _tool_items(meta)]


def module_name_from_path(path: str | os.PathLike[str]) -> str:
    """``modules/nf-core/fastqc/meta.yml`` -> ``FASTQC``."""
    parent = Path(path).parent.name
    return parent.upper() if parent else UNKNOWN_MODULE


def meta_to_topic_tuples(
    path: str | os.PathLike[str], module_name: str | None = None
) -> list[tuple[str, str, Any]]:
    """Convert a ``meta.yml`` into ``(module, tool, info)`` topic tuples."""
    try:
        meta = load_module_meta(path)
    except (ReportError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not convert meta.yml to topic format: %s", exc)
        return []
    module = module_name or Path(path).parent.name or "unknown"
    return [(module, name, info) for name, info in _tool_items(meta)]


def get_citation(path: str | os.PathLike[str]) -> list[tuple[str, str, Any]]:
    """
    Topic tuples a module emits at runtime for its own ``meta.yml``.

    Only tools with structured citation data are emitted; the module name is
    the upper-cased parent directory of the file.
    """
    try:
        meta = load_module_meta(path)
    except (ReportError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to extract citation from %s: %s", describe_source(path), exc)
        return []
    module = module_name_from_path(path)
    return [
        (module, name, info) for name, info in _tool_items(meta) if isinstance(info, Mapping)
    ]


def _is_topic_tuple(item: Any) -> bool:
    return (
        isinstance(item, (list, tuple))
        and len(item) == 3
        and not any(isinstance(part, (list, tuple)) for part in item[:2])
    )


def flatten_citation_topics(items: Iterable[Any]) -> list[tuple[Any, Any, Any]]:
    """Accept triples and lists of triples as collected from the citation topic."""
    flat: list[tuple[Any, Any, Any]] = []
    for item in items:
        if _is_topic_tuple(item):
            flat.append(tuple(item))
        elif isinstance(item, (list, tuple)):
            flat.extend(tuple(sub) for sub in item if _is_topic_tuple(sub))
    return flat


def _is_meta_document(entry: Mapping[Any, Any]) -> bool:
    return any(key in entry for key in META_DOCUMENT_KEYS)


def parse_citation_entry(entry: Any) -> list[CitationRecord]:
    """
    Normalise one citation source into records.

    Supported: topic triples, lists of triples, ``meta.yml`` paths, parsed
    ``meta.yml`` documents (any mapping with a ``META_DOCUMENT_KEYS`` key) and
    ``{tool: info}`` mappings. Unreadable or malformed sources are logged and
    skipped.
    """
    try:
        if _is_topic_tuple(entry):
            return [topic_record(*entry)]
        if isinstance(entry, (list, tuple)):
            return [topic_record(*item) for item in flatten_citation_topics([entry])]
        if isinstance(entry, (str, os.PathLike)):
            return parse_module_meta(entry)
        if isinstance(entry, Mapping):
            if _is_meta_document(entry):
                validate_config(dict(entry), "module_meta")
                return [tool_record(name, info) for name, info in _tool_items(entry)]
            return [tool_record(name, info) for name, info in entry.items()]
    except ReportError as exc:
        log_event(
            logger,
            "Could not process citation source",
            level=logging.WARNING,
            source=describe_source(entry) if isinstance(entry, (str, os.PathLike)) else "<mapping>",
            **exc.as_log_fields(),
        )
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not process citation source %r: %s", entry, exc)
        return []
    logger.warning("Skipping unsupported citation entry of type %s", type(entry).__name__)
    return []


def aggregate_citations(entries: Iterable[Any] | None) -> CitationReport:
    """Merge citation sources by tool name; later sources overwrite earlier ones."""
    if entries is None:
        return {}
    if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
        raise EntryTypeError(
            f"entries must be a sequence of citation sources, got {type(entries).__name__}",
            received=type(entries),
        )
    report: CitationReport = {}
    for entry in entries:
        for record in parse_citation_entry(entry):
            report[record.tool] = record
    return report


def tool_citation_text(report: Mapping[str, CitationRecord]) -> str:
    if not report:
        return NO_TOOLS_TEXT
    citations = [record.citation for record in report.values()]
    return "Tools used in the workflow included: " + ", ".join(citations) + "."


def tool_bibliography_text(report: Mapping[str, CitationRecord]) -> str:
    if not report:
        return NO_BIBLIOGRAPHY_TEXT
    return " ".join(record.bibliography for record in report.values() if record.bibliography)


def auto_tool_citation_text(topic_citations: Iterable[Any] | None = None) -> str:
    """Citation sentence straight from a collected citation topic."""
    return tool_citation_text(aggregate_citations(flatten_citation_topics(topic_citations or [])))


def auto_tool_bibliography_text(topic_citations: Iterable[Any] | None = None) -> str:
    return tool_bibliography_text(
        aggregate_citations(flatten_citation_topics(topic_citations or []))
    )
