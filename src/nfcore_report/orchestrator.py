"""
High-level reporting entry points.

Composes version aggregation, citation aggregation and methods rendering into
a single ``ReportBundle``. Every call is a pure function of its arguments;
nothing is cached between calls.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Iterable
from typing import Any

from nfcore_report.citations import (
    CitationRecord,
    aggregate_citations,
    tool_bibliography_text,
    tool_citation_text,
)
from nfcore_report.context import WorkflowContext
from nfcore_report.exceptions import ReportError
from nfcore_report.logging_config import LogContext, log_event
from nfcore_report.methods import methods_description_text
from nfcore_report.versions import VersionReport, software_versions_report

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ReportBundle:
    versions_yaml: str = ""
    software_versions: dict[str, str] = dataclasses.field(default_factory=dict)
    tool_citations: str = ""
    tool_bibliography: str = ""
    methods_description: str = ""
    citations_map: dict[str, CitationRecord] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "versions_yaml": self.versions_yaml,
            "software_versions": dict(self.software_versions),
            "tool_citations": self.tool_citations,
            "tool_bibliography": self.tool_bibliography,
            "methods_description": self.methods_description,
            "citations_map": {
                tool: record.to_dict() for tool, record in self.citations_map.items()
            },
        }


def _versions_report(
    topic_versions: Iterable[Any] | None,
    legacy_versions: Iterable[Any] | None,
    context: WorkflowContext,
) -> VersionReport:
    return software_versions_report(
        topic_versions,
        legacy_versions,
        context.name,
        context.version,
        context.runtime_version,
        commit_id=context.commit_id,
    )


def _methods_description(
    methods_template: str | os.PathLike[str] | None,
    citations: dict[str, CitationRecord],
    context: WorkflowContext | None,
) -> str:
    if methods_template is None or context is None:
        return ""
    try:
        return methods_description_text(methods_template, citations, context)
    except ReportError as exc:
        log_event(
            logger,
            "Could not generate methods description",
            level=logging.WARNING,
            **exc.as_log_fields(),
        )
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not generate methods description: %s", exc)
    return ""


def generate_comprehensive_report(
    topic_versions: Iterable[Any] | None,
    legacy_versions: Iterable[Any] | None = None,
    meta_file_paths: Iterable[Any] | None = None,
    methods_template: str | os.PathLike[str] | None = None,
    *,
    context: WorkflowContext,
) -> ReportBundle:
    """
    Versions YAML, citation text, bibliography and methods description in one call.

    Topic versions are applied before legacy versions, so a legacy entry for
    the same process and tool replaces the topic value.
    """
    with LogContext(workflow=context.name or "unknown"):
        citations = aggregate_citations(meta_file_paths or [])
        versions = _versions_report(topic_versions, legacy_versions, context)
        bundle = ReportBundle(
            versions_yaml=versions.to_yaml(),
            software_versions=versions.tools(),
            tool_citations=tool_citation_text(citations),
            tool_bibliography=tool_bibliography_text(citations),
            methods_description=_methods_description(methods_template, citations, context),
            citations_map=citations,
        )
        log_event(
            logger,
            "Generated comprehensive report",
            tools_cited=len(citations),
            methods_rendered=bool(bundle.methods_description),
        )
    return bundle


def generate_version_report(
    topic_versions: Iterable[Any] | None,
    legacy_versions: Iterable[Any] | None = None,
    *,
    context: WorkflowContext,
) -> ReportBundle:
    """Versions only; citation fields stay empty."""
    with LogContext(workflow=context.name or "unknown"):
        versions = _versions_report(topic_versions, legacy_versions, context)
        return ReportBundle(versions_yaml=versions.to_yaml(), software_versions=versions.tools())


def generate_citation_report(
    meta_file_paths: Iterable[Any] | None,
    methods_template: str | os.PathLike[str] | None = None,
    context: WorkflowContext | None = None,
) -> ReportBundle:
    """Citations only. The methods description needs a context and is skipped without one."""
    citations = aggregate_citations(meta_file_paths or [])
    return ReportBundle(
        tool_citations=tool_citation_text(citations),
        tool_bibliography=tool_bibliography_text(citations),
        methods_description=_methods_description(methods_template, citations, context),
        citations_map=citations,
    )
