"""
Methods description rendering for MultiQC.

Supported placeholders:
- ${name} - a top-level variable such as ${tool_citations}
- ${dotted.path} - a nested lookup such as ${workflow.manifest.name}

Variables provided by ``methods_description_text``:
- workflow - workflow metadata including ``manifest`` and ``nextflow.version``
- manifest_map - the pipeline manifest
- doi_text / nodoi_text - pipeline DOI links, or a reminder when none is set
- tool_citations / tool_bibliography - rendered citation text
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from nfcore_report.citations import tool_bibliography_text, tool_citation_text
from nfcore_report.context import WorkflowContext
from nfcore_report.exceptions import TemplateRenderError

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(
    r"\$\{\s*([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)\s*\}"
)

DOI_PREFIX = "https://doi.org/"
NODOI_TEXT = (
    "<li>If available, make sure to update the text to include the Zenodo DOI of "
    "version of the pipeline used. </li>"
)

_MISSING = object()


def _lookup(variables: Mapping[str, Any], dotted: str) -> Any:
    value: Any = variables
    for part in dotted.split("."):
        if isinstance(value, Mapping):
            value = value.get(part, _MISSING)
        else:
            value = getattr(value, part, _MISSING)
        if value is _MISSING:
            return _MISSING
    return value


def render_template(template: str, variables: Mapping[str, Any], *, strict: bool = False) -> str:
    """
    Substitute ``${...}`` placeholders.

    Unknown placeholders are kept verbatim, or raise ``TemplateRenderError``
    when ``strict`` is set. ``None`` renders as an empty string.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        value = _lookup(variables, name)
        if value is _MISSING:
            if strict:
                raise TemplateRenderError(
                    f"Undefined template variable: ${{{name}}}",
                    context={"variable": name},
                )
            return match.group(0)
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def _clean_doi(doi: str) -> str:
    return doi.replace(DOI_PREFIX, "").replace(" ", "")


def build_doi_text(manifest_doi: str | None) -> str:
    """``"10.1/a, https://doi.org/10.2/b"`` -> linked ``(doi: ...)`` items."""
    if not manifest_doi:
        return ""
    links = []
    for raw in str(manifest_doi).split(","):
        doi = _clean_doi(raw)
        if doi:
            links.append(f"(doi: <a href='{DOI_PREFIX}{doi}'>{doi}</a>)")
    return ", ".join(links)


def load_template(source: str | os.PathLike[str]) -> str:
    """A path-like or the path of an existing file is read; any other string is the template."""
    if isinstance(source, os.PathLike):
        return Path(source).read_text(encoding="utf-8")
    if "\n" not in source and "${" not in source:
        candidate = Path(source)
        if not candidate.is_file():
            raise FileNotFoundError(f"Methods template not found: {source}")
        return candidate.read_text(encoding="utf-8")
    return source


def template_variables(
    citations: Mapping[str, Any] | None,
    context: WorkflowContext | None,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    variables: dict[str, Any] = {}
    if context is not None:
        variables.update(context.template_variables())
    else:
        variables.update({"workflow": {}, "manifest_map": {}})
    if extra:
        variables.update(extra)
    manifest_doi = (variables.get("manifest_map") or {}).get("doi")
    variables.setdefault("doi_text", build_doi_text(manifest_doi))
    variables.setdefault("nodoi_text", "" if manifest_doi else NODOI_TEXT)
    citations = citations or {}
    variables.setdefault("tool_citations", tool_citation_text(citations))
    variables.setdefault("tool_bibliography", tool_bibliography_text(citations))
    return variables


def methods_description_text(
    template: str | os.PathLike[str],
    citations: Mapping[str, Any] | None = None,
    context: WorkflowContext | None = None,
    *,
    extra: Mapping[str, Any] | None = None,
    strict: bool = False,
) -> str:
    """
    Render a MultiQC methods description template.

    Values in ``extra`` take precedence over the computed variables, so a
    caller can supply its own ``tool_citations`` for instance.
    """
    text = load_template(template)
    return render_template(text, template_variables(citations, context, extra), strict=strict)
