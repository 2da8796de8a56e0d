from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nfcore_report.context import UNKNOWN

NA_HTML = '<span style="color:#999999;">N/A</span>'


def _is_empty(value: Any) -> bool:
    # Zero is a real setting; False, None and empty strings or collections are not
    if value is None or isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return False
    return not value


def params_summary_multiqc(
    summary_params: Mapping[str, Mapping[str, Any]], workflow_name: str | None
) -> str:
    """
    MultiQC custom-content YAML listing the parameters a run was started with.

    One ``<dl>`` block per non-empty group, parameters sorted by name.
    """
    workflow_name = workflow_name or UNKNOWN
    summary_section = ""
    for group, group_params in summary_params.items():
        if not group_params:
            continue
        summary_section += f'    <p style="font-size:110%"><b>{group}</b></p>\n'
        summary_section += '    <dl class="dl-horizontal">\n'
        for param in sorted(group_params):
            value = group_params[param]
            rendered = NA_HTML if _is_empty(value) else value
            summary_section += f"        <dt>{param}</dt><dd><samp>{rendered}</samp></dd>\n"
        summary_section += "    </dl>\n"

    yaml_text = f"id: '{workflow_name.replace('/', '-')}-summary'\n"
    yaml_text += "description: ' - this information is collected when the pipeline is started.'\n"
    yaml_text += f"section_name: '{workflow_name} Workflow Summary'\n"
    yaml_text += f"section_href: 'https://github.com/{workflow_name}'\n"
    yaml_text += "plot_type: 'html'\n"
    yaml_text += "data: |\n"
    yaml_text += summary_section
    return yaml_text


def workflow_summary_mqc(
    summary: Mapping[str, Any],
    metadata: Mapping[str, Any],
    results: Mapping[str, Any] | None,
    workflow_name: str | None,
) -> dict[str, str]:
    """Markdown run summary, plus the same text wrapped in ``<pre>`` for HTML reports."""
    lines = [f"# {workflow_name or UNKNOWN}", "", "Pipeline Summary", "---------------", ""]

    lines.append("## Workflow Summary")
    lines.append("")
    lines.extend(f" - **{key}:** {value}" for key, value in summary.items())
    lines.append("")

    lines.append("## Nextflow Metadata")
    lines.append("")
    lines.extend(
        f" - **{key}:** {'N/A' if _is_empty(value) else value}" for key, value in metadata.items()
    )
    lines.append("")

    if results:
        lines.append("## Results Summary")
        lines.append("")
        lines.append("| Section | Description |")
        lines.append("|---------|-------------|")
        lines.extend(f"| {key} | {value} |" for key, value in results.items())
        lines.append("")

    report_md = "\n".join(lines) + "\n"
    return {
        "workflow_summary_txt": report_md,
        "workflow_summary_html": f"<pre>{report_md}</pre>",
    }
