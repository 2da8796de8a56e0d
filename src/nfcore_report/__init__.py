"""Software version and tool citation reporting for nf-core style pipelines."""

from nfcore_report.citations import (
    CitationRecord,
    aggregate_citations,
    tool_bibliography_text,
    tool_citation_text,
)
from nfcore_report.context import WorkflowContext, format_workflow_version
from nfcore_report.multiqc import params_summary_multiqc, workflow_summary_mqc
from nfcore_report.orchestrator import (
    ReportBundle,
    generate_citation_report,
    generate_comprehensive_report,
    generate_version_report,
)
from nfcore_report.versions import (
    VersionRecord,
    VersionReport,
    aggregate_versions,
    software_versions_report,
)

__all__ = [
    "CitationRecord",
    "ReportBundle",
    "VersionRecord",
    "VersionReport",
    "WorkflowContext",
    "aggregate_citations",
    "aggregate_versions",
    "format_workflow_version",
    "generate_citation_report",
    "generate_comprehensive_report",
    "generate_version_report",
    "params_summary_multiqc",
    "software_versions_report",
    "tool_bibliography_text",
    "tool_citation_text",
    "workflow_summary_mqc",
]
