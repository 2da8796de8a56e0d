#!/usr/bin/env python3
"""Command-line front end for building version and citation reports from a config file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from nfcore_report.config import ReportConfig, load_report_config
from nfcore_report.exceptions import ReportError
from nfcore_report.io import write_text
from nfcore_report.logging_config import LogContext, add_logging_args, configure_logging, log_event
from nfcore_report.multiqc import params_summary_multiqc
from nfcore_report.orchestrator import (
    ReportBundle,
    generate_citation_report,
    generate_comprehensive_report,
    generate_version_report,
)

logger = logging.getLogger(__name__)

COMMAND_VERSIONS = "versions"
COMMAND_CITATIONS = "citations"
COMMAND_REPORT = "report"

VERSIONS_FILE = "software_versions.yml"
CITATIONS_FILE = "tool_citations.txt"
BIBLIOGRAPHY_FILE = "tool_bibliography.html"
METHODS_FILE = "methods_description.html"
PARAMS_SUMMARY_FILE = "workflow_summary_mqc.yaml"

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nfcore-report",
        description="Aggregate software versions and tool citations for a pipeline run.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        (COMMAND_VERSIONS, "Write the software versions YAML."),
        (COMMAND_CITATIONS, "Write citation text, bibliography and methods description."),
        (COMMAND_REPORT, "Write every report output."),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument(
            "--config", required=True, type=Path, help="Report configuration YAML."
        )
        command.add_argument(
            "--outdir",
            type=Path,
            default=None,
            help="Output directory (default: outdir from the config, else the current directory).",
        )
        add_logging_args(command)
    return parser


def _citation_sources(config: ReportConfig) -> list[object]:
    # Topic citations first so meta.yml files win for the same tool
    return [*config.citations, *config.meta_files]


def _build_bundle(command: str, config: ReportConfig) -> ReportBundle:
    if command == COMMAND_VERSIONS:
        return generate_version_report(
            config.topic_versions, config.legacy_versions, context=config.context
        )
    if command == COMMAND_CITATIONS:
        return generate_citation_report(
            _citation_sources(config), config.methods_template, config.context
        )
    return generate_comprehensive_report(
        config.topic_versions,
        config.legacy_versions,
        _citation_sources(config),
        config.methods_template,
        context=config.context,
    )


def write_outputs(
    command: str, bundle: ReportBundle, outdir: Path, *, params_summary: str = ""
) -> list[Path]:
    written: list[Path] = []
    outputs: list[tuple[str, str]] = []
    if command in (COMMAND_VERSIONS, COMMAND_REPORT):
        outputs.append((VERSIONS_FILE, bundle.versions_yaml))
    if command in (COMMAND_CITATIONS, COMMAND_REPORT):
        outputs.append((CITATIONS_FILE, bundle.tool_citations))
        outputs.append((BIBLIOGRAPHY_FILE, bundle.tool_bibliography))
        if bundle.methods_description:
            outputs.append((METHODS_FILE, bundle.methods_description))
    if command == COMMAND_REPORT and params_summary:
        outputs.append((PARAMS_SUMMARY_FILE, params_summary))
    for filename, text in outputs:
        path = outdir / filename
        write_text(path, text)
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, fmt=args.log_format)

    try:
        config = load_report_config(args.config)
    except ReportError as exc:
        logger.error("Invalid report configuration: %s", exc.message)
        return EXIT_CONFIG_ERROR

    outdir = args.outdir or config.outdir or Path.cwd()
    with LogContext(command=args.command):
        bundle = _build_bundle(args.command, config)
        params_summary = (
            params_summary_multiqc(config.summary_params, config.context.name)
            if config.summary_params
            else ""
        )
        written = write_outputs(args.command, bundle, outdir, params_summary=params_summary)
        log_event(logger, "Report written", outdir=str(outdir), files=len(written))

    summary = {
        "command": args.command,
        "outputs": [str(path) for path in written],
        "software_versions": bundle.software_versions,
        "tools_cited": sorted(bundle.citations_map),
    }
    sys.stdout.write(json.dumps(summary, indent=2) + "\n")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
