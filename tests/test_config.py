"""Tests for report configuration loading and schema validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from nfcore_report.config import load_report_config, load_schema, validate_config
from nfcore_report.exceptions import ConfigValidationError, SourceUnavailableError, YamlParseError


class TestLoadSchema:
    def test_known_schemas(self) -> None:
        assert load_schema("report_config")["type"] == "object"
        assert "tools" in load_schema("module_meta")["properties"]

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema("nonexistent_schema_xyz123")

    def test_caching(self) -> None:
        assert load_schema("module_meta") is load_schema("module_meta")


class TestValidateConfig:
    def test_valid(self) -> None:
        validate_config({"workflow": {"name": "p"}}, "report_config")

    def test_error_context(self) -> None:
        with pytest.raises(ConfigValidationError) as excinfo:
            validate_config(
                {"workflow": {"name": 3}, "bogus": 1}, "report_config", config_path="x.yml"
            )
        context = excinfo.value.context
        assert context["path"] == "x.yml"
        assert context["schema"] == "report_config"
        assert {error["path"] for error in context["errors"]} == {"<root>", "workflow.name"}
        assert context["truncated"] is False


class TestLoadReportConfig:
    def test_paths_resolved_against_config_dir(self, tmp_path: Path) -> None:
        config_path = tmp_path / "report.yml"
        config_path.write_text(
            "workflow:\n"
            "  name: nf-core/demo\n"
            "  version: '1.10'\n"
            "  runtime_version: 24.04.1\n"
            "topic_versions:\n"
            "  - [FASTQC, fastqc, 0.12.1]\n"
            "legacy_versions:\n"
            "  - work/versions.yml\n"
            "  - 'tool:samtools: 1.9'\n"
            "meta_files:\n"
            "  - modules/fastqc/meta.yml\n"
            "citations:\n"
            "  - [FASTQC, fastqc, {doi: 10.1/fq}]\n"
            "methods_template: assets/methods.yml\n"
            "outdir: results\n",
            encoding="utf-8",
        )
        config = load_report_config(config_path)
        assert config.context.name == "nf-core/demo"
        assert config.context.version == "1.10"
        assert config.context.runtime_version == "24.04.1"
        assert config.topic_versions == [["FASTQC", "fastqc", "0.12.1"]]
        assert config.legacy_versions == [tmp_path / "work" / "versions.yml", "tool:samtools: 1.9"]
        assert config.meta_files == [tmp_path / "modules" / "fastqc" / "meta.yml"]
        assert config.citations == [["FASTQC", "fastqc", {"doi": "10.1/fq"}]]
        assert config.methods_template == tmp_path / "assets" / "methods.yml"
        assert config.outdir == tmp_path / "results"

    def test_minimal(self, tmp_path: Path) -> None:
        config_path = tmp_path / "report.yml"
        config_path.write_text("workflow: {name: p}\n", encoding="utf-8")
        config = load_report_config(config_path)
        assert config.topic_versions == []
        assert config.methods_template is None
        assert config.outdir is None

    def test_missing_workflow_section(self, tmp_path: Path) -> None:
        config_path = tmp_path / "report.yml"
        config_path.write_text("outdir: results\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError):
            load_report_config(config_path)

    def test_bad_yaml(self, tmp_path: Path) -> None:
        config_path = tmp_path / "report.yml"
        config_path.write_text("workflow: [\n", encoding="utf-8")
        with pytest.raises(YamlParseError) as excinfo:
            load_report_config(config_path)
        assert excinfo.value.code == "yaml_parse_error"
        assert excinfo.value.context["path"] == str(config_path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceUnavailableError):
            load_report_config(tmp_path / "absent.yml")

    def test_unquoted_versions_stay_literal(self, tmp_path: Path) -> None:
        config_path = tmp_path / "report.yml"
        config_path.write_text(
            "workflow:\n"
            "  name: nf-core/demo\n"
            "  version: 2.10\n"
            "  runtime_version: 23.10\n"
            "  commit_id: null\n"
            "  manifest: {name: nf-core/demo, version: 2.10, doi: null}\n"
            "topic_versions:\n"
            "  - [FASTQC, fastqc, 0.10]\n"
            "summary_params:\n"
            "  Core: {max_cpus: 4, email: null}\n",
            encoding="utf-8",
        )
        config = load_report_config(config_path)
        assert config.context.version == "2.10"
        assert config.context.runtime_version == "23.10"
        assert config.context.commit_id is None
        assert config.context.manifest == {"name": "nf-core/demo", "version": "2.10", "doi": None}
        assert config.topic_versions == [["FASTQC", "fastqc", "0.10"]]
        assert config.summary_params == {"Core": {"max_cpus": 4, "email": None}}

    def test_numeric_version_rejected_by_schema(self) -> None:
        with pytest.raises(ConfigValidationError):
            validate_config({"workflow": {"name": "p", "version": 1.1}}, "report_config")
