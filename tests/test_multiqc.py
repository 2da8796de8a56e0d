from __future__ import annotations

import yaml

from nfcore_report.multiqc import NA_HTML, params_summary_multiqc, workflow_summary_mqc


def test_params_summary_multiqc_is_valid_yaml() -> None:
    text = params_summary_multiqc(
        {
            "Input/output options": {"outdir": "results", "input": "samplesheet.csv"},
            "Empty group": {},
            "Reference genome options": {"genome": None},
        },
        "nf-core/demo",
    )
    document = yaml.safe_load(text)
    assert document["id"] == "nf-core-demo-summary"
    assert document["section_name"] == "nf-core/demo Workflow Summary"
    assert document["section_href"] == "https://github.com/nf-core/demo"
    assert document["plot_type"] == "html"
    data = document["data"]
    assert "Empty group" not in data
    assert data.index("<dt>input</dt>") < data.index("<dt>outdir</dt>")
    assert f"<dt>genome</dt><dd><samp>{NA_HTML}</samp></dd>" in data


def test_params_summary_multiqc_unknown_workflow() -> None:
    text = params_summary_multiqc({}, None)
    assert text.startswith("id: 'unknown-summary'\n")
    assert text.endswith("data: |\n")


def test_workflow_summary_mqc() -> None:
    summary = workflow_summary_mqc(
        {"Run Name": "happy_turing"},
        {"profile": "docker", "container": None},
        {"FastQC": "ok"},
        "nf-core/demo",
    )
    text = summary["workflow_summary_txt"]
    assert text.startswith("# nf-core/demo\n")
    assert " - **Run Name:** happy_turing" in text
    assert " - **container:** N/A" in text
    assert "| FastQC | ok |" in text
    assert summary["workflow_summary_html"] == f"<pre>{text}</pre>"


def test_workflow_summary_mqc_without_results() -> None:
    text = workflow_summary_mqc({}, {}, None, None)["workflow_summary_txt"]
    assert "## Results Summary" not in text
    assert text.startswith("# unknown\n")


def test_params_summary_multiqc_empty_values() -> None:
    data = yaml.safe_load(
        params_summary_multiqc(
            {"Options": {"skip_qc": False, "tools": [], "extra": {}, "max_cpus": 0, "trim": True}},
            "nf-core/demo",
        )
    )["data"]
    for param in ("skip_qc", "tools", "extra"):
        assert f"<dt>{param}</dt><dd><samp>{NA_HTML}</samp></dd>" in data
    assert "<dt>max_cpus</dt><dd><samp>0</samp></dd>" in data
    assert "<dt>trim</dt><dd><samp>True</samp></dd>" in data


def test_workflow_summary_mqc_empty_metadata() -> None:
    text = workflow_summary_mqc({}, {"configFiles": [], "exitStatus": 0}, None, "p")[
        "workflow_summary_txt"
    ]
    assert " - **configFiles:** N/A" in text
    assert " - **exitStatus:** 0" in text
