from __future__ import annotations

import pytest

from nfcore_report.exceptions import (
    ConfigValidationError,
    EntryTypeError,
    ReportError,
    SourceUnavailableError,
    TemplateRenderError,
    YamlParseError,
)


def test_report_error_log_fields() -> None:
    err = ReportError("boom", context={"path": "x.yml"})
    assert str(err) == "boom"
    assert err.as_log_fields() == {
        "error_code": "report_error",
        "error_message": "boom",
        "error_context": {"path": "x.yml"},
    }


@pytest.mark.parametrize(
    ("error_cls", "code"),
    [
        (ConfigValidationError, "config_validation_error"),
        (YamlParseError, "yaml_parse_error"),
        (TemplateRenderError, "template_render_error"),
    ],
)
def test_subclass_codes(error_cls: type[ReportError], code: str) -> None:
    err = error_cls("failed")
    assert err.code == code
    assert isinstance(err, ReportError)


def test_code_override() -> None:
    assert ReportError("x", code="custom").code == "custom"


def test_source_unavailable_records_path() -> None:
    err = SourceUnavailableError("missing", path="/tmp/meta.yml")
    assert err.code == "source_unavailable"
    assert err.context == {"path": "/tmp/meta.yml"}


def test_entry_type_error_is_type_error() -> None:
    err = EntryTypeError("bad entries", received=str)
    assert isinstance(err, TypeError)
    assert err.context == {"received": "str"}
