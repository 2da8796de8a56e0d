from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class ReportError(Exception):
    message: str
    code: str = "report_error"
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(
        self, message: str, *, code: str | None = None, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.context = dict(context or {})

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "error_code": self.code,
            "error_message": self.message,
            "error_context": self.context,
        }


class EntryTypeError(ReportError, TypeError):
    """Raised when a caller hands an aggregator something that is not a sequence of entries."""

    code = "entry_type_error"

    def __init__(self, message: str, *, received: type) -> None:
        super().__init__(message, context={"received": received.__name__})


class ConfigValidationError(ReportError):
    code = "config_validation_error"


class YamlParseError(ReportError):
    code = "yaml_parse_error"


class SourceUnavailableError(ReportError):
    code = "source_unavailable"

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, context={"path": path})


class TemplateRenderError(ReportError):
    code = "template_render_error"
