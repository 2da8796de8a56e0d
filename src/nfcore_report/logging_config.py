from __future__ import annotations

import contextvars
import json
import logging
import time
from typing import Any

_CONFIGURED = False

# Fields attached to every JSON log line while a report is being assembled
_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "report_log_context", default=None
)


def get_log_context() -> dict[str, Any]:
    """Get the current logging context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


class LogContext:
    """Context manager binding fields (e.g. workflow name) for a block of work."""

    def __init__(self, **kwargs: Any):
        self.kwargs = kwargs
        self.token: contextvars.Token | None = None

    def __enter__(self) -> LogContext:
        current = get_log_context()
        current.update(self.kwargs)
        self.token = _log_context.set(current)
        return self

    def __exit__(self, *args: Any) -> None:
        if self.token is not None:
            _log_context.reset(self.token)


class TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        self.converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        context = get_log_context()
        if context:
            formatted += " | " + json.dumps(context, sort_keys=True, default=str)
        return formatted


class JsonFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__()
        self.converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_log_context()
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        return logging.INFO
    return logging._nameToLevel.get(str(level).upper(), logging.INFO)


def configure_logging(*, level: str | int | None = None, fmt: str = "text") -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    if not root.handlers:
        handler = logging.StreamHandler()
        if fmt.lower() == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(TextFormatter())
        root.addHandler(handler)

    _CONFIGURED = True


def add_logging_args(parser: Any) -> None:
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        default="text",
        choices=["text", "json"],
        help="Logging format (default: text)",
    )


def log_event(
    logger: logging.Logger, message: str, *, level: int = logging.INFO, **fields: Any
) -> None:
    """Log a structured message with JSON fields."""
    if fields:
        payload = json.dumps(fields, sort_keys=True, ensure_ascii=False, default=str)
        logger.log(level, "%s | %s", message, payload)
    else:
        logger.log(level, "%s", message)
