from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any

import yaml

from nfcore_report.exceptions import SourceUnavailableError, YamlParseError


def describe_source(source: Any) -> str:
    """Human-readable name of a file source for log lines and error context."""
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return str(getattr(source, "name", "<stream>"))


def read_text_source(source: str | os.PathLike[str] | IO[str]) -> str:
    """Read the full text of a path, path-like object or open text handle."""
    if hasattr(source, "read"):
        text = source.read()
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        return text
    path = Path(source)
    if not path.is_file():
        raise SourceUnavailableError(f"File not found: {path}", path=str(path))
    return path.read_text(encoding="utf-8")


def load_yaml_text(text: str, *, source: str = "<string>", preserve_scalars: bool = False) -> Any:
    """
    Parse a YAML document.

    With ``preserve_scalars`` every scalar is kept as the literal string that
    was written, so ``1.10`` stays ``"1.10"`` instead of becoming ``1.1``.
    """
    loader = yaml.BaseLoader if preserve_scalars else yaml.SafeLoader
    try:
        return yaml.load(text, Loader=loader)
    except yaml.YAMLError as exc:
        raise YamlParseError(
            f"YAML parse error in {source}: {exc}",
            context={"path": source, "error": str(exc)},
        ) from exc


def read_yaml(source: str | os.PathLike[str] | IO[str], *, preserve_scalars: bool = False) -> Any:
    text = read_text_source(source)
    data = load_yaml_text(text, source=describe_source(source), preserve_scalars=preserve_scalars)
    return {} if data is None else data


def write_text(path: Path, text: str) -> None:
    """Write text atomically, ending with a single newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text.rstrip("\n") + "\n")
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)
