import logging
import os
from pathlib import Path
from typing import Union

from pyjadx.errors import IOFailure, TypeMismatch

logger = logging.getLogger(__name__)

# A plain string path or a pathlib-style object.
PathArg = Union[str, "os.PathLike[str]"]

_HIGHLIGHT_LEXER = "java"
_HIGHLIGHT_FORMATTER = "terminal256"
_HIGHLIGHT_STYLE = "monokai"


def coerce_path(value: object) -> Path:
    """Resolve a ``str`` or path-like argument to a :class:`~pathlib.Path`."""
    if isinstance(value, str):
        return Path(value)
    if isinstance(value, os.PathLike):
        fspath = os.fspath(value)
        if isinstance(fspath, str):
            return Path(fspath)
    raise TypeMismatch(f"{value!r} is not supported!")


def write_source(path: Path, code: str) -> None:
    """Write ``code`` to ``path``, replacing any existing file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"Cannot write decompiled code to {path}: {exc}") from exc


def highlight_code(code: str, style: str = _HIGHLIGHT_STYLE) -> str:
    """Return ``code`` colored for a 256-color terminal, or unchanged if Pygments fails."""
    try:
        from pygments import highlight
        from pygments.formatters import get_formatter_by_name
        from pygments.lexers import get_lexer_by_name

        lexer = get_lexer_by_name(_HIGHLIGHT_LEXER)
        formatter = get_formatter_by_name(_HIGHLIGHT_FORMATTER, style=style, linenos=False)
        return highlight(code, lexer, formatter)
    except Exception as exc:
        logger.warning("Syntax highlighting failed, returning plain code: %s", exc)
        return code
