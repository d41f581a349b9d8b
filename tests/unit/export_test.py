"""Unit tests for path coercion, source writing and highlighting."""

from pathlib import Path
from unittest.mock import patch

import pytest

from pyjadx.core.export import coerce_path, highlight_code, write_source
from pyjadx.errors import IOFailure, TypeMismatch


class TestCoercePath:
    def test_str(self) -> None:
        assert coerce_path("out/B.java") == Path("out/B.java")

    def test_path_like(self, tmp_path: Path) -> None:
        assert coerce_path(tmp_path) == tmp_path

    @pytest.mark.parametrize("value", [42, None, b"out", ["out"]])
    def test_other_types_are_rejected(self, value: object) -> None:
        with pytest.raises(TypeMismatch) as exc_info:
            coerce_path(value)
        assert str(exc_info.value) == f"{value!r} is not supported!"

    def test_type_mismatch_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            coerce_path(1.5)

    def test_bytes_path_like_is_rejected(self) -> None:
        class BytesPath:
            def __fspath__(self) -> bytes:
                return b"out"

        with pytest.raises(TypeMismatch):
            coerce_path(BytesPath())


class TestWriteSource:
    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "C.java"
        write_source(target, "class C {}\n")
        assert target.read_text(encoding="utf-8") == "class C {}\n"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "C.java"
        target.write_text("old", encoding="utf-8")
        write_source(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_failure_raises_io_failure(self, tmp_path: Path) -> None:
        with pytest.raises(IOFailure, match="Cannot write decompiled code") as exc_info:
            write_source(tmp_path, "class C {}")
        assert isinstance(exc_info.value, OSError)


class TestHighlightCode:
    def test_highlights_java(self) -> None:
        highlighted = highlight_code("public class C {}\n")
        assert "\x1b[" in highlighted
        assert "class" in highlighted

    def test_falls_back_to_plain_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch("pygments.lexers.get_lexer_by_name", side_effect=RuntimeError("no lexer")):
            assert highlight_code("class C {}") == "class C {}"
        assert "Syntax highlighting failed" in caplog.text

    def test_unknown_style_falls_back(self) -> None:
        assert highlight_code("class C {}", style="no-such-style") == "class C {}"
