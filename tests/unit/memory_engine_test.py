"""Unit tests for load options as honoured by the in-memory engine."""

from collections.abc import Callable
from pathlib import Path

import pytest

from pyjadx import JadxDecompiler, LoadError, LoadOptions
from pyjadx.runtime.memory import InMemoryEngine, escape_unicode

UNICODE_CLASS = {"fullname": "p.U", "code": 'String s = "café \U0001f600";\n'}
INCONSISTENT_CLASS = {
    "fullname": "p.K",
    "inconsistent": True,
    "methods": [{"name": "work", "return_type": "int"}],
}
OBFUSCATED_CLASS = {
    "fullname": "o.a",
    "methods": [{"name": "<init>"}, {"name": "b"}, {"name": "run"}, {"name": "veryLongName"}],
}


def _load(engine: InMemoryEngine, path: Path, **settings: object) -> JadxDecompiler:
    return JadxDecompiler(engine).load(path, **settings)


def test_escape_unicode_helper() -> None:
    assert escape_unicode("café") == "caf\\u00e9"
    assert escape_unicode("\U0001f600") == "\\ud83d\\ude00"
    assert escape_unicode("plain") == "plain"


def test_escape_unicode_on(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    with _load(engine, write_artifact(UNICODE_CLASS)) as decompiler:
        assert decompiler.get_class("p.U").code == 'String s = "caf\\u00e9 \\ud83d\\ude00";\n'


def test_escape_unicode_off(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    with _load(engine, write_artifact(UNICODE_CLASS), escape_unicode=False) as decompiler:
        assert decompiler.get_class("p.U").code == UNICODE_CLASS["code"]


def test_inconsistent_code_is_shown_with_warning(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    with _load(engine, write_artifact(INCONSISTENT_CLASS)) as decompiler:
        code = decompiler.get_class("p.K").code
    assert "Code decompiled incorrectly" in code
    assert "return 0;" in code


def test_inconsistent_code_is_hidden(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    with _load(engine, write_artifact(INCONSISTENT_CLASS), show_inconsistent_code=False) as decompiler:
        code = decompiler.get_class("p.K").code
    assert 'throw new UnsupportedOperationException("Method not decompiled: p.K.work():int");' in code
    assert "return 0;" not in code


def test_deobfuscation_off_keeps_names(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    with _load(engine, write_artifact(OBFUSCATED_CLASS)) as decompiler:
        assert decompiler.has_class("o.a")


def test_deobfuscation_renames_out_of_range_names(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    path = write_artifact(OBFUSCATED_CLASS)
    with _load(engine, path, deobfuscation_on=True, deobfuscation_max_length=8) as decompiler:
        assert not decompiler.has_class("o.a")
        cls = decompiler.get_class("o.C0001a")
        assert [m.name for m in cls.methods] == ["<init>", "m2b", "run", "m3"]
        assert "public class C0001a {" in cls.code


def test_default_return_values(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    path = write_artifact(
        {
            "fullname": "p.R",
            "methods": [
                {"name": "flag", "return_type": "boolean"},
                {"name": "count", "return_type": "long"},
                {"name": "text", "return_type": "java.lang.String"},
            ],
        }
    )
    with _load(engine, path) as decompiler:
        code = decompiler.get_class("p.R").code
    assert "return false;" in code
    assert "return 0;" in code
    assert "return null;" in code


def test_close_marks_managed_decompiler_closed(engine: InMemoryEngine, two_classes_path: Path) -> None:
    managed = engine.load(two_classes_path, LoadOptions())
    engine.close(managed)
    assert engine.runtime.invoke(managed, "isClosed") is True


def test_duplicate_class_names_are_rejected(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    path = write_artifact({"fullname": "a.B"}, {"fullname": "a/B"})
    with pytest.raises(LoadError, match="Duplicate class a.B"):
        JadxDecompiler(engine).load(path)
