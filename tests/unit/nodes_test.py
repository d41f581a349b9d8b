"""Unit tests for classes, methods and packages of a loaded input."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from pyjadx import NO_LINE, JadxDecompiler, TypeMismatch
from pyjadx.runtime.memory import InMemoryEngine

EXPECTED_B = """\
package a;

/* loaded from: two_classes.json */
public class B {
    public B() {
    }

    public int run(int[][] p0, java.lang.String p1) {
        return p0.length;
    }
}
"""


def test_class_properties(decompiler: JadxDecompiler) -> None:
    cls = decompiler.get_class("a.B")

    assert cls.name == "B"
    assert cls.fullname == "a.B"
    assert cls.package == "a"
    assert cls.inner_classes == []
    assert str(cls) == "a.B"


def test_class_code(decompiler: JadxDecompiler) -> None:
    assert decompiler.get_class("a.B").code == EXPECTED_B


def test_methods_are_in_declaration_order(decompiler: JadxDecompiler) -> None:
    methods = decompiler.get_class("a.B").methods

    assert [m.name for m in methods] == ["<init>", "run"]
    assert methods[1].fullname == "a.B.run"
    assert str(methods[1]) == "a.B.run(int[][], java.lang.String):int"
    assert str(methods[1].return_type) == "int"
    assert [str(arg) for arg in methods[1].arguments] == ["int[][]", "java.lang.String"]


def test_decompiled_lines_point_into_code(decompiler: JadxDecompiler) -> None:
    cls = decompiler.get_class("a.B")
    lines = cls.code.splitlines()

    assert lines[cls.decompiled_line - 1] == "public class B {"
    run = cls.methods[1]
    assert lines[run.decompiled_line - 1].strip().startswith("public int run(")


def test_missing_line_is_reported_as_sentinel(engine: InMemoryEngine, write_artifact: Callable[..., Path]) -> None:
    path = write_artifact({"fullname": "p.K", "code": "class K {}\n", "methods": [{"name": "m1"}]})
    with JadxDecompiler(engine).load(path) as decompiler:
        cls = decompiler.get_class("p.K")
        assert cls.decompiled_line == NO_LINE
        assert cls.methods[0].decompiled_line == NO_LINE
        assert cls.code == "class K {}\n"


def test_method_navigates_back_to_class(decompiler: JadxDecompiler) -> None:
    cls = decompiler.get_class("a.C")
    assert cls.methods[0].declaring_class == cls


def test_get_access_flags_alias(decompiler: JadxDecompiler) -> None:
    method = decompiler.get_class("a.C").methods[0]
    assert method.getAccessFlags().flags == method.access_flags.flags


def test_fresh_wrappers_are_equal(decompiler: JadxDecompiler) -> None:
    first = decompiler.get_class("a.B").methods[1]
    second = decompiler.get_class("a/B").methods[1]

    assert first is not second
    assert first == second
    assert hash(first) == hash(second)


def test_code_highlight_colors_code(decompiler: JadxDecompiler) -> None:
    highlighted = decompiler.get_class("a.B").code_highlight
    assert "\x1b[" in highlighted


def test_package_properties(decompiler: JadxDecompiler) -> None:
    pkg = decompiler.get_package("a")

    assert pkg.name == "a"
    assert pkg.fullname == "a"
    assert [cls.fullname for cls in pkg.classes] == ["a.B", "a.C"]


def test_class_save_accepts_str_and_path(decompiler: JadxDecompiler, tmp_path: Path) -> None:
    cls = decompiler.get_class("a.B")

    assert cls.save(str(tmp_path / "B.java"))
    assert cls.save(tmp_path / "nested" / "B.java")
    assert (tmp_path / "B.java").read_text(encoding="utf-8") == EXPECTED_B
    assert (tmp_path / "nested" / "B.java").read_text(encoding="utf-8") == EXPECTED_B


def test_class_save_rejects_other_types(decompiler: JadxDecompiler) -> None:
    with pytest.raises(TypeMismatch, match="42 is not supported!"):
        decompiler.get_class("a.B").save(42)  # type: ignore[arg-type]


def test_class_save_to_unwritable_path_returns_false(decompiler: JadxDecompiler, tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    assert decompiler.get_class("a.B").save(blocker / "B.java") is False
    assert decompiler.has_class("a.B")
    assert len(decompiler.classes) == 2


def test_package_save_writes_source_tree(decompiler: JadxDecompiler, tmp_path: Path) -> None:
    assert decompiler.get_package("a").save(tmp_path)

    written = sorted(p.relative_to(tmp_path).as_posix() for p in tmp_path.rglob("*.java"))
    assert written == ["a/B.java", "a/C.java"]


def test_package_save_continues_after_failure(decompiler: JadxDecompiler, tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "B.java").mkdir()

    assert decompiler.get_package("a").save(tmp_path) is False
    assert (tmp_path / "a" / "C.java").is_file()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_package_save_into_read_only_directory(decompiler: JadxDecompiler, tmp_path: Path) -> None:
    if os.geteuid() == 0:
        pytest.skip("root ignores directory permissions")
    tmp_path.chmod(0o500)
    try:
        assert decompiler.get_package("a").save(tmp_path / "out") is False
    finally:
        tmp_path.chmod(0o700)
