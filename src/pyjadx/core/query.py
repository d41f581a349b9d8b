from typing import Any

from pyjadx.core.decompiler import JadxDecompiler
from pyjadx.core.nodes import JavaClass, JavaMethod


def _signature(method: JavaMethod) -> str:
    arguments = ", ".join(str(arg) for arg in method.arguments)
    return f"{method.name}({arguments})"


def query_classes(
    decompiler: JadxDecompiler, package: str | None = None, limit: int = 100
) -> list[tuple[str, int, int]]:
    """Return (fullname, method_count, decompiled_line) per class."""
    classes = decompiler.get_package(package).classes if package else decompiler.classes
    return [(cls.fullname, len(cls.methods), cls.decompiled_line) for cls in classes[:limit]]


def query_packages(decompiler: JadxDecompiler) -> list[tuple[str, int]]:
    """Return (fullname, class_count) per package."""
    return [(pkg.fullname, len(pkg.classes)) for pkg in decompiler.packages]


def query_methods(decompiler: JadxDecompiler, class_name: str) -> list[tuple[str, str, str, int]]:
    """Return (access, return_type, signature, decompiled_line) per method of a class."""
    cls = decompiler.get_class(class_name)
    return [
        (str(method.access_flags), str(method.return_type), _signature(method), method.decompiled_line)
        for method in cls.methods
    ]


def query_class_detail(cls: JavaClass) -> dict[str, Any]:
    access = cls.access_flags
    return {
        "fullname": cls.fullname,
        "name": cls.name,
        "package": cls.package,
        "access": str(access),
        "is_interface": access.is_interface,
        "is_abstract": access.is_abstract,
        "decompiled_line": cls.decompiled_line,
        "methods": [
            {
                "name": method.name,
                "signature": _signature(method),
                "return_type": str(method.return_type),
                "is_constructor": method.is_constructor,
                "decompiled_line": method.decompiled_line,
            }
            for method in cls.methods
        ],
    }
