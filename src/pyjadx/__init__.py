"""pyjadx - Python API of the jadx Dex/APK decompiler."""

from pyjadx.core.decompiler import Jadx, JadxDecompiler
from pyjadx.core.names import normalize_class_name, pretty_class_name
from pyjadx.core.nodes import NO_LINE, JavaClass, JavaMethod, JavaPackage
from pyjadx.core.types import AccessFlag, AccessInfo, ArgType, PrimitiveType
from pyjadx.errors import (
    IOFailure,
    JadxError,
    LoadError,
    ManagedRuntimeError,
    NotFoundError,
    NotLoadedError,
    TypeMismatch,
)
from pyjadx.models import LoadOptions

__version__ = "0.1.0"

__all__ = [
    "NO_LINE",
    "AccessFlag",
    "AccessInfo",
    "ArgType",
    "IOFailure",
    "Jadx",
    "JadxDecompiler",
    "JadxError",
    "JavaClass",
    "JavaMethod",
    "JavaPackage",
    "LoadError",
    "LoadOptions",
    "ManagedRuntimeError",
    "NotFoundError",
    "NotLoadedError",
    "PrimitiveType",
    "TypeMismatch",
    "normalize_class_name",
    "pretty_class_name",
]
