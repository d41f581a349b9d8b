"""Descriptive views: access flags, argument types and primitive types."""

from __future__ import annotations

import enum
from typing import Any

from pyjadx.core.handle import HandleScope, ManagedHandle


class AccessFlag(enum.IntFlag):
    """Dex/JVM access flags as stored in jadx's ``AccessInfo``."""

    PUBLIC = 0x1
    PRIVATE = 0x2
    PROTECTED = 0x4
    STATIC = 0x8
    FINAL = 0x10
    SYNCHRONIZED = 0x20
    # 0x40 and 0x80 mean VOLATILE/TRANSIENT on fields, BRIDGE/VARARGS on methods.
    VOLATILE = 0x40
    TRANSIENT = 0x80
    NATIVE = 0x100
    INTERFACE = 0x200
    ABSTRACT = 0x400
    STRICT = 0x800
    SYNTHETIC = 0x1000
    ANNOTATION = 0x2000
    ENUM = 0x4000
    CONSTRUCTOR = 0x10000

    BRIDGE = 0x40
    VARARGS = 0x80


_VISIBILITY = AccessFlag.PUBLIC | AccessFlag.PRIVATE | AccessFlag.PROTECTED


class AccessInfo(ManagedHandle):
    """Read-only predicates over the access flags of a method or a class.

    The raw bitfield is read once, when the view is created.
    """

    TAG = "jadx.core.dex.info.AccessInfo"

    def __init__(self, scope: HandleScope, obj: Any, cls: Any = None) -> None:
        super().__init__(scope, obj, cls)
        self._flags = AccessFlag(int(self._invoke("rawValue")))

    @property
    def flags(self) -> AccessFlag:
        return self._flags

    def _has(self, flag: AccessFlag) -> bool:
        return bool(self._flags & flag)

    @property
    def is_public(self) -> bool:
        return self._has(AccessFlag.PUBLIC)

    @property
    def is_protected(self) -> bool:
        return self._has(AccessFlag.PROTECTED)

    @property
    def is_private(self) -> bool:
        return self._has(AccessFlag.PRIVATE)

    @property
    def is_private_package(self) -> bool:
        return not self._flags & _VISIBILITY

    @property
    def is_static(self) -> bool:
        return self._has(AccessFlag.STATIC)

    @property
    def is_final(self) -> bool:
        return self._has(AccessFlag.FINAL)

    @property
    def is_synchronized(self) -> bool:
        return self._has(AccessFlag.SYNCHRONIZED)

    @property
    def is_volatile(self) -> bool:
        return self._has(AccessFlag.VOLATILE)

    @property
    def is_bridge(self) -> bool:
        return self._has(AccessFlag.BRIDGE)

    @property
    def is_transient(self) -> bool:
        return self._has(AccessFlag.TRANSIENT)

    # Spelling exposed by earlier pyjadx releases.
    is_transcient = is_transient

    @property
    def is_var_args(self) -> bool:
        return self._has(AccessFlag.VARARGS)

    @property
    def is_native(self) -> bool:
        return self._has(AccessFlag.NATIVE)

    @property
    def is_interface(self) -> bool:
        return self._has(AccessFlag.INTERFACE)

    @property
    def is_abstract(self) -> bool:
        return self._has(AccessFlag.ABSTRACT)

    @property
    def is_synthetic(self) -> bool:
        return self._has(AccessFlag.SYNTHETIC)

    @property
    def is_annotation(self) -> bool:
        return self._has(AccessFlag.ANNOTATION)

    @property
    def is_enum(self) -> bool:
        return self._has(AccessFlag.ENUM)

    @property
    def is_constructor(self) -> bool:
        return self._has(AccessFlag.CONSTRUCTOR)


class PrimitiveType(ManagedHandle):
    TAG = "jadx.core.dex.instructions.args.PrimitiveType"

    @property
    def longname(self) -> str:
        """Java spelling, e.g. ``int`` or ``OBJECT``."""
        return str(self._invoke("getLongName"))

    @property
    def shortname(self) -> str:
        """Descriptor letter, e.g. ``I``."""
        return str(self._invoke("getShortName"))


class ArgType(ManagedHandle):
    TAG = "jadx.core.dex.instructions.args.ArgType"

    @property
    def is_primitive(self) -> bool:
        return bool(self._invoke("isPrimitive"))

    @property
    def is_array(self) -> bool:
        return bool(self._invoke("isArray"))

    @property
    def array_root_element(self) -> ArgType | None:
        """Innermost element type of an array type; ``None`` for non-arrays."""
        if not self.is_array:
            return None
        root = self._invoke("getArrayRootElement")
        return self._wrap(ArgType, root) if root is not None else None

    @property
    def primitive_type(self) -> PrimitiveType | None:
        primitive = self._invoke("getPrimitiveType")
        return self._wrap(PrimitiveType, primitive) if primitive is not None else None
