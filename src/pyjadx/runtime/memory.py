"""A managed runtime living entirely in Python.

Objects on the in-memory "heap" answer to jadx's method names, carry their own
equality key and may be given failing members to emulate managed-side
exceptions. :class:`InMemoryEngine` builds such a heap from a JSON artifact
(see :class:`pyjadx.models.ArtifactModel`), so the whole binding can be used
and tested without a JVM.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pyjadx.core.names import normalize_class_name, package_of, simple_name
from pyjadx.core.types import AccessFlag
from pyjadx.errors import LoadError, ManagedRuntimeError
from pyjadx.models import ArtifactModel, ClassModel, LoadOptions, MethodModel

logger = logging.getLogger(__name__)

_ARGS = "jadx.core.dex.instructions.args"


class InMemoryManagedError(Exception):
    """Thrown by a member of an in-memory object, like a Java exception."""


@dataclass(frozen=True)
class InMemoryClass:
    name: str
    supertypes: tuple[str, ...] = ()


DECOMPILER_CLASS = InMemoryClass("jadx.api.JadxDecompiler")
CLASS_CLASS = InMemoryClass("jadx.api.JavaClass", ("jadx.api.JavaNode",))
METHOD_CLASS = InMemoryClass("jadx.api.JavaMethod", ("jadx.api.JavaNode",))
PACKAGE_CLASS = InMemoryClass("jadx.api.JavaPackage", ("jadx.api.JavaNode",))
ACCESS_INFO_CLASS = InMemoryClass("jadx.core.dex.info.AccessInfo")
PRIMITIVE_TYPE_CLASS = InMemoryClass(f"{_ARGS}.PrimitiveType")
PRIMITIVE_ARG_CLASS = InMemoryClass(f"{_ARGS}.ArgType$PrimitiveArg", (f"{_ARGS}.ArgType",))
OBJECT_ARG_CLASS = InMemoryClass(f"{_ARGS}.ArgType$ObjectType", (f"{_ARGS}.ArgType",))
ARRAY_ARG_CLASS = InMemoryClass(f"{_ARGS}.ArgType$ArrayArg", (f"{_ARGS}.ArgType",))


class InMemoryObject:
    """An object on the in-memory heap.

    ``members`` maps method names to values or callables. ``key`` is the
    managed-side equality key; ``None`` means identity equality.
    """

    def __init__(self, cls: InMemoryClass, members: dict[str, Any] | None = None, key: Any = None) -> None:
        self.cls = cls
        self.members: dict[str, Any] = members if members is not None else {}
        self.key = key

    def __repr__(self) -> str:
        return f"InMemoryObject({self.cls.name}, key={self.key!r})"


class InMemoryRuntime:
    """``ManagedRuntime`` implementation over :class:`InMemoryObject`."""

    def _check(self, obj: Any) -> InMemoryObject:
        if not isinstance(obj, InMemoryObject):
            raise ManagedRuntimeError(f"{obj!r} is not an in-memory managed object")
        return obj

    def invoke(self, obj: Any, method: str, *args: Any) -> Any:
        target = self._check(obj)
        try:
            member = target.members[method]
        except KeyError:
            raise ManagedRuntimeError(f"{target.cls.name} has no method {method}()") from None
        if isinstance(member, list):
            return list(member)
        if not callable(member):
            return member
        try:
            return member(*args)
        except InMemoryManagedError as exc:
            raise ManagedRuntimeError(f"{target.cls.name}.{method}() raised {exc}") from exc

    def to_string(self, obj: Any) -> str:
        target = self._check(obj)
        if "toString" in target.members:
            text = self.invoke(target, "toString")
            if text is None:
                raise ManagedRuntimeError(f"{target.cls.name}.toString() returned null")
            return str(text)
        return f"{target.cls.name}@{self.identity(target):x}"

    def hash_code(self, obj: Any) -> int:
        target = self._check(obj)
        if "hashCode" in target.members:
            return int(self.invoke(target, "hashCode"))
        if target.key is None:
            return self.identity(target)
        return hash((target.cls.name, target.key))

    def equals(self, obj: Any, other: Any) -> bool:
        target = self._check(obj)
        if "equals" in target.members:
            return bool(self.invoke(target, "equals", other))
        if target.key is None or not isinstance(other, InMemoryObject):
            return target is other
        return target.cls.name == other.cls.name and target.key == other.key

    def identity(self, obj: Any) -> int:
        return id(self._check(obj))

    def class_of(self, obj: Any) -> InMemoryClass:
        return self._check(obj).cls

    def class_name(self, cls: Any) -> str:
        if not isinstance(cls, InMemoryClass):
            raise ManagedRuntimeError(f"{cls!r} is not an in-memory class")
        return cls.name

    def is_instance(self, obj: Any, class_name: str) -> bool:
        if not isinstance(obj, InMemoryObject):
            return False
        return obj.cls.name == class_name or class_name in obj.cls.supertypes


# Java spelling -> descriptor letter.
_PRIMITIVES = {
    "boolean": "Z",
    "char": "C",
    "byte": "B",
    "short": "S",
    "int": "I",
    "float": "F",
    "long": "J",
    "double": "D",
    "void": "V",
}
_PSEUDO_PRIMITIVES = {"OBJECT": "L", "ARRAY": "["}

_DEFAULT_RETURNS = {"boolean": "false"}

_INCONSISTENT_CODE_COMMENT = "/* Code decompiled incorrectly, please refer to instructions dump. */"


def escape_unicode(text: str) -> str:
    """Replace non-ASCII characters with Java ``\\uXXXX`` escapes."""
    out: list[str] = []
    for ch in text:
        if ord(ch) < 0x80:
            out.append(ch)
            continue
        encoded = ch.encode("utf-16-be")
        for i in range(0, len(encoded), 2):
            out.append(f"\\u{int.from_bytes(encoded[i : i + 2], 'big'):04x}")
    return "".join(out)


def _modifiers(flags: AccessFlag, is_method: bool) -> list[str]:
    words: list[str] = []
    for flag, word in (
        (AccessFlag.PUBLIC, "public"),
        (AccessFlag.PROTECTED, "protected"),
        (AccessFlag.PRIVATE, "private"),
        (AccessFlag.ABSTRACT, "abstract"),
        (AccessFlag.STATIC, "static"),
        (AccessFlag.FINAL, "final"),
    ):
        if flags & flag:
            words.append(word)
    if is_method:
        if flags & AccessFlag.SYNCHRONIZED:
            words.append("synchronized")
        if flags & AccessFlag.NATIVE:
            words.append("native")
    return words


def _class_keyword(flags: AccessFlag) -> str:
    if flags & AccessFlag.ANNOTATION:
        return "@interface"
    if flags & AccessFlag.INTERFACE:
        return "interface"
    if flags & AccessFlag.ENUM:
        return "enum"
    return "class"


class _HeapBuilder:
    """Builds the managed objects of one load from an artifact."""

    def __init__(self, artifact: ArtifactModel, options: LoadOptions, source_name: str) -> None:
        self._artifact = artifact
        self._options = options
        self._source_name = source_name
        self._primitives: dict[str, InMemoryObject] = {}
        self._arg_types: dict[str, InMemoryObject] = {}
        self._rename_counter = 0

    def build(self) -> InMemoryObject:
        classes: list[InMemoryObject] = []
        package_classes: dict[str, list[InMemoryObject]] = {}
        seen: set[str] = set()
        for model in self._artifact.classes:
            cls = self._build_class(model)
            fullname = cls.members["getFullName"]
            if fullname in seen:
                raise LoadError(f"Duplicate class {fullname}")
            seen.add(fullname)
            classes.append(cls)
            package_classes.setdefault(cls.members["getPackage"], []).append(cls)

        packages = [self._build_package(name, members) for name, members in package_classes.items()]
        state = {"closed": False}

        def close() -> None:
            state["closed"] = True

        return InMemoryObject(
            DECOMPILER_CLASS,
            {
                "getClasses": classes,
                "getPackages": packages,
                "isClosed": lambda: state["closed"],
                "close": close,
            },
        )

    # Types

    def _primitive(self, longname: str) -> InMemoryObject:
        if longname not in self._primitives:
            shortname = _PRIMITIVES.get(longname) or _PSEUDO_PRIMITIVES[longname]
            self._primitives[longname] = InMemoryObject(
                PRIMITIVE_TYPE_CLASS,
                {
                    "getLongName": longname,
                    "getShortName": shortname,
                    "name": longname.upper(),
                    "toString": longname,
                },
                key=shortname,
            )
        return self._primitives[longname]

    def _arg_type(self, spelling: str) -> InMemoryObject:
        spelling = spelling.strip()
        if spelling in self._arg_types:
            return self._arg_types[spelling]

        if spelling.endswith("[]"):
            element = self._arg_type(spelling[:-2])
            root = element.members["getArrayRootElement"] if element.members["isArray"] else element
            arg = InMemoryObject(
                ARRAY_ARG_CLASS,
                {
                    "isPrimitive": False,
                    "isArray": True,
                    "getArrayRootElement": root,
                    "getPrimitiveType": self._primitive("ARRAY"),
                    "toString": spelling,
                },
                key=spelling,
            )
        elif spelling in _PRIMITIVES:
            arg = InMemoryObject(
                PRIMITIVE_ARG_CLASS,
                {"isPrimitive": True, "isArray": False, "getPrimitiveType": self._primitive(spelling), "toString": spelling},
                key=spelling,
            )
            # jadx answers getArrayRootElement() with the type itself for non-arrays.
            arg.members["getArrayRootElement"] = arg
        else:
            arg = InMemoryObject(
                OBJECT_ARG_CLASS,
                {"isPrimitive": False, "isArray": False, "getPrimitiveType": self._primitive("OBJECT"), "toString": spelling},
                key=spelling,
            )
            arg.members["getArrayRootElement"] = arg
        self._arg_types[spelling] = arg
        return arg

    def _access_info(self, flags: AccessFlag, is_method: bool) -> InMemoryObject:
        return InMemoryObject(
            ACCESS_INFO_CLASS,
            {"rawValue": int(flags), "toString": " ".join(_modifiers(flags, is_method))},
        )

    # Names

    def _deobfuscate(self, name: str, prefix: str, width: int) -> str:
        if not self._options.deobfuscation_on or name.startswith("<"):
            return name
        if self._options.deobfuscation_min_length <= len(name) <= self._options.deobfuscation_max_length:
            return name
        self._rename_counter += 1
        suffix = name if len(name) < self._options.deobfuscation_min_length else ""
        return f"{prefix}{self._rename_counter:0{width}d}{suffix}"

    # Nodes

    def _build_class(self, model: ClassModel) -> InMemoryObject:
        original = normalize_class_name(model.fullname)
        package = package_of(original)
        name = self._deobfuscate(simple_name(original), "C", 4)
        fullname = f"{package}.{name}"
        flags = AccessFlag(model.access_flags)

        cls = InMemoryObject(
            CLASS_CLASS,
            {
                "getName": name,
                "getFullName": fullname,
                "getPackage": package,
                "getAccessInfo": self._access_info(flags, is_method=False),
                "getInnerClasses": [],
                "toString": fullname,
            },
            key=fullname,
        )
        methods = [self._build_method(cls, fullname, method) for method in model.methods]
        cls.members["getMethods"] = methods

        if model.code is not None:
            code = model.code
            cls.members["getDecompiledLine"] = 0
            for method in methods:
                method.members["getDecompiledLine"] = 0
        else:
            code = self._render_class(cls, model, methods)
        if self._options.escape_unicode:
            code = escape_unicode(code)
        cls.members["getCode"] = code
        return cls

    def _build_method(self, cls: InMemoryObject, class_fullname: str, model: MethodModel) -> InMemoryObject:
        name = self._deobfuscate(model.name, "m", 1)
        flags = AccessFlag(model.access_flags)
        if name in ("<init>", "<clinit>"):
            flags |= AccessFlag.CONSTRUCTOR
        arguments = [self._arg_type(arg) for arg in model.arguments]
        signature = f"{class_fullname}.{name}({', '.join(model.arguments)}):{model.return_type}"
        return InMemoryObject(
            METHOD_CLASS,
            {
                "getName": name,
                "getFullName": f"{class_fullname}.{name}",
                "getAccessFlags": self._access_info(flags, is_method=True),
                "getReturnType": self._arg_type(model.return_type),
                "getArguments": arguments,
                "isConstructor": name == "<init>",
                "isClassInit": name == "<clinit>",
                "getDeclaringClass": cls,
                "getDecompiledLine": 0,
                "toString": signature,
            },
            key=(class_fullname, name, tuple(model.arguments)),
        )

    def _build_package(self, fullname: str, classes: list[InMemoryObject]) -> InMemoryObject:
        return InMemoryObject(
            PACKAGE_CLASS,
            {
                "getName": simple_name(fullname),
                "getFullName": fullname,
                "getClasses": classes,
                "getDecompiledLine": 0,
                "toString": fullname,
            },
            key=fullname,
        )

    # Source

    def _method_body(self, model: MethodModel) -> list[str]:
        body = list(model.body)
        if not body and model.return_type != "void" and model.name not in ("<init>", "<clinit>"):
            default = _DEFAULT_RETURNS.get(model.return_type, "0" if model.return_type in _PRIMITIVES else "null")
            body = [f"return {default};"]
        return body

    def _render_class(self, cls: InMemoryObject, model: ClassModel, methods: list[InMemoryObject]) -> str:
        name = cls.members["getName"]
        flags = AccessFlag(model.access_flags)
        header = " ".join([*_modifiers(flags, is_method=False), _class_keyword(flags), name])

        lines = [f"package {cls.members['getPackage']};", "", f"/* loaded from: {self._source_name} */"]
        lines.append(f"{header} {{")
        cls.members["getDecompiledLine"] = len(lines)

        for index, (method, method_model) in enumerate(zip(methods, model.methods, strict=True)):
            if index:
                lines.append("")
            method_name = method.members["getName"]
            modifiers = _modifiers(AccessFlag(method_model.access_flags), is_method=True)
            params = ", ".join(f"{arg} p{i}" for i, arg in enumerate(method_model.arguments))
            if method_name == "<clinit>":
                declaration = "static"
            elif method_name == "<init>":
                declaration = " ".join([*modifiers, f"{name}({params})"])
            else:
                declaration = " ".join([*modifiers, method_model.return_type, f"{method_name}({params})"])
            lines.append(f"    {declaration} {{")
            method.members["getDecompiledLine"] = len(lines)

            body = self._method_body(method_model)
            if model.inconsistent and not self._options.show_inconsistent_code:
                body = [f'throw new UnsupportedOperationException("Method not decompiled: {method.members["toString"]}");']
            elif model.inconsistent:
                body = [_INCONSISTENT_CODE_COMMENT, *body]
            lines.extend(f"        {line}" for line in body)
            lines.append("    }")

        lines.append("}")
        return "\n".join(lines) + "\n"


class InMemoryEngine:
    """``DecompilerEngine`` loading JSON artifacts onto an in-memory heap."""

    SUPPORTED_INPUT_SUFFIXES: frozenset[str] = frozenset({".json"})

    def __init__(self, runtime: InMemoryRuntime | None = None) -> None:
        self.runtime = runtime or InMemoryRuntime()

    def load(self, path: Path, options: LoadOptions) -> InMemoryObject:
        if path.suffix.lower() not in self.SUPPORTED_INPUT_SUFFIXES:
            raise LoadError(f"Unsupported input format '{path.suffix}': {path}")
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Cannot read {path}: {exc}") from exc
        try:
            artifact = ArtifactModel.model_validate_json(raw)
        except ValidationError as exc:
            raise LoadError(f"Corrupt artifact {path}: {exc.error_count()} validation error(s)") from exc

        decompiler = _HeapBuilder(artifact, options, path.name).build()
        logger.info("Loaded in-memory artifact %s (%d classes)", path, len(artifact.classes))
        return decompiler

    def close(self, decompiler: Any) -> None:
        self.runtime.invoke(decompiler, "close")
