"""JPype adapter: runs jadx inside an embedded JVM.

The JVM is process-wide and can only be started once per process; it is
started lazily on the first ``load``. Jadx's jars are located through
:func:`pyjadx.runtime.config.get_jvm_config`.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import jpype

from pyjadx.errors import LoadError, ManagedRuntimeError
from pyjadx.models import LoadOptions
from pyjadx.runtime.config import JvmConfig, get_jvm_config

logger = logging.getLogger(__name__)

# Containers jadx knows how to open.
SUPPORTED_INPUT_SUFFIXES: frozenset[str] = frozenset(
    {".apk", ".apks", ".xapk", ".aab", ".aar", ".dex", ".jar", ".class", ".smali", ".zip"}
)

_START_LOCK = threading.Lock()


class JPypeRuntime:
    """``ManagedRuntime`` implementation over JPype proxies."""

    def __init__(self, config: JvmConfig | None = None) -> None:
        self._config = config
        self._collection_class: Any = None

    @property
    def config(self) -> JvmConfig:
        if self._config is None:
            self._config = get_jvm_config()
        return self._config

    def ensure_started(self) -> None:
        with _START_LOCK:
            if jpype.isJVMStarted():
                return
            config = self.config
            if not config.classpath:
                raise LoadError("jadx jars not found: set PYJADX_CLASSPATH or JADX_HOME")
            jvm_path = config.jvm_path or jpype.getDefaultJVMPath()
            jpype.startJVM(jvm_path, *config.jvm_args, classpath=list(config.classpath), convertStrings=False)
            logger.info("JVM started (%s) with %d classpath entries", jvm_path, len(config.classpath))

    def jclass(self, name: str) -> Any:
        self.ensure_started()
        try:
            return jpype.JClass(name)
        except TypeError as exc:
            raise ManagedRuntimeError(f"Class {name} not found on the JVM classpath") from exc

    def _to_python(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, jpype.JString):
            return str(value)
        if self._collection_class is None:
            self._collection_class = jpype.JClass("java.util.Collection")
        if isinstance(value, self._collection_class):
            return list(value)
        return value

    def invoke(self, obj: Any, method: str, *args: Any) -> Any:
        try:
            bound = getattr(obj, method)
        except AttributeError:
            raise ManagedRuntimeError(f"{self._describe(obj)} has no method {method}()") from None
        try:
            result = bound(*args)
        except jpype.JException as exc:
            raise ManagedRuntimeError(f"{self._describe(obj)}.{method}() raised {exc.getClass().getName()}: {exc}") from exc
        except (TypeError, jpype.JVMNotRunning) as exc:
            # Overload mismatch or a call after JVM shutdown.
            raise ManagedRuntimeError(f"Cannot call {self._describe(obj)}.{method}(): {exc}") from exc
        return self._to_python(result)

    def to_string(self, obj: Any) -> str:
        text = self.invoke(obj, "toString")
        if text is None:
            raise ManagedRuntimeError(f"{self._describe(obj)}.toString() returned null")
        return str(text)

    def hash_code(self, obj: Any) -> int:
        return int(self.invoke(obj, "hashCode"))

    def equals(self, obj: Any, other: Any) -> bool:
        return bool(self.invoke(obj, "equals", other))

    def identity(self, obj: Any) -> int:
        try:
            return int(jpype.JClass("java.lang.System").identityHashCode(obj))
        except (TypeError, jpype.JException, jpype.JVMNotRunning) as exc:
            raise ManagedRuntimeError(f"Cannot read the identity of {type(obj).__name__}: {exc}") from exc

    def class_of(self, obj: Any) -> Any:
        return self.invoke(obj, "getClass")

    def class_name(self, cls: Any) -> str:
        return str(self.invoke(cls, "getName"))

    def is_instance(self, obj: Any, class_name: str) -> bool:
        return isinstance(obj, self.jclass(class_name))

    def _describe(self, obj: Any) -> str:
        try:
            return str(obj.getClass().getName())
        except (AttributeError, TypeError, jpype.JException, jpype.JVMNotRunning):
            return type(obj).__name__


class JadxEngine:
    """``DecompilerEngine`` creating ``jadx.api.JadxDecompiler`` instances."""

    def __init__(self, runtime: JPypeRuntime | None = None) -> None:
        self.runtime = runtime or JPypeRuntime()

    def _make_args(self, path: Path, options: LoadOptions) -> Any:
        args = self.runtime.jclass("jadx.api.JadxArgs")()
        args.setInputFile(self.runtime.jclass("java.io.File")(str(path)))
        args.setEscapeUnicode(options.escape_unicode)
        args.setShowInconsistentCode(options.show_inconsistent_code)
        args.setDeobfuscationOn(options.deobfuscation_on)
        args.setDeobfuscationMinLength(options.deobfuscation_min_length)
        args.setDeobfuscationMaxLength(options.deobfuscation_max_length)
        return args

    def load(self, path: Path, options: LoadOptions) -> Any:
        if path.suffix.lower() not in SUPPORTED_INPUT_SUFFIXES:
            raise LoadError(f"Unsupported input format '{path.suffix}': {path}")
        self.runtime.ensure_started()
        decompiler = self.runtime.jclass("jadx.api.JadxDecompiler")(self._make_args(path, options))
        try:
            decompiler.load()
        except jpype.JException as exc:
            self.close(decompiler)
            raise LoadError(f"jadx failed to load {path}: {exc}") from exc
        logger.info("jadx loaded %s", path)
        return decompiler

    def close(self, decompiler: Any) -> None:
        try:
            decompiler.close()
        except jpype.JException as exc:
            logger.warning("Closing jadx decompiler failed: %s", exc)
