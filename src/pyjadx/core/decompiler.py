"""Decompiler session: load an input, then look up its classes and packages.

A :class:`JadxDecompiler` is an explicitly owned session. Queries, saves and
every call made through a class, method or package handle run under the
session's shared lock, ``load`` and ``close`` under its exclusive
lock, so a reload waits for outstanding work and then invalidates every
handle produced by the previous load.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pyjadx.core.export import PathArg, coerce_path
from pyjadx.core.handle import HandleScope
from pyjadx.core.locks import SessionLock
from pyjadx.core.names import normalize_class_name
from pyjadx.core.nodes import JavaClass, JavaPackage
from pyjadx.core.ports.engine import DecompilerEngine
from pyjadx.errors import LoadError, ManagedRuntimeError, NotFoundError, NotLoadedError
from pyjadx.models import LoadOptions

logger = logging.getLogger(__name__)


class _LoadedInput:
    def __init__(
        self,
        path: Path,
        options: LoadOptions,
        managed: Any,
        scope: HandleScope,
        classes: dict[str, JavaClass],
        packages: dict[str, JavaPackage],
    ) -> None:
        self.path = path
        self.options = options
        self.managed = managed
        self.scope = scope
        self.classes = classes
        self.packages = packages


class JadxDecompiler:
    def __init__(self, engine: DecompilerEngine) -> None:
        self._engine = engine
        self._lock = SessionLock()
        self._loaded: _LoadedInput | None = None

    def __enter__(self) -> JadxDecompiler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def loaded(self) -> bool:
        return self._loaded is not None

    @property
    def input_path(self) -> Path | None:
        loaded = self._loaded
        return loaded.path if loaded else None

    @property
    def options(self) -> LoadOptions | None:
        loaded = self._loaded
        return loaded.options if loaded else None

    def load(self, path: PathArg, options: LoadOptions | None = None, **settings: Any) -> JadxDecompiler:
        """Load an APK or Dex file to decompile.

        ``settings`` override fields of ``options`` (see :class:`LoadOptions`).
        On failure the session keeps whatever it had loaded before.
        """
        input_path = coerce_path(path)
        if settings or options is None:
            base = options.model_dump() if options is not None else {}
            options = LoadOptions.model_validate({**base, **settings})
        if not input_path.is_file():
            raise LoadError(f"Input file not found: {input_path}")
        if not os.access(input_path, os.R_OK):
            raise LoadError(f"Input file is not readable: {input_path}")

        with self._lock.exclusive():
            managed = self._engine.load(input_path, options)
            # No handle may take the shared lock while the index is built under the exclusive one.
            scope = HandleScope(self._engine.runtime)
            try:
                classes, packages = self._build_index(scope, managed)
            except ManagedRuntimeError as exc:
                scope.invalidate()
                self._engine.close(managed)
                raise LoadError(f"Cannot index {input_path}: {exc}") from exc
            scope.attach(self._lock)

            previous = self._loaded
            self._loaded = _LoadedInput(input_path, options, managed, scope, classes, packages)
            if previous is not None:
                self._release(previous)

        logger.info("Loaded %s: %d classes in %d packages", input_path, len(classes), len(packages))
        return self

    def close(self) -> None:
        """Release the loaded input; handles obtained from it become unusable."""
        with self._lock.exclusive():
            previous, self._loaded = self._loaded, None
            if previous is not None:
                self._release(previous)

    def _release(self, loaded: _LoadedInput) -> None:
        loaded.scope.invalidate()
        self._engine.close(loaded.managed)
        logger.debug("Released %s", loaded.path)

    def _build_index(self, scope: HandleScope, managed: Any) -> tuple[dict[str, JavaClass], dict[str, JavaPackage]]:
        runtime = scope.runtime
        classes: dict[str, JavaClass] = {}
        for obj in runtime.invoke(managed, "getClasses") or ():
            cls = JavaClass(scope, obj)
            classes.setdefault(cls.fullname, cls)
        packages: dict[str, JavaPackage] = {}
        for obj in runtime.invoke(managed, "getPackages") or ():
            pkg = JavaPackage(scope, obj)
            packages.setdefault(pkg.fullname, pkg)
        logger.debug("Indexed %d classes and %d packages", len(classes), len(packages))
        return classes, packages

    def _require_loaded(self) -> _LoadedInput:
        loaded = self._loaded
        if loaded is None:
            raise NotLoadedError("No input loaded; call load() first")
        return loaded

    @property
    def classes(self) -> list[JavaClass]:
        """List of :class:`JavaClass`, in discovery order."""
        with self._lock.shared():
            return list(self._require_loaded().classes.values())

    @property
    def packages(self) -> list[JavaPackage]:
        """List of :class:`JavaPackage`, in discovery order."""
        with self._lock.shared():
            return list(self._require_loaded().packages.values())

    def has_class(self, class_name: str) -> bool:
        with self._lock.shared():
            loaded = self._loaded
            return loaded is not None and normalize_class_name(class_name) in loaded.classes

    def has_package(self, package_name: str) -> bool:
        with self._lock.shared():
            loaded = self._loaded
            return loaded is not None and package_name in loaded.packages

    def get_class(self, class_name: str) -> JavaClass:
        with self._lock.shared():
            classes = self._require_loaded().classes
            try:
                return classes[normalize_class_name(class_name)]
            except KeyError:
                raise NotFoundError(f"Class not found: {class_name}") from None

    def get_package(self, package_name: str) -> JavaPackage:
        with self._lock.shared():
            packages = self._require_loaded().packages
            try:
                return packages[package_name]
            except KeyError:
                raise NotFoundError(f"Package not found: {package_name}") from None


class Jadx:
    """Entry point creating one :class:`JadxDecompiler` per loaded input."""

    def __init__(self, engine: DecompilerEngine | None = None) -> None:
        if engine is None:
            from pyjadx.runtime.jvm import JadxEngine

            engine = JadxEngine()
        self._engine = engine

    @property
    def engine(self) -> DecompilerEngine:
        return self._engine

    def load(
        self,
        apk_path: PathArg,
        escape_unicode: bool = True,
        show_inconsistent_code: bool = True,
        deobfuscation_on: bool = False,
        deobfuscation_min_length: int = 3,
        deobfuscation_max_length: int = 64,
    ) -> JadxDecompiler:
        """Load an APK or Dex file to decompile."""
        options = LoadOptions(
            escape_unicode=escape_unicode,
            show_inconsistent_code=show_inconsistent_code,
            deobfuscation_on=deobfuscation_on,
            deobfuscation_min_length=deobfuscation_min_length,
            deobfuscation_max_length=deobfuscation_max_length,
        )
        return JadxDecompiler(self._engine).load(apk_path, options)
