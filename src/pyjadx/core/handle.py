"""Ownership wrapper around references into the managed runtime.

A :class:`ManagedHandle` pairs a managed object with its reflected class and
the :class:`HandleScope` of the load that produced it. Identity (``==``,
``hash``) and ``str`` are answered by the managed object itself, so two
wrappers around the same managed object compare and hash equal.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any, ClassVar, TypeVar

from pyjadx.core.locks import SessionLock
from pyjadx.core.ports.runtime import ManagedRuntime
from pyjadx.errors import ManagedRuntimeError

H = TypeVar("H", bound="ManagedHandle")


class HandleScope:
    """Lifetime of the handles produced by one load."""

    def __init__(self, runtime: ManagedRuntime, lock: SessionLock | None = None) -> None:
        self.runtime = runtime
        self._lock = lock
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def invalidate(self) -> None:
        self._alive = False

    def attach(self, lock: SessionLock) -> None:
        """Serialize calls of this scope's handles against ``lock``'s exclusive holders."""
        self._lock = lock

    @contextlib.contextmanager
    def shared(self) -> Iterator[None]:
        if self._lock is None:
            yield
            return
        with self._lock.shared():
            yield


class ManagedHandle:
    # Managed class the wrapped object must be an instance of.
    TAG: ClassVar[str | None] = None

    def __init__(self, scope: HandleScope, obj: Any, cls: Any = None) -> None:
        if obj is None:
            raise ManagedRuntimeError(f"Cannot wrap a null reference as {type(self).__name__}")
        self._scope = scope
        self._obj = obj
        self._cls = cls if cls is not None else scope.runtime.class_of(obj)
        if self.TAG is not None and not scope.runtime.is_instance(obj, self.TAG):
            raise ManagedRuntimeError(
                f"{scope.runtime.class_name(self._cls)} is not an instance of {self.TAG}"
            )

    @property
    def runtime(self) -> ManagedRuntime:
        return self._scope.runtime

    @property
    def scope(self) -> HandleScope:
        return self._scope

    @property
    def managed_class_name(self) -> str:
        return self.runtime.class_name(self._cls)

    def _check_alive(self) -> None:
        if not self._scope.alive:
            raise ManagedRuntimeError(
                f"{type(self).__name__} belongs to a decompiler session that was closed or reloaded"
            )

    def _invoke(self, method: str, *args: Any) -> Any:
        with self._scope.shared():
            self._check_alive()
            return self.runtime.invoke(self._obj, method, *args)

    def _wrap(self, handle_type: type[H], obj: Any) -> H:
        return handle_type(self._scope, obj)

    def _wrap_all(self, handle_type: type[H], objs: Any) -> list[H]:
        return [handle_type(self._scope, obj) for obj in objs or ()]

    def to_string(self) -> str:
        try:
            with self._scope.shared():
                self._check_alive()
                return self.runtime.to_string(self._obj)
        except ManagedRuntimeError:
            return self._fallback_string()

    def _fallback_string(self) -> str:
        try:
            type_name = self.managed_class_name
        except ManagedRuntimeError:
            type_name = type(self).__name__
        try:
            identity = self.runtime.identity(self._obj)
        except ManagedRuntimeError:
            identity = id(self._obj)
        return f"{type_name}#{identity:x}"

    def hash(self) -> int:
        with self._scope.shared():
            self._check_alive()
            return self.runtime.hash_code(self._obj)

    def equals(self, other: object) -> bool:
        if not isinstance(other, ManagedHandle):
            return False
        with self._scope.shared():
            self._check_alive()
            other._check_alive()
            return self.runtime.equals(self._obj, other._obj)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ManagedHandle):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return self.hash()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_string()}>"
