from typing import Any, Protocol


class ManagedRuntime(Protocol):
    """Capabilities pyjadx needs from the runtime hosting the decompiler.

    Every method translates a managed-side exception into
    ``pyjadx.errors.ManagedRuntimeError``. ``invoke`` returns managed strings
    as ``str`` and managed collections as ``list``.
    """

    def invoke(self, obj: Any, method: str, *args: Any) -> Any: ...

    def to_string(self, obj: Any) -> str: ...

    def hash_code(self, obj: Any) -> int: ...

    def equals(self, obj: Any, other: Any) -> bool: ...

    def identity(self, obj: Any) -> int: ...

    def class_of(self, obj: Any) -> Any: ...

    def class_name(self, cls: Any) -> str: ...

    def is_instance(self, obj: Any, class_name: str) -> bool: ...
