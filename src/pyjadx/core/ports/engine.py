from pathlib import Path
from typing import Any, Protocol

from pyjadx.core.ports.runtime import ManagedRuntime
from pyjadx.models import LoadOptions


class DecompilerEngine(Protocol):
    runtime: ManagedRuntime

    def load(self, path: Path, options: LoadOptions) -> Any: ...

    def close(self, decompiler: Any) -> None: ...
