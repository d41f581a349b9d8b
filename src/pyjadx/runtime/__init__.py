from pyjadx.runtime.config import JvmConfig, get_jvm_config
from pyjadx.runtime.jvm import SUPPORTED_INPUT_SUFFIXES, JadxEngine, JPypeRuntime
from pyjadx.runtime.memory import (
    InMemoryClass,
    InMemoryEngine,
    InMemoryManagedError,
    InMemoryObject,
    InMemoryRuntime,
)

__all__ = [
    "SUPPORTED_INPUT_SUFFIXES",
    "InMemoryClass",
    "InMemoryEngine",
    "InMemoryManagedError",
    "InMemoryObject",
    "InMemoryRuntime",
    "JPypeRuntime",
    "JadxEngine",
    "JvmConfig",
    "get_jvm_config",
]
