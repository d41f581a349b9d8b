class JadxError(Exception):
    """Base class of every error raised by pyjadx."""


class LoadError(JadxError):
    """The input could not be loaded (missing, unreadable, unsupported or corrupt)."""


class NotLoadedError(JadxError, RuntimeError):
    """A query was issued on a decompiler that has nothing loaded."""


class NotFoundError(JadxError, LookupError):
    """A class or package name is absent from the loaded input."""


class ManagedRuntimeError(JadxError, RuntimeError):
    """A call into the managed runtime failed or used a stale handle."""


class TypeMismatch(JadxError, TypeError):
    """An argument of an unsupported type was given to a coercing operation."""


class IOFailure(JadxError, OSError):
    """Decompiled code could not be written. Reported by ``save`` as ``False``."""
