import glob
import os
import shlex
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class JvmConfig:
    classpath: tuple[str, ...]
    jvm_path: str | None
    jvm_args: tuple[str, ...]


def _expand_classpath_entry(entry: str) -> list[str]:
    if any(ch in entry for ch in "*?["):
        return sorted(glob.glob(entry))
    path = Path(entry)
    if path.is_dir():
        return sorted(str(jar) for jar in path.glob("*.jar"))
    return [entry]


def get_jvm_config() -> JvmConfig:
    """Read the JVM settings from the environment.

    ``PYJADX_CLASSPATH`` lists jars, directories or glob patterns separated by
    ``os.pathsep``; ``JADX_HOME`` adds the jars of a jadx distribution.
    """
    classpath: list[str] = []
    for entry in os.getenv("PYJADX_CLASSPATH", "").split(os.pathsep):
        if entry.strip():
            classpath.extend(_expand_classpath_entry(entry.strip()))

    jadx_home = os.getenv("JADX_HOME")
    if jadx_home:
        classpath.extend(_expand_classpath_entry(str(Path(jadx_home) / "lib")))

    return JvmConfig(
        classpath=tuple(dict.fromkeys(classpath)),
        jvm_path=os.getenv("PYJADX_JVM_PATH") or None,
        jvm_args=tuple(shlex.split(os.getenv("PYJADX_JVM_ARGS", ""))),
    )
