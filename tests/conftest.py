"""Shared fixtures and helpers for tests."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from pyjadx import JadxDecompiler
from pyjadx.runtime.memory import InMemoryEngine

_REPO_ROOT = Path(__file__).parent.parent
FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# In-memory decompiler fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def two_classes_path() -> Path:
    """Artifact with classes a.B and a.C in package a."""
    return FIXTURES / "two_classes.json"


@pytest.fixture
def engine() -> InMemoryEngine:
    return InMemoryEngine()


@pytest.fixture
def decompiler(engine: InMemoryEngine, two_classes_path: Path) -> Iterator[JadxDecompiler]:
    session = JadxDecompiler(engine).load(two_classes_path)
    yield session
    session.close()


@pytest.fixture
def write_artifact(tmp_path: Path) -> Callable[..., Path]:
    """Write an artifact made of the given class dicts and return its path."""

    def _write(*classes: dict[str, Any], name: str = "artifact.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"classes": list(classes)}), encoding="utf-8")
        return path

    return _write
