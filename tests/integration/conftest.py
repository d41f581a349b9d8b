"""Session-scoped fixtures for integration tests against a real jadx."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from pyjadx import Jadx, JadxDecompiler
from pyjadx.runtime.config import get_jvm_config


@pytest.fixture(scope="session")
def input_path() -> Path:
    """APK or Dex file named by PYJADX_TEST_INPUT."""
    value = os.getenv("PYJADX_TEST_INPUT")
    if not value or not Path(value).is_file():
        pytest.skip("PYJADX_TEST_INPUT does not name an input file")
    if not get_jvm_config().classpath:
        pytest.skip("jadx jars not configured (PYJADX_CLASSPATH or JADX_HOME)")
    return Path(value)


@pytest.fixture(scope="session")
def jadx_decompiler(input_path: Path) -> Generator[JadxDecompiler, None, None]:
    decompiler = Jadx().load(input_path)
    yield decompiler
    decompiler.close()
