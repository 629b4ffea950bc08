"""Root test configuration: session-level cleanup of runtime artifacts and env isolation"""

import os
import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["blogkit.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and export directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep BLOGKIT_* variables from the outer environment out of every test."""
    for key in list(os.environ):
        if key.startswith("BLOGKIT_"):
            monkeypatch.delenv(key)
