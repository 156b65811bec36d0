from __future__ import annotations

import os
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import stored_data` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


_ENV_VARS = (
    "STORED_DATA_ENCODING",
    "STORED_DATA_AUTO_VALIDATE",
    "STORED_DATA_COERCE",
    "STORED_DATA_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """
    Tests never inherit STORED_DATA_* settings from the developer's shell,
    and values loaded from .env files during a test do not outlive it.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    for name in _ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def context():
    """
    A fresh StoreContext per test so lock registries never leak between tests.
    """
    from stored_data import StoreContext

    return StoreContext()
