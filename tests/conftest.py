from __future__ import annotations

import sys
from pathlib import Path

import pytest
from rich.console import Console

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure project root and src/ are importable without an editable install
ROOT = TESTS_DIR.parent
for extra in (ROOT, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import (  # noqa: E402
    MemoryRepository,
    ScriptedSession,
)

CAPITALS = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
)


@pytest.fixture
def console() -> Console:
    """Recording console sized for stable ``export_text`` assertions."""

    return Console(record=True, width=100, force_terminal=True)


@pytest.fixture
def repository() -> MemoryRepository:
    return MemoryRepository(CAPITALS)


@pytest.fixture
def session() -> ScriptedSession:
    return ScriptedSession()


@pytest.fixture(autouse=True)
def _isolated_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep tests away from the real ~/.quiz-manager-data."""

    monkeypatch.setenv("QUIZ_MANAGER_HOME", str(tmp_path / "home"))
    for name in (
        "QUIZ_MANAGER_CONFIG",
        "QUIZ_MANAGER_DATA_FILE",
        "QUIZ_MANAGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
