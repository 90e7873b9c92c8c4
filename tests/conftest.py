"""
Test fixtures for the WSB test suite.

Provides:
- Temporary directory fixtures (isolated from any real .wsb/)
- Engine/store fixtures and a sample project builder
- Helper functions for common assertions
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from wsb.constants import reset_config_manager
from wsb.managers.evm_tracker import EvmTracker
from wsb.managers.wsb_engine import WsbEngine
from wsb.models.store import TaskStore
from wsb.models.task_id import TaskId


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Generator[None, None, None]:
    """Run every test in an empty working directory with a fresh config singleton."""
    monkeypatch.chdir(tmp_path)
    reset_config_manager()
    yield
    reset_config_manager()


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="wsb_test_"))
    yield temp_path
    # Cleanup
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def wsb_dir(temp_dir: Path) -> Path:
    """Path of a (not yet created) .wsb/ directory inside temp_dir."""
    return temp_dir / ".wsb"


# =============================================================================
# Engine and Store Fixtures
# =============================================================================


@pytest.fixture
def engine() -> WsbEngine:
    return WsbEngine()


@pytest.fixture
def tracker(engine: WsbEngine) -> EvmTracker:
    return EvmTracker(engine)


@pytest.fixture
def store(engine: WsbEngine) -> TaskStore:
    """A store holding only the root task 'Project'."""
    task_store = TaskStore()
    engine.construct("Project", task_store)
    return task_store


def build_sample_store(engine: WsbEngine) -> TaskStore:
    """Build the sample project used across tests.

    Project
    ├─ 1 Create WSB
    │  └─ 1.1 Create Task struct
    ├─ 2 Create CLI tool
    │  ├─ 2.1 Create argument parser
    │  └─ 2.2 Create help menu
    └─ 3 Create GUI tool
       └─ 3.1 Create plot visualizer
    """
    task_store = TaskStore()
    engine.construct("Project", task_store)
    engine.expand(
        [
            ("", "Create WSB"),
            ("1", "Create Task struct"),
            ("", "Create CLI tool"),
            ("2", "Create argument parser"),
            ("2", "Create help menu"),
            ("", "Create GUI tool"),
            ("3", "Create plot visualizer"),
        ],
        task_store,
    )
    return task_store


@pytest.fixture
def sample_store(engine: WsbEngine) -> TaskStore:
    return build_sample_store(engine)


# =============================================================================
# Helpers
# =============================================================================


def tid(text: str) -> TaskId:
    """Shorthand for TaskId.parse in tests."""
    return TaskId.parse(text)
