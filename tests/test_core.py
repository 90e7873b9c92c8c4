"""
Tests for WsbCore.

Tests cover:
- Project initialization
- Text-id operations persisted after every mutation
- Listing filters and views
"""

import threading

import pytest

from wsb.core import WsbCore
from wsb.exceptions import (
    BadTaskIdStringError,
    InvalidOperationError,
    StorageError,
    TrunkCannotChangeValueError,
)


@pytest.fixture
def core(wsb_dir) -> WsbCore:
    """A WsbCore with the sample project initialized in a temp .wsb/ dir."""
    wsb_core = WsbCore(wsb_dir)
    wsb_core.init_project("Project")
    for parent_id, name in [
        ("", "Create WSB"),
        ("1", "Create Task struct"),
        ("", "Create CLI tool"),
        ("2", "Create argument parser"),
        ("2", "Create help menu"),
    ]:
        wsb_core.add_task(parent_id, name)
    return wsb_core


class TestInitProject:
    """Test project creation."""

    def test_init_writes_root(self, wsb_dir):
        root = WsbCore(wsb_dir).init_project("Website")

        assert root.name == "Website"
        assert (wsb_dir / "project.json").exists()
        assert WsbCore(wsb_dir).get_task("").name == "Website"

    def test_init_refuses_existing_project(self, core):
        with pytest.raises(InvalidOperationError, match="already exists"):
            core.init_project("Other")

    def test_init_force_replaces_project(self, core, wsb_dir):
        core.init_project("Other", force=True)

        fresh = WsbCore(wsb_dir)
        assert fresh.get_task("").name == "Other"
        assert fresh.list_tasks() == [fresh.get_task("")]

    def test_operations_without_project(self, wsb_dir):
        with pytest.raises(StorageError):
            WsbCore(wsb_dir).get_task("")


class TestPersistence:
    """Test that mutations are saved and visible to a new core."""

    def test_mutations_are_saved(self, core, wsb_dir):
        core.set_planned_value("2.1", 7.0)
        core.set_actual_cost("2.2", 3.0)
        core.mark_done("1.1")
        core.assign_member("2.1", "alice")
        core.add_dependency("2.2", "2.1")
        core.rename_task("2", "Build CLI")

        fresh = WsbCore(wsb_dir)
        assert fresh.get_task("").planned_value == 7.0
        assert fresh.get_task("").actual_cost == 3.0
        assert fresh.get_task("1").is_done()
        assert fresh.get_task("2.1").members == {"alice"}
        assert fresh.get_task("2.1").dependents == {fresh.get_task("2.2").id}
        assert fresh.get_task("2").name == "Build CLI"

    def test_remove_is_saved(self, core, wsb_dir):
        removed = core.remove_task("2.1")

        assert removed.name == "Create argument parser"
        assert WsbCore(wsb_dir).get_task("2.1").name == "Create help menu"

    def test_failed_mutation_leaves_file_unchanged(self, core, wsb_dir):
        before = (wsb_dir / "project.json").read_text(encoding="utf-8")

        with pytest.raises(TrunkCannotChangeValueError):
            core.set_planned_value("2", 5.0)
        with pytest.raises(BadTaskIdStringError):
            core.add_task("2.", "Bad")

        assert (wsb_dir / "project.json").read_text(encoding="utf-8") == before

    def test_unassign_and_undepend(self, core, wsb_dir):
        core.assign_member("2.1", "alice")
        core.add_dependency("2.2", "2.1")
        core.remove_member("2.1", "alice")
        core.remove_dependency("2.2", "2.1")

        fresh = WsbCore(wsb_dir)
        assert fresh.get_task("2.1").members == set()
        assert fresh.get_task("2.2").dependencies == set()

    def test_reopen(self, core):
        core.mark_done("1.1")
        task = core.mark_in_progress("1.1")

        assert not task.is_done()
        assert not core.get_task("1").is_done()

    def test_concurrent_adds(self, core):
        """Mutations from several threads are serialized."""
        threads = [
            threading.Thread(target=core.add_task, args=("1", f"Step {i}"))
            for i in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert core.get_task("1").num_child == 9
        assert sorted(core.get_task(f"1.{i}").name for i in range(2, 10)) == sorted(
            f"Step {i}" for i in range(8)
        )
        core.store.validate()


class TestListingsAndViews:
    """Test listing filters and text views."""

    def test_list_filters(self, core):
        core.mark_done("2.1")

        assert [str(t.id) for t in core.list_tasks()] == ["1.1", "2.1", "2.2"]
        assert [str(t.id) for t in core.list_tasks("done")] == ["2.1"]
        assert [str(t.id) for t in core.list_tasks("todo")] == ["1.1", "2.2"]
        assert [str(t.id) for t in core.list_tasks("in-progress")] == ["1.1", "2.2"]

    def test_list_unknown_filter(self, core):
        with pytest.raises(InvalidOperationError, match="Unknown task filter"):
            core.list_tasks("blocked")

    def test_tree_text(self, core):
        assert core.tree_text().splitlines()[0] == "Project (pv: 0.0, ac: 0.0) ✗"

    def test_graph_text(self, core):
        assert core.graph_text().startswith("digraph G {\n")

    def test_evm_summary(self, core):
        core.set_planned_value("1.1", 10.0)
        core.set_actual_cost("1.1", 5.0)
        core.mark_done("1.1")

        summary = core.evm_summary()
        assert summary.completion_percentage == pytest.approx(1 / 3)
        assert summary.earned_value == pytest.approx(10 / 3)
        assert summary.cv == pytest.approx(10 / 3 - 5.0)
