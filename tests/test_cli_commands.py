"""
Tests for WSB CLI commands.

Tests cover:
- project commands (init, tree, graph, evm, list)
- task commands (add, remove, rename, set-value, set-cost, done, reopen)
- member and dependency commands
- CLI error handling

Uses Click's CliRunner with an isolated temporary .wsb/ directory.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from wsb.cli import cli

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner, wsb_dir):
    """Invoke the CLI against the temp .wsb/ directory."""

    def _invoke(*args: str):
        return runner.invoke(cli, ["--wsb-dir", str(wsb_dir), *args])

    return _invoke


@pytest.fixture
def project(invoke):
    """Initialize the sample project through the CLI."""
    assert invoke("init", "Project").exit_code == 0
    for parent_id, name in [
        ("", "Create WSB"),
        ("1", "Create Task struct"),
        ("", "Create CLI tool"),
        ("2", "Create argument parser"),
        ("2", "Create help menu"),
    ]:
        result = invoke("add", parent_id, name)
        assert result.exit_code == 0, result.output
    return invoke


# =============================================================================
# Project Command Tests
# =============================================================================


class TestInitCommand:
    """Test init command."""

    def test_init(self, invoke, wsb_dir):
        result = invoke("init", "Website")

        assert result.exit_code == 0
        assert "Created project 'Website'" in result.output
        assert (wsb_dir / "project.json").exists()

    def test_init_twice(self, project):
        result = project("init", "Other")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_force(self, project):
        result = project("init", "Other", "--force")

        assert result.exit_code == 0
        assert project("tree").output == "Other (pv: 0.0, ac: 0.0) ✗\n"


class TestTreeCommand:
    """Test tree command."""

    def test_tree(self, project):
        result = project("tree")

        assert result.exit_code == 0
        assert result.output == (
            "Project (pv: 0.0, ac: 0.0) ✗\n"
            "├─ 1 - Create WSB (pv: 0.0, ac: 0.0) ✗\n"
            "│  └─ 1.1 - Create Task struct (pv: 0.0, ac: 0.0) ✗\n"
            "└─ 2 - Create CLI tool (pv: 0.0, ac: 0.0) ✗\n"
            "   ├─ 2.1 - Create argument parser (pv: 0.0, ac: 0.0) ✗\n"
            "   └─ 2.2 - Create help menu (pv: 0.0, ac: 0.0) ✗\n"
        )

    def test_tree_without_project(self, invoke):
        result = invoke("tree")

        assert result.exit_code == 1
        assert "wsb init" in result.output

    def test_tree_uses_configured_glyphs(self, project, wsb_dir):
        (wsb_dir / "config.json").write_text(
            json.dumps({"in_progress_glyph": "[ ]", "done_glyph": "[x]"}), encoding="utf-8"
        )
        project("done", "1.1")

        lines = project("tree").output.splitlines()

        assert lines[1] == "├─ 1 - Create WSB (pv: 0.0, ac: 0.0) [x]"
        assert lines[3] == "└─ 2 - Create CLI tool (pv: 0.0, ac: 0.0) [ ]"


class TestGraphCommand:
    """Test graph command."""

    def test_graph_stdout(self, project):
        result = project("graph")

        assert result.exit_code == 0
        assert result.output.startswith("digraph G {\nlabel=\"earned value: 0.0")
        assert result.output.count(" -> ") == 5

    def test_graph_to_file(self, project, temp_dir: Path):
        out = temp_dir / "wbs.dot"

        result = project("graph", "-o", str(out))

        assert result.exit_code == 0
        assert result.output == ""
        assert out.read_text(encoding="utf-8").endswith("}\n")


class TestEvmCommand:
    """Test evm command."""

    def test_evm_text(self, project):
        project("set-value", "1.1", "10")
        project("set-value", "2.1", "10")
        project("done", "1.1")

        result = project("evm")

        assert result.exit_code == 0
        assert "Planned value:  20.0" in result.output
        assert "Completion:     33.3%" in result.output

    def test_evm_json(self, project):
        project("set-value", "1.1", "8")
        project("set-cost", "1.1", "4")
        project("done", "1.1")
        project("done", "2.1")
        project("done", "2.2")

        data = json.loads(project("evm", "--json").output)

        assert data["completion_percentage"] == 1.0
        assert data["earned_value"] == 8.0
        assert data["cpi"] == 2.0
        assert data["sv"] == 0.0


class TestListCommand:
    """Test list command."""

    def test_list_all(self, project):
        result = project("list")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "1.1 - Create Task struct (pv: 0.0, ac: 0.0) ✗",
            "2.1 - Create argument parser (pv: 0.0, ac: 0.0) ✗",
            "2.2 - Create help menu (pv: 0.0, ac: 0.0) ✗",
        ]

    def test_list_done_empty(self, project):
        result = project("list", "--done")

        assert result.exit_code == 0
        assert result.output == "No tasks found.\n"

    def test_list_todo_json(self, project):
        project("done", "2.1")

        data = json.loads(project("list", "--todo", "--json").output)

        assert [t["id"] for t in data] == ["1.1", "2.2"]
        assert data[0]["name"] == "Create Task struct"


# =============================================================================
# Task Command Tests
# =============================================================================


class TestAddCommand:
    """Test add command."""

    def test_add(self, project):
        result = project("add", "2", "Create man page")

        assert result.exit_code == 0
        assert result.output == "Added task 2.3: Create man page\n"

    def test_add_missing_parent(self, project):
        result = project("add", "7", "Nope")

        assert result.exit_code == 1
        assert "7" in result.output

    def test_add_bad_id(self, project):
        result = project("add", "2..1", "Nope")

        assert result.exit_code == 1
        assert "Invalid task id '2..1'" in result.output

    def test_add_under_leaf_with_values(self, project):
        project("set-value", "1.1", "3")

        result = project("add", "1.1", "Split")

        assert result.exit_code == 1

    def test_add_blank_name(self, project):
        result = project("add", "2", " ")

        assert result.exit_code == 1
        assert "Name is required" in result.output


class TestRemoveCommand:
    """Test remove command."""

    def test_remove_renumbers(self, project):
        result = project("remove", "2.1")

        assert result.exit_code == 0
        assert result.output == "Removed task 2.1: Create argument parser\n"
        assert "2.1 - Create help menu" in project("tree").output

    def test_remove_trunk(self, project):
        result = project("remove", "2")

        assert result.exit_code == 1
        assert "has subtasks and cannot be removed" in result.output


class TestValueCommands:
    """Test set-value, set-cost and rename commands."""

    def test_set_value_propagates(self, project):
        result = project("set-value", "2.1", "7.5")

        assert result.exit_code == 0
        assert result.output == "2.1 - Create argument parser (pv: 7.5, ac: 0.0) ✗\n"
        assert project("tree").output.splitlines()[0] == "Project (pv: 7.5, ac: 0.0) ✗"

    def test_set_value_on_trunk(self, project):
        result = project("set-value", "2", "7")

        assert result.exit_code == 1

    def test_set_value_negative(self, project):
        result = project("set-value", "2.1", "--", "-1")

        assert result.exit_code == 1

    def test_set_cost(self, project):
        result = project("set-cost", "1.1", "4")

        assert result.exit_code == 0
        assert result.output == "1.1 - Create Task struct (pv: 0.0, ac: 4.0) ✗\n"

    def test_rename(self, project):
        result = project("rename", "1", "Create engine")

        assert result.exit_code == 0
        assert "1 - Create engine" in project("tree").output


class TestStatusCommands:
    """Test done and reopen commands."""

    def test_done_cascades(self, project):
        result = project("done", "1.1")

        assert result.exit_code == 0
        assert result.output == "Completed task 1.1: Create Task struct\n"
        assert "1 - Create WSB (pv: 0.0, ac: 0.0) ✔" in project("tree").output

    def test_done_on_trunk(self, project):
        assert project("done", "1").exit_code == 1

    def test_reopen(self, project):
        project("done", "1.1")
        result = project("reopen", "1.1")

        assert result.exit_code == 0
        assert "1 - Create WSB (pv: 0.0, ac: 0.0) ✗" in project("tree").output


class TestMemberAndDependencyCommands:
    """Test assign, unassign, depend and undepend commands."""

    def test_assign_and_unassign(self, project):
        assert project("assign", "2.1", "alice").output == "Assigned alice to task 2.1\n"
        assert project("unassign", "2.1", "alice").output == "Removed alice from task 2.1\n"

        result = project("unassign", "2.1", "alice")
        assert result.exit_code == 1

    def test_assign_to_trunk(self, project):
        assert project("assign", "2", "alice").exit_code == 1

    def test_depend_shows_in_list(self, project):
        result = project("depend", "2.2", "2.1")

        assert result.exit_code == 0
        assert "2.2 - Create help menu (pv: 0.0, ac: 0.0) ✗ [deps: 2.1]" in project("list").output

    def test_depend_on_self(self, project):
        assert project("depend", "2.2", "2.2").exit_code == 1

    def test_undepend(self, project):
        project("depend", "2.2", "2.1")

        result = project("undepend", "2.2", "2.1")

        assert result.exit_code == 0
        assert "[deps:" not in project("list").output
