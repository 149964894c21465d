"""Tests for per-run tool registries."""

import pytest

from codeAgent.agents.schema import RunResult
from codeAgent.tools import ToolSurface, ToolsetConfig
from codeAgent.tools.builtin.delegate_task import DELEGATION_TOOLS

from fakes import make_settings


async def _spawn(request):
    return RunResult(content="child done", completed=True, iterations=1)


@pytest.fixture
def surface():
    return ToolSurface(make_settings(max_delegation_depth=2), model_factory=None)


def test_root_gets_developer_and_delegation_tools(surface):
    names = surface.build_registry("root", 0, spawn=_spawn).tool_names()

    for expected in ("read_file", "edit_file", "run_command", "web_search", "read_page", "think"):
        assert expected in names
    for delegation in DELEGATION_TOOLS:
        assert delegation in names
    assert "mark_complete" in names


def test_delegation_stops_at_max_depth(surface):
    depth_one = surface.build_registry("subtask", 1, spawn=_spawn).tool_names()
    depth_two = surface.build_registry("subtask", 2, spawn=_spawn).tool_names()

    assert "delegate_subtask" in depth_one
    assert not any(name in depth_two for name in DELEGATION_TOOLS)
    assert "mark_complete" in depth_two


def test_no_spawn_means_no_delegation(surface):
    names = surface.build_registry("root", 0).tool_names()

    assert not any(name in names for name in DELEGATION_TOOLS)


def test_chat_runs_never_get_mark_complete(surface):
    names = surface.build_registry("chat", 0, spawn=_spawn, bounded=False).tool_names()

    assert "mark_complete" not in names
    assert "delegate_subtask" in names


def test_expert_role_cannot_delegate(surface):
    names = surface.build_registry("expert", 0, spawn=_spawn).tool_names()

    assert not any(name in names for name in DELEGATION_TOOLS)


def test_explicit_tool_names_override_role(surface):
    names = surface.build_registry("root", 0, spawn=_spawn, tool_names=["read_file", "think"]).tool_names()

    assert names == ["read_file", "think", "mark_complete"]


def test_unknown_tool_name_raises(surface):
    with pytest.raises(KeyError):
        surface.build_registry("root", 0, tool_names=["teleport"])


def test_unknown_role_raises(surface):
    with pytest.raises(KeyError):
        surface.build_registry("astronaut", 0)


def test_metadata_comes_from_toolsets(surface):
    registry = surface.build_registry("root", 0, spawn=_spawn)

    assert registry.get_meta("run_command").risk == "high"
    assert registry.get_meta("delegate_subtask").recursion_control is True
    assert registry.get_meta("read_file").recursion_control is False


def test_inline_toolset_config():
    config = ToolsetConfig(data={"tools": {"think": {"risk": "low"}}, "roles": {"tiny": ["think"]}})
    surface = ToolSurface(make_settings(), model_factory=None, toolsets=config)

    assert surface.build_registry("tiny", 0).tool_names() == ["think", "mark_complete"]
