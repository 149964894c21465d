"""Tests for the command-line entry point."""

from pathlib import Path

import pytest

from codeAgent import main as main_module
from codeAgent.runtime.app import BRANCH_PREFIX, branch_slug
from codeAgent.utils.error_handler import ConfigurationError, ModelInvocationError
from codeAgent.models import ModelTier

from fakes import ScriptedChatModel, ai, make_runtime, scripted, tool_call


def test_parse_ask():
    args = main_module.parse_args(["--max-iterations", "5", "ask", "add", "tests"])

    assert args.command == "ask"
    assert args.prompt == ["add", "tests"]
    assert args.max_iterations == 5
    assert args.yes is False


def test_parse_bg_with_keep_worktree():
    args = main_module.parse_args(["-y", "bg", "upgrade", "deps", "--keep-worktree"])

    assert args.command == "bg"
    assert args.task == ["upgrade", "deps"]
    assert args.keep_worktree is True
    assert args.yes is True


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        main_module.parse_args([])


@pytest.fixture
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main_module, "setup_logging", lambda *args, **kwargs: None)


def test_missing_configuration_exits_with_error(monkeypatch, quiet_logging, capsys):
    def failing_build(*args, **kwargs):
        raise ConfigurationError("no key", user_message="AGENT_API_KEY is not set")

    monkeypatch.setattr(main_module, "build_runtime", failing_build)

    assert main_module.main(["ask", "hello"]) == 1
    assert "Error: AGENT_API_KEY is not set" in capsys.readouterr().out


def test_ask_prints_result(monkeypatch, quiet_logging, workspace, capsys):
    runtime = make_runtime({ModelTier.LARGE: scripted(ai("All done.", tool_call("mark_complete")))})
    monkeypatch.setattr(main_module, "build_runtime", lambda *args, **kwargs: runtime)

    assert main_module.main(["ask", "say", "done"]) == 0

    captured = capsys.readouterr()
    assert "All done." in captured.out


def test_ask_notes_incomplete_run(monkeypatch, quiet_logging, workspace, capsys):
    runtime = make_runtime({ModelTier.LARGE: scripted("still working", "more work")})
    monkeypatch.setattr(main_module, "build_runtime", lambda *args, **kwargs: runtime)

    assert main_module.main(["--max-iterations", "2", "ask", "long", "job"]) == 0

    captured = capsys.readouterr()
    assert "more work" in captured.out
    assert "without completing" in captured.err


@pytest.mark.parametrize(
    "suggestion, expected",
    [
        ("Fix Login Bug", "fix-login-bug"),
        ("  add_type--hints!! ", "addtype-hints"),
        ("feature/New  Parser", "featurenew-parser"),
    ],
)
def test_branch_slug(suggestion, expected):
    assert branch_slug(suggestion) == expected


def test_branch_slug_falls_back_to_random_id():
    slug = branch_slug("!!!")

    assert len(slug) == 32
    assert slug != branch_slug("???")


@pytest.mark.asyncio
async def test_generate_branch_name_uses_small_tier():
    runtime = make_runtime({ModelTier.SMALL: scripted("Upgrade Test Suite")})

    assert await runtime.generate_branch_name("upgrade tests to pytest") == f"{BRANCH_PREFIX}upgrade-test-suite"


@pytest.mark.asyncio
async def test_generate_branch_name_survives_model_failure():
    runtime = make_runtime({})

    branch = await runtime.generate_branch_name("anything")

    assert branch.startswith(BRANCH_PREFIX)
    assert len(branch) == len(BRANCH_PREFIX) + 32


class FailingChatModel(ScriptedChatModel):
    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("connection reset")


@pytest.fixture
def fake_git(tmp_path, monkeypatch):
    """Replace the worktree helpers; returns the list of calls made."""
    calls = []
    worktree = tmp_path / "worktree"
    worktree.mkdir()

    def create(branch):
        calls.append(("create", branch))
        return worktree

    monkeypatch.setattr(main_module, "create_worktree", create)
    monkeypatch.setattr(main_module, "commit_all", lambda path, message: calls.append(("commit", message)) or True)
    monkeypatch.setattr(main_module, "remove_worktree", lambda branch: calls.append(("remove", branch)))
    return calls


@pytest.mark.asyncio
async def test_failed_background_run_still_removes_worktree(fake_git, workspace):
    runtime = make_runtime({
        ModelTier.SMALL: scripted("fix login"),
        ModelTier.LARGE: FailingChatModel(messages=iter([])),
    })

    with pytest.raises(ModelInvocationError):
        await main_module.run_background(runtime, "fix the login bug")

    assert fake_git == [("create", "bg-fix-login"), ("remove", "bg-fix-login")]
    assert Path.cwd() == workspace.resolve()


@pytest.mark.asyncio
async def test_background_run_commits_and_keeps_worktree_on_request(fake_git, workspace):
    runtime = make_runtime({
        ModelTier.SMALL: scripted("add docs"),
        ModelTier.LARGE: scripted(ai("Docs added.", tool_call("mark_complete"))),
    })

    assert await main_module.run_background(runtime, "add docs", keep_worktree=True) == 0

    assert fake_git == [("create", "bg-add-docs"), ("commit", "bg-add-docs: add docs")]
    assert Path.cwd() == workspace.resolve()
