"""Tests for the console confirmation step."""

import asyncio
import threading

import pytest

from codeAgent.hitl import ConsoleConfirmer, LineReader, is_affirmative

from fakes import ScriptedStdin


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " Yes please"])
def test_answers_starting_with_y_confirm(answer):
    assert is_affirmative(answer)


@pytest.mark.parametrize("answer", ["n", "no", "", "sure", None])
def test_other_answers_deny(answer):
    assert not is_affirmative(answer)


def _confirmer(reader, **kwargs):
    prompts = []
    confirmer = ConsoleConfirmer(reader=reader, writer=prompts.append, **kwargs)
    return confirmer, prompts


@pytest.mark.asyncio
async def test_yes_answer_confirms():
    confirmer, prompts = _confirmer(lambda: "y")

    assert await confirmer.confirm("Would you like to run ls?") is True
    assert prompts and prompts[0].startswith("Would you like to run ls?")


@pytest.mark.asyncio
async def test_no_answer_denies():
    confirmer, _ = _confirmer(lambda: "n")

    assert await confirmer.confirm("Run it?") is False


@pytest.mark.asyncio
async def test_timeout_proceeds_as_confirmed():
    release = threading.Event()
    confirmer, _ = _confirmer(lambda: (release.wait(5), "n")[1], timeout_seconds=0.05)

    try:
        assert await confirmer.confirm("Run it?") is True
    finally:
        release.set()


@pytest.mark.asyncio
async def test_timeout_can_be_configured_to_deny():
    release = threading.Event()
    confirmer, _ = _confirmer(lambda: (release.wait(5), "y")[1], timeout_seconds=0.05, on_timeout=False)

    try:
        assert await confirmer.confirm("Run it?") is False
    finally:
        release.set()


@pytest.mark.asyncio
async def test_closed_stdin_denies():
    def closed():
        raise EOFError

    confirmer, _ = _confirmer(closed)

    assert await confirmer.confirm("Run it?") is False


@pytest.mark.asyncio
async def test_auto_approve_skips_prompt():
    def never_called():
        raise AssertionError("reader should not be used")

    confirmer, prompts = _confirmer(never_called, auto_approve=True)

    assert await confirmer.confirm("Run it?") is True
    assert prompts == []


@pytest.mark.asyncio
async def test_answer_after_timed_out_prompt_goes_to_next_prompt():
    stdin = ScriptedStdin()
    prompts = []

    def writer(text):
        prompts.append(text)
        if len(prompts) == 2:
            stdin.lines.put("n")

    confirmer = ConsoleConfirmer(timeout_seconds=0.05, reader=stdin, writer=writer)

    assert await confirmer.confirm("Run ls?") is True
    confirmer.timeout_seconds = 5.0
    assert await confirmer.confirm("Run git push --force?") is False
    assert stdin.reads == 1


@pytest.mark.asyncio
async def test_line_typed_before_prompt_does_not_answer_it():
    stdin = ScriptedStdin()
    confirmer = ConsoleConfirmer(timeout_seconds=0.05, on_timeout=False, reader=stdin, writer=lambda text: None)

    assert await confirmer.confirm("Run ls?") is False
    stdin.lines.put("y")
    for _ in range(200):
        if confirmer.lines._pending.done():
            break
        await asyncio.sleep(0.01)
    else:
        pytest.fail("late answer never arrived")

    assert await confirmer.confirm("Run rm -rf build?") is False
    assert stdin.reads == 2


@pytest.mark.asyncio
async def test_line_reader_keeps_one_read_in_flight():
    stdin = ScriptedStdin()
    lines = LineReader(stdin)

    with pytest.raises(asyncio.TimeoutError):
        await lines.read(timeout=0.05)
    with pytest.raises(asyncio.TimeoutError):
        await lines.read(timeout=0.05)
    stdin.lines.put("hello")

    assert await lines.read(timeout=5) == "hello"
    assert stdin.reads == 1
