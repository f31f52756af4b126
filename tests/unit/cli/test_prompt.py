"""Unit tests for interactive confirmation."""

from __future__ import annotations

import pytest

from cli.prompt import prompt_user


@pytest.mark.parametrize(
    ("answer", "expected"),
    [("yes", True), (" Y ", True), ("no", False), ("", False)],
)
def test_prompt_accepts_only_yes(
    monkeypatch: pytest.MonkeyPatch,
    answer: str,
    expected: bool,
) -> None:
    """Only y or yes confirm; anything else declines."""
    monkeypatch.setattr("builtins.input", lambda prompt: answer)

    assert prompt_user("Proceed? (yes/no)") is expected


def test_prompt_treats_end_of_input_as_no(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    """Closed stdin declines instead of crashing."""

    def _eof(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)

    assert prompt_user("Copy to current directory? (yes/no)") is False
    assert "Copy to current directory?" in capsys.readouterr().out
