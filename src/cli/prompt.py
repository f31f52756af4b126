"""Interactive yes/no confirmation for trust prompts."""

from __future__ import annotations


def prompt_user(message: str) -> bool:
    """Print ``message`` and read a yes/no answer from stdin.

    End of input counts as "no".
    """
    print(message)
    try:
        response = input("> ")
    except EOFError:
        return False
    return response.strip().lower() in {"y", "yes"}
