"""Quoting of the argument string handed to the in-container client script.

The client entry script receives everything after its sub-command as one
argument and re-evaluates it, so the two quote characters are
backslash-escaped and the result is wrapped in double quotes. Nothing else
is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

ESCAPED_CHARACTERS = ("'", '"')
ESCAPE = "\\"
QUOTE = '"'


def escape_arguments(tokens: Iterable[str]) -> str:
    joined = " ".join(tokens)
    escaped = "".join(ESCAPE + char if char in ESCAPED_CHARACTERS else char for char in joined)
    return f"{QUOTE}{escaped}{QUOTE}"


def unescape_argument(text: str) -> str:
    """Invert :func:`escape_arguments` the way the nested shell does."""

    if len(text) >= 2 and text.startswith(QUOTE) and text.endswith(QUOTE):
        text = text[1:-1]
    out: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == ESCAPE and index + 1 < len(text) and text[index + 1] in ESCAPED_CHARACTERS:
            out.append(text[index + 1])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


@dataclass(frozen=True)
class EscapedCommand:
    """Sub-command plus its arguments, kept structured until rendered."""

    sub_command: tuple[str, ...]
    arguments: tuple[str, ...] = ()

    @classmethod
    def of(cls, sub_command: Sequence[str], arguments: Sequence[str]) -> "EscapedCommand":
        return cls(sub_command=tuple(sub_command), arguments=tuple(arguments))

    def render(self) -> str:
        return escape_arguments(self.arguments)

    def argv(self) -> list[str]:
        return [*self.sub_command, self.render()]


__all__ = ["EscapedCommand", "escape_arguments", "unescape_argument"]
