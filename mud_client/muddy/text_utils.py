"""
Text helpers for room display: list joining, exit sentences, word wrap.
"""

import textwrap
from typing import Mapping, Sequence

EMPHASIS = "**"


def emphasize(text: str) -> str:
    return f"{EMPHASIS}{text}{EMPHASIS}"


def format_list(items: Sequence[str]) -> str:
    """Join items with an Oxford comma: "a", "a and b", "a, b, and c"."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def format_exits(exits: Mapping[str, str]) -> str:
    """
    Describe a room's exits as a sentence.

    Exit names are sorted so the sentence does not depend on the order the
    exits were authored in. Returns "" when there are no exits.
    """
    if not exits:
        return ""

    names = [emphasize(name) for name in sorted(exits)]
    listed = format_list(names)

    if len(names) == 1:
        return f"There is an available exit to the {listed}."
    return f"There are available exits to the {listed}."


def wrap_lines(text: str, line_length: int) -> list[str]:
    """
    Word-wrap text to line_length columns.

    Explicit newlines start a new paragraph and blank paragraphs are kept as
    empty lines. Within a paragraph, runs of spaces and tabs collapse to a
    single space. Words longer than the limit get a line of their own.
    """
    lines: list[str] = []

    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        lines.extend(
            textwrap.wrap(
                " ".join(words),
                width=line_length,
                break_long_words=False,
                break_on_hyphens=False,
            )
        )

    return lines
