"""Collapse provider completion choices into one display string."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_TRIM_CHARS = "\n?"


def reduce_choices(choices: Sequence[str], *, trim_chars: str = DEFAULT_TRIM_CHARS) -> str:
    """Join choices one per line after stripping leading ``trim_chars`` from each.

    Only leading characters are removed; trailing punctuation is kept. Every
    choice, including the last, is terminated by a newline, so
    ``["\\n?A great place", "\\nAnother spot?"]`` becomes
    ``"A great place\\nAnother spot?\\n"``. An empty ``trim_chars`` keeps
    choices untouched.
    """

    lines: list[str] = []
    for choice in choices:
        text = choice.lstrip(trim_chars) if trim_chars else choice
        lines.append(f"{text}\n")
    return "".join(lines)
