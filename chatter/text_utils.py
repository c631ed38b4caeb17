"""Text utilities for log output."""

from __future__ import annotations


def is_empty_or_whitespace(text: str | None) -> bool:
    """Check if text is empty or whitespace-only."""
    return not text or not text.strip()


def find_break_point(body: str, width: int) -> int:
    """Index to split body at: the last space before width, or width itself."""
    if len(body) < width:
        return len(body) - 1
    for i in range(width - 1, -1, -1):
        if body[i] == " ":
            return i
    # No spaces, force a break
    return width


def wrap_body(body: str, width: int) -> list[str]:
    """Split body into lines no longer than width.

    A width below 1 disables wrapping. The result always has at least one
    line, an empty body gives [""].
    """
    if width < 1:
        return [body]
    if not body:
        return [""]
    lines: list[str] = []
    while len(body) > width:
        index = find_break_point(body, width)
        lines.append(body[:index].strip())
        body = body[index:].strip()
    if body:
        lines.append(body)
    return lines
