from __future__ import annotations

from datetime import datetime


def truncate(text: str, max_len: int) -> str:
    """Flatten newlines and cut ``text`` to ``max_len`` characters, ending in '...'.

    Widths below three still leave room for the ellipsis.
    """
    text = (text or "").replace("\r", "").replace("\n", " ")
    if len(text) <= max_len:
        return text
    max_len = max(max_len, 3)
    return text[: max_len - 3] + "..."


def format_time(value: datetime | None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    return value.strftime(fmt) if value else ""
