from datetime import datetime, timezone

from prcomments_core.utils.text import format_time, truncate


def test_truncate_short_text_unchanged():
    assert truncate("short", 10) == "short"


def test_truncate_adds_ellipsis():
    result = truncate("a" * 20, 10)
    assert result == "a" * 7 + "..."
    assert len(result) == 10


def test_truncate_flattens_newlines():
    assert truncate("line one\r\nline two", 40) == "line one line two"


def test_truncate_none():
    assert truncate(None, 10) == ""


def test_format_time():
    assert format_time(datetime(2024, 3, 5, 14, 7, tzinfo=timezone.utc)) == "2024-03-05 14:07"
    assert format_time(None) == ""


def test_truncate_tiny_width_is_ellipsis_only():
    assert truncate("abcdef", 2) == "..."
    assert truncate("abcdef", 0) == "..."
    assert truncate("abcdef", 3) == "..."
