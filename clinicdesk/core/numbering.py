"""
Human readable serial numbers (prescription Sno, receipt and bill numbers).

Numbers are allocated by scanning the existing identifiers for the current
maximum. Values that do not parse as a whole number are ignored.
"""
from typing import Any, Iterable, Optional


def parse_serial(value: Any, prefix: str = "") -> Optional[int]:
    """
    Parse a stored identifier into an integer.

    Args:
        value: Stored identifier (int or string)
        prefix: Optional prefix to strip before parsing, e.g. "R" or "O"

    Returns:
        The parsed number, or None if the value is not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    text = str(value).strip()
    if prefix and text.upper().startswith(prefix.upper()):
        text = text[len(prefix):]
    if not text.isdigit():
        return None
    return int(text)


def next_serial(values: Iterable[Any], prefix: str = "") -> int:
    """
    Return one more than the largest numeric identifier in ``values``.

    >>> next_serial([3, 7, "abc", 10])
    11
    >>> next_serial([])
    1
    """
    numbers = [n for n in (parse_serial(v, prefix) for v in values) if n is not None]
    return max(numbers) + 1 if numbers else 1


def format_serial(number: int, prefix: str = "", width: int = 4) -> str:
    """Zero-pad ``number`` and prepend ``prefix`` (``format_serial(7, "R")`` gives ``R0007``)."""
    return f"{prefix}{str(number).zfill(width)}"


def next_prefixed_number(values: Iterable[Any], prefix: str, width: int = 4) -> str:
    """Allocate the next prefixed number, e.g. ``O0012`` after ``O0011``."""
    return format_serial(next_serial(values, prefix), prefix, width)
