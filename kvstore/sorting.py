"""Key ordering used by sortable stores.

A sort request is a :class:`SortFlag`: one comparison kind, optionally
combined with ``FLAG_CASE`` for the string and natural kinds.
"""
from __future__ import annotations

import enum
import locale
import re
from functools import cmp_to_key
from typing import Any, Iterable, List, Union

_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DIGITS = re.compile(r"(\d+)")


class SortFlag(enum.IntFlag):
    REGULAR = 0
    NUMERIC = 1
    STRING = 2
    LOCALE_STRING = 4
    NATURAL = 8
    FLAG_CASE = 16


def to_number(value: Any) -> Union[int, float]:
    """Coerce a key to a number using its leading numeric prefix (else 0)."""
    if isinstance(value, (int, float)):
        return value
    match = _NUMERIC_PREFIX.match(str(value))
    if not match:
        return 0
    text = match.group(0).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def is_numeric(value: Any) -> bool:
    if isinstance(value, (int, float)):
        return True
    text = str(value)
    match = _NUMERIC_PREFIX.match(text)
    return bool(match) and not text[match.end():].strip()


def _compare_regular(a: Any, b: Any) -> int:
    if is_numeric(a) and is_numeric(b):
        x, y = to_number(a), to_number(b)
    else:
        x, y = str(a), str(b)
    return (x > y) - (x < y)


def _text(value: Any, fold: bool) -> str:
    text = str(value)
    return text.casefold() if fold else text


def natural_key(text: str) -> tuple:
    # re.split with a capturing group alternates text (even) and digits (odd)
    parts = _DIGITS.split(text)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts))


_KINDS = (
    SortFlag.REGULAR,
    SortFlag.NUMERIC,
    SortFlag.STRING,
    SortFlag.LOCALE_STRING,
    SortFlag.NATURAL,
)


def validate_flags(flags: Union[int, SortFlag]) -> SortFlag:
    """Return `flags` as a SortFlag, or raise ValueError for unsupported combinations."""
    try:
        flags = SortFlag(flags)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unsupported sort flags: {flags!r}") from exc
    kind = SortFlag(int(flags) & ~int(SortFlag.FLAG_CASE))
    if kind not in _KINDS:
        raise ValueError(f"Unsupported sort flags: {flags!r}")
    return flags


def sort_keys(keys: Iterable[Any], flags: SortFlag = SortFlag.REGULAR) -> List[Any]:
    """Return `keys` ordered according to `flags`. The sort is stable."""
    flags = validate_flags(flags)
    fold = bool(flags & SortFlag.FLAG_CASE)
    kind = SortFlag(int(flags) & ~int(SortFlag.FLAG_CASE))
    keys = list(keys)

    if kind == SortFlag.REGULAR:
        return sorted(keys, key=cmp_to_key(_compare_regular))
    if kind == SortFlag.NUMERIC:
        return sorted(keys, key=to_number)
    if kind == SortFlag.STRING:
        return sorted(keys, key=lambda k: _text(k, fold))
    if kind == SortFlag.LOCALE_STRING:
        return sorted(keys, key=lambda k: locale.strxfrm(str(k)))
    if kind == SortFlag.NATURAL:
        return sorted(keys, key=lambda k: natural_key(_text(k, fold)))
    raise AssertionError(f"unhandled sort kind {kind!r}")
