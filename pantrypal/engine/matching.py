"""Lenient name matching shared by the pantry, coupon and search logic."""

from __future__ import annotations

from collections.abc import Iterable


def normalize(name: str) -> str:
    """Trim and lower-case a free-text name."""
    return name.strip().lower()


def matches(a: str, b: str) -> bool:
    """Return True if either normalized name contains the other.

    Blank names never match, so an empty coupon key cannot apply to
    every item. Short names are lenient on purpose ("egg" matches
    "eggplant").
    """
    na = normalize(a)
    nb = normalize(b)
    if not na or not nb:
        return False
    return na in nb or nb in na


def matches_any(name: str, candidates: Iterable[str]) -> bool:
    """Check if *name* fuzzy-matches at least one candidate."""
    return any(matches(name, c) for c in candidates)


def same_name(a: str, b: str) -> bool:
    """Case-insensitive exact comparison (no containment)."""
    return normalize(a) == normalize(b)
