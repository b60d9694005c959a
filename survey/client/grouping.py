"""Insertion-ordered grouping by the `field` category."""

from __future__ import annotations

from typing import Dict, Iterable, List, TypeVar

T = TypeVar("T")


def group_by_field(items: Iterable[T]) -> Dict[str, List[T]]:
    """Group items by their `field` attribute, keys in first-seen order."""
    groups: Dict[str, List[T]] = {}
    for item in items:
        groups.setdefault(getattr(item, "field"), []).append(item)
    return groups


__all__ = ["group_by_field"]
