# File: utils/snapshot_utils.py
"""Copy-on-write helpers for Star Hunt snapshots.

Pure Python functions with ZERO Home Assistant dependencies.

Snapshots handed to the engines are treated as immutable: every change builds
new dicts/lists along the path to the changed value and shares everything
else. Callers can then detect "nothing happened" with an identity check.

Functions:
    - find_child: Look up a child by id
    - find_item: Look up a task/reward/activity by id in a list
    - replace_child: New snapshot with one child swapped
    - replace_item: New list with one item swapped
    - without_key: Shallow copy of a dict minus one key
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

# Local copies of wire keys to keep this module free of const.py
_KEY_CHILDREN = "children"
_KEY_ID = "id"


def find_child(data: Mapping[str, Any], child_id: str) -> dict[str, Any] | None:
    """Return the child with child_id, or None."""
    for child in data.get(_KEY_CHILDREN, []):
        if child.get(_KEY_ID) == child_id:
            return child
    return None


def find_item(items: Sequence[Mapping[str, Any]], item_id: str) -> Any:
    """Return the first item whose id equals item_id, or None."""
    for item in items:
        if item.get(_KEY_ID) == item_id:
            return item
    return None


def replace_child(
    data: Mapping[str, Any], child_id: str, new_child: Mapping[str, Any]
) -> dict[str, Any]:
    """Return a new snapshot where the child with child_id is new_child.

    Other children keep their identity.
    """
    children = [
        new_child if child.get(_KEY_ID) == child_id else child
        for child in data.get(_KEY_CHILDREN, [])
    ]
    return {**data, _KEY_CHILDREN: children}


def replace_item(
    items: Sequence[Mapping[str, Any]], item_id: str, new_item: Mapping[str, Any]
) -> list[Any]:
    """Return a new list where the item with item_id is new_item."""
    return [new_item if item.get(_KEY_ID) == item_id else item for item in items]


def without_key(source: Mapping[str, Any], key: str) -> dict[str, Any]:
    """Return a shallow copy of source without key."""
    return {k: v for k, v in source.items() if k != key}
