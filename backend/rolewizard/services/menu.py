from __future__ import annotations
"""Dashboard menu helpers.

Menus are ordered lists of entries::

    {'key': 'finance', 'label': 'Finance', 'icon': 'finance',
     'items': [{'key': 'fund-requests', 'label': 'Fund Requests', 'route': '/app/fund-requests'}]}

All helpers return new lists and leave their input untouched.
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from rolewizard.errors import DashboardValidationError


def _entry(raw: Mapping[str, Any], path: str, seen: Set[str]) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise DashboardValidationError(f'{path}: menu entry must be an object')
    key = raw.get('key')
    label = raw.get('label')
    if not key or not isinstance(key, str):
        raise DashboardValidationError(f'{path}: key required')
    if not label or not isinstance(label, str):
        raise DashboardValidationError(f'{path}: label required for {key}')
    if key in seen:
        raise DashboardValidationError(f'Duplicate menu key {key}')
    seen.add(key)
    entry: Dict[str, Any] = {'key': key, 'label': label}
    for opt in ('icon', 'route'):
        if raw.get(opt) is not None:
            if not isinstance(raw[opt], str):
                raise DashboardValidationError(f'{path}: {opt} must be a string')
            entry[opt] = raw[opt]
    items = raw.get('items')
    if items:
        if not isinstance(items, list):
            raise DashboardValidationError(f'{path}: items must be a list')
        entry['items'] = [_entry(child, f'{path}.items[{i}]', seen) for i, child in enumerate(items)]
    return entry


def normalize_menu(menu: Any) -> List[Dict[str, Any]]:
    """Validate a submitted menu tree; keys must be unique across the whole tree."""
    if menu is None:
        return []
    if not isinstance(menu, list):
        raise DashboardValidationError('Menus must be an array')
    seen: Set[str] = set()
    return [_entry(raw, f'menus[{i}]', seen) for i, raw in enumerate(menu)]


def menu_keys(menu: Sequence[Mapping[str, Any]]) -> List[str]:
    keys: List[str] = []
    for entry in menu:
        keys.append(entry['key'])
        keys.extend(menu_keys(entry.get('items') or []))
    return keys


def add_menu_entry(menu: Sequence[Mapping[str, Any]], entry: Mapping[str, Any], index: Optional[int] = None) -> List[Dict[str, Any]]:
    """Append (or insert at ``index``) a top-level entry.

    A top-level key already in the menu is a no-op; a nested item key that
    collides with an existing key raises DashboardValidationError.
    """
    current = [dict(e) for e in menu]
    existing = set(menu_keys(current))
    if entry.get('key') in existing:
        return current
    new_entry = _entry(entry, 'entry', existing)
    if index is None:
        current.append(new_entry)
    else:
        current.insert(index, new_entry)
    return current


def remove_menu_entry(menu: Sequence[Mapping[str, Any]], key: str) -> List[Dict[str, Any]]:
    """Drop the entry with ``key`` wherever it sits in the tree."""
    out = []
    for entry in menu:
        if entry['key'] == key:
            continue
        copy = dict(entry)
        if entry.get('items'):
            copy['items'] = remove_menu_entry(entry['items'], key)
        out.append(copy)
    return out


def move_menu_entry(menu: Sequence[Mapping[str, Any]], source: int, destination: int) -> List[Dict[str, Any]]:
    """Splice: remove at ``source``, insert at ``destination``; everything else keeps its order."""
    current = [dict(e) for e in menu]
    size = len(current)
    if not (0 <= source < size) or not (0 <= destination < size):
        raise DashboardValidationError(f'Menu index out of range ({source} -> {destination}, size {size})')
    moved = current.pop(source)
    current.insert(destination, moved)
    return current


__all__ = [
    'normalize_menu', 'menu_keys', 'add_menu_entry', 'remove_menu_entry',
    'move_menu_entry',
]
