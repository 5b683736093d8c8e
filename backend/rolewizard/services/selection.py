from __future__ import annotations
"""Capability selection engine.

A selection is a frozenset of capability keys that is always dependency-closed:
every selected capability has all of its depends_on keys selected too. All
functions are pure (selection in, new selection out) and take the catalog as
an explicit argument.

toggle() semantics:
  * not selected -> add the key plus everything it (transitively) depends on.
  * selected     -> remove the key plus every selected capability that
                    (transitively) depends on it, walking reverse edges
                    breadth-first until nothing else drops out.
"""
from collections import deque
from typing import AbstractSet, FrozenSet, Iterable, List, Set, Tuple

from rolewizard.services.catalog import CapabilityCatalog

Selection = FrozenSet[str]


def required_for(catalog: CapabilityCatalog, key: str) -> Set[str]:
    """Return ``key`` and every capability it requires, transitively."""
    seen = {key}
    queue = deque([key])
    while queue:
        current = queue.popleft()
        for dep in catalog.depends_on(current):
            if dep not in seen:
                seen.add(dep)
                queue.append(dep)
    return seen


def cascade_removal(catalog: CapabilityCatalog, key: str, selection: AbstractSet[str]) -> Set[str]:
    """Return ``key`` plus every selected capability that depends on it (directly or not)."""
    removed = {key}
    queue = deque([key])
    while queue:
        current = queue.popleft()
        for dependent in catalog.dependents(current):
            if dependent in selection and dependent not in removed:
                removed.add(dependent)
                queue.append(dependent)
    return removed


def toggle(catalog: CapabilityCatalog, key: str, selection: Iterable[str]) -> Selection:
    current = frozenset(selection)
    catalog.get(key)  # raises UnknownCapability
    if key in current:
        return current - cascade_removal(catalog, key, current)
    return current | required_for(catalog, key)


def toggle_with_diff(catalog: CapabilityCatalog, key: str, selection: Iterable[str]) -> Tuple[Selection, List[str], List[str]]:
    """toggle() plus the sorted keys that were added and removed."""
    before = frozenset(selection)
    after = toggle(catalog, key, before)
    return after, sorted(after - before), sorted(before - after)


def select_area(catalog: CapabilityCatalog, area: str, selection: Iterable[str]) -> Selection:
    """Select every capability of ``area`` (dependencies outside the area come along)."""
    current = frozenset(selection)
    for cap in catalog.in_area(area):
        if cap.key not in current:
            current = toggle(catalog, cap.key, current)
    return current


def clear_area(catalog: CapabilityCatalog, area: str, selection: Iterable[str]) -> Selection:
    """Deselect every capability of ``area``; dependents elsewhere cascade out."""
    current = frozenset(selection)
    for cap in catalog.in_area(area):
        if cap.key in current:
            current = toggle(catalog, cap.key, current)
    return current


def dangling(catalog: CapabilityCatalog, selection: Iterable[str]) -> List[Tuple[str, str]]:
    """(capability, missing dependency) pairs that break closure."""
    current = frozenset(selection)
    missing = []
    for key in sorted(current):
        for dep in catalog.depends_on(key):
            if dep not in current:
                missing.append((key, dep))
    return missing


def is_closed(catalog: CapabilityCatalog, selection: Iterable[str]) -> bool:
    return not dangling(catalog, selection)


def close(catalog: CapabilityCatalog, selection: Iterable[str]) -> Selection:
    """Dependency closure of an arbitrary set of keys (used for externally supplied lists)."""
    closed: Set[str] = set()
    for key in selection:
        closed |= required_for(catalog, key)
    return frozenset(closed)


__all__ = [
    'Selection', 'required_for', 'cascade_removal', 'toggle', 'toggle_with_diff',
    'select_area', 'clear_area', 'dangling', 'is_closed', 'close',
]
