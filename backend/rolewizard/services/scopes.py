from __future__ import annotations
from typing import Dict, Mapping

from rolewizard.errors import InvalidScope
from rolewizard.services.catalog import ScopeCatalog


def set_scope(catalog: ScopeCatalog, category: str, value: str, scopes: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``scopes`` with ``category`` set to ``value`` (last write wins).

    Unknown categories and values outside the category's options are rejected
    before anything is written.
    """
    if value not in catalog.allowed_values(category):
        raise InvalidScope(category, value)
    updated = dict(scopes)
    updated[category] = value
    return updated


def clear_scope(catalog: ScopeCatalog, category: str, scopes: Mapping[str, str]) -> Dict[str, str]:
    catalog.get(category)
    return {k: v for k, v in scopes.items() if k != category}


def validate_scope_map(catalog: ScopeCatalog, scopes: Mapping[str, str]) -> Dict[str, str]:
    """Validate a whole submitted map; returns a plain dict copy."""
    if not isinstance(scopes, Mapping):
        raise InvalidScope('<scopes>', repr(scopes))
    validated: Dict[str, str] = {}
    for category, value in scopes.items():
        validated = set_scope(catalog, category, value, validated)
    return validated


__all__ = ['set_scope', 'clear_scope', 'validate_scope_map']
