from __future__ import annotations
from typing import List, Optional, Set
from flask_jwt_extended import get_jwt, get_jwt_identity


def current_permissions() -> Set[str]:
    claims = get_jwt()
    return set(claims.get('perms', []))


def missing_permissions(*codes: str) -> List[str]:
    perms = current_permissions()
    return [c for c in codes if c not in perms]


def current_actor_id() -> Optional[int]:
    """JWT identity as int (identity is stored as a string), or None outside an authenticated request."""
    try:
        ident = get_jwt_identity()
    except RuntimeError:
        return None
    try:
        return int(ident) if ident is not None else None
    except (TypeError, ValueError):
        return None
