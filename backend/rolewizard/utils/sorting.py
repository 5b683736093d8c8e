from __future__ import annotations
from rolewizard.errors import ValidationError

def apply_multi_sort(stmt, sort_expr: str | None, allowed: dict, tie_breaker):
    """Apply multi-field sort to a SQLAlchemy select.
    sort_expr: comma-separated tokens, each optionally prefixed with '-' (e.g. ``-updated_at,id``).
    allowed: mapping of field key -> column object.
    tie_breaker: column appended for deterministic ordering.
    """
    if not sort_expr:
        return stmt.order_by(tie_breaker.asc())
    clauses = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            raise ValidationError(f'Invalid sort field {key}', allowed=sorted(allowed))
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker.asc())
    return stmt.order_by(*clauses)
