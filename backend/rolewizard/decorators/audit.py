from __future__ import annotations
"""Audit logging decorator for wizard route handlers.

Usage examples:

@audit_log('ROLE.SAVE', entity='Role', entity_id_key='id', meta_keys=['latest_version'])
def save_role(role_id):
    ... return {'id': role_id, 'latest_version': 3}

@audit_log('ROLE.ACTIVE.SET', entity='Role', entity_id_key='id', diff_keys=['active'],
           pre_fetch=lambda a, kw: _prefetch_role(kw.get('role_id')))
def set_active(role_id): ...

Parameters:
  action: audit action code (e.g. ROLE.SAVE)
  entity: optional entity label (Role, Dashboard, DashboardTemplate)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: view keyword argument used when entity_id_key is absent (e.g. DELETE with an empty body).
  meta_keys: keys projected from the returned JSON into meta.
  diff_keys / pre_fetch: pre_fetch(args, kwargs) snapshots the entity before the call;
    diff_keys whose value changed land in meta['changes'] as {'before', 'after'}.

Only successful responses are audited. If the view raises, the exception propagates
and nothing is recorded. The view's own transaction is already committed when the
audit row is written, so an audit failure is logged and never changes the response.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from rolewizard.services.audit import add_audit
from rolewizard import get_db

logger = logging.getLogger(__name__)


def _body(rv: Any):
    """JSON body of a view return value (plain dict or (body, status) tuple)."""
    if isinstance(rv, tuple) and rv:
        rv = rv[0]
    return rv if isinstance(rv, dict) else None


def _diff(before: Optional[Dict[str, Any]], after: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    if not before:
        return {}
    return {
        k: {'before': before[k], 'after': after[k]}
        for k in keys
        if k in before and k in after and before[k] != after[k]
    }


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Optional[Dict[str, Any]]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before = pre_fetch(args, kwargs) if diff_keys and pre_fetch else None
            rv = fn(*args, **kwargs)
            try:
                body = _body(rv)
                entity_id = kwargs.get(entity_id_arg) if entity_id_arg else None
                meta: Dict[str, Any] = {}
                if body is not None:
                    if entity_id_key and entity_id_key in body:
                        entity_id = body[entity_id_key]
                    meta = {k: body[k] for k in (meta_keys or ()) if k in body}
                    changes = _diff(before, body, diff_keys or ())
                    if changes:
                        meta['changes'] = changes
                add_audit(action, entity, entity_id, meta or None)
                get_db().commit()
            except Exception:
                logger.exception('audit write failed for %s', action)
                get_db().rollback()
            return rv
        return wrapper
    return outer
