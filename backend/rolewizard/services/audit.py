from __future__ import annotations
from typing import Any, Dict, Optional
from flask_jwt_extended import get_jwt
from rolewizard import get_db
from rolewizard.models.audit import AuditLog
from rolewizard.services.policy import current_actor_id


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the current DB session.

    Parameters:
      action: short action code e.g. ROLE.SAVE, ROLE.PUBLISH, DASHBOARD.SAVE
      entity: optional entity name (Role, Dashboard, DashboardTemplate)
      entity_id: optional role id / template id
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    session = get_db()
    claims = {}
    try:
        claims = get_jwt() or {}
    except RuntimeError:
        pass  # no JWT context (e.g. seed scripts) – keep empty
    log = AuditLog(
        actor_user_id=current_actor_id(),
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        perms_snapshot={'perms': claims.get('perms', [])},
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
