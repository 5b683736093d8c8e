from __future__ import annotations
"""Role & dashboard definition lifecycle (create/update, publish, clone, activate, delete).

Every public function is one transaction: it commits on success and rolls back
before re-raising on any error, so a failed call never leaves a partial write.
Versions are append-only: saving a role or dashboard writes a new version row
and never edits an existing one.

Optimistic concurrency: updates must name the version they were based on
(``expected_version``). A mismatch raises VersionConflict carrying the current
version; nothing is overwritten.
"""
import logging
import re
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy import select, update, delete, func, case
from sqlalchemy.exc import IntegrityError

from rolewizard import get_db
from rolewizard.errors import (
    DashboardValidationError, RoleAlreadyExists, RoleHasAssignedUsers, RoleNotFound,
    ValidationError, VersionConflict, VersionNotFound,
)
from rolewizard.models.definitions import (
    DashboardTemplate, DashboardVersion, RoleAssignment, RoleDefinition, RoleVersion,
)
from rolewizard.services.catalog import CapabilityCatalog, ScopeCatalog
from rolewizard.services.checklist import RoleChecklist
from rolewizard.services.menu import normalize_menu
from rolewizard.services.scopes import validate_scope_map
from rolewizard.services.selection import dangling

logger = logging.getLogger(__name__)

ROLE_ID_MAX = 64


@dataclass(frozen=True)
class RoleDraft:
    role_id: str = ''
    label: str = ''
    description: str = ''
    capabilities: FrozenSet[str] = frozenset()
    scopes: Mapping[str, str] = field(default_factory=dict)

    def checklist(self) -> RoleChecklist:
        return RoleChecklist.evaluate(self.role_id, self.label, self.capabilities, self.scopes)


@dataclass(frozen=True)
class DashboardDraft:
    menus: Tuple[Mapping[str, Any], ...] = ()
    pages: Tuple[Any, ...] = ()
    widgets: Tuple[Any, ...] = ()


def _in_transaction(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        session = get_db()
        try:
            result = fn(session, *args, **kwargs)
            session.commit()
            return result
        except Exception:
            session.rollback()
            raise
    return wrapper


# --- Lookups ---

def role_exists(role_id: str) -> bool:
    return get_db().get(RoleDefinition, role_id) is not None


def get_role(role_id: str) -> RoleDefinition:
    role = get_db().get(RoleDefinition, role_id)
    if role is None:
        raise RoleNotFound(role_id)
    return role


def get_role_version(role_id: str, version: int) -> RoleVersion:
    row = get_db().execute(
        select(RoleVersion).where(RoleVersion.role_id == role_id, RoleVersion.version == version)
    ).scalar_one_or_none()
    if row is None:
        get_role(role_id)
        raise VersionNotFound(role_id, version)
    return row


def latest_role_version(role: RoleDefinition) -> RoleVersion:
    return get_role_version(role.role_id, role.latest_version)


def published_role_version(role: RoleDefinition) -> Optional[RoleVersion]:
    if role.published_version is None:
        return None
    return get_role_version(role.role_id, role.published_version)


def list_role_versions(role_id: str) -> List[RoleVersion]:
    get_role(role_id)
    return list(get_db().execute(
        select(RoleVersion).where(RoleVersion.role_id == role_id).order_by(RoleVersion.version.desc())
    ).scalars())


def assigned_user_count(role_id: str) -> int:
    return get_db().execute(
        select(func.count(RoleAssignment.id)).where(RoleAssignment.role_id == role_id)
    ).scalar_one()


def active_dashboard(role_id: str) -> Optional[DashboardVersion]:
    return get_db().execute(
        select(DashboardVersion).where(DashboardVersion.role_id == role_id, DashboardVersion.active.is_(True))
    ).scalar_one_or_none()


def latest_dashboard(role_id: str) -> Optional[DashboardVersion]:
    return get_db().execute(
        select(DashboardVersion).where(DashboardVersion.role_id == role_id).order_by(DashboardVersion.version.desc()).limit(1)
    ).scalar_one_or_none()


def _latest_dashboard_version_number(session, role_id: str) -> int:
    return session.execute(
        select(func.coalesce(func.max(DashboardVersion.version), 0)).where(DashboardVersion.role_id == role_id)
    ).scalar_one()


def _check_dashboard_version(role_id: str, latest: int, expected_version: Optional[int]) -> None:
    if latest and expected_version != latest:
        raise VersionConflict(role_id, latest, expected_version)
    if not latest and expected_version:
        raise VersionConflict(role_id, 0, expected_version)


def assert_dashboard_version(role_id: str, expected_version: Optional[int]) -> None:
    """Raise VersionConflict unless ``expected_version`` matches the latest stored dashboard."""
    _check_dashboard_version(role_id, _latest_dashboard_version_number(get_db(), role_id), expected_version)


# --- Validation ---

def validate_role_draft(draft: RoleDraft, capabilities: CapabilityCatalog, scopes: ScopeCatalog) -> Dict[str, str]:
    """Checklist, capability closure and scope enumeration checks. Returns the validated scope map."""
    draft.checklist().raise_for_failures()
    for key in draft.capabilities:
        capabilities.get(key)
    missing = dangling(capabilities, draft.capabilities)
    if missing:
        raise ValidationError(
            'Capability selection is not dependency-closed',
            missing=[{'capability': cap, 'requires': dep} for cap, dep in missing],
        )
    return validate_scope_map(scopes, draft.scopes)


def validate_dashboard_draft(draft: DashboardDraft) -> Tuple[List[Dict[str, Any]], List[Any], List[Any]]:
    menus = normalize_menu(list(draft.menus) if draft.menus is not None else None)
    if not isinstance(draft.pages, (list, tuple)):
        raise DashboardValidationError('Pages must be an array')
    if not isinstance(draft.widgets, (list, tuple)):
        raise DashboardValidationError('Widgets must be an array')
    return menus, list(draft.pages), list(draft.widgets)


# --- Role lifecycle ---

@_in_transaction
def save_role(session, draft: RoleDraft, capabilities: CapabilityCatalog, scopes: ScopeCatalog,
              expected_version: Optional[int] = None, actor_id: Optional[int] = None) -> RoleVersion:
    """Create (version 1) or update (latest + 1) a role definition."""
    scope_map = validate_role_draft(draft, capabilities, scopes)
    role_id = draft.role_id.strip()
    role = session.get(RoleDefinition, role_id, populate_existing=True)
    if role is None:
        if expected_version:
            raise VersionConflict(role_id, 0, expected_version)
        role = RoleDefinition(role_id=role_id, latest_version=1, active=True, created_by=actor_id, updated_by=actor_id)
        session.add(role)
        version = 1
    else:
        if expected_version is None or expected_version != role.latest_version:
            raise VersionConflict(role_id, role.latest_version, expected_version)
        version = expected_version + 1
        # compare-and-swap on latest_version; a concurrent writer makes rowcount 0
        result = session.execute(
            update(RoleDefinition)
            .where(RoleDefinition.role_id == role_id, RoleDefinition.latest_version == expected_version)
            .values(latest_version=version, updated_by=actor_id, updated_at=func.now())
            .execution_options(synchronize_session='fetch')
        )
        if result.rowcount != 1:
            current = session.execute(select(RoleDefinition.latest_version).where(RoleDefinition.role_id == role_id)).scalar_one()
            raise VersionConflict(role_id, current, expected_version)
    row = RoleVersion(
        role_id=role_id,
        version=version,
        label=draft.label.strip(),
        description=draft.description or '',
        capabilities=sorted(draft.capabilities),
        scopes=scope_map,
        created_by=actor_id,
    )
    session.add(row)
    try:
        session.flush()
    except IntegrityError:
        raise VersionConflict(role_id, version, expected_version)
    logger.info('role saved role_id=%s version=%s', role_id, version)
    return row


@_in_transaction
def publish_role(session, role_id: str, version: int, actor_id: Optional[int] = None) -> RoleDefinition:
    """Point the role's published version at ``version`` in one statement."""
    role = session.get(RoleDefinition, role_id)
    if role is None:
        raise RoleNotFound(role_id)
    exists = session.execute(
        select(RoleVersion.id).where(RoleVersion.role_id == role_id, RoleVersion.version == version)
    ).scalar_one_or_none()
    if exists is None:
        raise VersionNotFound(role_id, version)
    session.execute(
        update(RoleDefinition)
        .where(RoleDefinition.role_id == role_id)
        .values(published_version=version, updated_by=actor_id, updated_at=func.now())
        .execution_options(synchronize_session='fetch')
    )
    logger.info('role published role_id=%s version=%s', role_id, version)
    return role


@_in_transaction
def set_role_active(session, role_id: str, active: bool, actor_id: Optional[int] = None) -> RoleDefinition:
    role = session.get(RoleDefinition, role_id)
    if role is None:
        raise RoleNotFound(role_id)
    role.active = bool(active)
    role.updated_by = actor_id
    role.updated_at = func.now()
    logger.info('role %s role_id=%s', 'activated' if active else 'deactivated', role_id)
    return role


@_in_transaction
def delete_role(session, role_id: str) -> None:
    """Delete a role with its versions and dashboards; refused while users are assigned."""
    role = session.get(RoleDefinition, role_id)
    if role is None:
        raise RoleNotFound(role_id)
    count = session.execute(
        select(func.count(RoleAssignment.id)).where(RoleAssignment.role_id == role_id)
    ).scalar_one()
    if count > 0:
        raise RoleHasAssignedUsers(role_id, count)
    session.delete(role)
    logger.info('role deleted role_id=%s', role_id)


def derive_clone_id(source_id: str) -> str:
    base = f'{source_id}_copy'[:ROLE_ID_MAX]
    candidate = base
    n = 2
    while role_exists(candidate):
        suffix = f'_{n}'
        candidate = base[:ROLE_ID_MAX - len(suffix)] + suffix
        n += 1
    return candidate


def clone_role(source_id: str, new_id: Optional[str] = None, new_label: Optional[str] = None,
               actor_id: Optional[int] = None) -> Tuple[RoleDefinition, RoleVersion, Optional[DashboardVersion]]:
    """Copy a role (latest version) and its current dashboard under a new id.

    The clone starts inactive at version 1, unpublished, with no assigned users.
    """
    source = get_role(source_id)
    source_version = latest_role_version(source)
    if new_id is None:
        new_id = derive_clone_id(source_id)
    elif role_exists(new_id):
        raise RoleAlreadyExists(new_id)
    label = new_label or f'{source_version.label} (Copy)'
    RoleChecklist.evaluate(new_id, label, source_version.capabilities, source_version.scopes).raise_for_failures()
    dashboard = active_dashboard(source_id) or latest_dashboard(source_id)
    return _clone(source_id, source_version, new_id, label, dashboard, actor_id)


@_in_transaction
def _clone(session, source_id: str, source_version: RoleVersion, new_id: str, label: str,
           dashboard: Optional[DashboardVersion], actor_id: Optional[int]):
    role = RoleDefinition(role_id=new_id, latest_version=1, active=False, cloned_from=source_id,
                          created_by=actor_id, updated_by=actor_id)
    session.add(role)
    version = RoleVersion(
        role_id=new_id,
        version=1,
        label=label,
        description=f'Cloned from {source_version.label}',
        capabilities=list(source_version.capabilities or []),
        scopes=dict(source_version.scopes or {}),
        created_by=actor_id,
    )
    session.add(version)
    copied = None
    if dashboard is not None:
        copied = DashboardVersion(
            role_id=new_id,
            version=1,
            menus=[dict(m) for m in dashboard.menus or []],
            pages=list(dashboard.pages or []),
            widgets=list(dashboard.widgets or []),
            active=False,
            created_by=actor_id,
        )
        session.add(copied)
    try:
        session.flush()
    except IntegrityError:
        raise RoleAlreadyExists(new_id)
    logger.info('role cloned source=%s clone=%s', source_id, new_id)
    return role, version, copied


# --- Dashboards ---

def _activate_dashboard(session, role_id: str, version: int) -> None:
    # single UPDATE: readers never observe zero or two active versions
    session.execute(
        update(DashboardVersion)
        .where(DashboardVersion.role_id == role_id)
        .values(active=case((DashboardVersion.version == version, True), else_=False))
        .execution_options(synchronize_session='fetch')
    )


@_in_transaction
def save_dashboard(session, role_id: str, draft: DashboardDraft, expected_version: Optional[int] = None,
                   activate: bool = False, actor_id: Optional[int] = None) -> DashboardVersion:
    """Write a new dashboard version for an existing role, optionally activating it."""
    if session.get(RoleDefinition, role_id) is None:
        raise RoleNotFound(role_id)
    menus, pages, widgets = validate_dashboard_draft(draft)
    latest = _latest_dashboard_version_number(session, role_id)
    _check_dashboard_version(role_id, latest, expected_version)
    row = DashboardVersion(
        role_id=role_id,
        version=latest + 1,
        menus=menus,
        pages=pages,
        widgets=widgets,
        active=False,
        created_by=actor_id,
    )
    session.add(row)
    try:
        session.flush()
    except IntegrityError:
        raise VersionConflict(role_id, latest + 1, expected_version)
    if activate:
        _activate_dashboard(session, role_id, row.version)
    logger.info('dashboard saved role_id=%s version=%s active=%s', role_id, row.version, activate)
    return row


@_in_transaction
def publish_dashboard(session, role_id: str, version: int) -> DashboardVersion:
    if session.get(RoleDefinition, role_id) is None:
        raise RoleNotFound(role_id)
    row = session.execute(
        select(DashboardVersion).where(DashboardVersion.role_id == role_id, DashboardVersion.version == version)
    ).scalar_one_or_none()
    if row is None:
        raise VersionNotFound(role_id, version, what='Dashboard of role')
    _activate_dashboard(session, role_id, version)
    logger.info('dashboard published role_id=%s version=%s', role_id, version)
    return row


# --- Templates ---

def template_id_from_name(name: str) -> str:
    return re.sub(r'\s+', '_', name.strip().lower())


@_in_transaction
def save_template(session, name: str, description: str = '', target_role: Optional[str] = None,
                  menus: Iterable[Mapping[str, Any]] = (), pages: Iterable[Any] = (), widgets: Iterable[Any] = (),
                  layout_columns: int = 3, is_system: bool = False, template_id: Optional[str] = None,
                  actor_id: Optional[int] = None) -> DashboardTemplate:
    """Upsert a reusable dashboard template keyed by a slug of its name."""
    if not name or not name.strip():
        raise DashboardValidationError('Template name is required')
    template_id = template_id or template_id_from_name(name)
    menus = normalize_menu(list(menus))
    tpl = session.get(DashboardTemplate, template_id)
    if tpl is None:
        tpl = DashboardTemplate(id=template_id)
        session.add(tpl)
    tpl.name = name.strip()
    tpl.description = description or ''
    tpl.target_role = target_role
    tpl.default_menus = menus
    tpl.default_pages = list(pages)
    tpl.default_widgets = list(widgets)
    tpl.default_layout_columns = int(layout_columns or 3)
    tpl.is_system_template = bool(is_system)
    tpl.updated_by = actor_id
    logger.info('dashboard template saved id=%s', template_id)
    return tpl


def list_templates(target_role: Optional[str] = None) -> List[DashboardTemplate]:
    q = select(DashboardTemplate).order_by(DashboardTemplate.id.asc())
    if target_role:
        q = q.where(DashboardTemplate.target_role == target_role)
    return list(get_db().execute(q).scalars())


# --- Assignments ---

@_in_transaction
def replace_assignments(session, role_id: str, user_ids: Iterable[int]) -> List[int]:
    """Replace the users assigned to a role (written by user management)."""
    if session.get(RoleDefinition, role_id) is None:
        raise RoleNotFound(role_id)
    ids = sorted(set(user_ids))
    session.execute(delete(RoleAssignment).where(RoleAssignment.role_id == role_id))
    for uid in ids:
        session.add(RoleAssignment(user_id=uid, role_id=role_id))
    return ids


__all__ = [
    'RoleDraft', 'DashboardDraft', 'role_exists', 'get_role', 'get_role_version', 'latest_role_version',
    'published_role_version', 'list_role_versions', 'assigned_user_count', 'active_dashboard',
    'latest_dashboard', 'validate_role_draft', 'validate_dashboard_draft', 'save_role', 'publish_role',
    'set_role_active', 'delete_role', 'derive_clone_id', 'clone_role', 'save_dashboard',
    'publish_dashboard', 'template_id_from_name', 'save_template', 'list_templates', 'replace_assignments',
]
