from __future__ import annotations
from datetime import datetime
from typing import Any, Optional

from flask import Blueprint, request
from sqlalchemy import select, and_, or_, func

from rolewizard import get_db, get_catalogs
from rolewizard.config.pagination import VERSIONS_DEFAULT_LIMIT
from rolewizard.constants.permissions import ROLE_READ, ROLE_MANAGE, DASHBOARD_MANAGE
from rolewizard.decorators.audit import audit_log
from rolewizard.decorators.auth import require_permissions
from rolewizard.errors import ValidationError
from rolewizard.models.definitions import RoleDefinition, RoleVersion, DashboardVersion, RoleAssignment
from rolewizard.services import definitions as store
from rolewizard.services.checklist import ROLE_ID_PATTERN
from rolewizard.services.definitions import RoleDraft, DashboardDraft
from rolewizard.services.policy import current_actor_id
from rolewizard.services.wizard import WizardSession
from rolewizard.utils.listing import apply_pagination, make_cached_list_response, make_cached_response, handle_conditional
from rolewizard.utils.sorting import apply_multi_sort

wizard_bp = Blueprint('wizard', __name__)


# --- request parsing ---

def _body() -> dict:
    data = request.json or {}
    if not isinstance(data, dict):
        raise ValidationError('JSON object body required')
    return data


def _int_or_none(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{key} must be an integer')
    return value


def _required_int(data: dict, key: str) -> int:
    value = _int_or_none(data, key)
    if value is None:
        raise ValidationError(f'{key} required')
    return value


def _list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f'{key} must be an array')
    return value


def _role_draft(role_id: str, data: dict) -> RoleDraft:
    capabilities = _list(data, 'capabilities')
    if not all(isinstance(c, str) for c in capabilities):
        raise ValidationError('capabilities must be an array of strings')
    scopes = data.get('scopes') or {}
    if not isinstance(scopes, dict):
        raise ValidationError('scopes must be an object')
    return RoleDraft(
        role_id=role_id,
        label=data.get('label') or '',
        description=data.get('description') or '',
        capabilities=frozenset(capabilities),
        scopes=scopes,
    )


def _dashboard_draft(data: dict) -> DashboardDraft:
    return DashboardDraft(
        menus=tuple(_list(data, 'menus')),
        pages=tuple(_list(data, 'pages')),
        widgets=tuple(_list(data, 'widgets')),
    )


# --- serializers ---

def _ts(dt) -> Optional[str]:
    return dt.isoformat() if isinstance(dt, datetime) else dt


def _version_json(v: RoleVersion):
    return {
        'version': v.version,
        'label': v.label,
        'description': v.description,
        'capabilities': sorted(v.capabilities or []),
        'scopes': dict(v.scopes or {}),
        'created_by': v.created_by,
        'created_at': _ts(v.created_at),
    }


def _dashboard_json(d: Optional[DashboardVersion]):
    if d is None:
        return None
    return {
        'role_id': d.role_id,
        'version': d.version,
        'menus': d.menus or [],
        'pages': d.pages or [],
        'widgets': d.widgets or [],
        'active': d.active,
        'created_at': _ts(d.created_at),
    }


def _role_json(role: RoleDefinition, latest: Optional[RoleVersion] = None,
               dashboard_version: Optional[int] = None, assigned_users: Optional[int] = None):
    latest = latest or store.latest_role_version(role)
    if assigned_users is None:
        dashboard = store.active_dashboard(role.role_id)
        dashboard_version = dashboard.version if dashboard else None
        assigned_users = store.assigned_user_count(role.role_id)
    return {
        'id': role.role_id,
        'label': latest.label,
        'description': latest.description,
        'latest_version': role.latest_version,
        'published_version': role.published_version,
        'active': role.active,
        'cloned_from': role.cloned_from,
        'dashboard_version': dashboard_version,
        'assigned_users': assigned_users,
        'updated_at': _ts(role.updated_at),
    }


def _fingerprint(row: dict):
    return [row['id'], row['latest_version'], row['published_version'], row['active'],
            row['dashboard_version'], row['assigned_users']]


def _prefetch_role(role_id: str):
    role = get_db().get(RoleDefinition, role_id)
    if role is None:
        return None
    return {'active': role.active, 'published_version': role.published_version}


def _prefetch_dashboard(role_id: str):
    d = store.active_dashboard(role_id)
    return {'active_version': d.version if d else None}


# --- roles: read ---

@wizard_bp.get('/roles')
@require_permissions(ROLE_READ)
def list_roles():
    active_dashboard = (
        select(DashboardVersion.version)
        .where(DashboardVersion.role_id == RoleDefinition.role_id, DashboardVersion.active.is_(True))
        .limit(1)
        .correlate(RoleDefinition)
        .scalar_subquery()
    )
    assigned = (
        select(func.count(RoleAssignment.id))
        .where(RoleAssignment.role_id == RoleDefinition.role_id)
        .correlate(RoleDefinition)
        .scalar_subquery()
    )
    stmt = select(RoleDefinition, RoleVersion, active_dashboard.label('dashboard_version'), assigned.label('assigned_users')).join(
        RoleVersion,
        and_(RoleVersion.role_id == RoleDefinition.role_id, RoleVersion.version == RoleDefinition.latest_version),
    )
    active = request.args.get('active')
    if active is not None:
        if active not in ('true', 'false'):
            raise ValidationError('active must be true or false')
        stmt = stmt.where(RoleDefinition.active.is_(active == 'true'))
    term = request.args.get('q')
    if term:
        stmt = stmt.where(or_(RoleDefinition.role_id.ilike(f'%{term}%'), RoleVersion.label.ilike(f'%{term}%')))
    allowed = {
        'id': RoleDefinition.role_id,
        'label': RoleVersion.label,
        'latest_version': RoleDefinition.latest_version,
        'published_version': RoleDefinition.published_version,
        'active': RoleDefinition.active,
        'updated_at': RoleDefinition.updated_at,
    }
    stmt = apply_multi_sort(stmt, request.args.get('sort'), allowed, RoleDefinition.role_id)
    rows, total, limit, offset = apply_pagination(stmt, scalars=False)
    rows_json = [_role_json(role, latest, dashboard_version, assigned_users)
                 for role, latest, dashboard_version, assigned_users in rows]
    stamps = [row[0].updated_at for row in rows if isinstance(row[0].updated_at, datetime)]
    latest_ts = max(stamps) if stamps else None
    resp, etag = make_cached_list_response(rows_json, total, limit, offset, latest_ts, fingerprint=_fingerprint)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@wizard_bp.get('/roles/<role_id>')
@require_permissions(ROLE_READ)
def get_role(role_id: str):
    role = store.get_role(role_id)
    latest = store.latest_role_version(role)
    published = store.published_role_version(role)
    body = _role_json(role, latest)
    body['latest'] = _version_json(latest)
    body['published'] = _version_json(published) if published else None
    body['dashboard'] = _dashboard_json(store.active_dashboard(role_id))
    updated_at = role.updated_at if isinstance(role.updated_at, datetime) else None
    return make_cached_response(body, _fingerprint(body), updated_at)


@wizard_bp.get('/roles/<role_id>/versions')
@require_permissions(ROLE_READ)
def list_role_versions(role_id: str):
    store.get_role(role_id)
    stmt = select(RoleVersion).where(RoleVersion.role_id == role_id).order_by(RoleVersion.version.desc())
    rows, total, limit, offset = apply_pagination(stmt, VERSIONS_DEFAULT_LIMIT)
    data = [_version_json(v) for v in rows]
    resp, etag = make_cached_list_response(data, total, limit, offset, fingerprint=lambda r: r['version'])
    cond = handle_conditional(etag, None)
    if cond:
        return cond
    return resp


@wizard_bp.get('/roles/<role_id>/availability')
@require_permissions(ROLE_READ)
def role_availability(role_id: str):
    exists = store.role_exists(role_id)
    valid_format = bool(ROLE_ID_PATTERN.match(role_id))
    return {'role_id': role_id, 'exists': exists, 'valid_format': valid_format, 'available': valid_format and not exists}


# --- roles: write ---

@wizard_bp.put('/roles/<role_id>')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.SAVE', entity='Role', entity_id_key='id', meta_keys=['latest_version'])
def save_role(role_id: str):
    data = _body()
    capabilities, scopes = get_catalogs()
    row = store.save_role(
        _role_draft(role_id, data), capabilities, scopes,
        expected_version=_int_or_none(data, 'expected_version'),
        actor_id=current_actor_id(),
    )
    body = _role_json(store.get_role(role_id), row)
    body['latest'] = _version_json(row)
    return body, (201 if row.version == 1 else 200)


@wizard_bp.post('/roles/<role_id>/publish')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.PUBLISH', entity='Role', entity_id_key='id', diff_keys=['published_version'], pre_fetch=lambda a, kw: _prefetch_role(kw.get('role_id')), meta_keys=['published_version'])
def publish_role(role_id: str):
    data = _body()
    role = store.publish_role(role_id, _required_int(data, 'version'), actor_id=current_actor_id())
    return _role_json(role)


@wizard_bp.put('/roles/<role_id>/active')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.ACTIVE.SET', entity='Role', entity_id_key='id', diff_keys=['active'], pre_fetch=lambda a, kw: _prefetch_role(kw.get('role_id')), meta_keys=['active'])
def set_role_active(role_id: str):
    data = _body()
    active = data.get('active')
    if not isinstance(active, bool):
        raise ValidationError('active must be a boolean')
    role = store.set_role_active(role_id, active, actor_id=current_actor_id())
    return _role_json(role)


@wizard_bp.post('/roles/<role_id>/clone')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.CLONE', entity='Role', entity_id_key='id', meta_keys=['cloned_from'])
def clone_role(role_id: str):
    data = request.get_json(silent=True) or {}
    new_id = data.get('new_id') or None
    new_label = data.get('new_label') or None
    role, version, dashboard = store.clone_role(role_id, new_id=new_id, new_label=new_label, actor_id=current_actor_id())
    body = _role_json(role, version)
    body['latest'] = _version_json(version)
    body['dashboard'] = _dashboard_json(dashboard)
    return body, 201


@wizard_bp.delete('/roles/<role_id>')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.DELETE', entity='Role', entity_id_arg='role_id')
def delete_role(role_id: str):
    store.delete_role(role_id)
    return '', 204


@wizard_bp.put('/roles/<role_id>/assignments')
@require_permissions(ROLE_MANAGE)
@audit_log('ROLE.ASSIGNMENTS.SET', entity='Role', entity_id_key='role_id', meta_keys=['user_ids'])
def replace_assignments(role_id: str):
    data = _body()
    user_ids = _list(data, 'user_ids')
    if not all(isinstance(u, int) and not isinstance(u, bool) for u in user_ids):
        raise ValidationError('user_ids must be an array of integers')
    ids = store.replace_assignments(role_id, user_ids)
    return {'role_id': role_id, 'user_ids': ids, 'assigned_users': len(ids)}


# --- dashboards ---

@wizard_bp.get('/roles/<role_id>/dashboard')
@require_permissions(ROLE_READ)
def get_dashboard(role_id: str):
    store.get_role(role_id)
    return {'data': _dashboard_json(store.active_dashboard(role_id)),
            'latest': _dashboard_json(store.latest_dashboard(role_id))}


@wizard_bp.put('/roles/<role_id>/dashboard')
@require_permissions(DASHBOARD_MANAGE)
@audit_log('DASHBOARD.SAVE', entity='Dashboard', entity_id_key='role_id', meta_keys=['version', 'active'])
def save_dashboard(role_id: str):
    data = _body()
    row = store.save_dashboard(
        role_id, _dashboard_draft(data),
        expected_version=_int_or_none(data, 'expected_version'),
        activate=bool(data.get('activate', False)),
        actor_id=current_actor_id(),
    )
    return _dashboard_json(row), (201 if row.version == 1 else 200)


@wizard_bp.post('/roles/<role_id>/dashboard/publish')
@require_permissions(DASHBOARD_MANAGE)
@audit_log('DASHBOARD.PUBLISH', entity='Dashboard', entity_id_arg='role_id', diff_keys=['active_version'], pre_fetch=lambda a, kw: _prefetch_dashboard(kw.get('role_id')), meta_keys=['active_version'])
def publish_dashboard(role_id: str):
    data = _body()
    row = store.publish_dashboard(role_id, _required_int(data, 'version'))
    body = _dashboard_json(row)
    body['active_version'] = row.version
    return body


# --- wizard ---

@wizard_bp.post('/complete')
@require_permissions(ROLE_MANAGE, DASHBOARD_MANAGE)
@audit_log('WIZARD.COMPLETE', entity='Role', entity_id_key='role_id', meta_keys=['role_version', 'dashboard_version', 'template_id'])
def complete_wizard():
    """Run both wizard steps in one call: save role, save + activate dashboard, publish."""
    data = _body()
    role_data = data.get('role') or {}
    dashboard_data = data.get('dashboard') or {}
    if not isinstance(role_data, dict) or not isinstance(dashboard_data, dict):
        raise ValidationError('role and dashboard must be objects')
    role_id = role_data.get('id') or ''
    if not isinstance(role_id, str):
        raise ValidationError('role.id must be a string')
    capabilities, scopes = get_catalogs()
    session = WizardSession(capabilities, scopes, store=store, actor_id=current_actor_id(),
                            draft=_role_draft(role_id, role_data))
    session.role_version = _int_or_none(role_data, 'expected_version')
    # everything that can be rejected is checked before the role is committed
    draft = _dashboard_draft(dashboard_data)
    dashboard_version = _int_or_none(dashboard_data, 'expected_version')
    session.checklist().raise_for_failures()
    store.validate_dashboard_draft(draft)
    store.assert_dashboard_version(role_id, dashboard_version)
    session.submit_role()
    session.set_menus(draft.menus)
    session.set_pages(draft.pages)
    session.set_widgets(draft.widgets)
    session.dashboard_version = dashboard_version
    session.submit_dashboard()
    body = session.as_dict()
    body['role_id'] = role_id
    body['template_id'] = None
    if data.get('save_as_template'):
        template_name = data.get('template_name') or f"{session.draft.label} Dashboard"
        tpl = store.save_template(
            template_name,
            description=f'Dashboard template for {session.draft.label}',
            target_role=role_id,
            menus=session.dashboard.menus,
            pages=session.dashboard.pages,
            widgets=session.dashboard.widgets,
            actor_id=current_actor_id(),
        )
        body['template_id'] = tpl.id
    return body, 201


# --- templates ---

def _template_json(t):
    return {
        'id': t.id,
        'name': t.name,
        'description': t.description,
        'target_role': t.target_role,
        'default_menus': t.default_menus or [],
        'default_pages': t.default_pages or [],
        'default_widgets': t.default_widgets or [],
        'default_layout_columns': t.default_layout_columns,
        'is_system_template': t.is_system_template,
    }


@wizard_bp.get('/templates')
@require_permissions(ROLE_READ)
def list_templates():
    rows = store.list_templates(request.args.get('target_role'))
    return {'data': [_template_json(t) for t in rows]}


@wizard_bp.post('/templates')
@require_permissions(DASHBOARD_MANAGE)
@audit_log('DASHBOARD.TEMPLATE.SAVE', entity='DashboardTemplate', entity_id_key='id', meta_keys=['name', 'target_role'])
def save_template():
    data = _body()
    columns: Any = data.get('default_layout_columns', 3)
    if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
        raise ValidationError('default_layout_columns must be a positive integer')
    tpl = store.save_template(
        data.get('name') or '',
        description=data.get('description') or '',
        target_role=data.get('target_role'),
        menus=_list(data, 'default_menus'),
        pages=_list(data, 'default_pages'),
        widgets=_list(data, 'default_widgets'),
        layout_columns=columns,
        actor_id=current_actor_id(),
    )
    return _template_json(tpl), 201
