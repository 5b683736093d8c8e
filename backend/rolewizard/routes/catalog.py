from __future__ import annotations
from flask import Blueprint, request
from rolewizard import get_catalogs
from rolewizard.constants.permissions import ROLE_READ
from rolewizard.decorators.auth import require_permissions
from rolewizard.errors import ValidationError
from rolewizard.services import selection
from rolewizard.services.checklist import RoleChecklist
from rolewizard.services.scopes import set_scope, clear_scope, validate_scope_map

catalog_bp = Blueprint('catalog', __name__)


def _string_list(data: dict, key: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f'{key} must be an array of strings')
    return value


def _scope_map(data: dict, key: str = 'scopes') -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValidationError(f'{key} must be an object')
    return value


@catalog_bp.get('/catalog/capabilities')
@require_permissions(ROLE_READ)
def list_capabilities():
    capabilities, _ = get_catalogs()
    area = request.args.get('area')
    if area:
        if area not in capabilities.areas():
            raise ValidationError(f'Unknown area {area}', areas=capabilities.areas())
        data = [c.as_dict() for c in capabilities.in_area(area)]
    else:
        data = capabilities.as_list()
    return {'data': data, 'areas': capabilities.areas(), 'total': len(data)}


@catalog_bp.get('/catalog/scopes')
@require_permissions(ROLE_READ)
def list_scopes():
    _, scopes = get_catalogs()
    return {'data': scopes.as_dict()}


@catalog_bp.post('/selection/toggle')
@require_permissions(ROLE_READ)
def toggle_selection():
    """Toggle one capability (or a whole area) against a client-held selection."""
    capabilities, _ = get_catalogs()
    data = request.json or {}
    current = _string_list(data, 'selection')
    for key in current:
        capabilities.get(key)
    before = frozenset(current)
    area = data.get('area')
    if area:
        op = selection.clear_area if data.get('clear') else selection.select_area
        after = op(capabilities, area, before)
        added, removed = sorted(after - before), sorted(before - after)
    else:
        key = data.get('capability')
        if not key or not isinstance(key, str):
            raise ValidationError('capability or area required')
        after, added, removed = selection.toggle_with_diff(capabilities, key, before)
    return {
        'selection': sorted(after),
        'added': added,
        'removed': removed,
        'closed': selection.is_closed(capabilities, after),
    }


@catalog_bp.post('/scopes/set')
@require_permissions(ROLE_READ)
def set_scope_value():
    _, scopes = get_catalogs()
    data = request.json or {}
    category = data.get('category')
    if not category or not isinstance(category, str):
        raise ValidationError('category required')
    current = validate_scope_map(scopes, _scope_map(data))
    value = data.get('value')
    if value is None:
        updated = clear_scope(scopes, category, current)
    else:
        updated = set_scope(scopes, category, value, current)
    return {'scopes': updated}


@catalog_bp.post('/roles/checklist')
@require_permissions(ROLE_READ)
def role_checklist():
    data = request.json or {}
    checklist = RoleChecklist.evaluate(
        data.get('id'),
        data.get('label'),
        _string_list(data, 'capabilities'),
        _scope_map(data),
    )
    body = checklist.as_dict()
    body['messages'] = checklist.messages()
    return body
