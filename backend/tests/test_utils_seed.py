"""Test seeding utilities to reduce duplication.

These helpers centralize creation of roles (with a first version), dashboards and
user assignments through the same lifecycle functions the API uses.
"""
from typing import Dict, Iterable, Optional
from rolewizard.services import definitions as store
from rolewizard.services.catalog import build_catalogs
from rolewizard.services.definitions import RoleDraft, DashboardDraft

DEFAULT_SCOPES = {'project': 'assigned', 'data': 'read'}
DEFAULT_CAPABILITIES = ['projects.view', 'projects.update']

_CATALOGS = None


def default_catalogs():
    """Bundled catalogs, built once per test session."""
    global _CATALOGS
    if _CATALOGS is None:
        _CATALOGS = build_catalogs()
    return _CATALOGS


def role_draft(role_id: str, label: Optional[str] = None, capabilities: Iterable[str] = DEFAULT_CAPABILITIES,
               scopes: Optional[Dict[str, str]] = None, description: str = '') -> RoleDraft:
    return RoleDraft(
        role_id=role_id,
        label=label or role_id.replace('_', ' ').title(),
        description=description,
        capabilities=frozenset(capabilities),
        scopes=dict(scopes if scopes is not None else DEFAULT_SCOPES),
    )


def seed_role(role_id: str, label: Optional[str] = None, capabilities: Iterable[str] = DEFAULT_CAPABILITIES,
              scopes: Optional[Dict[str, str]] = None, publish: bool = False, catalogs=None):
    """Create a role at version 1 (optionally published). Returns the RoleVersion."""
    capabilities_catalog, scope_catalog = catalogs or default_catalogs()
    row = store.save_role(role_draft(role_id, label, capabilities, scopes), capabilities_catalog, scope_catalog)
    if publish:
        store.publish_role(role_id, row.version)
    return row


def seed_dashboard(role_id: str, menus=None, pages=(), widgets=(), activate: bool = True, expected_version: Optional[int] = None):
    menus = menus if menus is not None else [{'key': 'home', 'label': 'Home', 'route': '/app'}]
    return store.save_dashboard(role_id, DashboardDraft(menus=tuple(menus), pages=tuple(pages), widgets=tuple(widgets)),
                                expected_version=expected_version, activate=activate)


def assign_users(role_id: str, user_ids: Iterable[int]):
    return store.replace_assignments(role_id, list(user_ids))


__all__ = ['default_catalogs', 'role_draft', 'seed_role', 'seed_dashboard', 'assign_users', 'DEFAULT_SCOPES', 'DEFAULT_CAPABILITIES']
