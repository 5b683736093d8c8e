from __future__ import annotations
"""Two-step role wizard as an explicit state machine.

    DRAFTING_ROLE --submit_role--> DRAFTING_DASHBOARD --submit_dashboard--> PUBLISHED
                  <-----back------

``submit_role`` is guarded by the role checklist; ``submit_dashboard`` saves the
dashboard, activates it and publishes the role version saved in step one.

The draft only changes after a store call returns. A store failure propagates
and leaves both the draft and the state as they were, so the caller can retry.
Abandoning the wizard in DRAFTING_DASHBOARD leaves a persisted role without a
dashboard, which is a valid state.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Mapping, Optional

from rolewizard.errors import InvalidTransition, ValidationError
from rolewizard.services import menu as menu_ops
from rolewizard.services import scopes as scope_ops
from rolewizard.services import selection
from rolewizard.services.catalog import CapabilityCatalog, ScopeCatalog
from rolewizard.services.checklist import RoleChecklist
from rolewizard.services.definitions import DashboardDraft, RoleDraft
from rolewizard.utils.fsm import TransitionValidator

logger = logging.getLogger(__name__)

DRAFTING_ROLE = 'DRAFTING_ROLE'
DRAFTING_DASHBOARD = 'DRAFTING_DASHBOARD'
PUBLISHED = 'PUBLISHED'

WIZARD_FSM = TransitionValidator({
    DRAFTING_ROLE: {DRAFTING_DASHBOARD},
    DRAFTING_DASHBOARD: {DRAFTING_ROLE, PUBLISHED},
    PUBLISHED: set(),
}, field_name='wizard step')


def _default_store():
    from rolewizard.services import definitions
    return definitions


class WizardSession:
    """In-memory draft of one role + dashboard, persisted step by step through ``store``.

    ``store`` defaults to :mod:`rolewizard.services.definitions`; anything exposing
    ``save_role``, ``save_dashboard``, ``publish_role`` and ``latest_dashboard`` works.
    """

    def __init__(self, capabilities: CapabilityCatalog, scopes: ScopeCatalog, store=None,
                 actor_id: Optional[int] = None, draft: Optional[RoleDraft] = None):
        self.capabilities = capabilities
        self.scopes = scopes
        self.store = store if store is not None else _default_store()
        self.actor_id = actor_id
        self.state = DRAFTING_ROLE
        self.draft = draft or RoleDraft()
        self.dashboard = DashboardDraft()
        # versions already persisted; used as expected_version on the next write
        self.role_version: Optional[int] = None
        self.dashboard_version: Optional[int] = None

    @classmethod
    def edit(cls, role_id: str, capabilities: CapabilityCatalog, scopes: ScopeCatalog, store=None,
             actor_id: Optional[int] = None) -> 'WizardSession':
        """Start a session pre-filled from the latest version of an existing role."""
        store = store if store is not None else _default_store()
        role = store.get_role(role_id)
        latest = store.latest_role_version(role)
        session = cls(capabilities, scopes, store=store, actor_id=actor_id, draft=RoleDraft(
            role_id=role.role_id,
            label=latest.label,
            description=latest.description or '',
            capabilities=frozenset(latest.capabilities or ()),
            scopes=dict(latest.scopes or {}),
        ))
        session.role_version = latest.version
        return session

    # --- helpers ---

    def _require(self, state: str, action: str):
        if self.state != state:
            raise InvalidTransition(f'Cannot {action} in state {self.state}', state=self.state)

    def _update_draft(self, **changes) -> RoleDraft:
        self._require(DRAFTING_ROLE, 'edit the role')
        self.draft = replace(self.draft, **changes)
        return self.draft

    def _update_dashboard(self, **changes) -> DashboardDraft:
        self._require(DRAFTING_DASHBOARD, 'edit the dashboard')
        self.dashboard = replace(self.dashboard, **changes)
        return self.dashboard

    @property
    def persisted(self) -> bool:
        return self.role_version is not None

    # --- step 1: role ---

    def set_role_id(self, role_id: str) -> RoleDraft:
        if self.persisted and role_id != self.draft.role_id:
            raise ValidationError('Role id cannot change once the role is saved', role_id=self.draft.role_id)
        return self._update_draft(role_id=role_id)

    def set_label(self, label: str) -> RoleDraft:
        return self._update_draft(label=label)

    def set_description(self, description: str) -> RoleDraft:
        return self._update_draft(description=description)

    def toggle_capability(self, key: str) -> RoleDraft:
        return self._update_draft(capabilities=selection.toggle(self.capabilities, key, self.draft.capabilities))

    def select_area(self, area: str) -> RoleDraft:
        return self._update_draft(capabilities=selection.select_area(self.capabilities, area, self.draft.capabilities))

    def clear_area(self, area: str) -> RoleDraft:
        return self._update_draft(capabilities=selection.clear_area(self.capabilities, area, self.draft.capabilities))

    def set_scope(self, category: str, value: str) -> RoleDraft:
        return self._update_draft(scopes=scope_ops.set_scope(self.scopes, category, value, self.draft.scopes))

    def clear_scope(self, category: str) -> RoleDraft:
        return self._update_draft(scopes=scope_ops.clear_scope(self.scopes, category, self.draft.scopes))

    def checklist(self) -> RoleChecklist:
        return self.draft.checklist()

    def can_advance(self) -> bool:
        return self.state == DRAFTING_ROLE and self.checklist().passed

    def submit_role(self):
        """Validate and persist the role, then move to the dashboard step."""
        WIZARD_FSM.assert_can_transition(self.state, DRAFTING_DASHBOARD)
        self.checklist().raise_for_failures()
        row = self.store.save_role(self.draft, self.capabilities, self.scopes,
                                   expected_version=self.role_version, actor_id=self.actor_id)
        self.role_version = row.version
        if self.dashboard_version is None:
            existing = self.store.latest_dashboard(self.draft.role_id)
            if existing is not None:
                self.dashboard = DashboardDraft(
                    menus=tuple(existing.menus or ()),
                    pages=tuple(existing.pages or ()),
                    widgets=tuple(existing.widgets or ()),
                )
                self.dashboard_version = existing.version
        self.state = DRAFTING_DASHBOARD
        logger.debug('wizard advanced role_id=%s version=%s', self.draft.role_id, row.version)
        return row

    # --- step 2: dashboard ---

    def add_menu_entry(self, entry: Mapping[str, Any], index: Optional[int] = None) -> DashboardDraft:
        return self._update_dashboard(menus=tuple(menu_ops.add_menu_entry(self.dashboard.menus, entry, index)))

    def remove_menu_entry(self, key: str) -> DashboardDraft:
        return self._update_dashboard(menus=tuple(menu_ops.remove_menu_entry(self.dashboard.menus, key)))

    def move_menu_entry(self, source: int, destination: int) -> DashboardDraft:
        return self._update_dashboard(menus=tuple(menu_ops.move_menu_entry(self.dashboard.menus, source, destination)))

    def set_menus(self, menus: Iterable[Mapping[str, Any]]) -> DashboardDraft:
        return self._update_dashboard(menus=tuple(menu_ops.normalize_menu(list(menus))))

    def set_pages(self, pages: Iterable[Any]) -> DashboardDraft:
        return self._update_dashboard(pages=tuple(pages))

    def set_widgets(self, widgets: Iterable[Any]) -> DashboardDraft:
        return self._update_dashboard(widgets=tuple(widgets))

    def apply_template(self, template) -> DashboardDraft:
        """Replace the dashboard draft with a template's defaults."""
        return self._update_dashboard(
            menus=tuple(menu_ops.normalize_menu(list(template.default_menus or []))),
            pages=tuple(template.default_pages or ()),
            widgets=tuple(template.default_widgets or ()),
        )

    def back(self) -> RoleDraft:
        WIZARD_FSM.assert_can_transition(self.state, DRAFTING_ROLE)
        self.state = DRAFTING_ROLE
        return self.draft

    def submit_dashboard(self):
        """Save and activate the dashboard, publish the role version, finish the wizard."""
        WIZARD_FSM.assert_can_transition(self.state, PUBLISHED)
        row = self.store.save_dashboard(self.draft.role_id, self.dashboard,
                                        expected_version=self.dashboard_version, activate=True,
                                        actor_id=self.actor_id)
        self.dashboard_version = row.version
        self.store.publish_role(self.draft.role_id, self.role_version, actor_id=self.actor_id)
        self.state = PUBLISHED
        logger.info('wizard completed role_id=%s role_version=%s dashboard_version=%s',
                    self.draft.role_id, self.role_version, row.version)
        return row

    def as_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state,
            'role': {
                'id': self.draft.role_id,
                'label': self.draft.label,
                'description': self.draft.description,
                'capabilities': sorted(self.draft.capabilities),
                'scopes': dict(self.draft.scopes),
            },
            'dashboard': {
                'menus': list(self.dashboard.menus),
                'pages': list(self.dashboard.pages),
                'widgets': list(self.dashboard.widgets),
            },
            'checklist': self.checklist().as_dict(),
            'role_version': self.role_version,
            'dashboard_version': self.dashboard_version,
        }


__all__ = ['WizardSession', 'WIZARD_FSM', 'DRAFTING_ROLE', 'DRAFTING_DASHBOARD', 'PUBLISHED']
