from __future__ import annotations
"""Role definition checklist: the gate between the role step and the dashboard step.

Each condition is reported individually so callers can render a checklist
rather than a single pass/fail.
"""
import re
from dataclasses import dataclass, asdict
from typing import Any, Iterable, List, Mapping, Optional

from rolewizard.errors import RoleValidationError

ROLE_ID_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')

CONDITION_MESSAGES = {
    'has_id': 'Role ID is required',
    'id_format': 'Role ID must start with a letter and contain only lowercase letters, numbers, and underscores',
    'has_label': 'Role label is required',
    'has_capabilities': 'At least one capability must be selected',
    'has_scopes': 'At least one scope must be configured',
}


@dataclass(frozen=True)
class RoleChecklist:
    has_id: bool
    id_format: bool
    has_label: bool
    has_capabilities: bool
    has_scopes: bool

    @classmethod
    def evaluate(cls, role_id: Optional[str], label: Optional[str], capabilities: Iterable[str], scopes: Mapping[str, Any]) -> 'RoleChecklist':
        role_id = (role_id or '').strip() if isinstance(role_id, str) else ''
        label = (label or '').strip() if isinstance(label, str) else ''
        return cls(
            has_id=bool(role_id),
            # an empty id is reported by has_id only
            id_format=not role_id or bool(ROLE_ID_PATTERN.match(role_id)),
            has_label=bool(label),
            has_capabilities=bool(list(capabilities or ())),
            has_scopes=bool(scopes),
        )

    @property
    def passed(self) -> bool:
        return all(asdict(self).values())

    def failures(self) -> List[str]:
        return [name for name, ok in asdict(self).items() if not ok]

    def messages(self) -> List[str]:
        return [CONDITION_MESSAGES[name] for name in self.failures()]

    def as_dict(self):
        out = asdict(self)
        out['passed'] = self.passed
        return out

    def raise_for_failures(self) -> 'RoleChecklist':
        if not self.passed:
            raise RoleValidationError(self)
        return self


__all__ = ['RoleChecklist', 'ROLE_ID_PATTERN', 'CONDITION_MESSAGES']
