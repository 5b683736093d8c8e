from __future__ import annotations
"""Error taxonomy for role / dashboard definition operations.

Every error carries an HTTP status and a stable ``code`` so the app-level
error handler can render the standard envelope::

    {"error": {"status": 409, "title": "Conflict", "detail": "...", "code": "version_conflict"}}

Persistence errors (SQLAlchemy) are deliberately not wrapped here; they
propagate unchanged and surface as 500.
"""
from typing import Any, Dict, Optional


class WizardError(Exception):
    status = 400
    title = 'Bad Request'
    code = 'wizard_error'

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {
            'status': self.status,
            'title': self.title,
            'detail': self.detail,
            'code': self.code,
        }
        body.update(self.extra)
        return body


# --- Validation ---

class ValidationError(WizardError):
    code = 'validation_error'


class RoleValidationError(ValidationError):
    code = 'role_invalid'

    def __init__(self, checklist):
        failed = checklist.failures()
        super().__init__(
            'Role definition incomplete: ' + ', '.join(failed),
            checklist=checklist.as_dict(),
            failed=failed,
        )
        self.checklist = checklist


class DashboardValidationError(ValidationError):
    code = 'dashboard_invalid'


class UnknownCapability(ValidationError):
    code = 'unknown_capability'

    def __init__(self, key: str):
        super().__init__(f'Unknown capability {key}', capability=key)
        self.key = key


class InvalidScope(ValidationError):
    code = 'invalid_scope'

    def __init__(self, category: str, value: Optional[str] = None):
        if value is None:
            detail = f'Unknown scope category {category}'
        else:
            detail = f'Invalid value {value!r} for scope {category}'
        super().__init__(detail, category=category, value=value)
        self.category = category
        self.value = value


class InvalidTransition(ValidationError):
    code = 'invalid_transition'


class CatalogError(ValidationError):
    code = 'catalog_invalid'


# --- Lookups ---

class RoleNotFound(WizardError):
    status = 404
    title = 'Not Found'
    code = 'role_not_found'

    def __init__(self, role_id: str):
        super().__init__(f'Role {role_id} not found', role_id=role_id)
        self.role_id = role_id


# --- Invariant violations ---

class VersionNotFound(WizardError):
    status = 404
    title = 'Not Found'
    code = 'version_not_found'

    def __init__(self, role_id: str, version: Any, what: str = 'Role'):
        super().__init__(f'{what} {role_id} has no version {version}', role_id=role_id, version=version)
        self.role_id = role_id
        self.version = version


class RoleHasAssignedUsers(WizardError):
    status = 409
    title = 'Conflict'
    code = 'role_has_users'

    def __init__(self, role_id: str, assigned_users: int):
        super().__init__(
            f'Cannot delete role {role_id} with {assigned_users} assigned user(s); reassign users first',
            role_id=role_id,
            assigned_users=assigned_users,
        )
        self.role_id = role_id
        self.assigned_users = assigned_users


class RoleAlreadyExists(WizardError):
    status = 409
    title = 'Conflict'
    code = 'role_exists'

    def __init__(self, role_id: str):
        super().__init__(f'Role ID {role_id} already exists', role_id=role_id)
        self.role_id = role_id


# --- Concurrency ---

class VersionConflict(WizardError):
    status = 409
    title = 'Conflict'
    code = 'version_conflict'

    def __init__(self, role_id: str, current_version: int, expected_version: Optional[int]):
        super().__init__(
            f'{role_id} is at version {current_version}, expected {expected_version}',
            role_id=role_id,
            current_version=current_version,
            expected_version=expected_version,
        )
        self.role_id = role_id
        self.current_version = current_version
        self.expected_version = expected_version


__all__ = [
    'WizardError', 'ValidationError', 'RoleValidationError', 'DashboardValidationError',
    'UnknownCapability', 'InvalidScope', 'InvalidTransition', 'CatalogError',
    'RoleNotFound', 'VersionNotFound', 'RoleHasAssignedUsers', 'RoleAlreadyExists',
    'VersionConflict',
]
