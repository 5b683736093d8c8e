"""Permission codes guarding the wizard admin API.
These live in the JWT 'perms' claim issued by the identity service; they are not
the capabilities composed by the wizard. Never rename codes silently.
"""
from __future__ import annotations
from typing import List

SERVICE_ACTIONS = {
    'ADMIN': ['ROLE.READ', 'ROLE.MANAGE', 'DASHBOARD.MANAGE'],
}


def build_all_permission_codes() -> List[str]:
    codes: List[str] = []
    for svc, actions in SERVICE_ACTIONS.items():
        for act in actions:
            codes.append(f"{svc}.{act}")
    return codes

ALL_PERMISSION_CODES = build_all_permission_codes()

ROLE_READ = 'ADMIN.ROLE.READ'
ROLE_MANAGE = 'ADMIN.ROLE.MANAGE'
DASHBOARD_MANAGE = 'ADMIN.DASHBOARD.MANAGE'
