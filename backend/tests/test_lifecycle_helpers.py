"""Reusable test helpers for the wizard HTTP API.

Patterns unified:
 - Auth header creation using direct JWT claims (tokens are issued by the identity service).
 - Role payload construction and save-then-assert sequencing.
"""
from __future__ import annotations
from typing import Dict, List, Optional
from flask_jwt_extended import create_access_token
from rolewizard.constants.permissions import ALL_PERMISSION_CODES

# ---------- Generic Auth Helpers ---------- #

def jwt_headers(user_id: int, perms: List[str]):
    token = create_access_token(identity=str(user_id), additional_claims={
        'perms': perms,
        'roles': [],
    })
    return {'Authorization': f'Bearer {token}'}


def admin_headers(app, user_id: int = 1):
    with app.app_context():
        return jwt_headers(user_id, ALL_PERMISSION_CODES)

# ---------- Payload / Assertion Helpers ---------- #

def role_payload(label: str = 'Project Viewer', capabilities: Optional[List[str]] = None,
                 scopes: Optional[Dict[str, str]] = None, expected_version: Optional[int] = None, description: str = ''):
    body = {
        'label': label,
        'description': description,
        'capabilities': capabilities if capabilities is not None else ['projects.view'],
        'scopes': scopes if scopes is not None else {'project': 'assigned'},
    }
    if expected_version is not None:
        body['expected_version'] = expected_version
    return body


def put_role_and_assert(client, role_id: str, payload: dict, headers: Dict[str, str], expected_status: int = 201):
    resp = client.put(f'/wizard/roles/{role_id}', json=payload, headers=headers)
    assert resp.status_code == expected_status, resp.get_json()
    return resp.get_json()


def assert_error(resp, status: int, code: Optional[str] = None):
    assert resp.status_code == status, resp.get_json()
    body = resp.get_json()
    assert body['error']['status'] == status
    if code:
        assert body['error']['code'] == code
    return body['error']

__all__ = ['jwt_headers', 'admin_headers', 'role_payload', 'put_role_and_assert', 'assert_error']
