from sqlalchemy import select, event
import rolewizard
from rolewizard import get_db
from rolewizard.constants.permissions import ROLE_READ
from rolewizard.models.audit import AuditLog
from tests.test_lifecycle_helpers import jwt_headers, admin_headers, role_payload, put_role_and_assert, assert_error
from tests.test_utils_seed import seed_role, seed_dashboard, assign_users


def test_requires_token_and_permission(client, app_instance):
    assert client.get('/wizard/roles').status_code == 401
    with app_instance.app_context():
        headers = jwt_headers(7, [])
    resp = client.get('/wizard/roles', headers=headers)
    assert_error(resp, 403)
    with app_instance.app_context():
        reader = jwt_headers(7, [ROLE_READ])
    assert client.get('/wizard/roles', headers=reader).status_code == 200
    assert_error(client.put('/wizard/roles/x', json=role_payload(), headers=reader), 403)


def test_role_save_publish_flow(client, app_instance):
    headers = admin_headers(app_instance)
    body = put_role_and_assert(client, 'project_viewer', role_payload(), headers)
    assert body['latest_version'] == 1
    assert body['published_version'] is None
    assert body['latest']['capabilities'] == ['projects.view']

    err = assert_error(client.put('/wizard/roles/project_viewer', json=role_payload(label='Blind'), headers=headers), 409, 'version_conflict')
    assert err['current_version'] == 1

    payload = role_payload(label='Project Viewer v2', capabilities=['projects.view', 'projects.update'], expected_version=1)
    body = put_role_and_assert(client, 'project_viewer', payload, headers, expected_status=200)
    assert body['latest_version'] == 2

    resp = client.post('/wizard/roles/project_viewer/publish', json={'version': 2}, headers=headers)
    assert resp.status_code == 200, resp.get_json()
    assert resp.get_json()['published_version'] == 2
    assert_error(client.post('/wizard/roles/project_viewer/publish', json={'version': 5}, headers=headers), 404, 'version_not_found')
    assert_error(client.post('/wizard/roles/project_viewer/publish', json={}, headers=headers), 400)

    detail = client.get('/wizard/roles/project_viewer', headers=headers).get_json()
    assert detail['published']['version'] == 2
    assert detail['latest']['label'] == 'Project Viewer v2'
    assert detail['dashboard'] is None

    versions = client.get('/wizard/roles/project_viewer/versions', headers=headers).get_json()
    assert [v['version'] for v in versions['data']] == [2, 1]
    assert versions['pagination']['total'] == 2


def test_role_validation_errors(client, app_instance):
    headers = admin_headers(app_instance)
    err = assert_error(client.put('/wizard/roles/empty', json=role_payload(capabilities=[]), headers=headers), 400, 'role_invalid')
    assert err['checklist']['has_capabilities'] is False
    assert err['failed'] == ['has_capabilities']
    assert_error(client.put('/wizard/roles/Bad-Id', json=role_payload(), headers=headers), 400, 'role_invalid')
    err = assert_error(client.put('/wizard/roles/open', json=role_payload(capabilities=['projects.close', 'projects.view']), headers=headers), 400, 'validation_error')
    assert err['missing'] == [{'capability': 'projects.close', 'requires': 'projects.update'}]
    assert_error(client.put('/wizard/roles/open', json=role_payload(capabilities=['nope']), headers=headers), 400, 'unknown_capability')
    assert_error(client.put('/wizard/roles/open', json=role_payload(scopes={'project': 'galaxy'}), headers=headers), 400, 'invalid_scope')
    assert_error(client.put('/wizard/roles/open', json=role_payload(expected_version='1'), headers=headers), 400)
    assert client.get('/wizard/roles', headers=headers).get_json()['pagination']['total'] == 0


def test_active_clone_delete(client, app_instance):
    headers = admin_headers(app_instance)
    put_role_and_assert(client, 'auditor', role_payload(label='Auditor'), headers)

    resp = client.put('/wizard/roles/auditor/active', json={'active': False}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['active'] is False
    assert_error(client.put('/wizard/roles/auditor/active', json={'active': 'no'}, headers=headers), 400)
    log = get_db().execute(select(AuditLog).where(AuditLog.action == 'ROLE.ACTIVE.SET')).scalars().first()
    assert log is not None
    assert log.entity_id == 'auditor'
    assert log.actor_user_id == 1
    assert log.meta['changes']['active'] == {'before': True, 'after': False}

    resp = client.post('/wizard/roles/auditor/clone', json={}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    clone = resp.get_json()
    assert clone['id'] == 'auditor_copy'
    assert clone['label'] == 'Auditor (Copy)'
    assert clone['active'] is False
    assert clone['assigned_users'] == 0
    assert_error(client.post('/wizard/roles/auditor/clone', json={'new_id': 'auditor_copy'}, headers=headers), 409, 'role_exists')

    resp = client.put('/wizard/roles/auditor/assignments', json={'user_ids': [3, 4, 3]}, headers=headers)
    assert resp.get_json() == {'role_id': 'auditor', 'user_ids': [3, 4], 'assigned_users': 2}
    err = assert_error(client.delete('/wizard/roles/auditor', headers=headers), 409, 'role_has_users')
    assert err['assigned_users'] == 2

    client.put('/wizard/roles/auditor/assignments', json={'user_ids': []}, headers=headers)
    assert client.delete('/wizard/roles/auditor', headers=headers).status_code == 204
    assert_error(client.get('/wizard/roles/auditor', headers=headers), 404, 'role_not_found')
    assert client.get('/wizard/roles/auditor_copy', headers=headers).status_code == 200
    actions = set(get_db().execute(select(AuditLog.action)).scalars())
    assert {'ROLE.SAVE', 'ROLE.ACTIVE.SET', 'ROLE.CLONE', 'ROLE.DELETE', 'ROLE.ASSIGNMENTS.SET'} <= actions


def test_dashboard_endpoints(client, app_instance):
    headers = admin_headers(app_instance)
    dash = {'menus': [{'key': 'home', 'label': 'Home'}], 'pages': ['dashboard'], 'widgets': [], 'activate': True}
    assert_error(client.put('/wizard/roles/ghost/dashboard', json=dash, headers=headers), 404, 'role_not_found')
    put_role_and_assert(client, 'dash_owner', role_payload(), headers)

    resp = client.put('/wizard/roles/dash_owner/dashboard', json=dash, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    assert resp.get_json()['active'] is True
    assert_error(client.put('/wizard/roles/dash_owner/dashboard', json=dash, headers=headers), 409, 'version_conflict')
    bad = {**dash, 'expected_version': 1, 'menus': [{'key': 'a', 'label': 'A'}, {'key': 'a', 'label': 'B'}]}
    assert_error(client.put('/wizard/roles/dash_owner/dashboard', json=bad, headers=headers), 400, 'dashboard_invalid')

    resp = client.put('/wizard/roles/dash_owner/dashboard', json={**dash, 'expected_version': 1, 'activate': False}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['version'] == 2
    assert client.get('/wizard/roles/dash_owner/dashboard', headers=headers).get_json()['data']['version'] == 1

    resp = client.post('/wizard/roles/dash_owner/dashboard/publish', json={'version': 2}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['active_version'] == 2
    body = client.get('/wizard/roles/dash_owner/dashboard', headers=headers).get_json()
    assert body['data']['version'] == 2
    assert body['latest']['version'] == 2
    log = get_db().execute(select(AuditLog).where(AuditLog.action == 'DASHBOARD.PUBLISH')).scalars().first()
    assert log.meta['changes']['active_version'] == {'before': 1, 'after': 2}


def test_list_roles_sort_pagination_and_etag(client, app_instance):
    headers = admin_headers(app_instance)
    for role_id in ('bravo', 'alpha', 'charlie'):
        seed_role(role_id)
    assign_users('alpha', [1])
    resp = client.get('/wizard/roles?sort=-id', headers=headers)
    assert resp.status_code == 200
    assert [r['id'] for r in resp.get_json()['data']] == ['charlie', 'bravo', 'alpha']
    alpha = client.get('/wizard/roles?q=alph', headers=headers).get_json()['data']
    assert [r['id'] for r in alpha] == ['alpha']
    assert alpha[0]['assigned_users'] == 1

    page = client.get('/wizard/roles?limit=1&offset=1', headers=headers).get_json()
    assert page['pagination'] == {'total': 3, 'limit': 1, 'offset': 1, 'returned': 1}
    assert page['data'][0]['id'] == 'bravo'

    assert_error(client.get('/wizard/roles?sort=password', headers=headers), 400)
    assert_error(client.get('/wizard/roles?limit=abc', headers=headers), 400)

    first = client.get('/wizard/roles', headers=headers)
    etag = first.headers.get('ETag')
    assert etag
    second = client.get('/wizard/roles', headers={**headers, 'If-None-Match': etag})
    assert second.status_code == 304
    assert second.headers.get('ETag') == etag

    client.post('/wizard/roles/alpha/publish', json={'version': 1}, headers=headers)
    third = client.get('/wizard/roles', headers={**headers, 'If-None-Match': etag})
    assert third.status_code == 200
    assert third.headers.get('ETag') != etag


def test_single_role_etag(client, app_instance):
    headers = admin_headers(app_instance)
    seed_role('cached')
    first = client.get('/wizard/roles/cached', headers=headers)
    etag = first.headers.get('ETag')
    assert client.get('/wizard/roles/cached', headers={**headers, 'If-None-Match': etag}).status_code == 304
    client.put('/wizard/roles/cached/active', json={'active': False}, headers=headers)
    assert client.get('/wizard/roles/cached', headers={**headers, 'If-None-Match': etag}).status_code == 200


def test_availability(client, app_instance):
    headers = admin_headers(app_instance)
    seed_role('taken')
    assert client.get('/wizard/roles/taken/availability', headers=headers).get_json() == {
        'role_id': 'taken', 'exists': True, 'valid_format': True, 'available': False}
    assert client.get('/wizard/roles/free_one/availability', headers=headers).get_json()['available'] is True
    assert client.get('/wizard/roles/9lives/availability', headers=headers).get_json()['valid_format'] is False


def _count_statements(fn):
    statements = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(rolewizard.db_engine, 'before_cursor_execute', before_cursor_execute)
    try:
        result = fn()
    finally:
        event.remove(rolewizard.db_engine, 'before_cursor_execute', before_cursor_execute)
    return result, len(statements)


def test_list_roles_query_count_does_not_grow_with_rows(client, app_instance):
    headers = admin_headers(app_instance)
    seed_role('alpha')
    seed_dashboard('alpha')
    assign_users('alpha', [1, 2])
    resp, few = _count_statements(lambda: client.get('/wizard/roles', headers=headers))
    row = resp.get_json()['data'][0]
    assert row['dashboard_version'] == 1
    assert row['assigned_users'] == 2
    for role_id in ('bravo', 'charlie', 'delta'):
        seed_role(role_id)
        seed_dashboard(role_id)
    resp, many = _count_statements(lambda: client.get('/wizard/roles', headers=headers))
    assert len(resp.get_json()['data']) == 4
    assert many == few
