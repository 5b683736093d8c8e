from tests.test_lifecycle_helpers import admin_headers, assert_error


def test_capability_catalog_listing(client, app_instance):
    headers = admin_headers(app_instance)
    body = client.get('/wizard/catalog/capabilities', headers=headers).get_json()
    assert body['total'] == len(body['data'])
    assert 'Projects' in body['areas']
    projects = client.get('/wizard/catalog/capabilities?area=Projects', headers=headers).get_json()['data']
    assert {c['area'] for c in projects} == {'Projects'}
    close = next(c for c in projects if c['cap'] == 'projects.close')
    assert close['depends_on'] == ['projects.update']
    assert_error(client.get('/wizard/catalog/capabilities?area=Nowhere', headers=headers), 400)


def test_scope_catalog_listing(client, app_instance):
    headers = admin_headers(app_instance)
    data = client.get('/wizard/catalog/scopes', headers=headers).get_json()['data']
    assert [o['value'] for o in data['project']['options']] == ['all', 'organization', 'assigned', 'self', 'none']


def test_selection_toggle_endpoint(client, app_instance):
    headers = admin_headers(app_instance)
    resp = client.post('/wizard/selection/toggle', json={'capability': 'projects.close', 'selection': []}, headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['selection'] == ['projects.close', 'projects.update', 'projects.view']
    assert body['added'] == body['selection']
    assert body['closed'] is True
    body = client.post('/wizard/selection/toggle', json={'capability': 'projects.view', 'selection': body['selection']}, headers=headers).get_json()
    assert body['selection'] == []
    assert body['removed'] == ['projects.close', 'projects.update', 'projects.view']
    area = client.post('/wizard/selection/toggle', json={'area': 'Projects', 'selection': []}, headers=headers).get_json()
    assert 'projects.delete' in area['selection']
    cleared = client.post('/wizard/selection/toggle', json={'area': 'Projects', 'clear': True, 'selection': area['selection']}, headers=headers).get_json()
    assert cleared['selection'] == []
    assert_error(client.post('/wizard/selection/toggle', json={'capability': 'ghost.view', 'selection': []}, headers=headers), 400, 'unknown_capability')
    assert_error(client.post('/wizard/selection/toggle', json={'selection': []}, headers=headers), 400)


def test_scope_set_endpoint(client, app_instance):
    headers = admin_headers(app_instance)
    body = client.post('/wizard/scopes/set', json={'category': 'data', 'value': 'read', 'scopes': {'project': 'all'}}, headers=headers).get_json()
    assert body['scopes'] == {'project': 'all', 'data': 'read'}
    body = client.post('/wizard/scopes/set', json={'category': 'project', 'value': None, 'scopes': body['scopes']}, headers=headers).get_json()
    assert body['scopes'] == {'data': 'read'}
    assert_error(client.post('/wizard/scopes/set', json={'category': 'data', 'value': 'everything', 'scopes': {}}, headers=headers), 400, 'invalid_scope')


def test_checklist_endpoint(client, app_instance):
    headers = admin_headers(app_instance)
    body = client.post('/wizard/roles/checklist', json={'id': 'ok_id', 'label': 'OK', 'capabilities': [], 'scopes': {}}, headers=headers).get_json()
    assert body['passed'] is False
    assert body['has_id'] is True and body['has_capabilities'] is False
    assert len(body['messages']) == 2
