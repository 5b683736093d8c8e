from tests.test_lifecycle_helpers import admin_headers


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_wizard_error_shape(client, app_instance):
    headers = admin_headers(app_instance)
    resp = client.get('/wizard/roles/missing_role', headers=headers)
    assert resp.status_code == 404
    err = resp.get_json()['error']
    assert err == {
        'status': 404,
        'title': 'Not Found',
        'detail': 'Role missing_role not found',
        'code': 'role_not_found',
        'role_id': 'missing_role',
    }


def test_internal_error_shape(client, app_instance, monkeypatch):
    headers = admin_headers(app_instance)
    import rolewizard.services.definitions as definitions_mod

    def boom(role_id):
        raise RuntimeError('explode')
    monkeypatch.setattr(definitions_mod, 'get_role', boom)
    resp = client.get('/wizard/roles/anything', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'


def test_healthz(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}
