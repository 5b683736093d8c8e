import pytest
from rolewizard.errors import InvalidScope, RoleValidationError
from rolewizard.services.catalog import ScopeCatalog
from rolewizard.services.checklist import RoleChecklist
from rolewizard.services.scopes import set_scope, clear_scope, validate_scope_map

SCOPES = ScopeCatalog.from_mapping({
    'project': {'label': 'Project', 'options': ['all', 'assigned', 'none']},
    'data': {'label': 'Data', 'options': ['full', 'read']},
})


def test_set_scope_last_write_wins_and_leaves_others():
    m = set_scope(SCOPES, 'project', 'all', {})
    m = set_scope(SCOPES, 'data', 'read', m)
    m2 = set_scope(SCOPES, 'project', 'assigned', m)
    assert m2 == {'project': 'assigned', 'data': 'read'}
    assert m == {'project': 'all', 'data': 'read'}


def test_set_scope_rejects_unknown_category_and_value():
    original = {'project': 'all'}
    with pytest.raises(InvalidScope):
        set_scope(SCOPES, 'region', 'all', original)
    with pytest.raises(InvalidScope) as exc:
        set_scope(SCOPES, 'project', 'everything', original)
    assert exc.value.category == 'project'
    assert original == {'project': 'all'}


def test_clear_scope_and_validate_map():
    assert clear_scope(SCOPES, 'project', {'project': 'all', 'data': 'read'}) == {'data': 'read'}
    assert validate_scope_map(SCOPES, {'data': 'full'}) == {'data': 'full'}
    with pytest.raises(InvalidScope):
        validate_scope_map(SCOPES, {'data': 'write'})


@pytest.mark.parametrize('role_id,label,caps,scopes,failed', [
    ('', 'Label', ['a'], {'p': 'x'}, ['has_id']),
    ('viewer', '', ['a'], {'p': 'x'}, ['has_label']),
    ('viewer', 'Viewer', [], {'p': 'x'}, ['has_capabilities']),
    ('viewer', 'Viewer', ['a'], {}, ['has_scopes']),
    ('Viewer-1', 'Viewer', ['a'], {'p': 'x'}, ['id_format']),
])
def test_each_condition_alone_fails_the_gate(role_id, label, caps, scopes, failed):
    checklist = RoleChecklist.evaluate(role_id, label, caps, scopes)
    assert not checklist.passed
    assert checklist.failures() == failed
    with pytest.raises(RoleValidationError) as exc:
        checklist.raise_for_failures()
    assert exc.value.to_dict()['failed'] == failed


def test_complete_checklist_passes():
    checklist = RoleChecklist.evaluate('viewer', 'Viewer', ['a'], {'p': 'x'})
    assert checklist.passed
    assert checklist.as_dict()['passed'] is True
    assert checklist.messages() == []
