import pytest
from rolewizard.errors import DashboardValidationError
from rolewizard.services.menu import normalize_menu, add_menu_entry, remove_menu_entry, move_menu_entry, menu_keys

MENU = [
    {'key': 'home', 'label': 'Home', 'route': '/app'},
    {'key': 'finance', 'label': 'Finance', 'items': [{'key': 'budgets', 'label': 'Budgets', 'route': '/app/budgets'}]},
    {'key': 'reports', 'label': 'Reports'},
]


def test_normalize_rejects_duplicate_keys_across_tree():
    with pytest.raises(DashboardValidationError):
        normalize_menu([{'key': 'a', 'label': 'A', 'items': [{'key': 'a', 'label': 'Nested A'}]}])


def test_normalize_requires_key_and_label():
    with pytest.raises(DashboardValidationError):
        normalize_menu([{'label': 'No key'}])
    with pytest.raises(DashboardValidationError):
        normalize_menu([{'key': 'x'}])
    assert normalize_menu(None) == []


def test_add_menu_entry_duplicate_is_noop():
    out = add_menu_entry(MENU, {'key': 'budgets', 'label': 'Again'})
    assert menu_keys(out) == menu_keys(MENU)
    out = add_menu_entry(MENU, {'key': 'users', 'label': 'Users'}, index=0)
    assert out[0]['key'] == 'users'
    assert len(MENU) == 3


def test_add_menu_entry_rejects_nested_key_already_in_menu():
    entry = {'key': 'admin', 'label': 'Admin', 'items': [{'key': 'finance', 'label': 'Finance'}]}
    with pytest.raises(DashboardValidationError):
        add_menu_entry(MENU, entry)
    out = add_menu_entry(MENU, {'key': 'admin', 'label': 'Admin', 'items': [{'key': 'users', 'label': 'Users'}]})
    assert menu_keys(out) == ['home', 'finance', 'budgets', 'reports', 'admin', 'users']


def test_remove_menu_entry_nested():
    out = remove_menu_entry(MENU, 'budgets')
    assert 'budgets' not in menu_keys(out)
    assert 'budgets' in menu_keys(MENU)


def test_move_menu_entry_splices():
    out = move_menu_entry(MENU, 0, 2)
    assert [e['key'] for e in out] == ['finance', 'reports', 'home']
    with pytest.raises(DashboardValidationError):
        move_menu_entry(MENU, 0, 3)
