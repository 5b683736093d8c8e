import json
import pytest
from rolewizard.errors import CatalogError, InvalidScope, UnknownCapability
from rolewizard.services.catalog import CapabilityCatalog, ScopeCatalog, build_catalogs


def test_from_entries_rejects_unknown_dependency():
    with pytest.raises(CatalogError):
        CapabilityCatalog.from_entries([{'cap': 'B', 'area': 'x', 'label': 'B', 'depends_on': ['A']}])


def test_from_entries_rejects_duplicates():
    with pytest.raises(CatalogError):
        CapabilityCatalog.from_entries([
            {'cap': 'A', 'area': 'x', 'label': 'A'},
            {'cap': 'A', 'area': 'x', 'label': 'A again'},
        ])


def test_dependents_and_grouping():
    cat = CapabilityCatalog.from_entries([
        {'cap': 'A', 'area': 'x', 'label': 'A'},
        {'cap': 'B', 'area': 'x', 'label': 'B', 'dependsOn': ['A', 'A']},
        {'cap': 'C', 'area': 'y', 'label': 'C', 'depends_on': ['A']},
    ])
    assert cat.depends_on('B') == ('A',)
    assert set(cat.dependents('A')) == {'B', 'C'}
    assert cat.areas() == ['x', 'y']
    assert [c.key for c in cat.by_area()['x']] == ['A', 'B']
    assert len(cat) == 3 and 'C' in cat
    with pytest.raises(UnknownCapability):
        cat.get('Z')


def test_bundled_catalogs_are_consistent():
    capabilities, scopes = build_catalogs()
    assert len(capabilities) > 100
    for cap in capabilities:
        for dep in cap.depends_on:
            assert dep in capabilities
    assert 'project' in scopes
    assert 'assigned' in scopes.allowed_values('project')
    with pytest.raises(InvalidScope):
        scopes.get('nope')


def test_scope_catalog_requires_options():
    with pytest.raises(CatalogError):
        ScopeCatalog.from_mapping({'project': {'label': 'Project', 'options': []}})


def test_build_catalogs_from_json_files(tmp_path):
    cap_file = tmp_path / 'caps.json'
    cap_file.write_text(json.dumps([{'cap': 'A', 'area': 'x', 'label': 'A', 'depends_on': []}]))
    scope_file = tmp_path / 'scopes.json'
    scope_file.write_text(json.dumps({'data': {'label': 'Data', 'options': ['read', 'none']}}))
    capabilities, scopes = build_catalogs(str(cap_file), str(scope_file))
    assert [c.key for c in capabilities] == ['A']
    assert scopes.allowed_values('data') == ('read', 'none')
