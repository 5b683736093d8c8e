import itertools
import pytest
from rolewizard.errors import UnknownCapability
from rolewizard.services.catalog import CapabilityCatalog
from rolewizard.services import selection


@pytest.fixture()
def abc():
    # C depends on B, B depends on A
    return CapabilityCatalog.from_entries([
        {'cap': 'A', 'area': 'x', 'label': 'A', 'depends_on': []},
        {'cap': 'B', 'area': 'x', 'label': 'B', 'depends_on': ['A']},
        {'cap': 'C', 'area': 'y', 'label': 'C', 'depends_on': ['B']},
    ])


@pytest.fixture()
def diamond():
    return CapabilityCatalog.from_entries([
        {'cap': 'root', 'area': 'core', 'label': 'Root', 'depends_on': []},
        {'cap': 'left', 'area': 'core', 'label': 'Left', 'depends_on': ['root']},
        {'cap': 'right', 'area': 'core', 'label': 'Right', 'depends_on': ['root']},
        {'cap': 'top', 'area': 'extra', 'label': 'Top', 'depends_on': ['left', 'right']},
        {'cap': 'solo', 'area': 'extra', 'label': 'Solo', 'depends_on': []},
    ])


def test_abc_scenario(abc):
    sel = selection.toggle(abc, 'C', frozenset())
    assert sel == {'A', 'B', 'C'}
    sel = selection.toggle(abc, 'A', sel)
    assert sel == frozenset()


def test_toggle_removal_only_cascades_to_dependents(abc):
    sel = selection.toggle(abc, 'B', frozenset())
    assert sel == {'A', 'B'}
    sel = selection.toggle(abc, 'B', sel)
    assert sel == {'A'}


def test_toggle_does_not_mutate_input(abc):
    before = frozenset({'A'})
    selection.toggle(abc, 'C', before)
    assert before == {'A'}


def test_toggle_unknown_capability_raises(abc):
    with pytest.raises(UnknownCapability):
        selection.toggle(abc, 'Z', frozenset())


def test_closure_holds_after_any_toggle_sequence(diamond):
    keys = [c.key for c in diamond]
    for seq in itertools.product(keys, repeat=3):
        sel = frozenset()
        for key in seq:
            sel = selection.toggle(diamond, key, sel)
            assert selection.is_closed(diamond, sel), (seq, sel)


def test_cascade_completeness(diamond):
    sel = selection.toggle(diamond, 'top', frozenset())
    sel = selection.toggle(diamond, 'solo', sel)
    after = selection.toggle(diamond, 'root', sel)
    # nothing left that transitively depended on root
    assert after == {'solo'}


def test_double_toggle_of_unselected_key_is_idempotent(diamond):
    base = selection.toggle(diamond, 'solo', frozenset())
    assert selection.toggle(diamond, 'solo', selection.toggle(diamond, 'solo', base)) == base
    # re-adding a dependency-free key that was removed restores the selection
    sel = selection.toggle(diamond, 'left', frozenset())
    assert selection.toggle(diamond, 'left', selection.toggle(diamond, 'left', sel)) == sel


def test_toggle_with_diff_reports_changes(abc):
    after, added, removed = selection.toggle_with_diff(abc, 'C', {'A'})
    assert after == {'A', 'B', 'C'}
    assert added == ['B', 'C']
    assert removed == []
    after, added, removed = selection.toggle_with_diff(abc, 'A', after)
    assert added == []
    assert removed == ['A', 'B', 'C']


def test_select_and_clear_area(diamond):
    sel = selection.select_area(diamond, 'extra', frozenset())
    assert sel == {'root', 'left', 'right', 'top', 'solo'}
    cleared = selection.clear_area(diamond, 'core', sel)
    assert cleared == {'solo'}
    assert selection.is_closed(diamond, cleared)


def test_dangling_and_close(abc):
    assert selection.dangling(abc, {'C'}) == [('C', 'B')]
    assert not selection.is_closed(abc, {'C'})
    assert selection.close(abc, {'C'}) == {'A', 'B', 'C'}


def test_bundled_catalog_toggle_pulls_dependency_chain(catalogs):
    capabilities, _ = catalogs
    sel = selection.toggle(capabilities, 'projects.close', frozenset())
    assert {'projects.close', 'projects.update', 'projects.view'} <= sel
    assert selection.is_closed(capabilities, sel)
