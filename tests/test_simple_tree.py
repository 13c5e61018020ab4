from __future__ import annotations

import pytest
from typing import Dict

from storm.Config import ConfigRepository
from storm.Database import ColumnMismatchError, Model, TreeCollection
from tests.fixtures.models import CategorySimple


@pytest.fixture(autouse=True)
def sample_tree(app_config: ConfigRepository) -> None:
    with Model.unguarded():
        webdev = CategorySimple.create(name='Web development')
        for name in ['HTML5', 'CSS3', 'jQuery', 'Bootstrap', 'Laravel']:
            webdev.relation('children').create({'name': name})
        winter = webdev.relation('children').create({'name': 'Winter CMS'})
        for name in ['September', 'October', 'November']:
            winter.relation('children').create({'name': name})

        mobdev = CategorySimple.create(name='Mobile development')
        for name in ['iOS', 'iPhone', 'iPad', 'Android']:
            mobdev.relation('children').create({'name': name})

        design = CategorySimple.create(name='Graphic design')
        for name in ['Photoshop', 'Illustrator', 'Fireworks']:
            design.relation('children').create({'name': name})

    # Start every test from freshly loaded models
    CategorySimple.resolve_session().expunge_all()


NAMES: Dict[int, str] = {
    1: 'Web development',
    2: 'HTML5',
    3: 'CSS3',
    4: 'jQuery',
    5: 'Bootstrap',
    6: 'Laravel',
    7: 'Winter CMS',
    8: 'September',
    9: 'October',
    10: 'November',
    11: 'Mobile development',
    12: 'iOS',
    13: 'iPhone',
    14: 'iPad',
    15: 'Android',
    16: 'Graphic design',
    17: 'Photoshop',
    18: 'Illustrator',
    19: 'Fireworks',
}

DEPTHS: Dict[int, int] = {
    1: 0, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1, 8: 2, 9: 2, 10: 2,
    11: 0, 12: 1, 13: 1, 14: 1, 15: 1, 16: 0, 17: 1, 18: 1, 19: 1,
}


class TestSimpleTree:
    """Test suite for SimpleTree."""

    def test_get_nested(self) -> None:
        items = CategorySimple.get_nested()

        assert isinstance(items, TreeCollection)
        assert items.count() == 3
        for item in items:
            assert item.relation_loaded('children')

    def test_get_all_root(self) -> None:
        items = CategorySimple.get_all_root()

        assert items.count() == 3
        for item in items:
            assert not item.relation_loaded('children')

    def test_get_children_lazy(self) -> None:
        item = CategorySimple.first()
        assert not item.relation_loaded('children')
        assert item.get_children().count() == 6
        assert item.relation_loaded('children')

    def test_get_children_from_root(self) -> None:
        item = CategorySimple.get_all_root().first()
        assert not item.relation_loaded('children')
        assert item.get_children().count() == 6

    def test_get_children_nested(self) -> None:
        item = CategorySimple.get_nested().first()
        assert item.relation_loaded('children')
        assert item.get_children().count() == 6

    def test_get_child_count(self) -> None:
        assert CategorySimple.first().get_child_count() == 9

    def test_get_child_count_nested(self) -> None:
        assert CategorySimple.get_nested().first().get_child_count() == 9

    def test_get_all_children(self) -> None:
        names = [item.name for item in CategorySimple.first().get_all_children()]
        assert names == [
            'HTML5', 'CSS3', 'jQuery', 'Bootstrap', 'Laravel', 'Winter CMS',
            'September', 'October', 'November',
        ]

    def test_get_parent(self) -> None:
        item = CategorySimple.find(8)
        assert item.get_parent_id() == 7
        assert item.get_parent().name == 'Winter CMS'
        assert CategorySimple.find(1).get_parent() is None

    def test_lists_nested(self) -> None:
        nbsp = '&nbsp;&nbsp;&nbsp;'
        expected = {key: nbsp * DEPTHS[key] + name for key, name in NAMES.items()}

        result = CategorySimple.lists_nested('name', 'id')
        assert result == expected
        assert list(result) == list(range(1, 20))

    def test_lists_nested_custom_indent(self) -> None:
        expected = {key: '--' * DEPTHS[key] + name for key, name in NAMES.items()}
        assert CategorySimple.lists_nested('name', 'id', '--') == expected

    def test_lists_nested_keyed_by_name(self) -> None:
        expected = {name: '**' * DEPTHS[key] + str(key) for key, name in NAMES.items()}
        assert CategorySimple.lists_nested('id', 'name', '**') == expected

    def test_lists_nested_without_key(self) -> None:
        result = CategorySimple.lists_nested('name', indent='-')
        assert result[:3] == ['Web development', '-HTML5', '-CSS3']
        assert len(result) == 19

    def test_lists_nested_unknown_column(self) -> None:
        with pytest.raises(ColumnMismatchError, match='Column mismatch in lists_nested method'):
            CategorySimple.lists_nested('custom_name', 'id')

    def test_lists_nested_unknown_parent_column(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(CategorySimple, 'PARENT_ID', 'no_such_parent')

        with pytest.raises(ColumnMismatchError):
            CategorySimple.lists_nested('name', 'id')

    def test_collection_lists_nested_unknown_column(self, monkeypatch: pytest.MonkeyPatch) -> None:
        categories = CategorySimple.get()

        with pytest.raises(ColumnMismatchError, match='Column mismatch in lists_nested method'):
            categories.lists_nested('no_such_column', 'id')
        with pytest.raises(ColumnMismatchError):
            categories.lists_nested('name', 'no_such_key')

        monkeypatch.setattr(CategorySimple, 'PARENT_ID', 'no_such_parent')
        with pytest.raises(ColumnMismatchError):
            categories.lists_nested('name', 'id')

    def test_lists_nested_from_collection(self) -> None:
        """Collections can list computed attributes."""
        expected = {key: '...' * DEPTHS[key] + f"{name} (#{key})" for key, name in NAMES.items()}
        assert CategorySimple.get().lists_nested('custom_name', 'id', '...') == expected

    def test_to_nested_drops_orphans_by_default(self) -> None:
        orphans = CategorySimple.query().where('parent_id', '=', 7).get()

        assert orphans.to_nested().count() == 0
        assert orphans.to_nested(remove_orphans=False).count() == 3
