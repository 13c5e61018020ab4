from __future__ import annotations

from pathlib import Path

from storm.Config.Repository import ConfigRepository
from storm.Support import Collection, Str, base_path, public_path, storage_path


class TestStr:
    """Test suite for string helpers."""

    def test_snake(self) -> None:
        assert Str.snake('DeferredBinding') == 'deferred_binding'
        assert Str.snake('attachOne') == 'attach_one'
        assert Str.snake('Simple Tree') == 'simple_tree'
        assert Str.snake('HasOne', '-') == 'has-one'

    def test_finish(self) -> None:
        assert Str.finish('uploads', '/') == 'uploads/'
        assert Str.finish('uploads///', '/') == 'uploads/'
        assert Str.finish('archive.tar', '.tar') == 'archive.tar'
        assert Str.finish('rat', 'at') == 'rat'

    def test_is(self) -> None:
        assert Str.is_('uploads/*', 'uploads/public/a.png')
        assert Str.is_('*.png', 'a.png')
        assert Str.is_('a?c', 'abc')
        assert not Str.is_('*.png', 'a.jpg')
        assert not Str.is_('*.PNG', 'a.png')
        assert Str.is_('*.PNG', 'a.png', ignore_case=True)


class TestCollection:
    """Test suite for collections."""

    def test_filtering(self) -> None:
        items = Collection([{'name': 'a', 'size': 3}, {'name': 'b', 'size': 1}, {'name': 'c', 'size': 2}])

        assert items.where('name', 'b').first() == {'name': 'b', 'size': 1}
        assert items.filter(lambda item: item['size'] > 1).count() == 2
        assert items.reject(lambda item: item['size'] > 1).pluck('name').all() == ['b']
        assert items.first(lambda item: item['size'] > 5, 'none') == 'none'
        assert items.last()['name'] == 'c'

    def test_transforming(self) -> None:
        items = Collection([{'name': 'a', 'size': 3}, {'name': 'b', 'size': 1}])

        assert items.sort_by('size').pluck('name').all() == ['b', 'a']
        assert items.sort_by(lambda item: item['name'], reverse=True)[0]['name'] == 'b'
        assert items.pluck('size', 'name') == {'a': 3, 'b': 1}
        assert items.map(lambda item: item['size'] * 2).all() == [6, 2]
        assert set(items.key_by('name')) == {'a', 'b'}

    def test_each_stops_on_false(self) -> None:
        seen = []
        Collection([1, 2, 3]).each(lambda item: seen.append(item) or item < 2)
        assert seen == [1, 2]

    def test_subclass_survives_filter(self) -> None:
        class Named(Collection):
            pass

        assert isinstance(Named([1, 0, 2]).filter(), Named)
        assert Named([1, 0, 2]).filter().all() == [1, 2]

    def test_empty(self) -> None:
        items = Collection()
        assert items.is_empty()
        assert not items
        assert items.push(1).is_not_empty()
        assert 1 in items


class TestPathHelpers:
    def test_paths(self, app_config: ConfigRepository, tmp_path: Path) -> None:
        assert base_path() == str(tmp_path)
        assert base_path('config') == str(tmp_path / 'config')
        assert public_path('index.php') == str(tmp_path / 'public' / 'index.php')
        assert storage_path('app') == str(tmp_path / 'storage' / 'app')
