"""Has one relations

Covers assignment by model and primary key, stealing the relation from the
previous holder, nullifying, and deferred binding. Every scenario runs for
a relation declared in ``__has_one__`` and for a ``@relation`` accessor.
"""

from __future__ import annotations

import uuid
import pytest
from typing import Tuple

from storm.Database import Model
from tests.fixtures.models import Author, Phone

RELATIONS = ['phone', 'contact_number']


def new_session_key() -> str:
    return uuid.uuid4().hex


class TestHasOne:
    """Test suite for HasOne."""

    @pytest.fixture
    def author(self) -> Author:
        with Model.unguarded():
            return Author.create(name='Stevie', email='stevie@example.com')

    @pytest.fixture
    def phones(self) -> Tuple[Phone, Phone, Phone]:
        with Model.unguarded():
            phone1 = Phone.create(number='0404040404')
            phone2 = Phone.create(number='0505050505')
            phone3 = Phone.make(number='0606060606')
        return phone1, phone2, phone3

    @pytest.mark.parametrize('name', RELATIONS)
    def test_set_relation_value(self, name: str, author: Author, phones: Tuple[Phone, Phone, Phone]) -> None:
        """Assign by model, by key, steal, nullify and assign in memory."""
        phone1, phone2, phone3 = phones

        # Set by model object
        author.set_related(name, phone1)
        author.save()
        assert phone1.author_id == author.id
        assert author.get_related(name).number == '0404040404'

        phone1 = Phone.find(phone1.id)
        assert phone1.author_id == author.id

        # Set by primary key
        phone_id = phone2.id
        author.set_related(name, phone_id)
        author.save()
        phone2 = Phone.find(phone_id)
        assert phone2.author_id == author.id
        assert author.get_related(name).number == '0505050505'

        # The first phone lost the relation
        phone1 = Phone.find(phone1.id)
        assert phone1.author_id != author.id

        # Nullify
        author.set_related(name, None)
        author.save()
        phone2 = Phone.find(phone_id)
        assert phone2.author_id is None
        assert phone2.get_related('author') is None

        # Deferred in memory
        author.set_related(name, phone3)
        assert author.get_related(name).number == '0606060606'
        assert phone3.author_id == author.id

    @pytest.mark.parametrize('name', RELATIONS)
    def test_set_relation_value_twice(self, name: str, author: Author) -> None:
        """Assigning the current holder again keeps it."""
        with Model.unguarded():
            phone = Phone.create(number='0505050505')

        phone_id = phone.id
        author.set_related(name, phone_id)
        author.save()

        author.set_related(name, phone_id)
        author.save()

        phone = Phone.find(phone_id)
        assert phone.author_id == author.id
        assert author.get_related(name).number == '0505050505'

    def test_set_relation_value_on_unsaved_parent(self) -> None:
        """The association is written once the parent has a key."""
        with Model.unguarded():
            phone = Phone.create(number='0404040404')

        author = Author(name='Stevie')
        author.set_related('phone', phone)
        assert phone.author_id is None

        author.save()
        assert phone.author_id == author.id
        assert Phone.find(phone.id).author_id == author.id

    def test_set_relation_value_ignores_arrays(self, author: Author, phones: Tuple[Phone, Phone, Phone]) -> None:
        author.set_related('phone', [phones[0]])
        author.save()
        assert phones[0].author_id is None

    @pytest.mark.parametrize('name', RELATIONS)
    def test_get_relation_value(self, name: str, author: Author) -> None:
        """The simple value of a has one relation is the related key."""
        with Model.unguarded():
            phone = Phone.create(number='0404040404', author_id=author.id)

        assert author.get_relation_value(name) == phone.id

    def test_get_relation_value_without_related(self, author: Author) -> None:
        assert author.get_relation_value('phone') is None

    @pytest.mark.parametrize('name', RELATIONS)
    def test_deferred_binding(self, name: str, author: Author) -> None:
        """Changes recorded under a session key apply when the parent saves with that key."""
        session_key = new_session_key()
        with Model.unguarded():
            phone = Phone.create(number='0404040404')
        phone_id = phone.id

        # Deferred add
        author.relation(name).add(phone, session_key)
        assert phone.author_id is None
        assert author.get_related(name) is None

        assert author.relation(name).count() == 0
        assert author.relation(name).with_deferred(session_key).count() == 1

        # Commit deferred
        author.save(session_key=session_key)
        phone = Phone.find(phone_id)
        assert author.relation(name).count() == 1
        assert phone.author_id == author.id
        assert author.get_related(name).number == '0404040404'

        # New session
        session_key = new_session_key()

        # Deferred remove
        author.relation(name).remove(phone, session_key)
        assert author.relation(name).count() == 1
        assert author.relation(name).with_deferred(session_key).count() == 0
        assert phone.author_id == author.id
        assert author.get_related(name).number == '0404040404'

        # Commit deferred
        author.save(session_key=session_key)
        phone = Phone.find(phone_id)
        assert author.relation(name).count() == 0
        assert phone.author_id is None
        assert author.get_related(name) is None

        assert author.get_deferred_bindings(session_key) == []

    def test_array_definition(self, author: Author) -> None:
        related, options = author.relation('phone').get_array_definition()
        assert related == 'tests.fixtures.models.Phone'
        assert options == {
            'delete': False,
            'push': True,
            'count': False,
            'key': 'author_id',
            'other_key': 'id',
        }
