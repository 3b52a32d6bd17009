"""
Tests for OwnedCollection: ordering, uniqueness, partial update
"""
import random

import pytest

from lifeboard.domain.challenge import Section
from lifeboard.domain.collection import OwnedCollection
from lifeboard.domain.errors import ValidationError, NotFoundError, DuplicateNameError
from lifeboard.domain.identity import new_id, is_valid_id
from lifeboard.domain.study_structure import Branch


def _sections(*names):
    collection = OwnedCollection(Section, ordered=True)
    for name in names:
        collection.insert(Section(name=name))
    return collection


class TestIdentity:
    def test_new_id_is_32_hex(self):
        value = new_id()
        assert is_valid_id(value)

    def test_ids_are_unique(self):
        assert len({new_id() for _ in range(1000)}) == 1000

    @pytest.mark.parametrize("value", ["", "abc", "z" * 32, None, 123])
    def test_invalid_ids(self, value):
        assert not is_valid_id(value)


class TestOrdering:
    def test_insert_assigns_sequential_order(self):
        collection = _sections("A", "B", "C")
        assert [s.order for s in collection] == [1, 2, 3]

    def test_remove_middle_renumbers(self):
        collection = _sections("A", "B", "C")
        middle = collection[1]
        collection.remove(middle.id)
        assert [s.name for s in collection] == ["A", "C"]
        assert [s.order for s in collection] == [1, 2]

    def test_random_insert_remove_keeps_order_gapless(self):
        """После любой последовательности insert/remove order = 1..N в прежней последовательности"""
        rng = random.Random(42)
        collection = OwnedCollection(Section, ordered=True)
        expected_names = []
        for step in range(200):
            if expected_names and rng.random() < 0.4:
                index = rng.randrange(len(expected_names))
                collection.remove(collection[index].id)
                expected_names.pop(index)
            else:
                name = f"S{step}"
                collection.insert(Section(name=name))
                expected_names.append(name)

            assert [s.order for s in collection] == list(range(1, len(collection) + 1))
            assert [s.name for s in collection] == expected_names

    def test_unordered_collection_has_no_order(self):
        collection = OwnedCollection(Branch)
        branch = collection.insert(Branch(name="Math"))
        assert not hasattr(branch, "order")


class TestLookup:
    def test_find_by_id_missing_raises(self):
        collection = _sections("A")
        with pytest.raises(NotFoundError, match="Section not found"):
            collection.find_by_id(new_id())

    def test_get_missing_returns_none(self):
        assert _sections("A").get("nope") is None

    def test_remove_missing_raises(self):
        with pytest.raises(NotFoundError):
            _sections("A").remove(new_id())


class TestUniqueness:
    def test_duplicate_name_case_insensitive(self):
        collection = OwnedCollection(Branch)
        collection.insert(Branch(name="Math"), unique_name=True)

        with pytest.raises(DuplicateNameError):
            collection.insert(Branch(name="  math "), unique_name=True)
        assert len(collection) == 1

    def test_rename_to_own_name_is_allowed(self):
        collection = OwnedCollection(Branch)
        branch = collection.insert(Branch(name="Math"), unique_name=True)
        collection.update(branch.id, {"name": "MATH"}, unique_name=True)
        assert collection.find_by_id(branch.id).name == "MATH"

    def test_rename_to_sibling_name_fails(self):
        collection = OwnedCollection(Branch)
        collection.insert(Branch(name="Math"), unique_name=True)
        physics = collection.insert(Branch(name="Physics"), unique_name=True)

        with pytest.raises(DuplicateNameError):
            collection.update(physics.id, {"name": "MATH"}, unique_name=True)
        assert collection.find_by_id(physics.id).name == "Physics"

    @pytest.mark.parametrize("value", [5, ["Math"], {"name": "Math"}])
    def test_rename_to_non_string_is_validation_error(self, value):
        collection = OwnedCollection(Branch)
        branch = collection.insert(Branch(name="Math"), unique_name=True)

        with pytest.raises(ValidationError, match="Branch name must be a string"):
            collection.update(branch.id, {"name": value}, unique_name=True)
        assert branch.name == "Math"


class TestPartialUpdate:
    def test_only_given_fields_change(self):
        collection = OwnedCollection(Section, ordered=True)
        section = collection.insert(Section(name="Week 1", description="intro"))
        collection.update(section.id, {"progress": 40})

        assert section.progress == 40
        assert section.name == "Week 1"
        assert section.description == "intro"

    def test_unknown_field_rejected(self):
        collection = _sections("A")
        with pytest.raises(ValidationError, match="order"):
            collection.update(collection[0].id, {"order": 5})

    def test_invalid_value_leaves_entry_unchanged(self):
        collection = _sections("A")
        section = collection[0]
        with pytest.raises(ValidationError):
            collection.update(section.id, {"name": "B", "progress": 150})
        assert section.name == "A"
        assert section.progress == 0


class TestReplaceAll:
    def test_keeps_supplied_ids_and_renumbers(self):
        collection = _sections("A", "B")
        kept_id = collection[1].id

        collection.replace_all([Section(id=kept_id, name="B2"), Section(name="C")])

        assert [s.name for s in collection] == ["B2", "C"]
        assert collection[0].id == kept_id
        assert is_valid_id(collection[1].id)
        assert [s.order for s in collection] == [1, 2]

    def test_duplicate_supplied_ids_rejected(self):
        collection = _sections("A")
        same = new_id()
        with pytest.raises(ValidationError):
            collection.replace_all([Section(id=same, name="X"), Section(id=same, name="Y")])
        assert [s.name for s in collection] == ["A"]
