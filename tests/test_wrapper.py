"""Tests for Restorable cells and the restorable() field declaration."""

import pytest

from restorable import NestedState, Restorable, RestorableField, RestorableObject, restorable


class TestRestorable:

    def test_value_get_set(self):
        cell = Restorable("Foo")
        cell.value = "Bar"
        assert cell.value == "Bar"

    def test_key_is_stable_and_unique(self):
        cell = Restorable("Foo")
        key = cell.key
        cell.value = "Bar"
        assert cell.key == key
        assert Restorable("Foo").key != key

    def test_key_is_read_only(self):
        with pytest.raises(AttributeError):
            Restorable("Foo").key = 1

    def test_default_is_none(self):
        assert Restorable().value is None

    def test_erased_set_accepts_matching_type(self):
        cell = Restorable("Foo", value_type=str)
        assert cell.set_erased("Bar") is True
        assert cell.erased_value == "Bar"

    def test_erased_set_ignores_wrong_type(self):
        cell = Restorable("Foo", value_type=str)
        cell.erased_value = 5
        assert cell.value == "Foo"
        assert cell.set_erased(5) is False

    def test_erased_set_without_type_accepts_anything(self):
        cell = Restorable("Foo")
        assert cell.set_erased(5) is True
        assert cell.value == 5

    def test_tuple_value_type(self):
        cell = Restorable(1, value_type=(int, type(None)))
        assert cell.set_erased(None) is True
        assert cell.set_erased("x") is False

    def test_repr(self):
        assert repr(Restorable("Foo")) == "Restorable[str]('Foo')"
        assert repr(Restorable(1, value_type=int)) == "Restorable[int](1)"


class TestNested:

    def test_nested_flattens_payload(self):
        cell = Restorable(Restorable("Foo"), nested=NestedState.NESTED)
        assert isinstance(cell.value, str)
        assert cell.value == "Foo"

    def test_standard_boxes_cell(self):
        inner = Restorable("Bar")
        cell = Restorable(inner, nested=NestedState.STANDARD)
        assert cell.value is inner

    def test_nested_flattens_one_level_only(self):
        innermost = Restorable("Baz")
        cell = Restorable(Restorable(innermost), nested=NestedState.NESTED)
        assert cell.value is innermost

    def test_nested_with_plain_value(self):
        assert Restorable("Foo", nested=NestedState.NESTED).value == "Foo"


class TestRestorableField:

    def test_class_access_returns_descriptor(self):
        class Doc(RestorableObject):
            title = restorable("Untitled")

        assert isinstance(Doc.title, RestorableField)
        assert Doc.title.name == "title"
        assert Doc.title.storage_name == "_title"

    def test_instances_get_separate_cells(self):
        class Doc(RestorableObject):
            title = restorable("Untitled")

        first, second = Doc(), Doc()
        first.title = "Changed"
        assert second.title == "Untitled"
        assert first.restorable_field("title").key != second.restorable_field("title").key

    def test_default_factory(self):
        class Doc(RestorableObject):
            tags = restorable(default_factory=list)

        first, second = Doc(), Doc()
        first.tags.append("a")
        assert second.tags == []

    def test_default_and_factory_conflict(self):
        with pytest.raises(ValueError):
            restorable(1, default_factory=int)

    def test_field_without_default(self):
        class Doc(RestorableObject):
            title = restorable()

        doc = Doc()
        with pytest.raises(AttributeError):
            doc.title
        assert doc.restorable_fields() == {}

        doc.title = "Set"
        assert list(doc.restorable_fields()) == ["title"]

    def test_cell_key_survives_assignment(self):
        class Doc(RestorableObject):
            title = restorable("Untitled")

        doc = Doc()
        key = doc.restorable_field("title").key
        doc.title = "Other"
        assert doc.restorable_field("title").key == key

    def test_enumeration_materializes_defaults(self):
        class Doc(RestorableObject):
            title = restorable("Untitled")
            revision = restorable(0)

        doc = Doc()
        fields = doc.restorable_fields()
        assert sorted(fields) == ["revision", "title"]
        assert fields["title"].value == "Untitled"

    def test_inherited_fields(self):
        class Base(RestorableObject):
            title = restorable("Untitled")

        class Child(Base):
            body = restorable("")

        assert sorted(Child().restorable_fields()) == ["body", "title"]

    def test_ad_hoc_cells_are_enumerated(self):
        class Doc(RestorableObject):
            def __init__(self):
                self._count = Restorable(0)
                self.plain = 1

        assert list(Doc().restorable_fields()) == ["count"]

    def test_unknown_field_lookup(self):
        class Doc(RestorableObject):
            title = restorable("Untitled")

        with pytest.raises(AttributeError):
            Doc().restorable_field("missing")

    def test_colliding_field_names(self):
        class Counter(RestorableObject):
            def __init__(self):
                self._count = Restorable(0)
                self.count = Restorable(1)

        with pytest.raises(ValueError, match="count"):
            Counter().restorable_fields()
