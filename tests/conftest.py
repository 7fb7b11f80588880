"""Pytest configuration and shared fixtures."""
import pytest

from restorable import Identifier, Reference, RestorableObject, restorable
import restorable.store as store_module


class Mock1(RestorableObject):
    """Two wrapped fields plus one plain field exposed through a Reference."""
    value1 = restorable("Foo")
    value2 = restorable(100)

    def __init__(self):
        self.value3 = True

    @property
    def references(self):
        return [Reference(self, "value3", value_type=bool)]


class Mock2(RestorableObject):
    value1 = restorable(8.2375)
    value2 = restorable(False)


class Mock3(RestorableObject, value_semantics=True):
    restorable_object_identifier: Identifier

    def __init__(self):
        self.restorable_object_identifier = Identifier()


class PropertiesMock(RestorableObject):
    """Duplicate-looking values and a computed property backed by a plain field."""
    value1 = restorable("Foo")
    value2 = restorable("Bar")
    value3 = restorable(10000)
    value4 = restorable(False)

    def __init__(self):
        self._value5 = 3.14

    @property
    def value5(self):
        return self._value5

    @value5.setter
    def value5(self, value):
        self._value5 = value

    @property
    def references(self):
        return [Reference(self, "value5")]


@pytest.fixture(autouse=True)
def reset_default_store():
    """Give every test a clean process-wide store."""
    original = store_module.get_default_store()
    fresh = store_module.RestorableStore()
    store_module.set_default_store(fresh)

    yield fresh

    store_module.set_default_store(original)


@pytest.fixture
def mock1():
    return Mock1()


@pytest.fixture
def mock2():
    return Mock2()


@pytest.fixture
def mock3():
    return Mock3()


@pytest.fixture
def properties_mock():
    return PropertiesMock()
