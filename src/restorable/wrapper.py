"""
Restorable: the unit of restorable state.

A Restorable is a mutable value cell carrying a random key assigned once at
construction. Snapshots index captured values by that key, so a restore finds
"the same logical field" no matter what value it currently holds, what it is
called, or whether another field holds an equal value.

Usage (declared on a class):
    class Document(RestorableObject):
        title = restorable("Untitled")
        revision = restorable(0, value_type=int)

Usage (standalone cell):
    cell = Restorable("Foo")
    cell.value = "Bar"
"""

from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar
import secrets
import logging

logger = logging.getLogger(__name__)

V = TypeVar('V')

# Instance-dict prefix for cells declared through restorable(); stripped from
# field names when a snapshot is captured.
FIELD_PREFIX = '_'

_MISSING = object()


def new_key() -> int:
    """Return a fresh random 64-bit key."""
    return secrets.randbits(64)


class NestedState(Enum):
    """How a Restorable treats an initial value that is itself a Restorable.

    STANDARD boxes the inner cell (the payload IS the cell).
    NESTED flattens one level (the payload is the inner cell's payload).
    """
    STANDARD = "standard"
    NESTED = "nested"


class Restorable(Generic[V]):
    """Value cell with a stable unique key."""

    __slots__ = ('_key', '_value', 'value_type')

    def __init__(
        self,
        value: V = None,
        *,
        value_type: Optional[type] = None,
        nested: NestedState = NestedState.STANDARD,
    ):
        """
        Args:
            value: Initial payload.
            value_type: Type (or tuple of types) accepted by the type-erased
                setter. None accepts any value.
            nested: Whether a Restorable passed as `value` is flattened.
        """
        if nested is NestedState.NESTED and isinstance(value, Restorable):
            value = value.value
        self._key: int = new_key()
        self._value = value
        self.value_type = value_type

    @property
    def key(self) -> int:
        return self._key

    @property
    def value(self) -> V:
        return self._value

    @value.setter
    def value(self, new_value: V) -> None:
        self._value = new_value

    @property
    def erased_value(self) -> Any:
        return self._value

    @erased_value.setter
    def erased_value(self, new_value: Any) -> None:
        self.set_erased(new_value)

    def accepts(self, value: Any) -> bool:
        return self.value_type is None or isinstance(value, self.value_type)

    def set_erased(self, new_value: Any) -> bool:
        """Type-erased write. Values of the wrong type are ignored.

        Returns:
            True if the value was written, False if it was ignored.
        """
        if not self.accepts(new_value):
            logger.debug(
                f"Ignored write of {type(new_value).__name__} into "
                f"{self._type_label()} cell {self._key:#x}"
            )
            return False
        self._value = new_value
        return True

    def _type_label(self) -> str:
        if self.value_type is None:
            return type(self._value).__name__
        if isinstance(self.value_type, tuple):
            return ' | '.join(t.__name__ for t in self.value_type)
        return self.value_type.__name__

    def __repr__(self) -> str:
        return f"Restorable[{self._type_label()}]({self._value!r})"


class RestorableField:
    """Class-level declaration of a restorable field.

    Reading the attribute returns the cell payload; assigning writes it. The
    cell itself lives in the instance dict under FIELD_PREFIX + name and is
    created on first read, first write, or field enumeration.
    """

    def __init__(
        self,
        default: Any = _MISSING,
        *,
        default_factory: Optional[Callable[[], Any]] = None,
        value_type: Optional[type] = None,
        nested: NestedState = NestedState.STANDARD,
    ):
        if default is not _MISSING and default_factory is not None:
            raise ValueError("cannot specify both default and default_factory")
        self.default = default
        self.default_factory = default_factory
        self.value_type = value_type
        self.nested = nested
        self.name: Optional[str] = None
        self.storage_name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.storage_name = FIELD_PREFIX + name

    def _initial_value(self, instance: Any) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is _MISSING:
            raise AttributeError(
                f"{type(instance).__name__}.{self.name} has no value and no default"
            )
        return self.default

    def _make_cell(self, instance: Any, value: Any) -> Restorable:
        cell = Restorable(value, value_type=self.value_type, nested=self.nested)
        instance.__dict__[self.storage_name] = cell
        return cell

    def has_initial_value(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not None

    def cell(self, instance: Any) -> Restorable:
        """Return the instance's cell, creating it from the default if needed."""
        cell = instance.__dict__.get(self.storage_name)
        if cell is None:
            cell = self._make_cell(instance, self._initial_value(instance))
        return cell

    def __get__(self, instance: Any, owner: type = None) -> Any:
        if instance is None:
            return self
        return self.cell(instance).value

    def __set__(self, instance: Any, value: Any) -> None:
        cell = instance.__dict__.get(self.storage_name)
        if cell is None:
            self._make_cell(instance, value)
        else:
            cell.value = value


def restorable(
    default: Any = _MISSING,
    *,
    default_factory: Optional[Callable[[], Any]] = None,
    value_type: Optional[type] = None,
    nested: NestedState = NestedState.STANDARD,
) -> Any:
    """Declare a restorable field on a RestorableObject subclass."""
    return RestorableField(
        default,
        default_factory=default_factory,
        value_type=value_type,
        nested=nested,
    )
