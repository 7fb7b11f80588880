"""
References to fields that cannot be wrapped in a Restorable cell.

Computed properties are the usual case: the backing storage is a plain
attribute and the public surface is a property. A Reference captures the
current value when it is constructed and can later write it back through the
owner's setter. The captured value is a deep copy, and every restore writes
a fresh copy of it. Each reference carries its own random key, so a Snapshot
stores it exactly like a wrapped field.

    class Gauge(RestorableObject):
        def __init__(self):
            self._level = 0.5

        @property
        def level(self):
            return self._level

        @level.setter
        def level(self, value):
            self._level = value

        @property
        def references(self):
            return [Reference(self, "level", value_type=float)]
"""

from typing import Any, Callable, Optional
import copy
import logging

from restorable.identifier import Identifier
from restorable.wrapper import new_key

logger = logging.getLogger(__name__)


class Reference:
    """Owner-bound accessor/mutator pair with a captured original value."""

    def __init__(
        self,
        owner: Any,
        name: str,
        getter: Optional[Callable[[Any], Any]] = None,
        setter: Optional[Callable[[Any, Any], None]] = None,
        value_type: Optional[type] = None,
    ):
        """
        Args:
            owner: Object whose field is referenced.
            name: Name the value is stored under in snapshots. Without an
                explicit getter/setter it is also the attribute name.
            getter: Callable receiving the owner, returning the value.
            setter: Callable receiving the owner and the value to write.
            value_type: Type (or tuple of types) the setter expects. None
                skips the check.
        """
        self.name = name
        self.key: int = new_key()
        self.value_type = value_type
        self.owner_identity: Identifier = _identity_of(owner)
        self._owner = owner
        self._setter = setter if setter is not None else (lambda obj, value: setattr(obj, name, value))
        read = getter if getter is not None else (lambda obj: getattr(obj, name))
        self.original_value = copy.deepcopy(read(owner))

    def restore(self) -> bool:
        """Write the captured value back into the owner.

        Returns:
            True if written, False if skipped because of a type mismatch.
        """
        if self.value_type is not None and not isinstance(self.original_value, self.value_type):
            logger.warning(
                f"Skipped restoring reference '{self.name}': captured "
                f"{type(self.original_value).__name__} does not match expected type"
            )
            return False
        self._setter(self._owner, copy.deepcopy(self.original_value))
        logger.debug(f"Restored reference '{self.name}' on {self.owner_identity}")
        return True

    def __repr__(self) -> str:
        return f"Reference(name={self.name!r}, original_value={self.original_value!r})"


def _identity_of(owner: Any) -> Identifier:
    identifier = getattr(owner, 'restorable_object_identifier', None)
    if isinstance(identifier, Identifier):
        return identifier
    return Identifier.for_object(owner)
