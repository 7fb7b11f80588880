"""
Read-only view over the values captured in a Snapshot.

    props = doc.properties("before-edit")
    props.title                      # captured value, AttributeError if absent
    props.lookup("revision", int)    # PropertyLookup(status=FOUND, value=3)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator
import copy

from restorable.reference import Reference
from restorable.snapshot_model import Snapshot


class LookupStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    WRONG_TYPE = "wrong_type"


@dataclass(frozen=True)
class PropertyLookup:
    """Result of Properties.lookup(); value is None unless status is FOUND."""
    status: LookupStatus
    value: Any = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class Properties:
    """Captured values of a snapshot, addressed by field name.

    References contribute their original value. The view never changes after
    construction, even when the object it was captured from does.
    """

    def __init__(self, snapshot: Snapshot):
        values: Dict[str, Any] = {}
        for name, value in snapshot.storage.values():
            captured = value.original_value if isinstance(value, Reference) else value
            values[name] = copy.deepcopy(captured)
        object.__setattr__(self, '_snapshot', snapshot)
        object.__setattr__(self, '_values', values)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def lookup(self, name: str, expected_type: type = object) -> PropertyLookup:
        """Typed access distinguishing absent from present-but-wrong-type."""
        if name not in self._values:
            return PropertyLookup(LookupStatus.NOT_FOUND)
        value = self._values[name]
        if not isinstance(value, expected_type):
            return PropertyLookup(LookupStatus.WRONG_TYPE)
        return PropertyLookup(LookupStatus.FOUND, value)

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get('_values', {})
        if name in values:
            return values[name]
        raise AttributeError(f"Snapshot has no property '{name}'")

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Properties is read-only. Restore the snapshot to change values.")

    def __repr__(self) -> str:
        return f"Properties({self._values!r})"
