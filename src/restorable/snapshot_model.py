"""
Snapshot: immutable capture of one object's restorable state.

Design:
- Frozen dataclass; storage is a read-only mapping
- Values are deep-copied on capture and again on every restore
- Entries are keyed by cell key, never by name or value
- A snapshot only fits the instance it was captured from: the live field
  keys act as a capability token checked by validate()
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union, TYPE_CHECKING
import copy
import logging
import time
import uuid

from restorable.errors import ForeignSnapshotError, MissingValuesError, UnknownPropertyError
from restorable.identifier import Identifier
from restorable.reference import Reference
from restorable.wrapper import Restorable

if TYPE_CHECKING:
    from restorable.restorable_object import RestorableObject

logger = logging.getLogger(__name__)

FieldSelector = Union[str, Restorable]


@dataclass(frozen=True)
class Snapshot:
    """Captured {key: (name, value)} for one object at one instant.

    Reference entries hold the Reference itself as their value.
    """
    id: str
    timestamp: float
    owner: Identifier
    owner_type: str
    storage: Mapping[int, Tuple[str, Any]]

    @classmethod
    def capture(cls, obj: 'RestorableObject') -> 'Snapshot':
        """Capture every wrapped field and declared reference of obj."""
        storage: Dict[int, Tuple[str, Any]] = {}
        for name, cell in obj.restorable_fields().items():
            storage[cell.key] = (name, copy.deepcopy(cell.value))
        for reference in obj.references:
            storage[reference.key] = (reference.name, reference)

        snapshot = cls(
            id=str(uuid.uuid4()),
            timestamp=time.time(),
            owner=obj.restorable_object_identifier,
            owner_type=type(obj).__qualname__,
            storage=MappingProxyType(storage),
        )
        logger.debug(
            f"Captured snapshot {snapshot.id[:8]} of {snapshot.owner_type} "
            f"({len(storage)} entries)"
        )
        return snapshot

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.storage.values()]

    @property
    def references(self) -> List[Reference]:
        return [value for _, value in self.storage.values() if isinstance(value, Reference)]

    def __len__(self) -> int:
        return len(self.storage)

    def __contains__(self, key: int) -> bool:
        return key in self.storage

    def validate(self, obj: 'RestorableObject') -> None:
        """Raise if this snapshot does not fit obj.

        Raises:
            MissingValuesError: obj declares fields this snapshot lacks.
            ForeignSnapshotError: captured from a different instance.
        """
        missing = [
            name for name, cell in obj.restorable_fields().items()
            if cell.key not in self.storage
        ]
        if missing:
            raise MissingValuesError(missing)
        identity = obj.restorable_object_identifier
        if identity != self.owner:
            raise ForeignSnapshotError(self.owner, identity)

    def restore_all(self, obj: 'RestorableObject') -> List[str]:
        """Write every captured value back into obj.

        Validation runs before anything is written. After that, writes are
        per entry: a type mismatch skips that entry only.

        Returns:
            Names of entries skipped because of a type mismatch.
        """
        self.validate(obj)
        skipped: List[str] = []

        for name, cell in obj.restorable_fields().items():
            entry = self.storage.get(cell.key)
            if entry is None:
                continue
            if not cell.set_erased(copy.deepcopy(entry[1])):
                logger.warning(f"Skipped restoring '{name}' on {self.owner_type}: type mismatch")
                skipped.append(name)

        for reference in self.references:
            if not reference.restore():
                skipped.append(reference.name)

        logger.debug(f"Restored {self.owner_type} from snapshot {self.id[:8]} (skipped={skipped})")
        return skipped

    def restore_one(self, obj: 'RestorableObject', field: FieldSelector) -> bool:
        """Write a single captured value back into obj.

        Args:
            field: Field name (without prefix) or the field's Restorable cell.
                A name may also select a captured Reference.

        Returns:
            True if written, False if skipped because of a type mismatch.

        Raises:
            UnknownPropertyError: the field is not a live field of obj or the
                snapshot holds no value for it.
        """
        self.validate(obj)
        live = obj.restorable_fields()

        if isinstance(field, Restorable):
            cell = field if any(c is field for c in live.values()) else None
            name = next((n for n, c in live.items() if c is field), repr(field))
        else:
            name = field
            cell = live.get(field)

        if cell is None:
            for reference in self.references:
                if reference.name == name:
                    return reference.restore()
            raise UnknownPropertyError(name)

        entry = self.storage.get(cell.key)
        if entry is None:
            raise UnknownPropertyError(name)
        written = cell.set_erased(copy.deepcopy(entry[1]))
        if not written:
            logger.warning(f"Skipped restoring '{name}' on {self.owner_type}: type mismatch")
        return written

    def to_dict(self) -> Dict[str, Any]:
        """Export names and values (references as their original value)."""
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'owner': str(self.owner),
            'owner_type': self.owner_type,
            'values': {
                name: copy.deepcopy(value.original_value if isinstance(value, Reference) else value)
                for name, value in self.storage.values()
            },
        }
