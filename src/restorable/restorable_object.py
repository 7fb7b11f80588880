"""
RestorableObject: the capability every participating object implements.

Lifecycle:
    doc = Document()
    doc.take_snapshot("before-edit")    # stored in the object's store
    doc.title = "Draft 2"
    doc.restore("before-edit")          # title is back to its captured value
    doc.remove_snapshot("before-edit")

Identity:
    Ordinary classes get an identifier derived from id(self). Classes declared
    with value_semantics=True must store their own:

        class Point(RestorableObject, value_semantics=True):
            restorable_object_identifier: Identifier
            x = restorable(0)

            def __init__(self):
                self.restorable_object_identifier = Identifier()

    Copies made with copy.copy() share that identifier and the same cells, so
    they address the same snapshots.
"""

from typing import Any, Dict, List, Optional, Union
import inspect
import logging

from restorable.errors import NoSnapshotError
from restorable.identifier import Identifier, RestorationKey
from restorable.properties import Properties
from restorable.reference import Reference
from restorable.snapshot_model import FieldSelector, Snapshot
from restorable.store import RestorableStore, get_default_store
from restorable.wrapper import FIELD_PREFIX, Restorable, RestorableField

logger = logging.getLogger(__name__)

KeyLike = Union[RestorationKey, str]
SnapshotOrKey = Union[Snapshot, RestorationKey, str]

_IDENTIFIER_ATTR = 'restorable_object_identifier'


class _ReferenceIdentity:
    """Default identifier: derived from the instance's reference identity.

    Non-data descriptor, so an identifier assigned on the instance wins.
    """

    def __get__(self, instance: Any, owner: type = None) -> Any:
        if instance is None:
            return self
        if getattr(owner, '__restorable_value_semantics__', False):
            raise TypeError(
                f"{owner.__name__} has value semantics and must assign "
                f"{_IDENTIFIER_ATTR} before use"
            )
        return Identifier.for_object(instance)


class RestorableObject:
    """Mixin adding snapshot/restore to a class.

    Restorable state is every field declared with restorable() and every
    Restorable cell found in the instance dict, plus the Reference objects
    returned by `references`.
    """

    __restorable_value_semantics__ = False

    restorable_object_identifier = _ReferenceIdentity()

    # None means: use the process-wide default store
    restorable_store: Optional[RestorableStore] = None

    def __init_subclass__(cls, value_semantics: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        if not value_semantics:
            return
        declared = any(
            _IDENTIFIER_ATTR in vars(klass) or _IDENTIFIER_ATTR in inspect.get_annotations(klass)
            for klass in cls.__mro__
            if klass is not RestorableObject
        )
        if not declared:
            raise TypeError(
                f"{cls.__name__} is declared with value_semantics=True but does not "
                f"declare {_IDENTIFIER_ATTR}"
            )
        cls.__restorable_value_semantics__ = True

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    @property
    def references(self) -> List[Reference]:
        """References to fields that cannot be wrapped (e.g. properties)."""
        return []

    def restorable_fields(self) -> Dict[str, Restorable]:
        """Live restorable cells keyed by field name (prefix stripped).

        Raises:
            ValueError: two attributes (e.g. `_count` and `count`) map to the
                same field name.
        """
        seen = set()
        for klass in type(self).__mro__:
            for attr, declared in vars(klass).items():
                if attr in seen:
                    continue
                seen.add(attr)
                if not isinstance(declared, RestorableField):
                    continue
                if declared.storage_name in self.__dict__ or declared.has_initial_value():
                    declared.cell(self)

        fields: Dict[str, Restorable] = {}
        for attr, value in vars(self).items():
            if isinstance(value, Restorable):
                name = attr[len(FIELD_PREFIX):] if attr.startswith(FIELD_PREFIX) else attr
                if name in fields:
                    raise ValueError(
                        f"{type(self).__name__} has more than one restorable cell named '{name}'"
                    )
                fields[name] = value
        return fields

    def restorable_field(self, name: str) -> Restorable:
        """Return the cell backing field `name`."""
        try:
            return self.restorable_fields()[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no restorable field '{name}'") from None

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    def _store(self) -> RestorableStore:
        return self.restorable_store if self.restorable_store is not None else get_default_store()

    @property
    def snapshots(self) -> Dict[RestorationKey, Snapshot]:
        """Copy of this object's stored snapshots."""
        return self._store().snapshots(self.restorable_object_identifier)

    def snapshot(self, key: KeyLike) -> Snapshot:
        """Return the snapshot stored under key.

        Raises:
            NoSnapshotError: nothing is stored under key.
        """
        key = RestorationKey.coerce(key)
        snapshot = self._store().get(self.restorable_object_identifier, key)
        if snapshot is None:
            raise NoSnapshotError(key)
        return snapshot

    def has_snapshot(self, key: KeyLike) -> bool:
        key = RestorationKey.coerce(key)
        return self._store().get(self.restorable_object_identifier, key) is not None

    def snapshot_keys(self) -> List[RestorationKey]:
        return list(self.snapshots)

    def snapshot_count(self) -> int:
        return self._store().count(self.restorable_object_identifier)

    def _resolve(self, source: SnapshotOrKey) -> Snapshot:
        if isinstance(source, Snapshot):
            return source
        return self.snapshot(source)

    # ------------------------------------------------------------------
    # Snapshot / restore
    # ------------------------------------------------------------------

    def take_snapshot(self, key: Optional[KeyLike] = None) -> Snapshot:
        """Capture the current state; store it under key when one is given.

        An existing snapshot under the same key is replaced.
        """
        snapshot = Snapshot.capture(self)
        if key is not None:
            store = self._store()
            identity = self.restorable_object_identifier
            store.put(identity, RestorationKey.coerce(key), snapshot)
            # id()-derived identities are released when this object is collected
            if not self.__restorable_value_semantics__:
                store.watch(self, identity)
        return snapshot

    def restore(self, source: SnapshotOrKey) -> List[str]:
        """Restore every field and reference from a snapshot or stored key.

        Returns:
            Names skipped because the captured value had the wrong type.

        Raises:
            NoSnapshotError: source is a key with nothing stored under it.
            SnapshotValidationError: the snapshot was not captured from this
                instance (or its fields have changed since).
        """
        snapshot = self._resolve(source)
        return snapshot.restore_all(self)

    def restore_field(self, field: FieldSelector, source: SnapshotOrKey) -> bool:
        """Restore a single field from a snapshot or stored key.

        Args:
            field: Field name, or the field's cell (see restorable_field()).
            source: Snapshot, or key of a stored snapshot.

        Raises:
            NoSnapshotError: source is a key with nothing stored under it.
            UnknownPropertyError: the snapshot holds no value for field.
            SnapshotValidationError: the snapshot does not fit this instance.
        """
        snapshot = self._resolve(source)
        return snapshot.restore_one(self, field)

    def properties(self, source: SnapshotOrKey) -> Properties:
        """Read-only view over the values captured in a snapshot."""
        return Properties(self._resolve(source))

    def remove_snapshot(self, key: KeyLike) -> None:
        """Remove the snapshot stored under key, if any."""
        self._store().remove(self.restorable_object_identifier, RestorationKey.coerce(key))

    def remove_local_snapshots(self) -> None:
        """Remove every snapshot stored for this object."""
        self._store().clear(self.restorable_object_identifier)
