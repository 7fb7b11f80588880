"""
Snapshot and restore for in-process objects.

An object declares which of its fields take part in restorable state; callers
take named snapshots of that state and later roll the object back, either in
full or one field at a time.

Quick Start:
    >>> from restorable import RestorableObject, restorable
    >>>
    >>> class Document(RestorableObject):
    ...     title = restorable("Untitled")
    ...     revision = restorable(0, value_type=int)
    >>>
    >>> doc = Document()
    >>> _ = doc.take_snapshot("before-edit")
    >>> doc.title = "Draft 2"
    >>> doc.restore("before-edit")
    []
    >>> doc.title
    'Untitled'

Architecture:
    Restorable cells carry a random key assigned once. A Snapshot stores
    captured values by cell key, so it only fits the instance it was taken
    from. Stored snapshots live in a RestorableStore partitioned by object
    identity.

Modules:
    - wrapper: Restorable cell and the restorable() field declaration
    - reference: References to fields that cannot be wrapped
    - snapshot_model: Snapshot capture, validation and restore
    - properties: Read-only view over captured values
    - store: Identity-partitioned snapshot storage
    - restorable_object: The RestorableObject mixin
    - identifier: Identifier and RestorationKey value types
    - errors: RestorationError hierarchy
"""

# Value types
from restorable.identifier import Identifier, RestorationKey

# Errors
from restorable.errors import (
    RestorationError,
    NoSnapshotError,
    UnknownPropertyError,
    SnapshotValidationError,
    MissingValuesError,
    ForeignSnapshotError,
)

# Cells and references
from restorable.wrapper import Restorable, RestorableField, NestedState, restorable
from restorable.reference import Reference

# Snapshots
from restorable.snapshot_model import Snapshot
from restorable.properties import Properties, PropertyLookup, LookupStatus

# Store
from restorable.store import RestorableStore, get_default_store, set_default_store

# Object capability
from restorable.restorable_object import RestorableObject

__all__ = [
    # Value types
    'Identifier',
    'RestorationKey',
    # Errors
    'RestorationError',
    'NoSnapshotError',
    'UnknownPropertyError',
    'SnapshotValidationError',
    'MissingValuesError',
    'ForeignSnapshotError',
    # Cells and references
    'Restorable',
    'RestorableField',
    'NestedState',
    'restorable',
    'Reference',
    # Snapshots
    'Snapshot',
    'Properties',
    'PropertyLookup',
    'LookupStatus',
    # Store
    'RestorableStore',
    'get_default_store',
    'set_default_store',
    # Object capability
    'RestorableObject',
]

__version__ = '1.0.0'
__description__ = 'Snapshot and restore for in-process objects'
