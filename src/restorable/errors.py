"""Exceptions raised by snapshot and restore operations."""

from typing import Iterable, Tuple


class RestorationError(Exception):
    """Base class for all restoration failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoSnapshotError(RestorationError):
    """No snapshot is stored under the requested key for this object."""

    def __init__(self, key):
        super().__init__(f"No snapshot exists for key {key}.")
        self.key = key


class UnknownPropertyError(RestorationError):
    """A single-field restore named a field the snapshot does not hold."""

    def __init__(self, name: str):
        super().__init__(f"No value is stored for property '{name}'.")
        self.name = name


class SnapshotValidationError(RestorationError):
    """The snapshot does not fit the object it is being restored into."""


class MissingValuesError(SnapshotValidationError):
    """The object declares fields the snapshot has no values for."""

    def __init__(self, names: Iterable[str]):
        self.names: Tuple[str, ...] = tuple(sorted(names))
        super().__init__(f"Snapshot is missing values for: {', '.join(self.names)}")


class ForeignSnapshotError(SnapshotValidationError):
    """The snapshot was captured from a different object instance."""

    def __init__(self, expected, actual):
        super().__init__(f"Snapshot belongs to object {expected}, not {actual}.")
        self.expected = expected
        self.actual = actual
