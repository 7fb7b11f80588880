"""
Identity and key value types.

Identifier partitions the snapshot store per object instance.
RestorationKey distinguishes multiple snapshots of the same instance.
Both are immutable and compare by their raw string value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union
import secrets


def _random_raw() -> str:
    return str(secrets.randbits(64))


@dataclass(frozen=True)
class Identifier:
    """Identifies a RestorableObject instance.

    Identifier() is random. Store it once (e.g. assign in __init__) so that it
    keeps identifying the same instance for its whole lifetime.
    """
    raw_value: str = field(default_factory=_random_raw)

    @classmethod
    def for_object(cls, obj: Any) -> 'Identifier':
        """Derive an identifier from an object's reference identity."""
        return cls(raw_value=f"{id(obj):#x}")

    @classmethod
    def from_string(cls, raw: str) -> 'Identifier':
        return cls(raw_value=raw)

    def __str__(self) -> str:
        return self.raw_value

    def to_dict(self) -> Dict[str, str]:
        return {'raw_value': self.raw_value}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Identifier':
        return cls(raw_value=data['raw_value'])


@dataclass(frozen=True)
class RestorationKey:
    """Key under which a snapshot is stored.

    Every API that takes a key also accepts a plain string.
    """
    raw_value: str

    @classmethod
    def coerce(cls, key: Union['RestorationKey', str]) -> 'RestorationKey':
        """Normalize a str or RestorationKey to a RestorationKey."""
        if isinstance(key, RestorationKey):
            return key
        if isinstance(key, str):
            return cls(raw_value=key)
        raise TypeError(f"RestorationKey expects str, got {type(key).__name__}")

    @classmethod
    def from_string(cls, raw: str) -> 'RestorationKey':
        return cls(raw_value=raw)

    def __str__(self) -> str:
        return self.raw_value

    def to_dict(self) -> Dict[str, str]:
        return {'raw_value': self.raw_value}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'RestorationKey':
        return cls(raw_value=data['raw_value'])
