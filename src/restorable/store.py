"""
Snapshot storage partitioned by object identity.

Layout: Identifier -> {RestorationKey -> Snapshot}

Entries are created lazily on first access and are never evicted by size or
age: objects remove their own snapshots (remove / clear). An identity whose
map becomes empty stays registered with an empty map. An identity derived
from id(obj) is released when its owner is garbage collected (see watch()),
so a later object that reuses the id starts with no snapshots.

A process-wide default store is used by every RestorableObject that does not
carry its own; swap it with set_default_store().
"""

import threading
import weakref
from typing import Any, Dict, List, Mapping, Optional
import logging

from restorable.identifier import Identifier, RestorationKey
from restorable.snapshot_model import Snapshot

logger = logging.getLogger(__name__)


class RestorableStore:
    """Identity-partitioned snapshot table.

    Thread safety: every operation holds one re-entrant lock. Restores that
    mutate the same object from several threads are not serialized here.
    """

    def __init__(self):
        self._tables: Dict[Identifier, Dict[RestorationKey, Snapshot]] = {}
        self._finalizers: Dict[Identifier, weakref.finalize] = {}
        self._lock = threading.RLock()

    def snapshots(self, identity: Identifier) -> Dict[RestorationKey, Snapshot]:
        """Return a copy of identity's snapshot map, registering it if absent."""
        with self._lock:
            return dict(self._tables.setdefault(identity, {}))

    def set_snapshots(self, identity: Identifier, snapshots: Mapping[RestorationKey, Snapshot]) -> None:
        """Replace identity's snapshot map."""
        with self._lock:
            self._tables[identity] = dict(snapshots)

    def get(self, identity: Identifier, key: RestorationKey) -> Optional[Snapshot]:
        with self._lock:
            return self._tables.setdefault(identity, {}).get(key)

    def put(self, identity: Identifier, key: RestorationKey, snapshot: Snapshot) -> None:
        with self._lock:
            table = self._tables.setdefault(identity, {})
            if key in table:
                logger.debug(f"Overwriting snapshot '{key}' for {identity}")
            table[key] = snapshot
        logger.debug(f"Stored snapshot {snapshot.id[:8]} under '{key}' for {identity}")

    def remove(self, identity: Identifier, key: RestorationKey) -> bool:
        """Remove one snapshot. Returns False if none was stored."""
        with self._lock:
            removed = self._tables.setdefault(identity, {}).pop(key, None)
        if removed is not None:
            logger.debug(f"Removed snapshot '{key}' for {identity}")
        return removed is not None

    def clear(self, identity: Identifier) -> int:
        """Remove every snapshot of identity. Returns how many were removed."""
        with self._lock:
            table = self._tables.setdefault(identity, {})
            count = len(table)
            table.clear()
        logger.debug(f"Cleared {count} snapshot(s) for {identity}")
        return count

    def count(self, identity: Identifier) -> int:
        with self._lock:
            return len(self._tables.get(identity, {}))

    def identities(self) -> List[Identifier]:
        with self._lock:
            return list(self._tables)

    def watch(self, owner: Any, identity: Identifier) -> bool:
        """Release identity's entry when owner is garbage collected.

        Returns:
            True if owner is watched (now or already), False if it does not
            support weak references.
        """
        with self._lock:
            finalizer = self._finalizers.get(identity)
            if finalizer is not None and finalizer.alive:
                return True
            if not hasattr(type(owner), '__weakref__'):
                logger.debug(f"Cannot watch {type(owner).__name__}: no weak reference support")
                return False
            self._finalizers[identity] = weakref.finalize(owner, self._release, identity)
        return True

    def _release(self, identity: Identifier) -> None:
        with self._lock:
            removed = self._tables.pop(identity, None)
            self._finalizers.pop(identity, None)
        logger.debug(f"Released {len(removed or {})} snapshot(s) of collected owner {identity}")

    def reset(self) -> None:
        """Drop every identity and snapshot."""
        with self._lock:
            for finalizer in self._finalizers.values():
                finalizer.detach()
            self._finalizers.clear()
            self._tables.clear()
        logger.debug("Reset snapshot store")

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)


_default_store = RestorableStore()


def get_default_store() -> RestorableStore:
    """Get the process-wide store used by objects without their own."""
    return _default_store


def set_default_store(store: RestorableStore) -> None:
    """Replace the process-wide default store.

    Objects resolve the default on every call, so the new store applies to
    existing objects that do not carry their own.
    """
    global _default_store
    _default_store = store
