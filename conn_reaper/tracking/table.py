from __future__ import annotations
import threading
from typing import Dict, Iterator, List, Optional

from ..models import ObservedConn, TrackedConn

class TrackingTable:
    """
    Every connection seen on the watched port and not yet evicted, keyed by
    inode. ``lock`` serializes the reaper cycle against status readers; the
    table methods themselves do not take it.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._entries: Dict[str, TrackedConn] = {}

    def upsert_seen(self, obs: ObservedConn, now: float) -> bool:
        """Refresh an existing entry or start tracking a new one. True if new."""
        entry = self._entries.get(obs.inode)
        if entry is None:
            self._entries[obs.inode] = TrackedConn.from_observed(obs, now)
            return True
        entry.last_seen = max(entry.last_seen, now)
        entry.active = True
        if obs.pid is not None:
            entry.pid = obs.pid
            entry.process = obs.process
        return False

    def mark_all_inactive(self) -> None:
        for entry in self._entries.values():
            entry.active = False

    def evict(self, inode: str) -> Optional[TrackedConn]:
        return self._entries.pop(inode, None)

    def iterate_snapshot(self) -> List[TrackedConn]:
        return list(self._entries.values())

    def get(self, inode: str) -> Optional[TrackedConn]:
        return self._entries.get(inode)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, inode: object) -> bool:
        return inode in self._entries

    def __iter__(self) -> Iterator[TrackedConn]:
        return iter(self.iterate_snapshot())
