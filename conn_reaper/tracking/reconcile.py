"""
Per-cycle reconciliation of a fresh ``ss`` snapshot against the tracking table.

Rules, evaluated once per entry per cycle and in this order:

  kill    active and ``now - first_seen > max_active``: ask the actuator to
          terminate it, then evict whatever the outcome was
  expire  ``now - last_seen > max_inactive``: evict without terminating
  keep    anything else

An entry that is old enough for both is killed. A failed kill is not retried:
the entry is gone from the table and, if the socket is still there next cycle,
it is picked up again as a new connection.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Tuple

from ..errors import SnapshotError
from ..models import KillResult, ObservedConn, TrackedConn
from .table import TrackingTable

logger = logging.getLogger(__name__)

class Actuator(Protocol):
    def kill(self, entry: TrackedConn) -> KillResult: ...

class SnapshotProvider(Protocol):
    def fetch(self) -> str: ...

@dataclass
class CycleReport:
    at: float
    new: List[str] = field(default_factory=list)
    killed: List[Tuple[str, bool]] = field(default_factory=list)
    expired: List[str] = field(default_factory=list)
    total: int = 0

    def as_dict(self) -> dict:
        return {
            "at": self.at,
            "new": list(self.new),
            "killed": [{"inode": i, "ok": ok} for i, ok in self.killed],
            "expired": list(self.expired),
            "total": self.total,
        }

class Reconciler:
    def __init__(self, table: TrackingTable, actuator: Actuator,
                 max_active: float, max_inactive: float):
        self.table = table
        self.actuator = actuator
        self.max_active = max_active
        self.max_inactive = max_inactive
        self.last_report: Optional[CycleReport] = None

    def run_cycle(self, observed: Mapping[str, ObservedConn], now: float) -> CycleReport:
        report = CycleReport(at=now)
        with self.table.lock:
            self._merge(observed, now, report)
            self._evaluate(now, report)
            report.total = len(self.table)
        logger.info("total tracked connections: %d", report.total)
        self.last_report = report
        return report

    def _merge(self, observed: Mapping[str, ObservedConn], now: float, report: CycleReport) -> None:
        self.table.mark_all_inactive()
        for obs in observed.values():
            if self.table.upsert_seen(obs, now):
                report.new.append(obs.inode)
                logger.info(" + new connection tracked (inode %s): %s", obs.inode, obs.conn_id)

    def _evaluate(self, now: float, report: CycleReport) -> None:
        for entry in self.table.iterate_snapshot():
            if entry.active and now - entry.first_seen > self.max_active:
                logger.info(" x killing active connection (>%s min, inode %s): %s",
                            _minutes(self.max_active), entry.inode, entry.conn_id)
                try:
                    result = self.actuator.kill(entry)
                except Exception:
                    logger.exception("kill raised for inode %s", entry.inode)
                    result = KillResult(ok=False, output="actuator error")
                if not result.ok:
                    logger.warning("kill failed for inode %s, dropping it anyway", entry.inode)
                self.table.evict(entry.inode)
                report.killed.append((entry.inode, result.ok))
                continue

            if now - entry.last_seen > self.max_inactive:
                logger.info(" - removing inactive connection (>%s min, inode %s): %s",
                            _minutes(self.max_inactive), entry.inode, entry.conn_id)
                self.table.evict(entry.inode)
                report.expired.append(entry.inode)

    def poll(self, provider: SnapshotProvider,
             parse: Callable[[str], Dict[str, ObservedConn]],
             clock: Callable[[], float] = time.time) -> Optional[CycleReport]:
        """One full cycle. Returns None when the snapshot could not be taken."""
        logger.info("--- executing monitoring cycle: %s ---",
                    datetime.now().strftime("%a, %d %b %Y %H:%M:%S"))
        try:
            text = provider.fetch()
        except SnapshotError as e:
            logger.error("error listing connections: %s", e)
            return None
        return self.run_cycle(parse(text), clock())

def _minutes(seconds: float) -> str:
    return f"{seconds / 60:g}"
