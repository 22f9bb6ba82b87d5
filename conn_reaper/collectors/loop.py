from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

from ..tracking import Reconciler
from .linux import parse_snapshot

logger = logging.getLogger(__name__)

def reaper_loop(reconciler: Reconciler, provider, interval: float,
                stop: Optional[threading.Event] = None,
                monotonic: Callable[[], float] = time.monotonic,
                max_cycles: Optional[int] = None) -> int:
    """
    Run a cycle now and then every ``interval`` seconds until ``stop`` is set.

    Cycles never overlap: one that overruns its slot pushes the next trigger
    back to "now" instead of queueing extra runs. Returns the number of cycles
    executed.
    """
    stop = stop or threading.Event()
    cycles = 0
    next_due = monotonic()
    while not stop.is_set():
        try:
            reconciler.poll(provider, parse_snapshot)
        except Exception:
            logger.exception("monitoring cycle failed")
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break

        next_due += interval
        delay = next_due - monotonic()
        if delay < 0:
            next_due = monotonic()
            delay = 0
        if stop.wait(delay):
            break
    return cycles
