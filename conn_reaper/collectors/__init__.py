from .linux import SsSnapshotProvider, parse_snapshot
from .loop import reaper_loop
