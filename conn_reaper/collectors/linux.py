"""
Snapshot side of a cycle: run ``ss`` for the watched port and turn its
output into observed connections keyed by socket inode.

Expected line layout (``ss -tnpeH src :PORT``):

    ESTAB 0 0 10.0.0.1:50090 10.0.0.2:41234 users:(("srv",pid=812,fd=9)) uid:0 ino:48213 sk:3 <->

Fields 3 and 4 are the local and peer endpoints. Only the inode and those two
positions are relied on; everything else is optional.
"""
from __future__ import annotations
import logging
import re
import subprocess
from typing import Dict, Optional

from ..errors import SnapshotError
from ..models import ObservedConn

logger = logging.getLogger(__name__)

INODE_RE = re.compile(r"ino:([0-9]+)")
PID_RE = re.compile(r"pid=(?P<pid>\d+),?\s*fd=\d+")
NAME_RE = re.compile(r"\(\(\"(?P<name>[^\"]+)\"")

LOCAL_FIELD = 3
REMOTE_FIELD = 4

def parse_line(line: str) -> Optional[ObservedConn]:
    m = INODE_RE.search(line)
    if not m:
        logger.warning("could not extract inode from line: %s", line)
        return None
    inode = m.group(1)

    fields = line.split()
    if len(fields) <= REMOTE_FIELD:
        return None

    mpid = PID_RE.search(line)
    mname = NAME_RE.search(line)
    return ObservedConn(
        inode=inode,
        local=fields[LOCAL_FIELD],
        remote=fields[REMOTE_FIELD],
        pid=int(mpid.group("pid")) if mpid else None,
        process=mname.group("name") if mname else None,
    )

def parse_snapshot(text: str) -> Dict[str, ObservedConn]:
    """Parse one ss listing. A repeated inode keeps the last line parsed."""
    observed: Dict[str, ObservedConn] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        obs = parse_line(line)
        if obs is not None:
            observed[obs.inode] = obs
    return observed

class SsSnapshotProvider:
    def __init__(self, port: int, ss_bin: str = "ss"):
        self.port = port
        self.ss_bin = ss_bin

    @property
    def argv(self) -> list[str]:
        return [self.ss_bin, "-tnpeH", "src", f":{self.port}"]

    def fetch(self) -> str:
        try:
            proc = subprocess.run(self.argv, capture_output=True, text=True,
                                  errors="replace", check=False)
        except OSError as e:
            raise SnapshotError(f"cannot run {self.ss_bin}: {e}") from e
        if proc.returncode != 0:
            raise SnapshotError(
                f"{' '.join(self.argv)} exited with {proc.returncode}: {proc.stderr.strip()}")
        return proc.stdout
