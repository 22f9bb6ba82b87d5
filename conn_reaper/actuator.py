from __future__ import annotations
import logging
import subprocess

from .errors import EndpointError
from .models import KillResult, TrackedConn
from .utils.net import split_pair

logger = logging.getLogger(__name__)

class SsKillActuator:
    """Terminates one socket with ``ss --kill dst REMOTE src LOCAL``."""

    def __init__(self, ss_bin: str = "ss"):
        self.ss_bin = ss_bin

    def argv(self, local: str, remote: str) -> list[str]:
        return [self.ss_bin, "--kill", "dst", remote, "src", local]

    def kill(self, entry: TrackedConn) -> KillResult:
        try:
            local, remote = split_pair(entry.local, entry.remote)
        except EndpointError as e:
            logger.error("invalid endpoint pair for inode %s: %s", entry.inode, e)
            return KillResult(ok=False, output=str(e))

        try:
            proc = subprocess.run(self.argv(local, remote), capture_output=True,
                                  text=True, errors="replace", check=False)
        except OSError as e:
            logger.error("error executing kill for %s (inode %s): %s", entry.conn_id, entry.inode, e)
            return KillResult(ok=False, output=str(e))

        output = (proc.stdout or "") + (proc.stderr or "")
        if proc.returncode != 0:
            logger.error("error executing kill for %s (inode %s): exit %d\noutput: %s",
                         entry.conn_id, entry.inode, proc.returncode, output.strip())
            return KillResult(ok=False, output=output)

        logger.info(" -> kill command executed for %s (inode %s)", entry.conn_id, entry.inode)
        return KillResult(ok=True, output=output)
