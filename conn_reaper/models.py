from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class ObservedConn:
    inode: str
    local: str
    remote: str
    pid: Optional[int] = None
    process: Optional[str] = None

    @property
    def conn_id(self) -> str:
        return f"{self.local} -> {self.remote}"

@dataclass
class TrackedConn:
    inode: str
    local: str
    remote: str
    first_seen: float
    last_seen: float
    active: bool = True
    pid: Optional[int] = None
    process: Optional[str] = None

    @property
    def conn_id(self) -> str:
        return f"{self.local} -> {self.remote}"

    @classmethod
    def from_observed(cls, obs: ObservedConn, now: float) -> "TrackedConn":
        return cls(inode=obs.inode, local=obs.local, remote=obs.remote,
                   first_seen=now, last_seen=now, active=True,
                   pid=obs.pid, process=obs.process)

@dataclass
class KillResult:
    ok: bool
    output: str = ""
