import pytest

from conn_reaper.models import KillResult
from conn_reaper.tracking import Reconciler, TrackingTable

MIN = 60.0

def ss_line(inode, local="10.0.0.1:50090", remote="10.0.0.2:41234", pid=812, name="srv"):
    return (f"ESTAB 0 0 {local} {remote} users:((\"{name}\",pid={pid},fd=9)) "
            f"uid:0 ino:{inode} sk:3 <->")

class FakeActuator:
    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    def kill(self, entry):
        self.calls.append(entry.inode)
        return KillResult(ok=self.ok, output="" if self.ok else "boom")

class FakeProvider:
    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.fetches = 0

    def fetch(self):
        self.fetches += 1
        out = self.outputs.pop(0) if self.outputs else ""
        if isinstance(out, Exception):
            raise out
        return out

@pytest.fixture
def actuator():
    return FakeActuator()

@pytest.fixture
def table():
    return TrackingTable()

@pytest.fixture
def reconciler(table, actuator):
    return Reconciler(table, actuator, max_active=120 * MIN, max_inactive=60 * MIN)
