import logging
import subprocess

from conn_reaper.actuator import SsKillActuator
from conn_reaper.models import TrackedConn

def entry(local="10.0.0.1:50090", remote="10.0.0.2:41234"):
    return TrackedConn(inode="9", local=local, remote=remote, first_seen=0.0, last_seen=0.0)

def test_kill_invokes_ss_with_exact_pair(monkeypatch):
    calls = []

    def fake_run(argv, **kw):
        calls.append(argv)
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    result = SsKillActuator().kill(entry())
    assert result.ok
    assert calls == [["ss", "--kill", "dst", "10.0.0.2:41234", "src", "10.0.0.1:50090"]]

def test_kill_failure_reports_output(monkeypatch, caplog):
    monkeypatch.setattr(subprocess, "run",
                        lambda argv, **kw: subprocess.CompletedProcess(argv, 1, stdout="", stderr="Operation not permitted"))
    with caplog.at_level(logging.ERROR):
        result = SsKillActuator().kill(entry())
    assert not result.ok
    assert "Operation not permitted" in result.output
    assert "error executing kill" in caplog.text

def test_kill_missing_binary_is_a_failed_attempt():
    result = SsKillActuator(ss_bin="/nonexistent/ss-binary").kill(entry())
    assert not result.ok

def test_malformed_pair_never_runs_ss(monkeypatch, caplog):
    def boom(*a, **kw):
        raise AssertionError("ss must not run")

    monkeypatch.setattr(subprocess, "run", boom)
    with caplog.at_level(logging.ERROR):
        result = SsKillActuator().kill(entry(remote=""))
    assert not result.ok
    assert "invalid endpoint pair" in caplog.text

def test_kill_with_non_utf8_output_is_still_reported(tmp_path):
    script = tmp_path / "ss"
    script.write_text("#!/bin/sh\nprintf '\\377\\376 closed\\n'\n")
    script.chmod(0o755)
    result = SsKillActuator(ss_bin=str(script)).kill(entry())
    assert result.ok
    assert "closed" in result.output
