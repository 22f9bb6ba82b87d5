from __future__ import annotations
import time
from dataclasses import replace
from typing import Optional

import orjson
import psutil
from flask import Flask, Response, current_app

from ..config import CFG
from ..models import TrackedConn
from ..tracking import Reconciler
from ..utils.net import parse_addr

def dumps(obj) -> str:
    return orjson.dumps(obj).decode()

def enrich_proc_info(pid: Optional[int]) -> dict:
    info = {"user": None, "cmd": None}
    if not pid:
        return info
    try:
        p = psutil.Process(pid)
        info["user"] = p.username()
        cmdline = p.cmdline()
        info["cmd"] = " ".join(cmdline) if cmdline else p.name()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        current_app.logger.debug("no process info for pid %s", pid)
    return info

def entry_to_dict(e: TrackedConn, now: float) -> dict:
    lhost, lport = parse_addr(e.local)
    rhost, rport = parse_addr(e.remote)
    d = {
        "inode": e.inode,
        "local": e.local,
        "remote": e.remote,
        "local_host": lhost, "local_port": lport,
        "remote_host": rhost, "remote_port": rport,
        "first_seen": e.first_seen,
        "last_seen": e.last_seen,
        "active": e.active,
        "age_s": round(now - e.first_seen, 3),
        "idle_s": round(now - e.last_seen, 3),
        "pid": e.pid,
        "process": e.process,
    }
    d.update(enrich_proc_info(e.pid))
    return d

def create_app(cfg: CFG, reconciler: Reconciler) -> Flask:
    app = Flask(__name__)
    table = reconciler.table

    @app.get("/api/status")
    def api_status():
        with table.lock:
            entries = [replace(e) for e in table.iterate_snapshot()]
            report = reconciler.last_report
            last_cycle = report.as_dict() if report else None
        now = time.time()
        body = {
            "config": {
                "port": cfg.port,
                "check_interval": cfg.check_interval,
                "max_active": cfg.max_active,
                "max_inactive": cfg.max_inactive,
            },
            "last_cycle": last_cycle,
            "tracked": [entry_to_dict(e, now) for e in entries],
        }
        return Response(dumps(body), mimetype="application/json")

    @app.get("/healthz")
    def healthz():
        with table.lock:
            n = len(table)
        return Response(dumps({"ok": True, "tracked": n}), mimetype="application/json")

    return app
