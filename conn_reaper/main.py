from __future__ import annotations
import argparse, logging, sys, threading
from .config import init_cfg_from_args
from .errors import ConfigError, PreflightError
from .preflight import check_environment
from .collectors import SsSnapshotProvider, reaper_loop
from .tracking import Reconciler, TrackingTable
from .actuator import SsKillActuator
from .web import create_app

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="conn-reaper",
        description="Monitors, tracks, and kills TCP connections on a specific source port.",
        epilog="NOTE: must be run as root (sudo). Settings also come from CONN_REAPER_* "
               "environment variables and --config; flags win.")
    ap.add_argument('--port', type=str, default=None, help='source port to monitor (default 50090)')
    ap.add_argument('--check-interval', type=str, default=None, help='check interval in minutes (default 30)')
    ap.add_argument('--max-active', type=str, default=None, help='max allowed active duration in minutes (default 120)')
    ap.add_argument('--max-inactive', type=str, default=None, help='minutes unseen before an entry is dropped (default 60)')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON file with the same settings')
    ap.add_argument('--status-port', type=str, default=None, help='serve a read-only status API on this port (0 = off)')
    ap.add_argument('--status-host', type=str, default=None, help='bind address for the status API (default 127.0.0.1)')
    ap.add_argument('--log-level', type=str, default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    ap.add_argument('--skip-preflight', action='store_true', help='do not check platform, ss and root before starting')
    return ap

def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = init_cfg_from_args(args)
    except ConfigError as e:
        ap.error(str(e))

    ss_bin = "ss"
    if not args.skip_preflight:
        try:
            ss_bin = check_environment()
        except PreflightError as e:
            print(f"[error] environment: {e}", file=sys.stderr)
            sys.exit(1)

    print(f"[*] Monitoring started on port: {cfg.port}")
    print(f"[*] Check interval: {cfg.check_interval} min")
    print(f"[*] Max active duration: {cfg.max_active} min")
    print(f"[*] Max inactive duration: {cfg.max_inactive} min")
    if cfg.config_path:
        print(f"[*] config: {cfg.config_path}")

    table = TrackingTable()
    reconciler = Reconciler(table, SsKillActuator(ss_bin), cfg.max_active_s, cfg.max_inactive_s)
    provider = SsSnapshotProvider(cfg.port, ss_bin)

    if not cfg.status_port:
        try:
            reaper_loop(reconciler, provider, cfg.interval_s)
        except KeyboardInterrupt:
            print("[*] stopped")
        return

    t = threading.Thread(target=reaper_loop, args=(reconciler, provider, cfg.interval_s), daemon=True)
    t.start()

    app = create_app(cfg, reconciler)
    print(f"[*] Status API on http://{cfg.status_host}:{cfg.status_port}/api/status")
    app.run(host=cfg.status_host, port=cfg.status_port, debug=False, use_reloader=False)

if __name__ == '__main__':
    main()
