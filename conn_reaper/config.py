from __future__ import annotations
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .utils.path import to_abs_path

@dataclass(frozen=True)
class CFG:
    port: int = 50090
    check_interval: int = 30     # minutes
    max_active: int = 120        # minutes
    max_inactive: int = 60       # minutes
    status_port: int = 0         # 0 disables the status API
    status_host: str = "127.0.0.1"
    config_path: Optional[Path] = None

    @property
    def interval_s(self) -> float:
        return self.check_interval * 60.0

    @property
    def max_active_s(self) -> float:
        return self.max_active * 60.0

    @property
    def max_inactive_s(self) -> float:
        return self.max_inactive * 60.0

ENV_PREFIX = "CONN_REAPER_"

# key -> (env suffix, minimum, maximum)
INT_KEYS = {
    "port": ("PORT", 1, 65535),
    "check_interval": ("CHECK_INTERVAL", 1, None),
    "max_active": ("MAX_ACTIVE", 1, None),
    "max_inactive": ("MAX_INACTIVE", 1, None),
    "status_port": ("STATUS_PORT", 0, 65535),
}

def load_config_file(path: Optional[str]) -> tuple[Optional[Path], Dict[str, Any]]:
    if not path:
        return None, {}
    p = to_abs_path(path)
    if p is None or not p.exists():
        raise ConfigError(f"config file not found: {path}")
    txt = p.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot parse {p}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: expected a mapping at top level")
    unknown = set(data) - set(INT_KEYS) - {"status_host"}
    if unknown:
        raise ConfigError(f"{p}: unknown keys: {', '.join(sorted(unknown))}")
    return p, data

def _as_int(key: str, value: Any, lo: int, hi: Optional[int]) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    try:
        text = str(value).strip()
        if key == "port":
            text = text.lstrip(":")
        n = int(text)
    except ValueError:
        raise ConfigError(f"{key}: expected an integer, got {value!r}") from None
    if n < lo or (hi is not None and n > hi):
        bound = f">= {lo}" if hi is None else f"in {lo}..{hi}"
        raise ConfigError(f"{key}: must be {bound}, got {n}")
    return n

def init_cfg_from_args(args, environ: Optional[Mapping[str, str]] = None) -> CFG:
    """Resolve every setting as: CLI flag, then environment, then config file, then default."""
    environ = os.environ if environ is None else environ
    path, filecfg = load_config_file(getattr(args, "config", None))
    defaults = CFG()
    values: Dict[str, Any] = {}

    for key, (suffix, lo, hi) in INT_KEYS.items():
        raw = getattr(args, key, None)
        if raw is None:
            raw = environ.get(ENV_PREFIX + suffix) or None
        if raw is None:
            raw = filecfg.get(key)
        values[key] = getattr(defaults, key) if raw is None else _as_int(key, raw, lo, hi)

    host = getattr(args, "status_host", None) or environ.get(ENV_PREFIX + "STATUS_HOST") \
        or filecfg.get("status_host") or defaults.status_host
    return CFG(status_host=str(host), config_path=path, **values)
