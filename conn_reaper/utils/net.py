from __future__ import annotations
from typing import Tuple

from ..errors import EndpointError

def _safe_int(s: str, default: int = 0) -> int:
    try:
        return int(s)
    except ValueError:
        return default

def parse_addr(addr: str) -> Tuple[str, int]:
    """
    Split an ss endpoint into (host, port). Handles:
      - '1.2.3.4:5678'
      - '[::1]:443', '[::ffff:10.0.0.1]:50090'
      - '10.0.0.1%eth0:22' (interface suffix is kept on the host)
      - '0.0.0.0:*', '*:443', '*:*', '*'
    """
    if not addr or addr == '*':
        return ('*', 0)

    if addr.startswith('['):
        host, _, port = addr.rpartition(':')
        host = host.strip('[]')
        return (host or '::', _safe_int(port, 0) if port not in ('', '*') else 0)

    if addr.startswith('*:'):
        _, port = addr.split(':', 1)
        return ('*', 0 if port == '*' else _safe_int(port, 0))

    if ':' in addr:
        host, port = addr.rsplit(':', 1)
        if port == '*' or port == '':
            return (host or '0.0.0.0', 0)
        return (host or '0.0.0.0', _safe_int(port, 0))

    return (addr, 0)

def split_pair(local: str, remote: str) -> Tuple[str, str]:
    """Validate an endpoint pair for use as ss src/dst filters."""
    local = (local or "").strip()
    remote = (remote or "").strip()
    if not local or not remote:
        raise EndpointError(f"incomplete endpoint pair: {local!r} -> {remote!r}")
    for ep in (local, remote):
        if any(ch.isspace() for ch in ep) or ':' not in ep:
            raise EndpointError(f"malformed endpoint: {ep!r}")
    return local, remote
