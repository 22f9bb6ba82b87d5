from __future__ import annotations
import os
import platform
import shutil
from typing import Callable, Optional

from .errors import PreflightError

def check_environment(which: Callable[[str], Optional[str]] = shutil.which,
                      system: Callable[[], str] = platform.system,
                      geteuid: Optional[Callable[[], int]] = None) -> str:
    """Fail fast unless this is Linux, ss is installed and we run as root. Returns the ss path."""
    osname = system()
    if osname != "Linux":
        raise PreflightError(f"this tool only works on Linux, current OS: {osname}")

    ss = which("ss")
    if not ss:
        raise PreflightError("ss utility not found in PATH, install the iproute2 package")

    geteuid = geteuid or os.geteuid
    uid = geteuid()
    if uid != 0:
        raise PreflightError(f"must be run as root (sudo), current uid: {uid}")
    return ss
