from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Expand ~ and resolve against the current directory."""
    if not p:
        return None
    return (Path.cwd() / Path(p).expanduser()).resolve()
