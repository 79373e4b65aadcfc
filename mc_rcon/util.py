from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

ENV_HOST = "MCRCON_HOST"
ENV_PORT = "MCRCON_PORT"
ENV_PASS = "MCRCON_PASS"


def env_value(key: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Environment lookup where an empty value counts as unset."""
    env = os.environ if environ is None else environ
    val = env.get(key, "")
    return val or None


def read_properties(path: Path) -> dict:
    props = {}
    if path.exists():
        for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                k, v = line.split("=", 1)
                props[k.strip()] = v.strip()
    return props


def first_set(*values: Optional[str]) -> Optional[str]:
    for v in values:
        if v:
            return v
    return None
