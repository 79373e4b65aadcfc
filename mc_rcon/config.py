# mc_rcon/config.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError
from .util import ENV_HOST, ENV_PASS, ENV_PORT, env_value, first_set, read_properties

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "25575"
MAX_WAIT_SECONDS = 600


class ColorMode(enum.Enum):
    ANSI = "ansi"
    STRIP = "strip"
    RAW = "raw"


@dataclass(frozen=True, slots=True)
class RconConfig:
    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    password: str = ""
    terminal_mode: bool = False
    silent: bool = False
    color_mode: ColorMode = ColorMode.ANSI
    wait_seconds: int = 0

    @property
    def port_number(self) -> int:
        try:
            port = int(self.port)
        except ValueError:
            raise ConfigError(f"invalid port: {self.port!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"port out of range: {port}")
        return port

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def parse_wait_seconds(value: str) -> int:
    """Used as an argparse ``type=``; ValueError becomes a usage error."""
    try:
        wait = int(value)
    except ValueError:
        raise ValueError(f"invalid wait value: {value!r}") from None
    if wait <= 0 or wait > MAX_WAIT_SECONDS:
        raise ValueError(f"wait value out of range (1-{MAX_WAIT_SECONDS})")
    return wait


def resolve_config(
    *,
    host: Optional[str] = None,
    port: Optional[str] = None,
    password: Optional[str] = None,
    properties: Optional[Path] = None,
    terminal_mode: bool = False,
    silent: bool = False,
    no_color: bool = False,
    raw: bool = False,
    wait_seconds: Optional[int] = None,
    has_commands: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> RconConfig:
    """
    Flags beat MCRCON_* environment variables, which beat server.properties,
    which beats the built-in defaults.
    """
    props: dict = {}
    if properties is not None:
        if not properties.exists():
            raise ConfigError(f"properties file not found: {properties}")
        props = read_properties(properties)

    if raw:
        mode = ColorMode.RAW
    elif no_color:
        mode = ColorMode.STRIP
    else:
        mode = ColorMode.ANSI

    return RconConfig(
        host=first_set(host, env_value(ENV_HOST, environ), props.get("server-ip")) or DEFAULT_HOST,
        port=first_set(port, env_value(ENV_PORT, environ), props.get("rcon.port")) or DEFAULT_PORT,
        password=first_set(password, env_value(ENV_PASS, environ), props.get("rcon.password")) or "",
        terminal_mode=terminal_mode or not has_commands,
        silent=silent,
        color_mode=mode,
        wait_seconds=wait_seconds or 0,
    )
