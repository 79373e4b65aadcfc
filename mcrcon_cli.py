#!/usr/bin/env python3
from __future__ import annotations
import argparse, logging, signal, sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from mc_rcon import __version__
from mc_rcon.config import RconConfig, parse_wait_seconds, resolve_config
from mc_rcon.errors import ConfigError, ConnectionFailedError, RconError
from mc_rcon.rcon import RconSession
from mc_rcon.rcon_ui import run_batch, run_terminal

EPILOG = """\
Server address, port and password can be set with the environment variables
MCRCON_HOST, MCRCON_PORT and MCRCON_PASS. Command-line options override them.

mcrcon starts in terminal mode if no commands are given.
Commands with spaces must be enclosed in quotes.

Example:
  mcrcon -H my.minecraft.server -p password -w 5 "say Server is restarting!" save-all stop
"""

# --- helpers -----------------------------------------------------------------

def prompt_password() -> str:
    from prompt_toolkit import prompt
    return prompt("Password: ", is_password=True).strip()

def _on_terminate(signum, frame):
    print("\nDisconnecting...", flush=True)
    raise SystemExit(0)

def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# --- run ---------------------------------------------------------------------

def run(config: RconConfig, commands: list[str]) -> int:
    session = RconSession(config)
    try:
        try:
            session.connect()
        except ConnectionFailedError as e:
            print(f"Connection failed: {e}", file=sys.stderr)
            return 1
        try:
            session.authenticate()
        except RconError as e:
            print(f"Authentication failed: {e}", file=sys.stderr)
            return 1

        if config.terminal_mode:
            return run_terminal(session)
        return run_batch(session, commands)
    finally:
        session.close()

# --- argparse ----------------------------------------------------------------

def build_parser():
    p = argparse.ArgumentParser(
        prog="mcrcon",
        description="Send rcon commands to a Minecraft server.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-H", dest="host", metavar="HOST", help="Server address (default: localhost)")
    p.add_argument("-P", dest="port", metavar="PORT", help="Port (default: 25575)")
    p.add_argument("-p", dest="password", metavar="PASSWORD", help="Rcon password")
    p.add_argument("-t", dest="terminal", action="store_true", help="Terminal mode")
    p.add_argument("-s", dest="silent", action="store_true", help="Silent mode")
    p.add_argument("-c", dest="no_color", action="store_true", help="Disable colors")
    p.add_argument("-r", dest="raw", action="store_true", help="Output raw packets")
    p.add_argument("-w", dest="wait", metavar="SECONDS",
                   help="Wait between each command (1-600s)")
    p.add_argument("--properties", type=Path, metavar="PATH",
                   help="Read server-ip, rcon.port and rcon.password from a server.properties file")
    p.add_argument("--debug", action="store_true", help="Log protocol traffic to stderr")
    p.add_argument("-v", "--version", action="version", version=f"mcrcon {__version__}")
    p.add_argument("commands", nargs="*", help="Rcon commands to run in order")
    return p

def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_intermixed_args(argv)
    setup_logging(args.debug)

    try:
        wait = None if args.wait is None else parse_wait_seconds(args.wait)
        config = resolve_config(
            host=args.host,
            port=args.port,
            password=args.password,
            properties=args.properties,
            terminal_mode=args.terminal,
            silent=args.silent,
            no_color=args.no_color,
            raw=args.raw,
            wait_seconds=wait,
            has_commands=bool(args.commands),
        )
        config.port_number  # fail before any network activity
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.password:
        if config.terminal_mode and sys.stdin.isatty():
            try:
                config = replace(config, password=prompt_password())
            except (EOFError, KeyboardInterrupt):
                return 1
        if not config.password:
            print("You must provide password (-p password).", file=sys.stderr)
            print("Try 'mcrcon -h' for help.", file=sys.stderr)
            return 1

    signal.signal(signal.SIGTERM, _on_terminate)
    try:
        return run(config, args.commands)
    except KeyboardInterrupt:
        print("\nDisconnecting...", flush=True)
        return 0

if __name__ == "__main__":
    raise SystemExit(main())
