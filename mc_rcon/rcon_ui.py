# mc_rcon/rcon_ui.py
from __future__ import annotations

import logging
import sys
import time
from typing import Iterable, Iterator, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .colors import format_response
from .errors import RconError
from .rcon import RconSession

log = logging.getLogger(__name__)

PROMPT = "> "
QUIT_COMMAND = "q"
STOP_COMMAND = "stop"  # server misbehaves after this one, so the terminal loop ends with it

BANNER = "Logged in.\nType 'Q' or press Ctrl-D / Ctrl-C to disconnect."


def execute(session: RconSession, cmd: str, out: Optional[TextIO] = None) -> None:
    """One full round trip; the response is shown unless the session is silent."""
    out = out or sys.stdout
    body = session.command(cmd)
    if session.config.silent or not body:
        return
    out.write(format_response(body, session.config.color_mode))
    out.flush()


def run_batch(
    session: RconSession,
    commands: Iterable[str],
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    err = err or sys.stderr
    commands = list(commands)
    wait = session.config.wait_seconds

    for i, cmd in enumerate(commands):
        try:
            execute(session, cmd, out)
        except RconError as e:
            print(f"Command failed: {e}", file=err)
            return 1

        if i < len(commands) - 1 and wait > 0:
            log.debug("waiting %ds before next command", wait)
            time.sleep(wait)
    return 0


def prompt_lines(message: str = PROMPT) -> Iterator[str]:
    """Lines from an interactive prompt; Ctrl-D and Ctrl-C both end the input."""
    prompt = PromptSession(message, history=InMemoryHistory())
    while True:
        try:
            yield prompt.prompt()
        except (EOFError, KeyboardInterrupt):
            return


def stream_lines(stream: TextIO, out: Optional[TextIO] = None, prompt: str = "") -> Iterator[str]:
    """Lines from a non-interactive stream; the prompt, if any, is echoed before each read."""
    while True:
        if prompt and out is not None:
            out.write(prompt)
            out.flush()
        line = stream.readline()
        if not line:
            return
        yield line.rstrip("\r\n")


def run_terminal(
    session: RconSession,
    lines: Optional[Iterable[str]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    if lines is None:
        lines = prompt_lines() if sys.stdin.isatty() else stream_lines(sys.stdin, out, PROMPT)

    print(BANNER, file=out, flush=True)
    try:
        for line in lines:
            cmd = line.strip()
            if not cmd:
                continue
            if cmd.lower() == QUIT_COMMAND:
                break
            try:
                execute(session, cmd, out)
            except RconError as e:
                print(f"Error: {e}", file=err)
            if cmd.lower() == STOP_COMMAND:
                break
    except (OSError, UnicodeDecodeError) as e:
        print(f"Input error: {e}", file=err)
        return 1
    return 0
