# mc_rcon/colors.py
from __future__ import annotations

from .config import ColorMode

SECTION = "§"  # §, Minecraft formatting prefix
RESET = "\033[0m"

ANSI_CODES = {
    "0": "\033[0;30m",    # black
    "1": "\033[0;34m",    # blue
    "2": "\033[0;32m",    # green
    "3": "\033[0;36m",    # cyan
    "4": "\033[0;31m",    # red
    "5": "\033[0;35m",    # purple
    "6": "\033[0;33m",    # gold
    "7": "\033[0;37m",    # grey
    "8": "\033[0;1;30m",  # dark grey
    "9": "\033[0;1;34m",  # light blue
    "a": "\033[0;1;32m",  # light green
    "b": "\033[0;1;36m",  # light cyan
    "c": "\033[0;1;31m",  # light red
    "d": "\033[0;1;35m",  # light purple
    "e": "\033[0;1;33m",  # yellow
    "f": "\033[0;1;37m",  # white
    "n": "\033[4m",       # underline
    "r": RESET,
}


def strip_colors(text: str) -> str:
    out = []
    i, n = 0, len(text)
    while i < n:
        if text[i] == SECTION and i + 1 < n:
            i += 2
            continue
        out.append(text[i])
        i += 1
    return "".join(out)


def translate_colors(text: str) -> str:
    """Map color codes to ANSI escapes; formatting is reset at every line break and at the end."""
    out = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch == SECTION and i + 1 < n:
            out.append(ANSI_CODES.get(text[i + 1], ""))
            i += 2
            continue
        if ch == "\n":
            out.append(RESET)
        out.append(ch)
        i += 1
    out.append(RESET)
    return "".join(out)


def format_response(text: str, mode: ColorMode) -> str:
    if mode is ColorMode.RAW:
        return text
    text = strip_colors(text) if mode is ColorMode.STRIP else translate_colors(text)
    if not text.endswith("\n"):
        text += "\n"
    return text
