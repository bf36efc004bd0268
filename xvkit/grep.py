"""Line filter supporting the ^ . * $ regular-expression operators."""

from __future__ import annotations

import sys
from typing import Iterator, Optional, Sequence, TextIO

_BUFSIZE = 1024


def match(pattern: str, text: str) -> bool:
    """Whether ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _match_here(pattern, 1, text, 0)
    return any(_match_here(pattern, 0, text, t) for t in range(len(text) + 1))


def _match_here(pattern: str, r: int, text: str, t: int) -> bool:
    while True:
        if r == len(pattern):
            return True
        if r + 1 < len(pattern) and pattern[r + 1] == "*":
            return _match_star(pattern[r], pattern, r + 2, text, t)
        if pattern[r] == "$" and r + 1 == len(pattern):
            return t == len(text)
        if t < len(text) and (pattern[r] == "." or pattern[r] == text[t]):
            r += 1
            t += 1
            continue
        return False


def _match_star(c: str, pattern: str, r: int, text: str, t: int) -> bool:
    while True:
        if _match_here(pattern, r, text, t):
            return True
        if t < len(text) and (text[t] == c or c == "."):
            t += 1
        else:
            return False


def grep(pattern: str, stream: TextIO) -> Iterator[str]:
    """Yield the newline-terminated lines of ``stream`` that match ``pattern``.

    A final line without a newline is not examined, and reading stops if a
    line grows too long to fit in the line buffer.
    """
    pending = ""
    while True:
        room = _BUFSIZE - 1 - len(pending)
        if room <= 0:
            return
        chunk = stream.read(room)
        if not chunk:
            return
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                yield line + "\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run grep over the named files or standard input; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, paths = args[0], args[1:]
    if not paths:
        sys.stdout.writelines(grep(pattern, sys.stdin))
        return 0
    for path in paths:
        try:
            handle = open(path, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with handle:
            sys.stdout.writelines(grep(pattern, handle))
    return 0