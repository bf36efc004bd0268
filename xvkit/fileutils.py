"""The find, ls, kill, ln, mkdir, rm and sleep commands over the host file system."""

from __future__ import annotations

import enum
import os
import signal
import stat as stat_module
import sys
import time
from typing import Iterator, Optional, Sequence

from xvkit.fmt import sprintf
from xvkit.ulib import atoi

DIRSIZ = 14  # longest directory-entry name
TICK_SECONDS = 0.1  # length of one clock tick
_PATHBUF = 512  # room for a path being built while walking a directory

_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


class FileKind(enum.IntEnum):
    """Kind of an inode, as reported in listings."""

    DIR = 1
    FILE = 2
    DEVICE = 3


def _kind(st: os.stat_result) -> FileKind:
    if stat_module.S_ISDIR(st.st_mode):
        return FileKind.DIR
    if stat_module.S_ISREG(st.st_mode):
        return FileKind.FILE
    return FileKind.DEVICE


def _too_long(path: str) -> bool:
    return len(path.encode("utf-8", "surrogateescape")) + 1 + DIRSIZ + 1 > _PATHBUF


def fmtname(path: str, pad: bool = False) -> str:
    """Last component of ``path``; with ``pad``, blank-padded to DIRSIZ when shorter."""
    name = path[path.rfind("/") + 1 :]
    if not pad or len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def find(path: str, name: str) -> Iterator[str]:
    """Yield the output lines of a search for entries called ``name`` under ``path``.

    Matching paths are yielded in directory-walk order, together with any
    "path too long" notices; failures to open are reported on standard error.
    """
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"find: cannot open {path}\n")
        return
    kind = _kind(st)
    if kind is FileKind.FILE:
        if fmtname(path) == name:
            yield path
    elif kind is FileKind.DIR:
        if _too_long(path):
            yield "ls: path too long"
            return
        if fmtname(path) == name:
            yield path
        try:
            entries = sorted(os.listdir(path))
        except OSError:
            sys.stderr.write(f"find: cannot open {path}\n")
            return
        for entry in entries:
            if entry in (".", ".."):
                continue
            yield from find(f"{path}/{entry}", name)


def ls(path: str) -> Iterator[str]:
    """Yield the listing lines for ``path``: name, kind, inode number and size.

    A failure to open ``path`` is reported on standard error.
    """
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    kind = _kind(st)
    if kind is FileKind.FILE:
        yield sprintf("%s %d %d %l", fmtname(path, pad=True), kind, st.st_ino, st.st_size)
    elif kind is FileKind.DIR:
        if _too_long(path):
            yield "ls: path too long"
            return
        try:
            entries = [".", ".."] + sorted(os.listdir(path))
        except OSError:
            sys.stderr.write(f"ls: cannot open {path}\n")
            return
        for entry in entries:
            full = f"{path}/{entry}"
            try:
                est = os.stat(full)
            except OSError:
                yield f"ls: cannot stat {full}"
                continue
            yield sprintf("%s %d %d %d", fmtname(full, pad=True), _kind(est), est.st_ino, est.st_size)


def _args(argv: Optional[Sequence[str]]) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def find_main(argv: Optional[Sequence[str]] = None) -> int:
    """Search a tree for a name: ``find <path> <file_name>``."""
    args = _args(argv)
    if len(args) < 2:
        sys.stderr.write("usage find <path> <file_name>")
        return 0
    for line in find(args[0], args[1]):
        sys.stdout.write(line + "\n")
    return 0


def ls_main(argv: Optional[Sequence[str]] = None) -> int:
    """List the named paths, or the current directory."""
    args = _args(argv) or ["."]
    for path in args:
        for line in ls(path):
            sys.stdout.write(line + "\n")
    return 0


def kill_main(argv: Optional[Sequence[str]] = None) -> int:
    """Kill each process whose id is given."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            continue  # names no process
        try:
            os.kill(pid, _KILL_SIGNAL)
        except OSError:
            pass
    return 0


def ln_main(argv: Optional[Sequence[str]] = None) -> int:
    """Make a hard link: ``ln old new``."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv: Optional[Sequence[str]] = None) -> int:
    """Create each named directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            sys.stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0


def rm_main(argv: Optional[Sequence[str]] = None) -> int:
    """Remove each named file or empty directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


def sleep_main(argv: Optional[Sequence[str]] = None) -> int:
    """Sleep for the given number of clock ticks."""
    args = _args(argv)
    if len(args) != 1:
        sys.stdout.write("Sleep needs one argument!\n")
        return -1
    time.sleep(atoi(args[0]) * TICK_SECONDS)
    sys.stdout.write("(nothing happens for a little while)\n")
    return 0