"""The cat, echo and wc commands."""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, NamedTuple, Optional, Sequence, TextIO

_BUFSIZE = 512
_WC_SPACE = frozenset(b" \r\t\n\v\0")


class _StreamError(OSError):
    """A copy failed while reading or writing."""


def cat(streams: Iterable[BinaryIO], out: BinaryIO) -> None:
    """Copy each binary stream in turn to ``out``."""
    for stream in streams:
        while True:
            try:
                chunk = stream.read(_BUFSIZE)
            except OSError as exc:
                raise _StreamError("read error") from exc
            if not chunk:
                break
            try:
                written = out.write(chunk)
            except OSError as exc:
                raise _StreamError("write error") from exc
            if written is not None and written != len(chunk):
                raise _StreamError("write error")


def echo(args: Sequence[str], out: TextIO) -> None:
    """Write the arguments separated by spaces and ended by a newline."""
    if args:
        out.write(" ".join(args) + "\n")


class WordCount(NamedTuple):
    """Line, word and byte counts."""

    lines: int
    words: int
    chars: int


class _Counter:
    def __init__(self) -> None:
        self.lines = self.words = self.chars = 0
        self.in_word = False

    def feed(self, data: bytes) -> None:
        self.chars += len(data)
        self.lines += data.count(b"\n")
        for byte in data:
            if byte in _WC_SPACE:
                self.in_word = False
            elif not self.in_word:
                self.words += 1
                self.in_word = True

    def result(self) -> WordCount:
        return WordCount(self.lines, self.words, self.chars)


def word_count(data: bytes) -> WordCount:
    """Count newlines, whitespace-separated words and bytes in ``data``."""
    counter = _Counter()
    counter.feed(bytes(data))
    return counter.result()


def _count_stream(stream: BinaryIO) -> WordCount:
    counter = _Counter()
    while chunk := stream.read(_BUFSIZE):
        counter.feed(chunk)
    return counter.result()


def cat_main(argv: Optional[Sequence[str]] = None) -> int:
    """Concatenate the named files, or standard input, to standard output."""
    args = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat([sys.stdin.buffer], out)
            return 0
        for path in args:
            try:
                handle = open(path, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {path}\n")
                return 1
            with handle:
                cat([handle], out)
        return 0
    except _StreamError as exc:
        sys.stderr.write(f"cat: {exc.args[0]}\n")
        return 1
    finally:
        out.flush()


def echo_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the arguments."""
    args = list(sys.argv[1:] if argv is None else argv)
    echo(args, sys.stdout)
    return 0


def wc_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print line, word and byte counts for the named files or standard input."""
    args = list(sys.argv[1:] if argv is None else argv)
    targets = args or [None]
    for path in targets:
        try:
            handle = sys.stdin.buffer if path is None else open(path, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {path}\n")
            return 1
        try:
            counts = _count_stream(handle)
        except OSError:
            sys.stdout.write("wc: read error\n")
            return 1
        finally:
            if path is not None:
                handle.close()
        name = "" if path is None else path
        sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")
    return 0