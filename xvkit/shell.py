"""Command-line parser for the simple shell: pipes, lists, background jobs and redirection."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union

MAXARGS = 10

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"

WORD = "word"


class OpenFlag(enum.IntFlag):
    """Flags accepted by open()."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


@dataclass(frozen=True)
class Token:
    """A lexical token: a word, or one of | ( ) ; & < > >>."""

    kind: str
    text: str

    @property
    def is_word(self) -> bool:
        return self.kind == WORD


@dataclass
class ExecCmd:
    """Run a program with arguments; argv[0] names the program."""

    argv: list[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` reopened on ``file``."""

    cmd: "Command"
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run ``cmd`` in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class _Scanner:
    def __init__(self, line: str) -> None:
        # The line ends at the first NUL, as a C string would.
        self.line = line.split("\0", 1)[0]
        self.end = len(self.line)
        self.pos = 0

    def _skip_space(self, s: int) -> int:
        while s < self.end and self.line[s] in WHITESPACE:
            s += 1
        return s

    def next_token(self) -> Optional[Token]:
        s = self._skip_space(self.pos)
        if s >= self.end:
            self.pos = s
            return None
        start = s
        c = self.line[s]
        if c in "|();&<":
            s += 1
            kind = c
        elif c == ">":
            s += 1
            if s < self.end and self.line[s] == ">":
                s += 1
                kind = ">>"
            else:
                kind = ">"
        else:
            while s < self.end and self.line[s] not in WHITESPACE and self.line[s] not in SYMBOLS:
                s += 1
            kind = WORD
        text = self.line[start:s]
        self.pos = self._skip_space(s)
        return Token(kind, text)

    def peek(self, toks: str) -> bool:
        self.pos = self._skip_space(self.pos)
        return self.pos < self.end and self.line[self.pos] in toks

    @property
    def rest(self) -> str:
        return self.line[self.pos :]


def tokenize(line: str) -> list[Token]:
    """Split a command line into tokens."""
    scanner = _Scanner(line)
    tokens = []
    while (tok := scanner.next_token()) is not None:
        tokens.append(tok)
    return tokens


def parse_command(line: str) -> Command:
    """Parse a command line into a command tree."""
    scanner = _Scanner(line)
    cmd = _parse_line(scanner)
    scanner.peek("")
    if scanner.pos != scanner.end:
        raise ShellSyntaxError(f"syntax: leftovers: {scanner.rest}")
    return cmd


def _parse_line(sc: _Scanner) -> Command:
    cmd = _parse_pipe(sc)
    while sc.peek("&"):
        sc.next_token()
        cmd = BackCmd(cmd)
    if sc.peek(";"):
        sc.next_token()
        cmd = ListCmd(cmd, _parse_line(sc))
    return cmd


def _parse_pipe(sc: _Scanner) -> Command:
    cmd = _parse_exec(sc)
    if sc.peek("|"):
        sc.next_token()
        cmd = PipeCmd(cmd, _parse_pipe(sc))
    return cmd


_REDIRECTIONS = {
    "<": (OpenFlag.RDONLY, 0),
    ">": (OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1),
    ">>": (OpenFlag.WRONLY | OpenFlag.CREATE, 1),
}


def _parse_redirs(cmd: Command, sc: _Scanner) -> Command:
    while sc.peek("<>"):
        tok = sc.next_token()
        target = sc.next_token()
        if target is None or not target.is_word:
            raise ShellSyntaxError("missing file for redirection")
        mode, fd = _REDIRECTIONS[tok.kind]
        cmd = RedirCmd(cmd, target.text, mode, fd)
    return cmd


def _parse_block(sc: _Scanner) -> Command:
    if not sc.peek("("):
        raise ShellSyntaxError("parseblock")
    sc.next_token()
    cmd = _parse_line(sc)
    if not sc.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    sc.next_token()
    return _parse_redirs(cmd, sc)


def _parse_exec(sc: _Scanner) -> Command:
    if sc.peek("("):
        return _parse_block(sc)
    exec_cmd = ExecCmd()
    ret = _parse_redirs(exec_cmd, sc)
    while not sc.peek("|)&;"):
        tok = sc.next_token()
        if tok is None:
            break
        if not tok.is_word:
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(tok.text)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parse_redirs(ret, sc)
    return ret


def cd_target(line: str) -> Optional[str]:
    """Directory named by a ``cd`` line, or None if the line is not a cd command."""
    if not line.startswith("cd "):
        return None
    target = line[3:]
    if target.endswith(("\n", "\r")):
        target = target[:-1]
    return target