"""Small string helpers: number conversion, comparison and line reading."""

from __future__ import annotations

from typing import TextIO, Union

_DECIMAL = "0123456789"


def atoi(s: str) -> int:
    """Value of the leading decimal digits of ``s``; no sign or spaces are accepted."""
    n = 0
    for c in s:
        if c not in _DECIMAL:
            break
        n = n * 10 + _DECIMAL.index(c)
    return n


def itoa(n: int) -> str:
    """Decimal text of ``n``, with a leading minus sign when negative."""
    negative = n < 0
    n = -n if negative else n
    digits = []
    while True:
        digits.append(_DECIMAL[n % 10])
        n //= 10
        if n == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _c_bytes(s: Union[str, bytes]) -> bytes:
    raw = s.encode("utf-8", "surrogateescape") if isinstance(s, str) else bytes(s)
    return raw.split(b"\0", 1)[0]


def strcmp(p: Union[str, bytes], q: Union[str, bytes]) -> int:
    """Compare two strings bytewise up to their first NUL.

    Returns the difference of the first differing unsigned bytes, or 0.
    """
    a, b = _c_bytes(p), _c_bytes(q)
    for x, y in zip(a, b):
        if x != y:
            return x - y
    if len(a) == len(b):
        return 0
    return a[len(b)] if len(a) > len(b) else -b[len(a)]


def read_line(stream: TextIO, max: int) -> str:
    """Read at most ``max - 1`` characters, stopping after a newline or carriage return."""
    chars: list[str] = []
    while len(chars) + 1 < max:
        c = stream.read(1)
        if not c:
            break
        chars.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(chars)