"""Formatted output understanding %d, %l, %x, %p, %s and %c."""

from __future__ import annotations

import operator
from typing import Any, TextIO

_DIGITS = "0123456789ABCDEF"
_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1


def _int32(value: Any) -> int:
    v = operator.index(value) & _MASK32
    return v - (1 << 32) if v & 0x80000000 else v


def _format_int(value: Any, base: int, signed: bool) -> str:
    xx = _int32(value)
    if signed and xx < 0:
        negative, x = True, -xx
    else:
        negative, x = False, xx & _MASK32
    digits = []
    while True:
        digits.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _format_ptr(value: Any) -> str:
    return "0x" + format(operator.index(value) & _MASK64, "016X")


def _format_str(value: Any) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", "surrogateescape")
    return str(value).split("\0", 1)[0]


def _format_char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c requires a single character")
        return value
    return chr(operator.index(value) & 0xFF)


def sprintf(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the text.

    Unknown conversions are copied through with their percent sign; a lone
    percent sign at the end of ``fmt`` produces nothing.
    """
    values = iter(args)

    def take() -> Any:
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out: list[str] = []
    in_conversion = False
    for c in fmt:
        if not in_conversion:
            if c == "%":
                in_conversion = True
            else:
                out.append(c)
            continue
        in_conversion = False
        if c == "d":
            out.append(_format_int(take(), 10, True))
        elif c == "l":
            out.append(_format_int(take(), 10, False))
        elif c == "x":
            out.append(_format_int(take(), 16, False))
        elif c == "p":
            out.append(_format_ptr(take()))
        elif c == "s":
            out.append(_format_str(take()))
        elif c == "c":
            out.append(_format_char(take()))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Format ``args`` according to ``fmt`` and write the text to ``stream``."""
    stream.write(sprintf(fmt, *args))