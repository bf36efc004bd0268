"""ELF64 file header and program header records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word

ELF_PROG_LOAD = 1


class ProgramFlag(enum.IntFlag):
    """Permission bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a well-formed ELF record."""


def _pack(fmt: struct.Struct, *values: object) -> bytes:
    try:
        return fmt.pack(*values)
    except struct.error as exc:
        raise ElfFormatError(f"field out of range: {exc}") from exc


@dataclass(frozen=True)
class ProgramHeader:
    """One entry of the program header table."""

    type: int = ELF_PROG_LOAD
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<IIQQQQQQ")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProgramHeader":
        """Decode a program header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"program header needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the program header."""
        return _pack(
            self._STRUCT,
            self.type,
            self.flags,
            self.off,
            self.vaddr,
            self.paddr,
            self.filesz,
            self.memsz,
            self.align,
        )

    @property
    def is_loadable(self) -> bool:
        """Whether the segment is to be loaded into memory."""
        return self.type == ELF_PROG_LOAD

    @property
    def permissions(self) -> ProgramFlag:
        """The segment's permission bits."""
        return ProgramFlag(self.flags & 0x7)


@dataclass(frozen=True)
class ElfHeader:
    """The ELF64 file header."""

    ident: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<I12sHHIQQQIHHHHHH")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "ElfHeader":
        """Decode and validate a file header from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ElfFormatError(f"ELF header needs {cls.SIZE} bytes, got {len(data)}")
        magic, *fields = cls._STRUCT.unpack_from(data)
        if magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {magic:#010x}")
        return cls(*fields)

    def to_bytes(self) -> bytes:
        """Encode the file header, magic number first."""
        if len(self.ident) != 12:
            raise ElfFormatError("ident must be exactly 12 bytes")
        return _pack(
            self._STRUCT,
            ELF_MAGIC,
            bytes(self.ident),
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )

    def program_headers(self, data: bytes) -> list[ProgramHeader]:
        """Decode the program header table this header describes within ``data``."""
        headers = []
        for index in range(self.phnum):
            start = self.phoff + index * ProgramHeader.SIZE
            chunk = data[start : start + ProgramHeader.SIZE]
            if len(chunk) < ProgramHeader.SIZE:
                raise ElfFormatError(f"program header {index} runs past end of file")
            headers.append(ProgramHeader.from_bytes(chunk))
        return headers