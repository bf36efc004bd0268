"""First-fit free-list allocator over a simulated growing heap."""

from __future__ import annotations

from typing import Optional

HEADER_SIZE = 16  # bytes per allocation unit, one block header
MORECORE_UNITS = 4096  # fewest units requested from the break at a time

_BASE = 0  # address of the list head, below every heap block


class Heap:
    """Allocator whose memory comes from a break that only grows.

    Addresses are plain integers; ``limit`` caps how many bytes the break may
    grow by, or is None for no cap.
    """

    def __init__(self, start: int = 0x1000, limit: Optional[int] = None) -> None:
        if start <= _BASE or start % HEADER_SIZE:
            raise ValueError("start must be positive and aligned to the header size")
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        self.start = start
        self.limit = limit
        self._brk = start
        # header address -> [next free header, size in units]
        self._headers: dict[int, list[int]] = {}
        self._allocated: set[int] = set()
        self._freep: Optional[int] = None

    @property
    def brk(self) -> int:
        """Current end of the heap."""
        return self._brk

    def _next(self, p: int) -> int:
        return self._headers[p][0]

    def _size(self, p: int) -> int:
        return self._headers[p][1]

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the address of the block."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._headers[_BASE] = [_BASE, 0]
            self._freep = _BASE
        prevp = self._freep
        p = self._next(prevp)
        while True:
            size = self._size(p)
            if size >= nunits:
                if size == nunits:
                    self._headers[prevp][0] = self._next(p)
                else:
                    self._headers[p][1] = size - nunits
                    p += (size - nunits) * HEADER_SIZE
                    self._headers[p] = [_BASE, nunits]
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
            prevp, p = p, self._next(p)

    def _morecore(self, nu: int) -> int:
        nu = max(nu, MORECORE_UNITS)
        nbytes = nu * HEADER_SIZE
        if self.limit is not None and self._brk + nbytes - self.start > self.limit:
            raise MemoryError("heap limit reached")
        hp = self._brk
        self._brk += nbytes
        self._headers[hp] = [_BASE, nu]
        self._allocated.add(hp)
        self.free(hp + HEADER_SIZE)
        assert self._freep is not None
        return self._freep

    def free(self, ap: int) -> None:
        """Return the block at ``ap`` to the free list, merging with neighbours."""
        bp = ap - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"address {ap:#x} is not an allocated block")
        self._allocated.remove(bp)
        assert self._freep is not None
        p = self._freep
        while not (p < bp < self._next(p)):
            if p >= self._next(p) and (bp > p or bp < self._next(p)):
                break
            p = self._next(p)
        following = self._next(p)
        if bp + self._size(bp) * HEADER_SIZE == following:
            self._headers[bp][1] += self._size(following)
            self._headers[bp][0] = self._next(following)
            del self._headers[following]
        else:
            self._headers[bp][0] = following
        if p + self._size(p) * HEADER_SIZE == bp:
            self._headers[p][1] += self._size(bp)
            self._headers[p][0] = self._next(bp)
            del self._headers[bp]
        else:
            self._headers[p][0] = bp
        self._freep = p

    def free_blocks(self) -> list[tuple[int, int]]:
        """Free blocks in address order, as (header address, size in bytes)."""
        if self._freep is None:
            return []
        blocks = []
        p = self._next(_BASE)
        while p != _BASE:
            blocks.append((p, self._size(p) * HEADER_SIZE))
            p = self._next(p)
        return blocks