"""Sv39 page tables built over a simulated pool of physical pages."""

from __future__ import annotations

import struct

from xvkit.riscv import (
    CLINT,
    KERNBASE,
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    TRAMPOLINE,
    UART0,
    VIRTIO0,
    Pte,
    make_satp,
    pa2pte,
    pg_round_down,
    pg_round_up,
    pte2pa,
    pte_flags,
    px,
)

_MASK64 = (1 << 64) - 1
_PTE_SIZE = 8
_NPTES = PGSIZE // _PTE_SIZE
_TABLE = struct.Struct(f"<{_NPTES}Q")
_JUNK = b"\x01" * PGSIZE


class VmPanic(RuntimeError):
    """An invariant of the paging code was violated."""


class OutOfMemoryError(MemoryError):
    """No free physical page was left."""


class BadAddressError(ValueError):
    """An address does not refer to accessible memory."""


class PhysicalMemory:
    """A pool of physical pages handed out one page at a time."""

    def __init__(self, npages: int = 1024, base: int = KERNBASE) -> None:
        if npages <= 0:
            raise ValueError("npages must be positive")
        if base % PGSIZE:
            raise ValueError("base must be page aligned")
        self.base = base
        self.npages = npages
        self._frames = [bytearray(PGSIZE) for _ in range(npages)]
        self._free = [base + i * PGSIZE for i in reversed(range(npages))]
        self._allocated: set[int] = set()

    @property
    def available(self) -> int:
        """Number of pages that can still be allocated."""
        return len(self._free)

    def __contains__(self, pa: object) -> bool:
        return isinstance(pa, int) and self.base <= pa < self.base + self.npages * PGSIZE

    def alloc(self) -> int:
        """Allocate a zero-filled page and return its physical address."""
        if not self._free:
            raise OutOfMemoryError("out of physical pages")
        pa = self._free.pop()
        frame, _ = self._frame(pa)
        frame[:] = bytes(PGSIZE)
        self._allocated.add(pa)
        return pa

    def free(self, pa: int) -> None:
        """Return a page to the pool, filling it with junk."""
        if pa % PGSIZE or pa not in self or pa not in self._allocated:
            raise VmPanic("kfree")
        self._allocated.remove(pa)
        frame, _ = self._frame(pa)
        frame[:] = _JUNK
        self._free.append(pa)

    def read(self, pa: int, n: int) -> bytes:
        """Read ``n`` bytes starting at physical address ``pa``."""
        if n < 0:
            raise ValueError("negative length")
        out = bytearray()
        while n > 0:
            frame, off = self._frame(pa)
            chunk = min(n, PGSIZE - off)
            out += frame[off : off + chunk]
            pa += chunk
            n -= chunk
        return bytes(out)

    def write(self, pa: int, data: bytes) -> None:
        """Write ``data`` starting at physical address ``pa``."""
        view = memoryview(bytes(data))
        while view:
            frame, off = self._frame(pa)
            chunk = min(len(view), PGSIZE - off)
            frame[off : off + chunk] = view[:chunk]
            pa += chunk
            view = view[chunk:]

    def _frame(self, pa: int) -> tuple[bytearray, int]:
        if pa not in self:
            raise BadAddressError(f"physical address {pa:#x} outside memory")
        index, off = divmod(pa - self.base, PGSIZE)
        return self._frames[index], off

    def _load_u64(self, pa: int) -> int:
        frame, off = self._frame(pa)
        return int.from_bytes(frame[off : off + _PTE_SIZE], "little")

    def _store_u64(self, pa: int, value: int) -> None:
        frame, off = self._frame(pa)
        frame[off : off + _PTE_SIZE] = (value & _MASK64).to_bytes(_PTE_SIZE, "little")


class PageTable:
    """A three-level Sv39 page table whose pages live in ``memory``."""

    def __init__(self, memory: PhysicalMemory, root: int | None = None) -> None:
        self.memory = memory
        self.root = memory.alloc() if root is None else root

    @property
    def satp(self) -> int:
        """The satp register value that selects this table."""
        return make_satp(self.root)

    def walk(self, va: int, alloc: bool = False) -> int | None:
        """Physical address of the level-0 PTE for ``va``.

        Returns None when an intermediate table is missing and ``alloc`` is
        false; raises OutOfMemoryError when one cannot be allocated.
        """
        if not 0 <= va < MAXVA:
            raise VmPanic("walk")
        mem = self.memory
        table = self.root
        for level in (2, 1):
            addr = table + px(level, va) * _PTE_SIZE
            pte = mem._load_u64(addr)
            if pte & Pte.V:
                table = pte2pa(pte)
            else:
                if not alloc:
                    return None
                table = mem.alloc()
                mem._store_u64(addr, pa2pte(table) | Pte.V)
        return table + px(0, va) * _PTE_SIZE

    def walkaddr(self, va: int) -> int | None:
        """Physical address of a user page, or None if it is not mapped for users."""
        if not 0 <= va < MAXVA:
            return None
        addr = self.walk(va)
        if addr is None:
            return None
        pte = self.memory._load_u64(addr)
        if not pte & Pte.V or not pte & Pte.U:
            return None
        return pte2pa(pte)

    def translate(self, va: int) -> int:
        """Translate a virtual address to a physical one, keeping the page offset."""
        off = va % PGSIZE
        addr = self.walk(va)
        if addr is None:
            raise VmPanic("kvmpa")
        pte = self.memory._load_u64(addr)
        if not pte & Pte.V:
            raise VmPanic("kvmpa")
        return pte2pa(pte) + off

    def map_pages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``[va, va+size)`` to physical memory starting at ``pa``."""
        if size <= 0:
            raise VmPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            addr = self.walk(a, alloc=True)
            if self.memory._load_u64(addr) & Pte.V:
                raise VmPanic("remap")
            self.memory._store_u64(addr, pa2pte(pa) | int(perm) | Pte.V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool = False) -> None:
        """Remove ``npages`` existing mappings from ``va``, optionally freeing the pages."""
        if va % PGSIZE:
            raise VmPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a)
            if addr is None:
                raise VmPanic("uvmunmap: walk")
            pte = self.memory._load_u64(addr)
            if not pte & Pte.V:
                raise VmPanic("uvmunmap: not mapped")
            if pte_flags(pte) == Pte.V:
                raise VmPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.free(pte2pa(pte))
            self.memory._store_u64(addr, 0)

    def init_user(self, src: bytes) -> None:
        """Load the first process's code into a page at address zero."""
        if len(src) >= PGSIZE:
            raise VmPanic("inituvm: more than a page")
        mem = self.memory.alloc()
        self.map_pages(0, PGSIZE, mem, Pte.W | Pte.R | Pte.X | Pte.U)
        self.memory.write(mem, src)

    def grow(self, oldsz: int, newsz: int) -> int:
        """Allocate user pages to grow from ``oldsz`` to ``newsz``; return the new size."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.alloc()
            except OutOfMemoryError:
                self.shrink(a, oldsz)
                raise
            try:
                self.map_pages(a, PGSIZE, mem, Pte.W | Pte.X | Pte.R | Pte.U)
            except OutOfMemoryError:
                self.memory.free(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Free user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, do_free=True)
        return newsz

    def free_walk(self) -> None:
        """Free every page-table page; all leaf mappings must already be gone."""
        self._free_table(self.root)

    def _free_table(self, table: int) -> None:
        for index, pte in enumerate(_TABLE.unpack(self.memory.read(table, PGSIZE))):
            if pte & Pte.V and not pte & (Pte.R | Pte.W | Pte.X):
                self._free_table(pte2pa(pte))
                self.memory._store_u64(table + index * _PTE_SIZE, 0)
            elif pte & Pte.V:
                raise VmPanic("freewalk: leaf")
        self.memory.free(table)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then the page-table pages."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, do_free=True)
        self.free_walk()

    def copy_to(self, other: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of memory and mappings into ``other``."""
        copied = 0
        try:
            for i in range(0, sz, PGSIZE):
                addr = self.walk(i)
                if addr is None:
                    raise VmPanic("uvmcopy: pte should exist")
                pte = self.memory._load_u64(addr)
                if not pte & Pte.V:
                    raise VmPanic("uvmcopy: page not present")
                mem = other.memory.alloc()
                other.memory.write(mem, self.memory.read(pte2pa(pte), PGSIZE))
                try:
                    other.map_pages(i, PGSIZE, mem, pte_flags(pte))
                except OutOfMemoryError:
                    other.memory.free(mem)
                    raise
                copied = i + PGSIZE
        except OutOfMemoryError:
            other.unmap(0, copied // PGSIZE, do_free=True)
            raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user mode."""
        addr = self.walk(va)
        if addr is None:
            raise VmPanic("uvmclear")
        self.memory._store_u64(addr, self.memory._load_u64(addr) & ~Pte.U)

    def copy_out(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        dstva &= _MASK64
        view = memoryview(bytes(data))
        while view:
            va0 = pg_round_down(dstva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddressError(f"user address {va0:#x} not mapped")
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copy_in(self, srcva: int, length: int) -> bytes:
        """Copy ``length`` bytes from user virtual address ``srcva``."""
        srcva &= _MASK64
        out = bytearray()
        while length > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddressError(f"user address {va0:#x} not mapped")
            n = min(PGSIZE - (srcva - va0), length)
            out += self.memory.read(pa0 + (srcva - va0), n)
            length -= n
            srcva = va0 + PGSIZE
        return bytes(out)

    def copy_in_str(self, srcva: int, max: int) -> bytes:
        """Copy a NUL-terminated string of at most ``max`` bytes from user space."""
        srcva &= _MASK64
        out = bytearray()
        while max > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddressError(f"user address {va0:#x} not mapped")
            n = min(PGSIZE - (srcva - va0), max)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            end = chunk.find(b"\0")
            if end >= 0:
                out += chunk[:end]
                return bytes(out)
            out += chunk
            max -= n
            srcva = va0 + PGSIZE
        raise BadAddressError("string not terminated within the limit")


def kernel_pagetable(memory: PhysicalMemory, etext: int, trampoline: int) -> PageTable:
    """Build the kernel's direct-mapped page table."""
    rw = Pte.R | Pte.W
    rx = Pte.R | Pte.X
    regions = [
        (UART0, UART0, PGSIZE, rw),
        (VIRTIO0, VIRTIO0, PGSIZE, rw),
        (CLINT, CLINT, 0x10000, rw),
        (PLIC, PLIC, 0x400000, rw),
        (KERNBASE, KERNBASE, etext - KERNBASE, rx),
        (etext, etext, PHYSTOP - etext, rw),
        (TRAMPOLINE, trampoline, PGSIZE, rx),
    ]
    try:
        table = PageTable(memory)
        for va, pa, size, perm in regions:
            table.map_pages(va, size, pa, perm)
    except OutOfMemoryError as exc:
        raise VmPanic("kvmmap") from exc
    return table