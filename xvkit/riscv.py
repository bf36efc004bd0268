"""RISC-V Sv39 paging helpers, control-register bits and the qemu virt memory layout."""

from __future__ import annotations

import enum

_MASK64 = (1 << 64) - 1

# Kernel parameters.
NPROC = 64
NCPU = 8
NOFILE = 16
NFILE = 100
NINODE = 50
NDEV = 10
ROOTDEV = 1
MAXARG = 32
MAXOPBLOCKS = 10
LOGSIZE = MAXOPBLOCKS * 3
NBUF = MAXOPBLOCKS * 3
FSSIZE = 1000
MAXPATH = 128

# Machine status register.
MSTATUS_MPP_MASK = 3 << 11
MSTATUS_MPP_M = 3 << 11
MSTATUS_MPP_S = 1 << 11
MSTATUS_MPP_U = 0 << 11
MSTATUS_MIE = 1 << 3

# Supervisor status register.
SSTATUS_SPP = 1 << 8
SSTATUS_SPIE = 1 << 5
SSTATUS_UPIE = 1 << 4
SSTATUS_SIE = 1 << 1
SSTATUS_UIE = 1 << 0

# Supervisor interrupt enable.
SIE_SEIE = 1 << 9
SIE_STIE = 1 << 5
SIE_SSIE = 1 << 1

# Machine interrupt enable.
MIE_MEIE = 1 << 11
MIE_MTIE = 1 << 7
MIE_MSIE = 1 << 3

SATP_SV39 = 8 << 60

PGSIZE = 4096
PGSHIFT = 12
PXMASK = 0x1FF

# One beyond the highest usable virtual address (one bit less than Sv39 allows).
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)


class Pte(enum.IntFlag):
    """Page-table entry permission and status bits."""

    V = 1 << 0
    R = 1 << 1
    W = 1 << 2
    X = 1 << 3
    U = 1 << 4


# Physical memory layout of the qemu virt machine.
UART0 = 0x10000000
UART0_IRQ = 10
VIRTIO0 = 0x10001000
VIRTIO0_IRQ = 1
CLINT = 0x2000000
CLINT_MTIME = CLINT + 0xBFF8
PLIC = 0x0C000000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000
KERNBASE = 0x80000000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

# Virtual layout shared by user and kernel space.
TRAMPOLINE = MAXVA - PGSIZE
TRAPFRAME = TRAMPOLINE - PGSIZE


def pg_round_up(sz: int) -> int:
    """Round a size up to the next page boundary."""
    return ((sz + PGSIZE - 1) & ~(PGSIZE - 1)) & _MASK64


def pg_round_down(a: int) -> int:
    """Round an address down to its page boundary."""
    return (a & ~(PGSIZE - 1)) & _MASK64


def pa2pte(pa: int) -> int:
    """Shift a physical address into the PPN field of a PTE."""
    return ((pa & _MASK64) >> 12) << 10


def pte2pa(pte: int) -> int:
    """Extract the physical address a PTE points to."""
    return ((pte & _MASK64) >> 10) << 12


def pte_flags(pte: int) -> int:
    """Return the low ten flag bits of a PTE."""
    return pte & 0x3FF


def px_shift(level: int) -> int:
    """Bit position of the page-table index for the given level."""
    return PGSHIFT + 9 * level


def px(level: int, va: int) -> int:
    """Extract the 9-bit page-table index of a virtual address at a level."""
    return ((va & _MASK64) >> px_shift(level)) & PXMASK


def make_satp(pagetable: int) -> int:
    """Build a satp value selecting Sv39 with the given root page table."""
    return SATP_SV39 | ((pagetable & _MASK64) >> 12)


def kstack(p: int) -> int:
    """Virtual address of the kernel stack of process slot ``p``."""
    return TRAMPOLINE - (p + 1) * 2 * PGSIZE


def clint_mtimecmp(hartid: int) -> int:
    """Address of a hart's timer-compare register."""
    return CLINT + 0x4000 + 8 * hartid


def plic_menable(hart: int) -> int:
    """Address of a hart's machine-mode PLIC enable bits."""
    return PLIC + 0x2000 + hart * 0x100


def plic_senable(hart: int) -> int:
    """Address of a hart's supervisor-mode PLIC enable bits."""
    return PLIC + 0x2080 + hart * 0x100


def plic_mpriority(hart: int) -> int:
    """Address of a hart's machine-mode PLIC priority threshold."""
    return PLIC + 0x200000 + hart * 0x2000


def plic_spriority(hart: int) -> int:
    """Address of a hart's supervisor-mode PLIC priority threshold."""
    return PLIC + 0x201000 + hart * 0x2000


def plic_mclaim(hart: int) -> int:
    """Address of a hart's machine-mode PLIC claim register."""
    return PLIC + 0x200004 + hart * 0x2000


def plic_sclaim(hart: int) -> int:
    """Address of a hart's supervisor-mode PLIC claim register."""
    return PLIC + 0x201004 + hart * 0x2000