"""User tools, shell parser, ELF headers, allocator and Sv39 page tables of a small RISC-V teaching system."""

__version__ = "0.1.0"