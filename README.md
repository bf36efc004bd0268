# xvkit

Pieces of a small RISC-V teaching operating system, written as plain Python:

- `xvkit.riscv` – Sv39 address arithmetic, PTE bits (`Pte`), control-register
  bits and the machine's memory-layout constants (`pg_round_up`, `px`,
  `pa2pte`, `kstack`, `plic_sclaim`, ...).
- `xvkit.elf` – read and write ELF file and program headers
  (`ElfHeader`, `ProgramHeader`, `ElfFormatError`).
- `xvkit.vm` – a simulated physical memory and three-level page tables
  (`PhysicalMemory`, `PageTable`, `kernel_pagetable`), with growing,
  shrinking, copying and user/kernel data transfer.
- `xvkit.shell` – the shell's tokenizer and command parser
  (`tokenize`, `parse_command`, `cd_target`) producing `ExecCmd`,
  `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd` trees.
- `xvkit.grep` – the tiny regular-expression matcher supporting
  `^ . * $`, and a line filter built on it.
- `xvkit.fmt` – the minimal `printf` (`sprintf`, `fprintf`; `%d %l %x %p %s %c %%`).
- `xvkit.ulib` – `atoi`, `itoa`, `strcmp`, `read_line`.
- `xvkit.umalloc` – a first-fit free-list allocator over a simulated heap (`Heap`).
- `xvkit.coreutils`, `xvkit.fileutils` – the user programs cat, echo, wc,
  find, ls, kill, ln, mkdir, rm and sleep.

No third-party libraries are needed.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Library use

```python
from xvkit.grep import match
from xvkit.fmt import sprintf
from xvkit.ulib import atoi, itoa
from xvkit.shell import parse_command
from xvkit.riscv import pg_round_up, px

match("^ab*c$", "abbbc")         # True
sprintf("%d %x %s", -12, 255, "hi")
atoi("123abc")                   # 123
itoa(-42)                        # "-42"
pg_round_up(4097)                # 8192
px(2, 0x40000000)                # 1, the level-2 index of the address

tree = parse_command("cat < in | grep foo > out; echo done &")
```

Page tables live in a simulated physical memory:

```python
from xvkit.vm import PhysicalMemory, PageTable

memory = PhysicalMemory()
table = PageTable(memory)
size = table.grow(0, 8192)
table.copy_out(100, b"hello\0")
table.copy_in_str(100, 64)       # b"hello"
table.free(size)
```

Paging invariants that are broken raise `VmPanic`; running out of pages
raises `OutOfMemoryError`; touching unmapped user memory raises
`BadAddressError`.

## Commands

Each user program is installed as a command working on the host's files
and processes:

| Command    | Does                                                   |
|------------|--------------------------------------------------------|
| `xv-cat`   | copy files (or standard input) to standard output      |
| `xv-echo`  | print its arguments                                    |
| `xv-wc`    | count lines, words and bytes                           |
| `xv-grep`  | print lines matching a pattern                         |
| `xv-find`  | find files by name under a directory                   |
| `xv-ls`    | list a directory or file: name, kind, inode, size      |
| `xv-kill`  | kill processes by pid                                  |
| `xv-ln`    | make a hard link                                       |
| `xv-mkdir` | make directories                                       |
| `xv-rm`    | remove files or empty directories                      |
| `xv-sleep` | pause for a number of ticks (a tick is 0.1 seconds)    |

For example:

```
xv-echo hello world
xv-grep '^a.*z$' words.txt
xv-wc README.md
xv-find . README.md
```

## What it does not do

There is no kernel here to boot and no shell to run commands: `xvkit.shell`
parses command lines into trees but executes nothing. There are no
process-demonstration commands (such as bouncing a message between two
processes or stressing the file system with several writers), no file
system image, and the page tables and heap work only on the simulated
memory in `xvkit.vm` and `xvkit.umalloc`.