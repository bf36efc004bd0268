[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvkit"
version = "0.1.0"
description = "A small teaching operating system's user tools, shell parser, ELF headers and Sv39 page tables, in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "riscv",
    "sv39",
    "page-table",
    "shell",
    "grep",
    "elf",
    "malloc",
    "teaching",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xv-grep = "xvkit.grep:main"
xv-cat = "xvkit.coreutils:cat_main"
xv-echo = "xvkit.coreutils:echo_main"
xv-wc = "xvkit.coreutils:wc_main"
xv-find = "xvkit.fileutils:find_main"
xv-ls = "xvkit.fileutils:ls_main"
xv-kill = "xvkit.fileutils:kill_main"
xv-ln = "xvkit.fileutils:ln_main"
xv-mkdir = "xvkit.fileutils:mkdir_main"
xv-rm = "xvkit.fileutils:rm_main"
xv-sleep = "xvkit.fileutils:sleep_main"

[tool.hatch.build.targets.wheel]
packages = ["xvkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
