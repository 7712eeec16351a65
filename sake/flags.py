"""Option sets collected from the command line for each sake command."""

from __future__ import annotations

from dataclasses import dataclass, field

_UINT32_MAX = 2**32 - 1
_UINT8_MAX = 2**8 - 1


@dataclass
class ListFlags:
    output: str = ""
    theme: str = ""


@dataclass
class ServerFlags:
    tags: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    edit: bool = False
    regex: str = ""
    invert: bool = False
    all_headers: bool = False


@dataclass
class TargetFlags:
    headers: list[str] = field(default_factory=list)
    edit: bool = False


@dataclass
class SpecFlags:
    headers: list[str] = field(default_factory=list)
    edit: bool = False


@dataclass
class TagFlags:
    headers: list[str] = field(default_factory=list)


@dataclass
class TaskFlags:
    headers: list[str] = field(default_factory=list)
    edit: bool = False
    all_headers: bool = False


@dataclass
class RunFlags:
    """Options of the ``run`` and ``exec`` commands."""

    # Flags
    edit: bool = False
    dry_run: bool = False
    describe: bool = False
    silent: bool = False

    # Target
    all: bool = False
    regex: str = ""
    servers: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    cwd: bool = False
    invert: bool = False
    limit: int = 0
    limit_p: int = 0

    # Config
    known_hosts_file: str = ""

    # Task
    theme: str = ""
    tty: bool = False
    attach: bool = False
    local: bool = False

    # Server
    identity_file: str = ""
    password: str = ""

    # Spec
    parallel: bool = False
    any_errors_fatal: bool = False
    ignore_errors: bool = False
    ignore_unreachable: bool = False
    omit_empty: bool = False
    output: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.limit <= _UINT32_MAX:
            raise ValueError(f"limit must be between 0 and {_UINT32_MAX}, got {self.limit}")
        if not 0 <= self.limit_p <= _UINT8_MAX:
            raise ValueError(f"limit_p must be between 0 and {_UINT8_MAX}, got {self.limit_p}")


@dataclass
class SetRunFlags:
    """Which boolean run options were given explicitly on the command line."""

    all: bool = False
    invert: bool = False
    parallel: bool = False
    omit_empty: bool = False
    local: bool = False
    tty: bool = False
    any_errors_fatal: bool = False
    ignore_errors: bool = False
    ignore_unreachable: bool = False