"""Error types raised by sake and helpers for turning them into exit codes."""

from __future__ import annotations

import sys
from collections.abc import Iterable

_RED = "\x1b[31m"
_RESET = "\x1b[0m"


def _quoted(items: Iterable[str]) -> str:
    return "`" + "`, `".join(items) + "`"


class SakeError(Exception):
    """Base class for errors reported by sake."""


class AlreadySakeDirectory(SakeError):
    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"`{directory}` is already a sake directory\n")


class ConfigEnvFailed(SakeError):
    def __init__(self, name: str, err: str) -> None:
        self.name = name
        self.err = err
        super().__init__(f"failed to evaluate env `{name}` \n  {err}")


class PasswordEvalFailed(SakeError):
    def __init__(self, err: str) -> None:
        self.err = err
        super().__init__(f"failed to evaluate password {err}")


class InventoryEvalFailed(SakeError):
    def __init__(self, err: str) -> None:
        self.err = err
        super().__init__(f"failed to run inventory command {err}")


class TagNotFound(SakeError):
    def __init__(self, tags: list[str]) -> None:
        self.tags = list(tags)
        super().__init__(f"cannot find tags {_quoted(self.tags)}")


class TargetsNotFound(SakeError):
    def __init__(self, targets: list[str]) -> None:
        self.targets = list(targets)
        super().__init__(f"cannot find targets {_quoted(self.targets)}")


class SpecsNotFound(SakeError):
    def __init__(self, specs: list[str]) -> None:
        self.specs = list(specs)
        super().__init__(f"cannot find specs {_quoted(self.specs)}")


class ServerNotFound(SakeError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(f"cannot find servers {_quoted(self.names)}")


class TaskNotFound(SakeError):
    def __init__(self, ids: list[str]) -> None:
        self.ids = list(ids)
        super().__init__(f"cannot find tasks {_quoted(self.ids)}")


class TaskMultipleDef(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"can only define one of the following for task `{name}`: cmd, task, tasks"
        )


class InvalidPercentInput(SakeError):
    def __init__(self) -> None:
        super().__init__("Percentage can only be between 0 and 100")


class InvalidLimit(SakeError):
    def __init__(self, max_servers: int, limit: int) -> None:
        self.max_servers = max_servers
        self.limit = limit
        super().__init__(
            f"The number of filtered servers is {max_servers}, but limit was set to {limit}"
        )


class ServerMultipleDef(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"can only define one of the following for server `{name}`: host, hosts"
        )


class TaskRefMultipleDef(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"found `task` and `cmd` definition for sub tasks in task `{name}`"
        )


class NoTaskRefDefined(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"found no `task` or `cmd` definition for sub-task in task `{name}`"
        )


class ThemeNotFound(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"cannot find theme `{name}`")


class SpecNotFound(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"cannot find spec `{name}`")


class TargetNotFound(SakeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"cannot find target `{name}`")


class ConfigNotFound(SakeError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        listed = "[" + " ".join(self.names) + "]"
        super().__init__(
            f"cannot find any configuration file {listed} in current directory "
            "or any of the parent directories"
        )


class ConfigErr(SakeError):
    """A configuration error whose message already carries its own prefix."""

    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(msg)


class FileError(SakeError):
    def __init__(self, err: str) -> None:
        self.err = err
        super().__init__(err)


class NoRemoteServerToAttach(SakeError):
    def __init__(self) -> None:
        super().__init__("no remote server to ssh into")


class NoEditorEnv(SakeError):
    def __init__(self) -> None:
        super().__init__("no environment variable `EDITOR` found")


class TemplateParseError(SakeError):
    def __init__(self, msg: str) -> None:
        self.msg = msg
        super().__init__(f"failed to parse {msg}")


class ExecError(SakeError):
    """A task failed on a server; carries the exit code to leave with."""

    def __init__(self, err: BaseException | None, exit_code: int) -> None:
        self.err = err
        self.exit_code = exit_code
        super().__init__("")


class HostRangeError(SakeError, ValueError):
    """A host range pattern such as ``web-[01:10]`` could not be expanded."""


def exit_with(err: BaseException) -> None:
    """Report ``err`` on stderr the way the command line does, then exit."""
    if isinstance(err, ConfigErr):
        sys.stderr.write(str(err))
        sys.stderr.flush()
        raise SystemExit(1)
    if isinstance(err, ExecError):
        raise SystemExit(err.exit_code)
    sys.stderr.write(f"{_RED}error{_RESET}: {err}\n")
    sys.stderr.flush()
    raise SystemExit(1)


def check_if_error(err: BaseException | None) -> None:
    """Exit through :func:`exit_with` when ``err`` is set."""
    if err is not None:
        exit_with(err)