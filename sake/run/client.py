"""The interface shared by local and remote command runners."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import IO

from sake.errors import SakeError


class ConnectError(SakeError):
    """Connecting to a server failed."""

    def __init__(self, name: str, host: str, user: str, port: int, reason: str) -> None:
        self.name = name
        self.host = host
        self.user = user
        self.port = port
        self.reason = reason
        super().__init__(reason)


class Client(ABC):
    """Runs one command at a time on a server and exposes its streams."""

    name: str

    @abstractmethod
    def connect(
        self, disable_verify_host: bool, known_hosts_file: str, lock: threading.Lock
    ) -> None:
        """Open the connection; raise :class:`ConnectError` on failure."""

    @abstractmethod
    def run(self, env: list[str], work_dir: str, shell: str, cmd: str) -> None:
        """Start ``cmd`` without waiting for it."""

    @abstractmethod
    def wait(self) -> None:
        """Wait for the running command; raise if it failed."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection."""

    @abstractmethod
    def prefix(self) -> str:
        """Text that identifies this client in output lines."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Send ``data`` to the command's standard input."""

    @abstractmethod
    def write_close(self) -> None:
        """Close the command's standard input."""

    @abstractmethod
    def signal(self, sig: int) -> None:
        """Deliver ``sig`` to the running command."""

    @abstractmethod
    def stdin(self) -> IO[bytes] | None:
        """Writable standard input of the running command."""

    @abstractmethod
    def stdout(self) -> IO[bytes] | None:
        """Readable standard output of the running command."""

    @abstractmethod
    def stderr(self) -> IO[bytes] | None:
        """Readable standard error of the running command."""

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()