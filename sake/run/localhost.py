"""Running commands on the local machine."""

from __future__ import annotations

import os
import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from typing import IO

from sake.run.client import Client

DEFAULT_SHELL = "bash -c"


def _merged_env(envs: list[str]) -> dict[str, str]:
    env = dict(os.environ)
    for entry in envs:
        key, _, value = entry.partition("=")
        env[key] = value
    return env


@dataclass
class LocalhostClient(Client):
    """Runs commands as child processes of this one."""

    name: str = ""
    user: str = ""
    host: str = ""
    _proc: subprocess.Popen | None = field(default=None, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)

    def connect(
        self, disable_verify_host: bool, known_hosts_file: str, lock: threading.Lock
    ) -> None:
        """Nothing to connect to for the local machine."""
        return None

    def run(self, env: list[str], work_dir: str, shell: str, cmd: str) -> None:
        """Start ``cmd`` under ``shell`` (program and one flag) in ``work_dir``."""
        if self._running:
            raise RuntimeError("Command already running")
        if not shell:
            shell = DEFAULT_SHELL

        program, *flags = shell.split(" ", 1)
        self._proc = subprocess.Popen(
            [program, *flags, cmd],
            env=_merged_env(env),
            cwd=work_dir or None,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        self._running = True

    def wait(self) -> None:
        """Wait for the command; raise CalledProcessError on a non-zero exit."""
        if not self._running or self._proc is None:
            raise RuntimeError("Trying to wait on stopped command")
        proc = self._proc
        if proc.stdin is not None and not proc.stdin.closed:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
        code = proc.wait()
        self._running = False
        if code != 0:
            raise subprocess.CalledProcessError(code, proc.args)

    def close(self) -> None:
        """Release the pipes of the last command, if any."""
        if self._proc is None:
            return
        for stream in (self._proc.stdout, self._proc.stderr):
            if stream is not None and not stream.closed:
                stream.close()

    def stdin(self) -> IO[bytes] | None:
        return self._proc.stdin if self._proc else None

    def stdout(self) -> IO[bytes] | None:
        return self._proc.stdout if self._proc else None

    def stderr(self) -> IO[bytes] | None:
        return self._proc.stderr if self._proc else None

    def write(self, data: bytes) -> int:
        """Send ``data`` to the command's standard input."""
        stream = self.stdin()
        if stream is None:
            raise RuntimeError("no command running")
        stream.write(data)
        stream.flush()
        return len(data)

    def write_close(self) -> None:
        stream = self.stdin()
        if stream is None:
            raise RuntimeError("no command running")
        stream.close()

    def prefix(self) -> str:
        return self.host

    def signal(self, sig: int) -> None:
        """Deliver ``sig`` to the running command."""
        if self._proc is None:
            raise RuntimeError("no command running")
        self._proc.send_signal(sig)


def exec_tty(cmd: str, envs: list[str]) -> None:
    """Replace this process with ``bash -c cmd``, keeping the terminal attached."""
    if os.name == "nt":
        return None
    bash = shutil.which("bash")
    if bash is None:
        raise FileNotFoundError("executable file `bash` not found in $PATH")
    os.execve(bash, ["bash", "-c", cmd], _merged_env(envs))
    return None