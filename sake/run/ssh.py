"""Running commands on remote servers over SSH, and known-hosts handling."""

from __future__ import annotations

import base64
import hashlib
import os
import signal as signals
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from typing import IO, Any

import paramiko
from paramiko.common import cMSG_CHANNEL_REQUEST

from sake.errors import SakeError
from sake.run.client import Client, ConnectError

DEFAULT_TIMEOUT = 20.0


def _split_host_port(address: str) -> tuple[str, str] | None:
    """Split ``host:port`` or ``[host]:port``; None when there is no port."""
    if address.startswith("["):
        end = address.find("]")
        if end == -1 or address[end + 1:end + 2] != ":":
            return None
        return address[1:end], address[end + 2:]
    if address.count(":") != 1:
        return None
    host, _, port = address.partition(":")
    return host, port


def _host_and_port(address: str) -> tuple[str, str]:
    parts = _split_host_port(address)
    return parts if parts is not None else (address, "22")


def _join_host_port(host: str, port: int) -> str:
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


def fingerprint_sha256(data: bytes) -> str:
    """OpenSSH style SHA256 fingerprint of a serialized public key."""
    digest = hashlib.sha256(data).digest()
    return "SHA256:" + base64.b64encode(digest).decode().rstrip("=")


def as_export(env: list[str]) -> str:
    """Turn ``KEY=VALUE`` entries into ``export KEY="VALUE";`` statements."""
    exports = []
    for entry in env:
        parts = entry.split("=")
        if len(parts) < 2:
            raise ValueError(f"invalid env entry {entry!r}, expected KEY=VALUE")
        exports.append(f'export {parts[0]}="{parts[1]}";')
    return "".join(exports)


def known_host_line(address: str, key: paramiko.PKey, hash_hosts: bool) -> str:
    """A known_hosts line for ``address`` (``host``, ``host:port`` or ``[host]:port``)."""
    host, port = _host_and_port(address)
    hash_target = host
    if port != "22":
        hash_target = f"[{host}]:{port}"
        host = f"[{host}]:{port}" if ":" in host else f"{host}:{port}"
    entry = paramiko.HostKeys.hash_host(hash_target) if hash_hosts else host
    return f"{entry} {key.get_name()} {key.get_base64()}"


def _lookup_names(address: str) -> list[str]:
    host, port = _host_and_port(address)
    if port == "22":
        return [host]
    names = [f"[{host}]:{port}"]
    if ":" not in host:
        names.append(f"{host}:{port}")
    return names


def check_known_host(host: str, key: paramiko.PKey, known_hosts_file: str) -> bool:
    """True when ``host`` is known with ``key``, False when it is unknown.

    Raises BadHostKeyException when the host is known with another key, and
    OSError when the file cannot be read.
    """
    known = paramiko.HostKeys(known_hosts_file)
    stored: list[paramiko.PKey] = []
    for name in _lookup_names(host):
        entries = known.lookup(name)
        if entries:
            stored.extend(entries.values())
    if not stored:
        return False
    if any(k.asbytes() == key.asbytes() for k in stored):
        return True
    raise paramiko.BadHostKeyException(host, key, stored[0])


def _hash_known_hosts(host: str) -> bool:
    config_path = os.path.join(os.path.expanduser("~"), ".ssh", "config")
    if not os.path.isfile(config_path):
        return False
    try:
        config = paramiko.SSHConfig.from_path(config_path)
        value = config.lookup(host).get("hashknownhosts", "")
    except Exception:
        return False
    return str(value).lower() == "yes"


def add_known_host(host: str, key: paramiko.PKey, known_hosts_file: str) -> None:
    """Append ``host`` with ``key`` to the known_hosts file, creating it if needed."""
    line = known_host_line(host, key, _hash_known_hosts(host))
    fd = os.open(known_hosts_file, os.O_CREAT | os.O_WRONLY | os.O_APPEND, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(line + "\n")


def _ask_is_host_trusted(host: str, key: paramiko.PKey, lock: threading.Lock) -> bool:
    with lock:
        print(f"Unknown Host: {host} \nFingerprint: {fingerprint_sha256(key.asbytes())} ")
        print("Would you like to add it? type (y)es or (n)o: ", end="", flush=True)
        answer = sys.stdin.readline()
    if not answer:
        return False
    return answer.strip().lower() in ("yes", "y")


def verify_host(
    known_hosts_file: str, lock: threading.Lock, host: str, key: paramiko.PKey
) -> None:
    """Accept ``key`` for ``host`` if known, else ask the user and record it."""
    try:
        found = check_known_host(host, key, known_hosts_file)
    except paramiko.BadHostKeyException:
        raise
    except (OSError, paramiko.SSHException):
        found = False
    if found:
        return
    if not _ask_is_host_trusted(host, key, lock):
        raise SakeError("you typed no, aborted!")
    add_known_host(host, key, known_hosts_file)


class _HostKeyPolicy(paramiko.MissingHostKeyPolicy):
    def __init__(
        self, address: str, disable: bool, known_hosts_file: str, lock: threading.Lock
    ) -> None:
        self._address = address
        self._disable = disable
        self._known_hosts_file = known_hosts_file
        self._lock = lock

    def missing_host_key(self, client: Any, hostname: str, key: paramiko.PKey) -> None:
        if not self._disable:
            verify_host(self._known_hosts_file, self._lock, self._address, key)


@dataclass
class SSHClient(Client):
    """Runs commands on a server through an SSH connection.

    ``via`` names an already connected client to tunnel through (a bastion).
    """

    name: str = ""
    user: str = ""
    host: str = ""
    port: int = 22
    identity_file: str = ""
    password: str = ""
    pkey: paramiko.PKey | None = None
    allow_agent: bool = True
    via: SSHClient | None = None
    _conn: paramiko.SSHClient | None = field(default=None, init=False, repr=False)
    _chan: paramiko.Channel | None = field(default=None, init=False, repr=False)
    _stdin: IO[bytes] | None = field(default=None, init=False, repr=False)
    _stdout: IO[bytes] | None = field(default=None, init=False, repr=False)
    _stderr: IO[bytes] | None = field(default=None, init=False, repr=False)
    _command: str = field(default="", init=False, repr=False)
    _conn_opened: bool = field(default=False, init=False, repr=False)
    _sess_opened: bool = field(default=False, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)

    def _error(self, reason: str) -> ConnectError:
        return ConnectError(self.name, self.host, self.user, self.port, reason)

    def _open_tunnel(self, host: str, port: int) -> paramiko.Channel:
        if not self._conn_opened or self._conn is None:
            raise RuntimeError("Not connected")
        transport = self._conn.get_transport()
        if transport is None:
            raise RuntimeError("Not connected")
        return transport.open_channel("direct-tcpip", (host, port), ("", 0))

    def connect(
        self, disable_verify_host: bool, known_hosts_file: str, lock: threading.Lock
    ) -> None:
        """Open the SSH connection; raise ConnectError on failure."""
        if self._conn_opened:
            raise self._error("Already connected")

        address = _join_host_port(self.host, self.port)
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(
            _HostKeyPolicy(address, disable_verify_host, known_hosts_file, lock)
        )
        try:
            sock = self.via._open_tunnel(self.host, self.port) if self.via else None
            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.user or None,
                password=self.password or None,
                pkey=self.pkey,
                key_filename=self.identity_file or None,
                allow_agent=self.allow_agent,
                look_for_keys=False,
                timeout=DEFAULT_TIMEOUT,
                sock=sock,
            )
        except Exception as exc:
            client.close()
            raise self._error(str(exc) or type(exc).__name__) from exc

        self._conn = client
        self._conn_opened = True

    def run(self, env: list[str], work_dir: str, shell: str, cmd: str) -> None:
        """Start ``cmd`` on the server without waiting for it."""
        if self._running:
            raise RuntimeError("Session already running")
        if self._sess_opened:
            raise RuntimeError("Session already connected")
        if not self._conn_opened or self._conn is None:
            raise RuntimeError("Not connected")
        transport = self._conn.get_transport()
        if transport is None:
            raise RuntimeError("Not connected")

        exported = as_export(env)
        command = f"cd {work_dir}; {exported}" if work_dir else exported
        command = f"{command} {shell} '{cmd}'" if shell else f"{command} {cmd}"

        chan = transport.open_session()
        chan.exec_command(command)
        self._chan = chan
        self._stdin = chan.makefile_stdin("wb")
        self._stdout = chan.makefile("rb")
        self._stderr = chan.makefile_stderr("rb")
        self._command = command
        self._sess_opened = True
        self._running = True

    def wait(self) -> None:
        """Wait for the remote command; raise CalledProcessError on failure."""
        if not self._running or self._chan is None:
            raise RuntimeError("Trying to wait on stopped session")
        status = self._chan.recv_exit_status()
        self._chan.close()
        self._running = False
        self._sess_opened = False
        if status != 0:
            raise subprocess.CalledProcessError(status, self._command)

    def close(self) -> None:
        """Close the session and the connection."""
        if self._sess_opened and self._chan is not None:
            self._chan.close()
            self._sess_opened = False
        if not self._conn_opened or self._conn is None:
            raise RuntimeError("Trying to close the already closed connection")
        self._conn.close()
        self._conn_opened = False
        self._running = False

    def stdin(self) -> IO[bytes] | None:
        return self._stdin

    def stdout(self) -> IO[bytes] | None:
        return self._stdout

    def stderr(self) -> IO[bytes] | None:
        return self._stderr

    def write(self, data: bytes) -> int:
        if self._stdin is None:
            raise RuntimeError("session is not open")
        self._stdin.write(data)
        self._stdin.flush()
        return len(data)

    def write_close(self) -> None:
        if self._chan is None:
            raise RuntimeError("session is not open")
        self._chan.shutdown_write()

    def prefix(self) -> str:
        return self.host

    def signal(self, sig: int) -> None:
        """Send an interrupt to the remote command; other signals are refused."""
        if not self._sess_opened or self._chan is None:
            raise RuntimeError("session is not open")
        if sig != signals.SIGINT:
            raise ValueError(f"{sig} not supported")
        message = paramiko.Message()
        message.add_byte(cMSG_CHANNEL_REQUEST)
        message.add_int(self._chan.remote_chanid)
        message.add_string("signal")
        message.add_boolean(False)
        message.add_string("INT")
        self._chan.transport._send_user_message(message)