"""Small helpers for paths, shells, host names and text."""

from __future__ import annotations

import ipaddress
import os
import re
from collections.abc import Iterable
from typing import Any

from sake.errors import ConfigNotFound

_ANSI_RE = re.compile(
    r"[\x1b\x9b][\[\]()#;?]*"
    r"(?:(?:(?:[a-zA-Z\d]*(?:;[a-zA-Z\d]*)*)?\x07)"
    r"|(?:(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PRZcf-ntqry=><~]))",
    re.ASCII,
)

_ENV_RE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")
_PORT_RE = re.compile(r"[0-9]+")


def strip_ansi(s: str) -> str:
    """Remove ANSI escape sequences from ``s``."""
    return _ANSI_RE.sub("", s)


def intersection(a: Iterable[str], b: Iterable[str]) -> list[str]:
    """Items of ``a`` that also occur in ``b``, in the order of ``a``."""
    members = set(b)
    return [item for item in a if item in members]


def find_file_in_parent_dirs(path: str, files: list[str]) -> str:
    """Find the first of ``files`` in ``path`` or one of its parent directories."""
    current = path
    while True:
        for name in files:
            candidate = os.path.join(current, name)
            if os.path.exists(candidate):
                return candidate
        parent = os.path.dirname(current)
        if parent == "/" or parent == current:
            raise ConfigNotFound(files)
        current = parent


def _expand_env(path: str) -> str:
    return _ENV_RE.sub(
        lambda m: os.environ.get(m.group(1) if m.group(1) is not None else m.group(2), ""),
        path,
    )


def _join(*parts: str) -> str:
    kept = [p for p in parts if p]
    if not kept:
        return ""
    return os.path.normpath(os.path.join(*kept))


def get_absolute_path(config_dir: str, path: str, name: str) -> str:
    """Resolve ``path`` against ``config_dir``, expanding ``~`` and ``$VARS``.

    An empty ``path`` falls back to ``name`` inside ``config_dir``.
    """
    path = _expand_env(path)
    home = os.path.expanduser("~")

    if path == "~":
        return home
    if path.startswith("~/"):
        return _join(home, path[2:])
    if path and os.path.isabs(path):
        return path
    if path:
        return _join(config_dir, path)
    return _join(config_dir, name)


def format_shell(shell: str) -> str:
    """Add the command flag a shell program needs, unless one is given."""
    if len(shell.split(" ")) > 1:
        return shell
    for program, flag in (
        ("bash", "-c"),
        ("zsh", "-c"),
        ("sh", "-c"),
        ("node", "-e"),
        ("python", "-c"),
    ):
        if program in shell:
            return f"{shell} {flag}"
    return shell


def any_to_string(value: Any) -> str:
    """Render None, bools, ints and strings as text; anything else as ''."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def string_to_bool(s: str) -> bool:
    """True for 'true' or 'yes' in any case, ignoring surrounding space."""
    return s.strip().lower() in ("true", "yes")


def _parse_port(text: str) -> int:
    if not _PORT_RE.fullmatch(text):
        raise ValueError(f"invalid port {text!r}")
    port = int(text)
    if port > 0xFFFF:
        raise ValueError(f"port {text!r} out of range")
    return port


def _ip_type(host: str) -> int:
    for ch in host:
        if ch == ".":
            return 4
        if ch == ":":
            return 6
    return 0


def parse_host_name(
    hostname: str, default_user: str, default_port: int
) -> tuple[str, str, int]:
    """Split ``[ssh://][user@]host[:port]`` into ``(user, host, port)``."""
    if "/" in hostname:
        raise ValueError(f"unexpected slash in the host {hostname}")

    host = hostname
    if len(host) > 6 and host.startswith("ssh://"):
        host = host[6:]

    at = host.rfind("@")
    if at != -1:
        user, host = host[:at], host[at + 1:]
    else:
        user = default_user

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        ip = None
    if ip is not None:
        if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
            return user, str(ip.ipv4_mapped), default_port
        return user, str(ip), default_port

    port = 0
    kind = _ip_type(host)
    if kind == 4:
        if ":" in host:
            last = host.rfind(":")
            port = _parse_port(host[last + 1:])
            host = host[:last]
        else:
            port = default_port
        return user, host, port
    if kind == 6:
        if "[" in host and "]" in host:
            last = host.rfind(":")
            try:
                port = _parse_port(host[last + 1:])
            except ValueError:
                raise ValueError(f"failed to parse {hostname}") from None
            host = host[1:last - 1]
        return user, host, port

    if port == 0:
        port = default_port
    return user, host, port


def is_digit(s: str) -> bool:
    """True when every character of ``s`` is an ASCII digit."""
    return all("0" <= ch <= "9" for ch in s)