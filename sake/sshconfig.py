"""Reading host entries out of OpenSSH client configuration files."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import IO

from sake.errors import FileError
from sake.utils import string_to_bool

_NODE_RE = re.compile(r"([^\s=]+)(?:\s*=\s*|\s+)(.*)")


@dataclass
class Endpoint:
    """A concrete host from an ssh config, with wildcard sections applied."""

    name: str
    host_name: str = ""
    port: str = ""
    user: str = ""
    proxy_jump: str = ""
    forward_agent: bool = False
    request_tty: bool = False
    remote_command: str = ""
    send_env: list[str] = field(default_factory=list)
    set_env: list[str] = field(default_factory=list)
    identity_files: list[str] = field(default_factory=list)


@dataclass
class _HostInfo:
    host_name: str = ""
    port: str = ""
    user: str = ""
    proxy_jump: str = ""
    forward_agent: str = ""
    request_tty: str = ""
    remote_command: str = ""
    send_env: list[str] = field(default_factory=list)
    set_env: list[str] = field(default_factory=list)
    identity_files: list[str] = field(default_factory=list)


def _merge_info(primary: _HostInfo, fallback: _HostInfo) -> _HostInfo:
    """Fill the blanks of ``primary`` from ``fallback``; lists are concatenated."""
    return _HostInfo(
        host_name=primary.host_name or fallback.host_name,
        port=primary.port or fallback.port,
        user=primary.user or fallback.user,
        proxy_jump=primary.proxy_jump or fallback.proxy_jump,
        forward_agent=primary.forward_agent or fallback.forward_agent,
        request_tty=primary.request_tty or fallback.request_tty,
        remote_command=primary.remote_command or fallback.remote_command,
        send_env=fallback.send_env + primary.send_env,
        set_env=fallback.set_env + primary.set_env,
        identity_files=fallback.identity_files + primary.identity_files,
    )


def _merge(m1: dict[str, _HostInfo], m2: dict[str, _HostInfo]) -> dict[str, _HostInfo]:
    result: dict[str, _HostInfo] = {}
    for key, info in m1.items():
        result[key] = _merge_info(info, m2[key]) if key in m2 else info
    for key, info in m2.items():
        if key not in m1:
            result[key] = info
    return result


def _split_node(node: str) -> tuple[str, str] | None:
    match = _NODE_RE.fullmatch(node)
    if match is None:
        return None
    key, value = match.group(1), match.group(2).strip()
    if not value:
        return None
    return key, value


def _sections(text: str) -> Iterator[tuple[list[str], list[str]]]:
    """Yield ``(patterns, nodes)`` per Host block; lines before any Host go to ``*``."""
    patterns = ["*"]
    nodes: list[str] = []
    for raw in text.split("\n"):
        node = raw.strip()
        if node.lower().startswith("match"):
            continue
        if not node or node.startswith("#"):
            continue
        parts = _split_node(node)
        if parts is not None and parts[0].lower() == "host":
            yield patterns, nodes
            patterns, nodes = parts[1].split(), []
            continue
        nodes.append(node)
    yield patterns, nodes


def _expand_path(path: str) -> str:
    if not path.startswith("~/"):
        return path
    return os.path.join(os.path.expanduser("~"), path[2:])


def _read_file(path: str) -> str:
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read()
    except OSError as exc:
        raise FileError(f"failed to open config: {exc}") from exc


def _parse_internal(text: str, source: str) -> dict[str, _HostInfo]:
    infos: dict[str, _HostInfo] = {}
    for patterns, nodes in _sections(text):
        for name in patterns:
            info = infos.get(name, _HostInfo())
            for node in nodes:
                parts = _split_node(node)
                if parts is None:
                    raise FileError(f"{source}: invalid node on app {name!r}: {node!r}")
                key, value = parts[0].lower(), parts[1]
                if key == "hostname":
                    info.host_name = value
                elif key == "user":
                    info.user = value
                elif key == "port":
                    info.port = value
                elif key == "proxyjump":
                    info.proxy_jump = value
                elif key == "identityfile":
                    info.identity_files = info.identity_files + [value]
                elif key == "forwardagent":
                    info.forward_agent = value
                elif key == "requesttty":
                    info.request_tty = value
                elif key == "remotecommand":
                    info.remote_command = value
                elif key == "sendenv":
                    info.send_env = info.send_env + [value]
                elif key == "setenv":
                    info.set_env = info.set_env + [value]
                elif key == "include":
                    if "*" in value:
                        continue
                    path = _expand_path(value)
                    included = _parse_internal(_read_file(path), path)
                    infos[name] = info
                    infos = _merge(infos, included)
                    info = infos.get(name, _HostInfo())
            infos[name] = info
    return infos


def parse_reader(stream: IO, source: str = "") -> list[Endpoint]:
    """Parse an ssh config from ``stream`` into endpoints, in definition order.

    ``Match`` lines are ignored and ``Include`` directives with globs are
    skipped. ``source`` names the config in error messages.
    """
    data = stream.read()
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    infos = _parse_internal(text, source)

    wildcards = {k: v for k, v in infos.items() if "*" in k}
    hosts = {k: v for k, v in infos.items() if "*" not in k}

    endpoints = []
    for name, info in hosts.items():
        for pattern, wildcard in wildcards.items():
            if fnmatchcase(name, pattern) or (
                info.host_name and fnmatchcase(info.host_name, pattern)
            ):
                info = _merge_info(info, wildcard)
        endpoints.append(
            Endpoint(
                name=name,
                host_name=info.host_name or name,
                port=info.port,
                user=info.user,
                proxy_jump=info.proxy_jump,
                forward_agent=string_to_bool(info.forward_agent),
                request_tty=string_to_bool(info.request_tty),
                remote_command=info.remote_command,
                send_env=list(info.send_env),
                set_env=list(info.set_env),
                identity_files=list(info.identity_files),
            )
        )
    return endpoints


def parse_ssh_config(path: str) -> dict[str, Endpoint]:
    """Parse the ssh config at ``path`` into endpoints keyed by host name."""
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise FileError(f"failed to open config: {exc}") from exc
    with handle:
        endpoints = parse_reader(handle, path)
    return {endpoint.name: endpoint for endpoint in endpoints}