"""Host list generation from inventory commands and range patterns."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass

from sake.errors import HostRangeError, InventoryEvalFailed
from sake.utils import is_digit


def _env_pairs(entries: list[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for entry in entries:
        key, _, value = entry.partition("=")
        env[key] = value
    return env


def evaluate_inventory(
    context: str, command: str, server_envs: list[str], user_envs: list[str]
) -> list[str]:
    """Run ``command`` with ``sh`` and return the whitespace-separated hosts it prints.

    The command runs in the directory of ``context`` with ``KEY=VALUE``
    entries from ``server_envs`` and ``user_envs`` added to the environment.
    """
    env = dict(os.environ)
    env.update(_env_pairs(server_envs))
    env.update(_env_pairs(user_envs))
    cwd = os.path.dirname(context) or "."

    try:
        result = subprocess.run(
            ["sh", "-c", command],
            env=env,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
    except OSError as exc:
        raise InventoryEvalFailed(str(exc)) from exc

    output = result.stdout.decode(errors="replace")
    if result.returncode != 0:
        raise InventoryEvalFailed(output)
    return output.split()


@dataclass
class _HostRange:
    start: str = ""
    end: str = ""
    step: str = "1"


_Part = str | _HostRange


def _read_range(pattern: str, i: int) -> tuple[_HostRange, int]:
    hr = _HostRange()
    state = 0
    while i < len(pattern):
        if state > 2:
            raise HostRangeError("parsing hosts failed")
        ch = pattern[i]
        if ch == "]":
            i += 1
            break
        if is_digit(ch):
            if state == 0:
                hr.start += ch
            elif state == 1:
                hr.end += ch
            else:
                hr.step = ch
        elif ch == ":":
            state += 1
        else:
            raise HostRangeError(f"parsing hosts failed, found {ch} in range")
        i += 1

    if not hr.start:
        raise HostRangeError("parsing hosts failed, missing start range")
    if not hr.end:
        raise HostRangeError("parsing hosts failed, missing end range")
    if hr.start > hr.end:
        raise HostRangeError("parsing hosts failed, start cannot be greater than end")
    return hr, i


def _parse(pattern: str) -> list[_Part]:
    parts: list[_Part] = []
    literal = ""
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            hr, i = _read_range(pattern, i + 1)
            parts.append(literal)
            parts.append(hr)
            literal = ""
            continue
        literal += pattern[i]
        i += 1
    if literal:
        parts.append(literal)
    return parts


def _expand(hr: _HostRange) -> list[str]:
    start, end, step = int(hr.start), int(hr.end), int(hr.step)
    padding = len(hr.start) - len(str(start))

    if step <= 0:
        raise HostRangeError("parsing hosts failed, step less than 1")
    if end < start:
        raise HostRangeError("parsing hosts failed, end lower than start")

    values = []
    for n in range(start, end + 1, step):
        text = str(n)
        if padding and padding >= len(text):
            text = text.rjust(padding + 1, "0")
        values.append(text)
    return values


def evaluate_range(pattern: str) -> list[str]:
    """Expand ``[start:end(:step)]`` ranges in ``pattern`` into host names.

    Zero padding on the start value is kept, e.g. ``web-[09:11]`` gives
    ``web-09``, ``web-10``, ``web-11``.
    """
    hosts = [""]
    for part in _parse(pattern):
        if isinstance(part, str):
            hosts = [h + part for h in hosts]
        else:
            hosts = [h + sub for sub in _expand(part) for h in hosts]
    return hosts