# sake

Building blocks for running shell commands on many servers, locally or over
SSH: host list expansion, host string parsing, OpenSSH client config reading,
known_hosts handling, and clients that start a command and expose its streams.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `sake.hostgen`
  - `evaluate_range(pattern)` expands `[start:end]` and `[start:end:step]`
    ranges, keeping zero padding of the start value. Several ranges give every
    combination. A malformed pattern raises `sake.errors.HostRangeError`.
  - `evaluate_inventory(context, command, server_envs, user_envs)` runs
    `command` with `sh -c` in the directory of `context`, with the
    `KEY=VALUE` entries added to the environment, and returns the
    whitespace-separated words it prints. A failing command raises
    `InventoryEvalFailed` carrying its output.
- `sake.utils`
  - `parse_host_name(hostname, default_user, default_port)` splits
    `[ssh://][user@]host[:port]` into `(user, host, port)` for IPv4, IPv6
    (`[addr]:port` for a port) and names; a `/` in the host raises
    `ValueError`.
  - `format_shell` adds `-c` (or `-e` for `node`) to a bare shell name,
    `get_absolute_path` resolves `~`, `$VARS` and relative paths against a
    directory, `find_file_in_parent_dirs` searches upward and raises
    `ConfigNotFound`, plus `strip_ansi`, `intersection`, `any_to_string`,
    `string_to_bool` and `is_digit`.
- `sake.sshconfig`
  - `parse_ssh_config(path)` returns a dict of `Endpoint` records keyed by host
    name; `parse_reader(stream, source)` returns them as a list in the order
    they were defined. Wildcard `Host` sections fill in values a host leaves
    blank, `Include` of a single file is followed, `Include` with a glob is
    skipped and `Match` lines are ignored. Unreadable files raise `FileError`.
- `sake.prefixer`
  - `Prefixer(reader, prefix)` prepends `prefix` to every line read from a
    stream, through `read(size)` or `write_to(writer)`.
- `sake.styles`
  - `Format`, `Align` and `Color` enums, the lookups `get_format`,
    `get_align`, `get_fg`, `get_bg`, `get_attr` for theme names such as
    `upper`, `center`, `hi_red` or `bold`, `combine_colors(fg, bg, attr)` and
    `colorize(text, colors)` for ANSI output.
- `sake.flags`
  - Dataclasses holding command options: `ListFlags`, `ServerFlags`,
    `TargetFlags`, `SpecFlags`, `TagFlags`, `TaskFlags`, `RunFlags` (whose
    `limit` and `limit_p` are range-checked) and `SetRunFlags`.
- `sake.run.client`
  - `Client`, the abstract interface (`connect`, `run`, `wait`, `close`,
    `prefix`, `write`, `write_close`, `signal`, `stdin`, `stdout`, `stderr`;
    usable as a context manager), and `ConnectError`.
- `sake.run.localhost`
  - `LocalhostClient` runs a command as a child process under a shell such as
    `bash -c` (the default). `wait()` raises `subprocess.CalledProcessError`
    on a non-zero exit. `exec_tty(cmd, envs)` replaces the current process
    with `bash -c cmd`.
- `sake.run.ssh`
  - `SSHClient` connects with paramiko (password, key file, `pkey` or agent,
    optionally tunnelled through another connected `SSHClient` given as
    `via`), runs one command at a time, and sends `SIGINT` to it with
    `signal`. Connection failures raise `ConnectError`.
  - Known-hosts helpers: `check_known_host`, `add_known_host`, `verify_host`
    (asks on the terminal before trusting an unknown key) and
    `known_host_line`; also `as_export` and `fingerprint_sha256`.
- `sake.errors`
  - The exceptions raised across the package, all derived from `SakeError`,
    and `exit_with` / `check_if_error`, which print an error the way a command
    line tool would and raise `SystemExit` with the right code.

## Examples

Expand a host range:

```python
from sake.hostgen import evaluate_range

evaluate_range("192.168.0.[09:12].33")
# ['192.168.0.09.33', '192.168.0.10.33', '192.168.0.11.33', '192.168.0.12.33']
```

Parse a host string:

```python
from sake.utils import parse_host_name

parse_host_name("user@[2001:3984:3989::10]:44", "test", 22)
# ('user', '2001:3984:3989::10', 44)
```

Run a command locally and read its output:

```python
from sake.run.localhost import LocalhostClient

client = LocalhostClient(name="local", user="me", host="localhost")
client.run(["GREETING=hello"], "", "bash -c", "echo $GREETING")
print(client.stdout().read())  # b'hello\n'
client.wait()
client.close()
```

Prefix every line of a stream:

```python
import io
from sake.prefixer import Prefixer

Prefixer(io.BytesIO(b"one\ntwo\n"), "web | ").read()
# b'web | one\nweb | two\n'
```

Read an SSH client configuration:

```python
from sake.sshconfig import parse_ssh_config

endpoints = parse_ssh_config("/home/me/.ssh/config")
print(endpoints["web"].host_name, endpoints["web"].port)
```

## What this package does not do

There is no `sake` command and no entry point. The package does not read a
task configuration file, has no notion of servers, tags, targets, specs or
tasks as configured objects, does not select servers by filters, and does not
run a task across servers or render its results as text or tables. It
provides the pieces such a tool is built from; wiring them together is left to
the caller.