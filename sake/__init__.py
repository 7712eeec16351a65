"""Host expansion, SSH config parsing, output helpers and command runners for local and remote servers."""

__version__ = "0.12.1"