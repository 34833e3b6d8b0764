"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from typing import Callable

name = "lib_log_ingest"
title = "Forward structured log records to a remote log-ingest endpoint"
version = "0.1.0"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_ingest"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner, one ``key = value`` line per field.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_ingest:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:\n", "\n"]
    lines.extend(f"    {label.ljust(pad)} = {value}\n" for label, value in fields)
    emit = writer if writer is not None else (lambda text: print(text, end=""))
    for line in lines:
        emit(line)


def summary_info() -> str:
    """Return the banner written by :func:`print_info` as one string.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)
