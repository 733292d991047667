"""Run helper commands and collect their text output."""

from __future__ import annotations

import logging
import subprocess  # noqa: S404
from shlex import quote
from subprocess import Popen  # noqa: S404
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def run_capture(cmd: Sequence[str], env: Mapping[str, str]) -> tuple[Exception | None, str]:
    """
    Run *cmd* to completion and capture its standard output.

    :param cmd: the command and its arguments
    :param env: the environment of the command
    :return: a failure (``None`` on success) and the captured standard output
    """
    _LOGGER.debug("run %s", LogCmd(list(cmd)))
    try:
        process = Popen(  # noqa: S603
            list(cmd),
            universal_newlines=True,
            stdin=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            stdout=subprocess.PIPE,
            env=dict(env),
            encoding="utf-8",
            errors="backslashreplace",
        )
        out, err = process.communicate()
        code = process.returncode
    except OSError as os_error:
        out, err, code = "", os_error.strerror, os_error.errno
    if code != 0:
        msg = f"{LogCmd(list(cmd))!r} with code {code}{f' out: {out!r}' if out else ''}{f' err: {err!r}' if err else ''}"
        return RuntimeError(f"failed to run {msg}"), out or ""
    return None, out


class LogCmd:
    """Shell quoted rendering of a command, only built when the log record is emitted."""

    def __init__(self, cmd: Sequence[str]) -> None:
        self.cmd = cmd

    def __repr__(self) -> str:
        return " ".join(quote(str(c)) for c in self.cmd)


__all__ = [
    "LogCmd",
    "run_capture",
]
