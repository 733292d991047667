"""Hand a script over to the resolved interpreter."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess  # noqa: S404
from subprocess import Popen  # noqa: S404
from typing import TYPE_CHECKING, Final

from ._check import report
from ._subprocess import LogCmd

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._config import DispatchConfig
    from ._resolve import Resolution

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
MODE_RUN: Final[str] = "run"
MODE_PAGER: Final[str] = "pager"
MODE_CHECK: Final[str] = "check"
EXIT_CANNOT_CHECK: Final[int] = 2


def build_command(  # noqa: PLR0913
    resolution: Resolution,
    config: DispatchConfig,
    script: str,
    args: Sequence[str],
    *,
    debug: bool = False,
    check: bool = False,
) -> list[str]:
    """The interpreter flags are only added for the managed interpreter, a foreign shebang runs untouched."""
    cmd = list(resolution.command)
    if resolution.governed:
        if debug:
            cmd.append(config.debug_flag)
        if check:
            cmd.append(config.check_flag)
    elif debug:
        _LOGGER.warning("%s has no known debugger flag, run without it", resolution.command[0])
    return [*cmd, script, *args]


def exec_interpreter(cmd: Sequence[str], resolution: Resolution) -> None:
    """Replace the current process with *cmd*, does not return on success."""
    _LOGGER.debug("exec %s", LogCmd(list(cmd)))
    os.execvpe(cmd[0], list(cmd), dict(resolution.env))  # noqa: S606


def pager_command(resolution: Resolution, config: DispatchConfig) -> list[str]:
    return shlex.split(resolution.env.get("PAGER") or config.pager)


def run_with_pager(cmd: Sequence[str], resolution: Resolution, config: DispatchConfig) -> int:
    """Run *cmd* with its output going through the pager, return the exit code of the pager."""
    pager = pager_command(resolution, config)
    env = dict(resolution.env)
    _LOGGER.debug("run %s | %s", LogCmd(list(cmd)), LogCmd(pager))
    with Popen(list(cmd), stdout=subprocess.PIPE, env=env) as process:  # noqa: S603
        with Popen(pager, stdin=process.stdout, env=env) as pager_process:  # noqa: S603
            if process.stdout is not None:  # pragma: no branch
                process.stdout.close()  # the pager owns the read end now
            pager_code = pager_process.wait()
        process.wait()
    return pager_code


def run_check(cmd: Sequence[str], resolution: Resolution) -> int:
    """Run *cmd* in syntax check mode and print its diagnostics reformatted, return the interpreter exit code."""
    _LOGGER.debug("check %s", LogCmd(list(cmd)))
    process = Popen(  # noqa: S603
        list(cmd),
        universal_newlines=True,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        env=dict(resolution.env),
        encoding="utf-8",
        errors="backslashreplace",
    )
    out, _ = process.communicate()
    report(out.splitlines())
    return process.returncode


def launch(  # noqa: PLR0913
    resolution: Resolution,
    config: DispatchConfig,
    script: str,
    args: Sequence[str],
    *,
    debug: bool = False,
    mode: str = MODE_RUN,
) -> int:
    """
    Run *script* with the resolved interpreter.

    :param resolution: the interpreter and environment to use
    :param config: the launcher configuration
    :param script: path of the script
    :param args: arguments forwarded to the script untouched
    :param debug: run the interpreter with its debugger enabled
    :param mode: ``run`` replaces the current process, ``pager`` pipes the output through the pager and ``check`` only
        checks the syntax (refused with ``2`` for scripts run by some other interpreter)
    :return: the exit code, only for the ``pager`` and ``check`` modes
    """
    if mode == MODE_CHECK and not resolution.governed:
        _LOGGER.error("cannot check the syntax of %s, it runs with %s", script, " ".join(resolution.command))
        return EXIT_CANNOT_CHECK
    cmd = build_command(resolution, config, script, args, debug=debug, check=mode == MODE_CHECK)
    if mode == MODE_CHECK:
        return run_check(cmd, resolution)
    if mode == MODE_PAGER:
        return run_with_pager(cmd, resolution, config)
    exec_interpreter(cmd, resolution)
    return 0  # pragma: no cover # exec does not return


__all__ = [
    "EXIT_CANNOT_CHECK",
    "MODE_CHECK",
    "MODE_PAGER",
    "MODE_RUN",
    "build_command",
    "exec_interpreter",
    "launch",
    "pager_command",
    "run_check",
    "run_with_pager",
]
