"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._config import load_config
from ._env import EnvLineFormat
from ._launch import MODE_CHECK, MODE_PAGER, MODE_RUN, launch
from ._resolve import resolve

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_LEVELS: Final[tuple[int, ...]] = (logging.WARNING, logging.INFO, logging.DEBUG)
_VALUE_OPTIONS: Final[frozenset[str]] = frozenset({"--config"})
_END_OF_OPTIONS: Final[str] = "--"
EXIT_NOT_RUNNABLE: Final[int] = 127


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interp-dispatch",
        description="Run a script with the installed interpreter that matches the version it declares.",
        usage="%(prog)s [-d] [-p | -c] [--csh] [-v] script [arg ...]",
        allow_abbrev=False,
    )
    parser.add_argument("-d", "--debug", action="store_true", help="run the script under the interpreter's debugger")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-p", "--pager", dest="mode", action="store_const", const=MODE_PAGER, help="page the output of the script"
    )
    mode.add_argument(
        "-c",
        "--check",
        dest="mode",
        action="store_const",
        const=MODE_CHECK,
        help="only check the syntax, report problems as FILE:LINE:message",
    )
    parser.add_argument(
        "--csh",
        dest="env_format",
        action="store_const",
        const=EnvLineFormat.CSH_SETENV,
        default=None,
        help="read the installation environment as csh setenv lines",
    )
    parser.add_argument("--config", type=Path, default=None, help="configuration file to use")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more, repeat for debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("script", help="the script to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments passed to the script")
    parser.set_defaults(mode=MODE_RUN)
    return parser


def _version() -> str:
    from . import __version__  # noqa: PLC0415

    return __version__


def split_argv(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """
    Split the command line after the script.

    :return: the launcher options with the script, and the arguments forwarded to the script exactly as given
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == _END_OF_OPTIONS:
            index += 1
            break
        if not token.startswith("-") or token == "-":
            break
        index += 2 if token in _VALUE_OPTIONS else 1
    return list(argv[: index + 1]), list(argv[index + 1 :])


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    head, forwarded = split_argv(argv)
    options = build_parser().parse_args(head)
    options.args = forwarded
    return options


def setup_logging(verbosity: int) -> None:
    level = _LEVELS[min(verbosity, len(_LEVELS) - 1)]
    logging.basicConfig(stream=sys.stderr, level=level, format="%(name)s: %(message)s")


def _read_script(script: str) -> str | None:
    try:
        return Path(script).read_text(encoding="utf-8", errors="surrogateescape")
    except OSError:
        _LOGGER.debug("cannot read %s", script, exc_info=True)
        return None


def main(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    """
    Run the launcher.

    :param argv: the command line arguments, without the program name
    :param env: the environment to start from, a copy of the process environment by default
    :return: the exit code
    """
    options = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(options.verbose)
    env = os.environ.copy() if env is None else dict(env)
    if (source := _read_script(options.script)) is None:
        return 0
    config = load_config(env, options.config)
    if options.env_format is not None:
        config = config.replace(env_format=options.env_format)
    resolution = resolve(source, config, env)
    try:
        return launch(resolution, config, options.script, options.args, debug=options.debug, mode=options.mode)
    except OSError as exc:
        _LOGGER.error("cannot run %s: %s", resolution.command[0], exc)  # noqa: TRY400
        return EXIT_NOT_RUNNABLE


__all__ = [
    "build_parser",
    "main",
    "parse_args",
    "setup_logging",
    "split_argv",
]
