"""Rewrite interpreter diagnostics into the ``FILE:LINE:message`` form editors understand."""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
NO_ERRORS: Final[str] = "No errors"
TTY: Final[Path] = Path("/dev/tty")
_DIAGNOSTIC_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    (?P<message>.*?)
    \s at \s (?P<file>.+?)
    \s line \s (?P<line>\d+)
    (?:,\s*(?P<rest>.*?))?   # e.g. near "print"
    \.?
    \s*
    $
    """,
    re.VERBOSE,
)


def reformat_diagnostic(line: str) -> str | None:
    """
    :param line: a line of interpreter output, such as ``syntax error at a.pl line 3, near "}"``
    :return: the line as ``a.pl:3:syntax error near "}"``, ``None`` if it is not a diagnostic
    """
    if not (match := _DIAGNOSTIC_RE.match(line)):
        return None
    text = match["message"]
    if match["rest"]:
        text = f"{text} {match['rest']}"
    return f"{match['file']}:{match['line']}:{text}"


def reformat_output(lines: Iterable[str]) -> list[str]:
    return [result for line in lines if (result := reformat_diagnostic(line)) is not None]


def _tell_terminal(message: str, tty: Path) -> None:
    try:
        with tty.open("w", encoding="utf-8") as file_handler:
            file_handler.write(f"{message}\n")
    except OSError:
        _LOGGER.debug("cannot open %s, write to stderr", tty, exc_info=True)
        sys.stderr.write(f"{message}\n")


def report(lines: Iterable[str], out: TextIO | None = None, tty: Path = TTY) -> int:
    """
    Print the reformatted diagnostics of *lines*.

    When there are none, ``No errors`` goes straight to the controlling terminal so that it is seen even when the
    regular output is captured.

    :return: the number of diagnostics printed
    """
    out = sys.stdout if out is None else out
    diagnostics = reformat_output(lines)
    for diagnostic in diagnostics:
        out.write(f"{diagnostic}\n")
    out.flush()
    if not diagnostics:
        _tell_terminal(NO_ERRORS, tty)
    return len(diagnostics)


__all__ = [
    "NO_ERRORS",
    "TTY",
    "reformat_diagnostic",
    "reformat_output",
    "report",
]
