"""Read the interpreter a script asks for on its ``#!`` line."""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

_MARKER: Final[str] = "#!"
_ENV: Final[str] = "env"


def parse_shebang(source: str) -> list[str] | None:
    """
    :param source: the script content
    :return: the shebang interpreter arguments, ``None`` if the script has no shebang
    """
    if not source.startswith(_MARKER):
        return None
    first_line = source[len(_MARKER) :].split("\n", 1)[0]
    return [i.strip() for i in first_line.strip().split() if i.strip()] or None


def shebang_interpreter(command: Sequence[str]) -> str | None:
    """The name of the program a shebang runs, looking through ``/usr/bin/env``."""
    if not command:
        return None
    name = PurePath(command[0]).name
    if name != _ENV:
        return name
    for arg in command[1:]:
        if arg.startswith("-") or "=" in arg:
            continue
        return PurePath(arg).name
    return None


def is_governed(command: Sequence[str] | None, interpreter: str) -> bool:
    """
    Check whether a script with this shebang may be dispatched to a managed *interpreter* installation.

    Scripts without a shebang are governed, as are those whose shebang runs *interpreter* itself or a versioned name
    of it (e.g. ``perl5.20.1``).
    """
    if command is None:
        return True
    if (name := shebang_interpreter(command)) is None:
        return False
    return re.fullmatch(rf"{re.escape(interpreter)}[\d.]*", name) is not None


__all__ = [
    "is_governed",
    "parse_shebang",
    "shebang_interpreter",
]
