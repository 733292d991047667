"""Turn the shell assignments printed by an installation manager into an environment mapping."""

from __future__ import annotations

import logging
import os
import re
from enum import Enum
from typing import TYPE_CHECKING, Final

from ._subprocess import run_capture

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ._candidates import Candidate
    from ._config import DispatchConfig

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_QUOTES: Final[tuple[str, ...]] = ('"', "'")


class EnvLineFormat(Enum):
    """The assignment syntax of a shell family."""

    POSIX_EXPORT = "posix"
    CSH_SETENV = "csh"

    @property
    def pattern(self) -> re.Pattern[str]:
        return _PATTERNS[self]

    @property
    def shell(self) -> str:
        """The ``SHELL`` value that makes the manager print this syntax."""
        return "/bin/csh" if self is EnvLineFormat.CSH_SETENV else "/bin/sh"


_PATTERNS: Final[dict[EnvLineFormat, re.Pattern[str]]] = {
    EnvLineFormat.POSIX_EXPORT: re.compile(r"^\s*export\s+(?P<name>[A-Za-z_]\w*)=(?P<value>.*?)\s*;?\s*$"),
    EnvLineFormat.CSH_SETENV: re.compile(r"^\s*setenv\s+(?P<name>[A-Za-z_]\w*)\s+(?P<value>.*?)\s*;?\s*$"),
}


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:  # noqa: PLR2004
        return value[1:-1]
    return value


def parse_env_lines(lines: Iterable[str], fmt: EnvLineFormat) -> dict[str, str]:
    """
    Extract variable assignments written in *fmt* syntax.

    Lines that are not an assignment of that syntax are skipped.
    """
    result: dict[str, str] = {}
    for line in lines:
        if not (match := fmt.pattern.match(line)):
            if line.strip():
                _LOGGER.debug("skip environment line %r", line)
            continue
        result[match["name"]] = _unquote(match["value"])
    return result


def overlay_env(env: Mapping[str, str], assignments: Mapping[str, str], path_variable: str | None) -> dict[str, str]:
    """Return a copy of *env* with *assignments* applied, and the *path_variable* entries put in front of ``PATH``."""
    result = dict(env)
    result.update(assignments)
    if path_variable and (prefix := assignments.get(path_variable)):
        result["PATH"] = os.pathsep.join(i for i in (prefix, env.get("PATH", "")) if i)
    return result


def fetch_env(config: DispatchConfig, candidate: Candidate, env: Mapping[str, str]) -> dict[str, str] | None:
    """
    Get the environment that activates *candidate*.

    :param config: the launcher configuration, provides the export command and its line format
    :param candidate: the installation to activate
    :param env: the base environment, never modified
    :return: a new mapping, ``None`` when the export command fails
    """
    query_env = dict(env)
    query_env["SHELL"] = config.env_format.shell
    failure, out = run_capture([*config.env_command, candidate.name], query_env)
    if failure is not None:
        _LOGGER.info("%s", failure)
        return None
    assignments = parse_env_lines(out.splitlines(), config.env_format)
    _LOGGER.debug("environment of %s sets %s", candidate.name, ", ".join(sorted(assignments)))
    return overlay_env(env, assignments, config.path_variable)


__all__ = [
    "EnvLineFormat",
    "fetch_env",
    "overlay_env",
    "parse_env_lines",
]
