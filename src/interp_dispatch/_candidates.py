"""Enumerate the installed interpreters a script can be dispatched to."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ._subprocess import run_capture
from ._version import VersionTuple, format_version, parse_version

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ._config import DispatchConfig

_DC_KW = {"frozen": True, "kw_only": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_ACTIVE_MARKER: Final[str] = "*"
_LIB_SEPARATOR: Final[str] = "@"


@dataclass(**_DC_KW)
class Candidate:
    """An installed interpreter, identified by its name and the version embedded in that name."""

    name: str
    version: VersionTuple

    def __str__(self) -> str:
        return f"{self.name} ({format_version(self.version)})"


def _identifier(line: str) -> str | None:
    text = line.strip().lstrip(_ACTIVE_MARKER).strip()
    if not text:
        return None
    name = text.split()[0]
    if _LIB_SEPARATOR in name:  # a library set layered on an installation, not an installation
        return None
    return name


def parse_candidates(lines: Iterable[str], anchor: str) -> list[Candidate]:
    """
    Turn the lines of an installation listing into candidates.

    :param lines: the listing, one installation per line, the active one may be marked with ``*``
    :param anchor: regular expression that precedes the version literal inside an identifier
    :return: candidates ordered by version, then name
    """
    result: list[Candidate] = []
    for line in lines:
        if (name := _identifier(line)) is None:
            continue
        if (version := parse_version(name, anchor)) is None:
            _LOGGER.debug("skip %r as it has no version", name)
            continue
        result.append(Candidate(name=name, version=version))
    return sorted(result, key=lambda c: (c.version, c.name))


def enumerate_candidates(config: DispatchConfig, env: Mapping[str, str] | None = None) -> list[Candidate]:
    """List the installed interpreters; an empty list when the listing command is unavailable or fails."""
    env = os.environ if env is None else env
    failure, out = run_capture(config.list_command, env)
    if failure is not None:
        _LOGGER.info("%s", failure)
        return []
    candidates = parse_candidates(out.splitlines(), config.candidate_anchor)
    _LOGGER.debug("found %d candidate(s): %s", len(candidates), ", ".join(c.name for c in candidates))
    return candidates


__all__ = [
    "Candidate",
    "enumerate_candidates",
    "parse_candidates",
]
