"""Pick the installed interpreter that best fits a declared version."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ._version import format_version, parse_version, satisfies

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._candidates import Candidate

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


def select(requested_text: str, candidates: Iterable[Candidate], anchor: str) -> Candidate | None:
    """
    Select the candidate for the version declared in *requested_text*.

    No declared version means no selection at all, whatever the candidates are. Otherwise the highest version among
    the candidates that match every declared position wins, ties go to the greater name.

    :param requested_text: text holding the version declaration
    :param candidates: the installed interpreters
    :param anchor: regular expression that precedes the version literal of the declaration
    :return: the chosen candidate, ``None`` if nothing was declared or nothing fits
    """
    if (requested := parse_version(requested_text, anchor)) is None:
        return None
    matching = [c for c in candidates if satisfies(c.version, requested)]
    if not matching:
        _LOGGER.info("no installed interpreter satisfies %s", format_version(requested))
        return None
    best = max(matching, key=lambda c: (c.version, c.name))
    _LOGGER.info("selected %s for %s", best, format_version(requested))
    return best


__all__ = [
    "select",
]
