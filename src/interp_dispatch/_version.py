"""Version declarations: parse them out of free-form text and match them against installed versions."""

from __future__ import annotations

import re
from typing import Final

VersionTuple = tuple[int, ...]

_MAX_VERSION_PARTS: Final[int] = 3

# most specific first, so that v1.2.3 never matches as v1.2
_FORMS: Final[tuple[str, ...]] = (
    r"v(\d+)\.(\d+)\.(\d+)",  # v5.20.1
    r"v(\d+)\.(\d+)",  # v5.20
    r"(\d+)\.(\d+)\.(\d+)",  # 5.20.1
    r"(\d+)\.(\d{3})(\d{1,3})",  # 5.020001
    r"(\d+)\.(\d{1,3})",  # 5.020
)


def _compile(anchor: str, form: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*(?:{anchor}){form}", re.MULTILINE)


def parse_version(text: str, anchor: str) -> VersionTuple | None:
    """
    Find the first version literal that directly follows *anchor* in *text*.

    :param text: the text to scan, searched line by line
    :param anchor: regular expression that must precede the version literal
    :return: the version as a tuple of one to three integers, ``None`` if nothing matched
    """
    for form in _FORMS:
        if match := _compile(anchor, form).search(text):
            return tuple(int(group) for group in match.groups())
    return None


def satisfies(candidate: VersionTuple, requested: VersionTuple | None) -> bool:
    """Check that *candidate* equals *requested* on every position the request declares."""
    if requested is None:
        return True
    if len(candidate) < len(requested):
        return False
    return all(our == req for our, req in zip(candidate, requested))


def format_version(version: VersionTuple) -> str:
    return ".".join(str(part) for part in version[:_MAX_VERSION_PARTS])


__all__ = [
    "VersionTuple",
    "format_version",
    "parse_version",
    "satisfies",
]
