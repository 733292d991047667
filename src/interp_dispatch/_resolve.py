"""Decide which interpreter runs a script, and in which environment."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from ._candidates import Candidate, enumerate_candidates
from ._env import fetch_env
from ._select import select
from ._shebang import is_governed, parse_shebang
from ._version import parse_version

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ._config import DispatchConfig

_DC_KW = {"frozen": True, "kw_only": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

ORIGIN_CANDIDATE: Final[str] = "candidate"
ORIGIN_SHEBANG: Final[str] = "shebang"
ORIGIN_DEFAULT: Final[str] = "default"

CandidatesProvider = Callable[["DispatchConfig", "Mapping[str, str]"], "Sequence[Candidate]"]


@dataclass(**_DC_KW)
class Resolution:
    """The interpreter command to run a script with, and the environment to run it in."""

    command: tuple[str, ...]
    env: Mapping[str, str]
    origin: str
    candidate: Candidate | None = None
    governed: bool = True


@dataclass(**_DC_KW)
class _Context:
    source: str
    shebang: list[str] | None
    config: DispatchConfig
    env: Mapping[str, str]
    candidates_provider: CandidatesProvider


def _from_foreign_shebang(ctx: _Context) -> Resolution | None:
    if ctx.shebang is None or is_governed(ctx.shebang, ctx.config.interpreter):
        return None
    return Resolution(command=tuple(ctx.shebang), env=dict(ctx.env), origin=ORIGIN_SHEBANG, governed=False)


def _from_declared_version(ctx: _Context) -> Resolution | None:
    if parse_version(ctx.source, ctx.config.version_anchor) is None:
        _LOGGER.debug("no version declared")
        return None
    candidates = ctx.candidates_provider(ctx.config, ctx.env)
    if (candidate := select(ctx.source, candidates, ctx.config.version_anchor)) is None:
        return None
    if (env := fetch_env(ctx.config, candidate, ctx.env)) is None:
        _LOGGER.warning("cannot activate %s, ignore it", candidate.name)
        return None
    return Resolution(command=(ctx.config.interpreter,), env=env, origin=ORIGIN_CANDIDATE, candidate=candidate)


def _from_governed_shebang(ctx: _Context) -> Resolution | None:
    if ctx.shebang is None:
        return None
    return Resolution(command=tuple(ctx.shebang), env=dict(ctx.env), origin=ORIGIN_SHEBANG)


def _from_default(ctx: _Context) -> Resolution:
    return Resolution(command=ctx.config.default_interpreter, env=dict(ctx.env), origin=ORIGIN_DEFAULT)


_STEPS: Final[tuple[Callable[[_Context], Resolution | None], ...]] = (
    _from_foreign_shebang,
    _from_declared_version,
    _from_governed_shebang,
)


def resolve(
    source: str,
    config: DispatchConfig,
    env: Mapping[str, str] | None = None,
    candidates_provider: CandidatesProvider = enumerate_candidates,
) -> Resolution:
    """
    Resolve the interpreter for a script.

    The steps are tried in order and the first one that resolves wins: a shebang naming some other interpreter, an
    installed interpreter matching the declared version, the script's own shebang and finally the default interpreter.

    :param source: the script content
    :param config: the launcher configuration
    :param env: the environment to start from, never modified; defaults to a copy of the process environment
    :param candidates_provider: lists the installed interpreters, only called when a version is declared
    :return: the resolution
    """
    env = os.environ.copy() if env is None else env
    ctx = _Context(
        source=source,
        shebang=parse_shebang(source),
        config=config,
        env=env,
        candidates_provider=candidates_provider,
    )
    for step in _STEPS:
        if (result := step(ctx)) is not None:
            _LOGGER.info("run with %s via %s", " ".join(result.command), result.origin)
            return result
    result = _from_default(ctx)
    _LOGGER.info("run with default %s", " ".join(result.command))
    return result


__all__ = [
    "ORIGIN_CANDIDATE",
    "ORIGIN_DEFAULT",
    "ORIGIN_SHEBANG",
    "CandidatesProvider",
    "Resolution",
    "resolve",
]
