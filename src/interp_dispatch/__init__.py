"""Dispatch scripts to the installed interpreter matching the version they declare."""

from __future__ import annotations

from importlib.metadata import version

from ._candidates import Candidate, enumerate_candidates, parse_candidates
from ._check import reformat_diagnostic, report
from ._config import DispatchConfig, load_config
from ._env import EnvLineFormat, fetch_env, parse_env_lines
from ._launch import launch
from ._resolve import Resolution, resolve
from ._select import select
from ._shebang import is_governed, parse_shebang
from ._version import VersionTuple, parse_version, satisfies

__version__ = version("interp-dispatch")

__all__ = [
    "Candidate",
    "DispatchConfig",
    "EnvLineFormat",
    "Resolution",
    "VersionTuple",
    "__version__",
    "enumerate_candidates",
    "fetch_env",
    "is_governed",
    "launch",
    "load_config",
    "parse_candidates",
    "parse_env_lines",
    "parse_shebang",
    "parse_version",
    "reformat_diagnostic",
    "report",
    "resolve",
    "satisfies",
    "select",
]
