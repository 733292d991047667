"""Launcher settings: built-in defaults, an optional per-user JSON file and environment overrides."""

from __future__ import annotations

import dataclasses
import json
import logging
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from platformdirs import user_config_path

from ._env import EnvLineFormat

if TYPE_CHECKING:
    from collections.abc import Mapping

_DC_KW = {"frozen": True, "kw_only": True, "slots": True} if sys.version_info >= (3, 10) else {"frozen": True}

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
APP_NAME: Final[str] = "interp-dispatch"
CONFIG_ENV: Final[str] = "INTERP_DISPATCH_CONFIG"
_COMMAND_ENV: Final[dict[str, str]] = {
    "INTERP_DISPATCH_DEFAULT": "default_interpreter",
    "INTERP_DISPATCH_LIST": "list_command",
    "INTERP_DISPATCH_ENV": "env_command",
}


@dataclass(**_DC_KW)
class DispatchConfig:
    """Everything the launcher needs to know about the managed interpreter installations."""

    list_command: tuple[str, ...] = ("perlbrew", "list")
    env_command: tuple[str, ...] = ("perlbrew", "env")
    candidate_anchor: str = "perl-"
    version_anchor: str = r"(?:use|require)\s+"
    interpreter: str = "perl"
    default_interpreter: tuple[str, ...] = ("/usr/bin/perl",)
    debug_flag: str = "-d"
    check_flag: str = "-c"
    pager: str = "more"
    path_variable: str | None = "PERLBREW_PATH"
    env_format: EnvLineFormat = EnvLineFormat.POSIX_EXPORT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DispatchConfig:
        known = {field.name: field for field in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                _LOGGER.debug("ignore unknown configuration key %r", key)
                continue
            kwargs[key] = _coerce(key, value)
        return cls(**kwargs)

    def replace(self, **changes: Any) -> DispatchConfig:
        return dataclasses.replace(self, **changes)


def _coerce(key: str, value: Any) -> Any:  # noqa: ANN401
    if key == "env_format":
        return EnvLineFormat(value)
    if key in {"list_command", "env_command", "default_interpreter"}:
        if isinstance(value, str):
            return tuple(shlex.split(value))
        if isinstance(value, list) and all(isinstance(i, str) for i in value):
            return tuple(value)
        msg = f"{key} must be a string or a list of strings, got {value!r}"
        raise TypeError(msg)
    if key == "path_variable" and value is None:
        return None
    if not isinstance(value, str):
        msg = f"{key} must be a string, got {value!r}"
        raise TypeError(msg)
    return value


def default_config_path(env: Mapping[str, str]) -> Path:
    if explicit := env.get(CONFIG_ENV):
        return Path(explicit).expanduser()
    return user_config_path(APP_NAME) / "config.json"


def _read_config_file(path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError:
        _LOGGER.debug("ignore invalid configuration file %s", path, exc_info=True)
        return None
    except OSError:
        _LOGGER.debug("no configuration file at %s", path)
        return None
    if not isinstance(data, dict):
        _LOGGER.debug("ignore configuration file %s as it does not hold an object", path)
        return None
    _LOGGER.debug("got configuration from %s", path)
    return data


def load_config(env: Mapping[str, str], path: Path | None = None) -> DispatchConfig:
    """
    Build the launcher configuration.

    :param env: the environment to read overrides (and the configuration file location) from
    :param path: explicit configuration file, overrides the environment and the per-user location
    :return: the resolved configuration
    """
    data = _read_config_file(path if path is not None else default_config_path(env)) or {}
    config = DispatchConfig.from_dict(data)
    overrides = {field: tuple(shlex.split(value)) for key, field in _COMMAND_ENV.items() if (value := env.get(key))}
    if overrides:
        _LOGGER.debug("environment overrides %s", ", ".join(sorted(overrides)))
        config = config.replace(**overrides)
    return config


__all__ = [
    "APP_NAME",
    "CONFIG_ENV",
    "DispatchConfig",
    "default_config_path",
    "load_config",
]
