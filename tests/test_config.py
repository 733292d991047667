from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from interp_dispatch import DispatchConfig, EnvLineFormat, load_config
from interp_dispatch._config import CONFIG_ENV, default_config_path

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _write(path: Path, content: object) -> Path:
    path.write_text(json.dumps(content), encoding="utf-8")
    return path


def test_defaults() -> None:
    config = DispatchConfig()
    assert config.list_command == ("perlbrew", "list")
    assert config.env_command == ("perlbrew", "env")
    assert config.candidate_anchor == "perl-"
    assert config.interpreter == "perl"
    assert config.default_interpreter == ("/usr/bin/perl",)
    assert config.env_format is EnvLineFormat.POSIX_EXPORT


def test_load_config_missing_file(tmp_path: Path) -> None:
    assert load_config({}, tmp_path / "missing.json") == DispatchConfig()


def test_load_config_from_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {
            "list_command": "plenv versions --bare",
            "env_command": ["plenv", "env"],
            "candidate_anchor": "",
            "env_format": "csh",
            "pager": "less -R",
            "path_variable": None,
        },
    )
    config = load_config({}, path)
    assert config.list_command == ("plenv", "versions", "--bare")
    assert config.env_command == ("plenv", "env")
    assert config.candidate_anchor == ""
    assert config.env_format is EnvLineFormat.CSH_SETENV
    assert config.pager == "less -R"
    assert config.path_variable is None


def test_load_config_invalid_json(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config({}, path) == DispatchConfig()
    assert "ignore invalid configuration file" in caplog.text


def test_load_config_not_an_object(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", ["perlbrew"])
    assert load_config({}, path) == DispatchConfig()


def test_load_config_unknown_key(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)
    path = _write(tmp_path / "config.json", {"colour": "blue", "interpreter": "cperl"})
    config = load_config({}, path)
    assert config.interpreter == "cperl"
    assert "ignore unknown configuration key 'colour'" in caplog.text


@pytest.mark.parametrize(
    "content",
    [
        pytest.param({"interpreter": 5}, id="not-a-string"),
        pytest.param({"list_command": ["perlbrew", 1]}, id="mixed-list"),
        pytest.param({"default_interpreter": {"a": 1}}, id="mapping"),
    ],
)
def test_load_config_wrong_type(tmp_path: Path, content: dict[str, object]) -> None:
    path = _write(tmp_path / "config.json", content)
    with pytest.raises(TypeError, match="must be a string"):
        load_config({}, path)


def test_load_config_bad_env_format(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"env_format": "fish"})
    with pytest.raises(ValueError, match="fish"):
        load_config({}, path)


def test_load_config_environment_overrides(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"list_command": "plenv versions"})
    env = {
        "INTERP_DISPATCH_DEFAULT": "/opt/perl/bin/perl -X",
        "INTERP_DISPATCH_LIST": "perlbrew list",
        "INTERP_DISPATCH_ENV": "",
    }
    config = load_config(env, path)
    assert config.default_interpreter == ("/opt/perl/bin/perl", "-X")
    assert config.list_command == ("perlbrew", "list")
    assert config.env_command == ("perlbrew", "env")


def test_load_config_path_from_environment(tmp_path: Path) -> None:
    path = _write(tmp_path / "custom.json", {"interpreter": "cperl"})
    assert load_config({CONFIG_ENV: str(path)}).interpreter == "cperl"


def test_default_config_path_explicit(tmp_path: Path) -> None:
    assert default_config_path({CONFIG_ENV: str(tmp_path / "a.json")}) == tmp_path / "a.json"


def test_default_config_path_per_user(mocker: MockerFixture, tmp_path: Path) -> None:
    user_config = mocker.patch("interp_dispatch._config.user_config_path", return_value=tmp_path)
    assert default_config_path({}) == tmp_path / "config.json"
    user_config.assert_called_once_with("interp-dispatch")


def test_config_replace_keeps_original() -> None:
    config = DispatchConfig()
    changed = config.replace(env_format=EnvLineFormat.CSH_SETENV)
    assert changed.env_format is EnvLineFormat.CSH_SETENV
    assert config.env_format is EnvLineFormat.POSIX_EXPORT
