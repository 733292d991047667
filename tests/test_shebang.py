from __future__ import annotations

import pytest

from interp_dispatch import is_governed, parse_shebang
from interp_dispatch._shebang import shebang_interpreter


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        pytest.param("#!/usr/bin/perl\nprint 1;\n", ["/usr/bin/perl"], id="plain"),
        pytest.param("#!/usr/bin/env perl -w\n", ["/usr/bin/env", "perl", "-w"], id="env"),
        pytest.param("#! /bin/sh\r\necho\r\n", ["/bin/sh"], id="space-crlf"),
        pytest.param("#!/usr/bin/python3", ["/usr/bin/python3"], id="no-newline"),
    ],
)
def test_parse_shebang(source: str, expected: list[str]) -> None:
    assert parse_shebang(source) == expected


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("", id="empty"),
        pytest.param("print 1;\n#!/usr/bin/perl\n", id="not-first"),
        pytest.param(" #!/usr/bin/perl\n", id="indented"),
        pytest.param("#!\n", id="bare-marker"),
    ],
)
def test_parse_shebang_none(source: str) -> None:
    assert parse_shebang(source) is None


@pytest.mark.parametrize(
    ("command", "expected"),
    [
        pytest.param(["/usr/bin/perl"], "perl", id="direct"),
        pytest.param(["/usr/bin/env", "perl"], "perl", id="env"),
        pytest.param(["/usr/bin/env", "-S", "perl", "-w"], "perl", id="env-option"),
        pytest.param(["/usr/bin/env", "LC_ALL=C", "python3"], "python3", id="env-assignment"),
        pytest.param(["/usr/bin/env"], None, id="env-alone"),
        pytest.param([], None, id="empty"),
    ],
)
def test_shebang_interpreter(command: list[str], expected: str | None) -> None:
    assert shebang_interpreter(command) == expected


@pytest.mark.parametrize(
    ("command", "expected"),
    [
        pytest.param(None, True, id="no-shebang"),
        pytest.param(["/usr/bin/perl"], True, id="perl"),
        pytest.param(["/usr/local/bin/perl5.20.1"], True, id="versioned-perl"),
        pytest.param(["/usr/bin/env", "perl"], True, id="env-perl"),
        pytest.param(["/usr/bin/python3"], False, id="python"),
        pytest.param(["/bin/sh"], False, id="sh"),
        pytest.param(["/usr/bin/perldoc"], False, id="perl-prefixed-tool"),
        pytest.param(["/usr/bin/env"], False, id="env-alone"),
    ],
)
def test_is_governed(command: list[str] | None, expected: bool) -> None:
    assert is_governed(command, "perl") is expected
