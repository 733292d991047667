from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest

from interp_dispatch import DispatchConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def config() -> DispatchConfig:
    return DispatchConfig()


@pytest.fixture
def fake_command(tmp_path: Path) -> Callable[..., tuple[str, ...]]:
    """Build a command that runs a small Python program printing *out* and exiting with *code*."""

    def _make(out: str, code: int = 0, name: str = "tool") -> tuple[str, ...]:
        script = tmp_path / f"{name}.py"
        script.write_text(f"import sys\nsys.stdout.write({out!r})\nsys.exit({code})\n", encoding="utf-8")
        return sys.executable, str(script)

    return _make
