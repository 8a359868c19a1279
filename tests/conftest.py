from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def write_pairs(path: Path, pairs: list[tuple[int, int]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{x} {y}\n" for x, y in pairs), encoding="utf-8")
    return path


def write_settings(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def doubling_pairs_path(tmp_path: Path) -> Path:
    return write_pairs(tmp_path / "input-target.txt", [(1, 2), (2, 4), (3, 6)])


@pytest.fixture
def mixed_pairs_path(tmp_path: Path) -> Path:
    return write_pairs(
        tmp_path / "mixed.txt",
        [(1, 2), (2, 3), (3, 4), (123, 432), (10, 1), (-10, 37)],
    )


@pytest.fixture
def settings_file(tmp_path: Path) -> Callable[[list[str]], Path]:
    def _write(lines: list[str]) -> Path:
        return write_settings(tmp_path / "settings.txt", lines)

    return _write
