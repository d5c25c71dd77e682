from __future__ import annotations

from pathlib import Path

import pytest


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """a/x (10B), a/b/y (30B), a/b/z (5B)."""
    root = tmp_path / "a"
    write_file(root / "x", 10)
    write_file(root / "b" / "y", 30)
    write_file(root / "b" / "z", 5)
    return root


@pytest.fixture
def make_file():
    return write_file
