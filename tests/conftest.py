"""Shared fixtures for lsfnd tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """
    A directory `d` holding `a.txt`, `b.txt` and `sub/`, where `sub/` holds
    `c.txt` and `deep/e.md`.
    """
    d = tmp_path / "d"
    d.mkdir()
    (d / "a.txt").write_text("a")
    (d / "b.txt").write_text("b")
    sub = d / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c")
    (sub / "deep").mkdir()
    (sub / "deep" / "e.md").write_text("# e")
    return d
