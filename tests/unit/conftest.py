"""Shared fixtures: build throwaway .rulesync trees under tmp_path."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

WriteDoc = Callable[[str, str], Path]


@pytest.fixture
def rulesync_dir(tmp_path: Path) -> Path:
    """An empty .rulesync directory inside a fake repository root."""
    root = tmp_path / ".rulesync"
    root.mkdir()
    return root


@pytest.fixture
def write_doc(rulesync_dir: Path) -> WriteDoc:
    """Write a file relative to the .rulesync root, creating parent dirs."""

    def _write(rel_path: str, content: str) -> Path:
        path = rulesync_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
