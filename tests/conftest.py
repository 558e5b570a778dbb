from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a file under ``tmp_path`` with the given bytes and permission bits."""

    def _make(name: str, data: bytes, mode: int = 0o644) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        os.chmod(path, mode)
        return path

    return _make
