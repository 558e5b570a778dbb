"""Filesystem metadata for lazymove.

Source and destination are each described by a ``FileDescriptor`` taken from
a single ``stat`` call at decision time.  Both must be regular files; anything
else is fatal.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import ErrorKind, LazyMoveError


@dataclass(frozen=True)
class FileDescriptor:
    path: Path
    is_regular: bool
    size_bytes: int
    permissions: int


def _describe(path: Path, st: os.stat_result) -> FileDescriptor:
    return FileDescriptor(
        path=path,
        is_regular=stat.S_ISREG(st.st_mode),
        size_bytes=st.st_size,
        permissions=stat.S_IMODE(st.st_mode) & 0o777,
    )


def _require_regular(desc: FileDescriptor) -> FileDescriptor:
    if not desc.is_regular:
        raise LazyMoveError(ErrorKind.OS_ERROR, 'stat', desc.path, reason='not a regular file')
    return desc


def describe_source(path: Path) -> FileDescriptor:
    """Stat the source file.

    Raises:
        LazyMoveError: ``NO_INPUT`` if the path does not exist, ``OS_ERROR``
            for any other stat failure or when it is not a regular file.
    """
    try:
        st = path.stat()
    except FileNotFoundError as exc:
        raise LazyMoveError.from_os_error('stat', path, exc, ErrorKind.NO_INPUT) from exc
    except OSError as exc:
        raise LazyMoveError.from_os_error('stat', path, exc) from exc
    return _require_regular(_describe(path, st))


def describe_destination(path: Path) -> Optional[FileDescriptor]:
    """Stat the destination file, returning ``None`` when it is absent."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise LazyMoveError.from_os_error('stat', path, exc) from exc
    return _require_regular(_describe(path, st))
