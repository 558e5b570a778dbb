"""Prefix comparison for lazymove.

Only the first ``cutoff`` bytes of a file are ever read.  A source read that
fills the whole window is marked partial: it is cut to ``cutoff - 1`` bytes
and its last three bytes are replaced by ``...``.  Two partial buffers that
agree up to the marker compare equal even when the files differ further on.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import LazyMoveError

MARKER = b'...'


@dataclass(frozen=True)
class PrefixBuffer:
    data: bytes
    partial: bool = False

    def __len__(self) -> int:
        return len(self.data)


def mark_partial(chunk: bytes, cutoff: int) -> PrefixBuffer:
    """Turn a full ``cutoff``-byte read into a partial-marked buffer."""
    if len(chunk) != cutoff:
        raise ValueError(f'expected a full {cutoff}-byte window, got {len(chunk)} bytes')
    length = cutoff - 1
    return PrefixBuffer(chunk[:length - len(MARKER)] + MARKER, partial=True)


def load_prefix(path: Path, cutoff: int, mark: bool = True) -> PrefixBuffer:
    """Read at most ``cutoff`` bytes from the start of ``path``.

    Args:
        path: File to read.
        cutoff: Window size in bytes.
        mark: Mark a full window as partial; ``False`` keeps the bytes as read.

    Raises:
        LazyMoveError: if the file cannot be opened or read.
    """
    try:
        f = path.open('rb')
    except OSError as exc:
        raise LazyMoveError.from_os_error('open', path, exc) from exc
    with f:
        try:
            chunk = f.read(cutoff)
        except OSError as exc:
            raise LazyMoveError.from_os_error('read', path, exc) from exc
    if mark and len(chunk) == cutoff:
        return mark_partial(chunk, cutoff)
    return PrefixBuffer(chunk)


def prefixes_match(a: PrefixBuffer, b: PrefixBuffer) -> bool:
    """Compare two prefix buffers by length first, then by content."""
    if len(a) != len(b):
        return False
    return a.data == b.data
