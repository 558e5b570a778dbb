"""Decision engine for lazymove.

Classifies the source/destination pair and produces exactly one
``TransferPlan``: skip, write-replace, or truncate.  Nothing here mutates
the filesystem; ``transfer.engine`` carries the plan out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

from ..metadata.scanner import FileDescriptor
from ..verification.engine import PrefixBuffer, load_prefix, prefixes_match

logger = logging.getLogger(__name__)


class TransferDecision(Enum):
    SKIP = auto()
    WRITE = auto()
    TRUNCATE = auto()


@dataclass(frozen=True)
class TransferPlan:
    src: FileDescriptor
    dst_path: Path
    decision: TransferDecision
    reason: str
    buffer: Optional[PrefixBuffer] = None

    def __post_init__(self) -> None:
        if self.decision is TransferDecision.WRITE and self.buffer is None:
            raise ValueError(f'write plan for {self.dst_path} has no buffer')

    @property
    def mode(self) -> int:
        """Permission bits applied to whatever gets written."""
        return self.src.permissions


def needs_comparison(src: FileDescriptor, dst: Optional[FileDescriptor], cutoff: int) -> bool:
    """Whether the destination is worth reading before deciding.

    True when the sizes match, or when the destination looks like an earlier
    truncated write of a source at least ``cutoff`` bytes long.
    """
    if dst is None:
        return False
    i_size, o_size = src.size_bytes, dst.size_bytes
    if o_size == i_size:
        return True
    if o_size == cutoff and i_size > cutoff:
        return True
    return o_size == cutoff - 1 and i_size >= cutoff


def decide(src: FileDescriptor, dst: Optional[FileDescriptor], dst_path: Path, cutoff: int) -> TransferPlan:
    """Decide what to do with ``dst_path`` given the described source.

    Args:
        src: Source descriptor (a regular file).
        dst: Destination descriptor, or ``None`` when it does not exist.
        dst_path: Destination path, used even when ``dst`` is ``None``.
        cutoff: Prefix window in bytes.

    Returns:
        The plan to carry out.
    """
    if src.size_bytes == 0:
        if dst is None:
            return TransferPlan(src, dst_path, TransferDecision.SKIP, 'empty source, no destination')
        if dst.size_bytes == 0:
            return TransferPlan(src, dst_path, TransferDecision.SKIP, 'both empty')
        return TransferPlan(src, dst_path, TransferDecision.TRUNCATE, 'empty source')

    ibf = load_prefix(src.path, cutoff)
    if dst is None or not needs_comparison(src, dst, cutoff):
        reason = 'destination missing' if dst is None else 'size differs'
        return TransferPlan(src, dst_path, TransferDecision.WRITE, reason, ibf)

    # a same-size destination is marked like the source; any other is read as-is
    obf = load_prefix(dst_path, cutoff, mark=dst.size_bytes == src.size_bytes)
    logger.debug('comparing %d-byte prefix of %s with %d bytes of %s', len(ibf), src.path, len(obf), dst_path)
    if len(ibf) != len(obf):
        return TransferPlan(src, dst_path, TransferDecision.WRITE, 'prefix length differs', ibf)
    if not prefixes_match(ibf, obf):
        return TransferPlan(src, dst_path, TransferDecision.WRITE, 'content differs', ibf)
    return TransferPlan(src, dst_path, TransferDecision.SKIP, 'content matches')
