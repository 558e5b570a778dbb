"""Transfer engine for lazymove.

Carries out a ``TransferPlan``.  A write goes to ``<dst>~`` first and is then
renamed over the destination, so readers never see a half-written file.
Every failure is raised as ``LazyMoveError`` naming the operation and path.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..config_loader import LazyConfig, TransferMode
from ..decision.engine import TransferDecision, TransferPlan, decide
from ..errors import LazyMoveError
from ..metadata.scanner import describe_destination, describe_source
from ..verification.engine import PrefixBuffer

logger = logging.getLogger(__name__)

TEMP_SUFFIX = '~'


def temp_path_for(dst: Path) -> Path:
    return dst.with_name(dst.name + TEMP_SUFFIX)


def _open_for_write(path: Path, mode: int) -> int:
    try:
        return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    except OSError as exc:
        raise LazyMoveError.from_os_error('open', path, exc) from exc


def _chmod(path: Path, mode: int) -> None:
    try:
        path.chmod(mode)
    except OSError as exc:
        raise LazyMoveError.from_os_error('chmod', path, exc) from exc


def write_replace(buffer: PrefixBuffer, dst: Path, mode: int) -> None:
    """Write ``buffer`` to ``<dst>~`` and rename it onto ``dst``."""
    tmp = temp_path_for(dst)
    fd = _open_for_write(tmp, mode)
    try:
        view = memoryview(buffer.data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except OSError as exc:
        raise LazyMoveError.from_os_error('write', tmp, exc) from exc
    finally:
        os.close(fd)
    # O_CREAT mode is filtered by the umask and ignored for an existing file
    _chmod(tmp, mode)
    try:
        tmp.replace(dst)
    except OSError as exc:
        raise LazyMoveError.from_os_error('rename', f'{tmp}, {dst}', exc) from exc


def truncate(dst: Path, mode: int) -> None:
    """Empty ``dst`` in place and give it ``mode``."""
    os.close(_open_for_write(dst, mode))
    _chmod(dst, mode)


def apply_plan(plan: TransferPlan, dry_run: bool = False) -> None:
    prefix = 'would ' if dry_run else ''
    if plan.decision is TransferDecision.SKIP:
        logger.info('skip %s -> %s (%s)', plan.src.path, plan.dst_path, plan.reason)
        return
    if plan.decision is TransferDecision.TRUNCATE:
        logger.info('%struncate %s (%s)', prefix, plan.dst_path, plan.reason)
        if not dry_run:
            truncate(plan.dst_path, plan.mode)
        return
    buffer = plan.buffer
    if buffer is None:
        raise ValueError(f'write plan for {plan.dst_path} has no buffer')
    logger.info(
        '%swrite %d bytes %s -> %s (%s)', prefix, len(buffer), plan.src.path, plan.dst_path, plan.reason
    )
    if not dry_run:
        write_replace(buffer, plan.dst_path, plan.mode)


def remove_source(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        raise LazyMoveError.from_os_error('unlink', path, exc) from exc


def lazy_transfer(src: Path, dst: Path, config: Optional[LazyConfig] = None) -> TransferPlan:
    """Copy or move ``src`` to ``dst``, writing only when the content differs.

    Args:
        src: Source path; must be an existing regular file.
        dst: Destination path; must be a regular file or absent.
        config: Cutoff, mode and dry-run settings (defaults when ``None``).

    Returns:
        The plan that was carried out.

    Raises:
        LazyMoveError: on the first failing filesystem operation.
    """
    config = config or LazyConfig()
    src_desc = describe_source(src)
    dst_desc = describe_destination(dst)
    plan = decide(src_desc, dst_desc, dst, config.cutoff)
    apply_plan(plan, dry_run=config.dry_run)
    if config.mode is TransferMode.MOVE:
        if config.dry_run:
            logger.info('would remove %s', src)
        else:
            logger.info('remove %s', src)
            remove_source(src)
    return plan
