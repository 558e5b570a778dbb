from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from lazymove.decision.engine import TransferDecision, TransferPlan, decide, needs_comparison
from lazymove.metadata.scanner import FileDescriptor, describe_destination, describe_source


def _desc(size: int, path: Path = Path('f')) -> FileDescriptor:
    return FileDescriptor(path=path, is_regular=True, size_bytes=size, permissions=0o644)


@pytest.mark.parametrize(
    'i_size, o_size, expected',
    [
        (10, None, False),
        (10, 10, True),
        (10, 11, False),
        (10, 0, False),
        (5000, 4096, True),
        (4096, 4096, True),
        (4097, 4096, True),
        (4096, 4095, True),
        (5000, 4095, True),
        (4095, 4095, True),
        (4095, 4096, False),
        (4000, 4095, False),
        (5000, 4094, False),
    ],
)
def test_needs_comparison(i_size: int, o_size: Optional[int], expected: bool) -> None:
    dst = None if o_size is None else _desc(o_size)
    assert needs_comparison(_desc(i_size), dst, 4096) is expected


def _plan(src, dst, cutoff=64):
    return decide(describe_source(src), describe_destination(dst), dst, cutoff)


def test_missing_destination_writes(make_file, tmp_path) -> None:
    src = make_file('src', b'payload')
    plan = _plan(src, tmp_path / 'dst')
    assert plan.decision is TransferDecision.WRITE
    assert plan.buffer is not None and plan.buffer.data == b'payload'
    assert plan.reason == 'destination missing'


def test_size_mismatch_writes_without_reading_destination(make_file) -> None:
    src = make_file('src', b'hello')
    dst = make_file('dst', b'hello!')
    plan = _plan(src, dst)
    assert plan.decision is TransferDecision.WRITE
    assert plan.reason == 'size differs'


def test_equal_content_skips(make_file) -> None:
    src = make_file('src', b'same bytes')
    dst = make_file('dst', b'same bytes')
    plan = _plan(src, dst)
    assert plan.decision is TransferDecision.SKIP
    assert plan.buffer is None


def test_same_size_different_content_writes(make_file) -> None:
    src = make_file('src', b'abcdef')
    dst = make_file('dst', b'abcxef')
    plan = _plan(src, dst)
    assert plan.decision is TransferDecision.WRITE
    assert plan.reason == 'content differs'


def test_same_size_past_cutoff_is_treated_equal(make_file) -> None:
    cutoff = 64
    data = bytearray(b'a' * 200)
    src = make_file('src', bytes(data))
    data[cutoff + 5] = ord('b')
    dst = make_file('dst', bytes(data))
    assert _plan(src, dst, cutoff).decision is TransferDecision.SKIP


def test_same_size_inside_cutoff_writes(make_file) -> None:
    data = bytearray(b'a' * 200)
    src = make_file('src', bytes(data))
    data[10] = ord('b')
    dst = make_file('dst', bytes(data))
    assert _plan(src, dst, 64).decision is TransferDecision.WRITE


def test_cutoff_sized_destination_is_read_as_is(make_file) -> None:
    cutoff = 64
    src = make_file('src', b'q' * 65)
    dst = make_file('dst', b'q' * (cutoff - 3) + b'...')
    plan = _plan(src, dst, cutoff)
    assert plan.decision is TransferDecision.WRITE
    assert plan.reason == 'prefix length differs'


def test_cutoff_sized_destination_with_stale_tail_writes(make_file) -> None:
    cutoff = 64
    src = make_file('src', b'q' * 100)
    dst = make_file('dst', b'q' * 60 + b'ZZZZ')
    plan = _plan(src, dst, cutoff)
    assert plan.decision is TransferDecision.WRITE
    assert plan.buffer is not None
    assert plan.buffer.data == b'q' * 60 + b'...'


def test_write_plan_requires_buffer(make_file) -> None:
    src = describe_source(make_file('src', b'data'))
    with pytest.raises(ValueError):
        TransferPlan(src, src.path, TransferDecision.WRITE, 'no buffer')


def test_own_truncated_size_with_real_bytes_in_marker_slot_writes(make_file) -> None:
    src = make_file('src', b's' * 100)
    dst = make_file('dst', b's' * 63)
    plan = _plan(src, dst, 64)
    assert plan.decision is TransferDecision.WRITE


@pytest.mark.parametrize(
    'dst_content, expected',
    [(None, TransferDecision.SKIP), (b'', TransferDecision.SKIP), (b'x', TransferDecision.TRUNCATE)],
)
def test_empty_source(make_file, tmp_path, dst_content, expected) -> None:
    src = make_file('src', b'')
    dst = tmp_path / 'dst'
    if dst_content is not None:
        dst = make_file('dst', dst_content)
    plan = _plan(src, dst)
    assert plan.decision is expected
    assert plan.buffer is None


def test_plan_mode_is_source_permissions(make_file, tmp_path) -> None:
    src = make_file('src', b'data', mode=0o751)
    assert _plan(src, tmp_path / 'dst').mode == 0o751
