"""Configuration for lazymove.

A ``LazyConfig`` value is built once at startup from the command line (and an
optional YAML file) and passed explicitly to the transfer engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

DEFAULT_CUTOFF = 4096
MIN_CUTOFF = 4
MAX_CUTOFF = 0x20000

MOVE_COMMAND = 'lazymove'
COPY_COMMAND = 'lazycopy'

_CUTOFF_RE = re.compile(r'0x([0-9a-fA-F]+)|([0-9]+)', re.ASCII)


class TransferMode(Enum):
    COPY = 'copy'
    MOVE = 'move'

    @classmethod
    def from_prog_name(cls, name: str) -> 'TransferMode':
        """Move only when invoked under exactly the move command name."""
        return cls.MOVE if Path(name).name == MOVE_COMMAND else cls.COPY


@dataclass(frozen=True)
class LazyConfig:
    cutoff: int = DEFAULT_CUTOFF
    mode: TransferMode = TransferMode.COPY
    dry_run: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        check_cutoff(self.cutoff)

    def with_overrides(self, **changes: Any) -> 'LazyConfig':
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def check_cutoff(value: int) -> int:
    if not MIN_CUTOFF <= value <= MAX_CUTOFF:
        raise ValueError(f'unsafe cutoff size: {value} (expected {MIN_CUTOFF}..{MAX_CUTOFF})')
    return value


def parse_cutoff(text: Union[str, int]) -> int:
    """Parse a cutoff given as decimal or as ``0x``-prefixed hexadecimal.

    Raises:
        ValueError: if the text is not a number or the value is out of range.
    """
    if isinstance(text, bool):
        raise ValueError(f'invalid cutoff size: {text!r}')
    if isinstance(text, int):
        return check_cutoff(text)
    match = _CUTOFF_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f'invalid cutoff size: {text!r}')
    hex_digits, dec_digits = match.groups()
    value = int(hex_digits, 16) if hex_digits is not None else int(dec_digits, 10)
    return check_cutoff(value)


_KNOWN_KEYS = {'cutoff', 'verbose'}


def load_config(path: Path) -> LazyConfig:
    """Load settings from a YAML mapping.

    Args:
        path: YAML file with optional ``cutoff`` and ``verbose`` keys.

    Returns:
        A ``LazyConfig`` in copy mode; the caller applies the invoked mode and
        any command-line overrides.
    """
    with path.open('r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f'{path}: invalid YAML: {exc}') from exc
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f'{path}: expected a mapping at top level')
    return config_from_mapping(data)


def config_from_mapping(data: Mapping[str, Any]) -> LazyConfig:
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f'unknown configuration keys: {", ".join(sorted(unknown))}')
    kwargs: Dict[str, Any] = {}
    if 'cutoff' in data:
        kwargs['cutoff'] = parse_cutoff(data['cutoff'])
    if 'verbose' in data:
        kwargs['verbose'] = bool(data['verbose'])
    return LazyConfig(**kwargs)
