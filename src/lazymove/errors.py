"""Error taxonomy for lazymove.

The engine raises ``LazyMoveError``; only the console layer turns an error
into a diagnostic line and an exit status.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional, Union

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_NOINPUT = 66
EXIT_OSERR = 71


class ErrorKind(Enum):
    USAGE = EXIT_USAGE
    NO_INPUT = EXIT_NOINPUT
    OS_ERROR = EXIT_OSERR

    @property
    def exit_code(self) -> int:
        return self.value


class LazyMoveError(Exception):
    """A fatal failure naming the operation and the path involved."""

    def __init__(
        self,
        kind: ErrorKind,
        operation: str,
        path: Union[str, Path],
        reason: Optional[str] = None,
        cause: Optional[OSError] = None,
    ):
        self.kind = kind
        self.operation = operation
        self.path = str(path)
        self.cause = cause
        if reason is None:
            reason = cause.strerror if cause is not None and cause.strerror else str(cause)
        self.reason = reason
        super().__init__(f'{operation}({self.path}): {reason}')

    @classmethod
    def from_os_error(
        cls, operation: str, path: Union[str, Path], exc: OSError, kind: ErrorKind = ErrorKind.OS_ERROR
    ) -> 'LazyMoveError':
        return cls(kind, operation, path, cause=exc)

    @property
    def exit_code(self) -> int:
        return self.kind.exit_code
