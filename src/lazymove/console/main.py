"""Command-line interface for lazymove.

Installed twice: ``lazycopy`` leaves the source in place, ``lazymove`` deletes
it after a successful run.  ``--mode`` overrides the name-based choice.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import click

from ..config_loader import (
    COPY_COMMAND,
    DEFAULT_CUTOFF,
    MOVE_COMMAND,
    LazyConfig,
    TransferMode,
    load_config,
    parse_cutoff,
)
from ..errors import ErrorKind, LazyMoveError
from ..logging.logger import configure_logging
from ..transfer.engine import lazy_transfer


class CutoffType(click.ParamType):
    name = 'size'

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> int:
        try:
            return parse_cutoff(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


class LazyUsageError(click.UsageError):
    exit_code = ErrorKind.USAGE.exit_code


class TransferFailed(click.ClickException):
    def __init__(self, error: LazyMoveError):
        super().__init__(str(error))
        self.exit_code = error.exit_code


class LazyCommand(click.Command):
    """Report every command-line mistake with the usage exit status."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = ErrorKind.USAGE.exit_code
            raise


@click.command(name=COPY_COMMAND, cls=LazyCommand)
@click.option('-b', '--bs', 'cutoff', type=CutoffType(), default=None, metavar='SIZE',
              help=f'Process no more than SIZE bytes from input (default {DEFAULT_CUTOFF}, hex with 0x).')
@click.option('--mode', type=click.Choice([m.value for m in TransferMode]), default=None,
              help='Copy or move regardless of the invoked command name.')
@click.option('-n', '--dry-run', is_flag=True, default=False, help='Decide and report, but change nothing.')
@click.option('-v', '--verbose', is_flag=True, default=False, help='Report the decision taken.')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help='YAML file with default settings.')
@click.argument('source', type=click.Path(path_type=Path))
@click.argument('destination', type=click.Path(path_type=Path))
@click.pass_context
def cli(
    ctx: click.Context,
    cutoff: Optional[int],
    mode: Optional[str],
    dry_run: bool,
    verbose: bool,
    config_path: Optional[Path],
    source: Path,
    destination: Path,
) -> None:
    """Copy or move SOURCE to DESTINATION lazily (only if they differ)."""
    config = LazyConfig()
    if config_path is not None:
        try:
            config = load_config(config_path)
        except (ValueError, OSError) as exc:
            raise LazyUsageError(f'{config_path}: {exc}', ctx) from exc

    resolved = TransferMode(mode) if mode else TransferMode.from_prog_name(ctx.find_root().info_name or '')
    config = config.with_overrides(
        cutoff=cutoff,
        mode=resolved,
        dry_run=dry_run or None,
        verbose=verbose or None,
    )
    configure_logging(config.verbose)

    try:
        lazy_transfer(source, destination, config)
    except LazyMoveError as exc:
        raise TransferFailed(exc) from exc


def main(argv: Optional[List[str]] = None, prog_name: Optional[str] = None) -> None:
    cli.main(args=argv, prog_name=prog_name)


def copy_main() -> None:
    main(prog_name=COPY_COMMAND)


def move_main() -> None:
    main(prog_name=MOVE_COMMAND)


if __name__ == '__main__':  # pragma: no cover
    main()
