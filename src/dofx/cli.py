"""Command-line interface for dofx."""

import os
import re
import sys
import click
from typing import Any, Dict, List, Optional
import logging

from .models.core import ProcessingResult, ERROR_POLICIES
from .processor import FileProcessor
from .scanners.range_resolver import parse_date_range
from .scanners.stats_collector import format_report
from .utils.config_manager import ConfigManager, ConfigError
from .utils.error_handler import ErrorHandler


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

USAGE = "usage: dofx (stats|clean|clean-range START END) <file1> <file2> ..."

DATE_ARGUMENT = re.compile(r'[0-9]{8}')


class DofxCLI:
    """Holds configuration and the file processor for one invocation"""

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        """Initialize CLI with configuration and command-line overrides"""
        self.config_manager = ConfigManager(config_path)
        self.config_manager.load_config()
        if overrides:
            self.config_manager.update_config(overrides)
        self.config = self.config_manager.load_config()

        self.error_handler = ErrorHandler(
            log_directory=self.config.log_directory,
            enable_console=False
        )
        self.processor = FileProcessor(self.config, error_handler=self.error_handler)

    def run(self, command: str, files: List[str], date_range=None, on_result=None) -> bool:
        """Process files and return True if every file succeeded"""
        try:
            self.processor.process_files(command, files, date_range, on_result)
            summary = self.error_handler.get_error_summary()
            self.error_handler.log_info(f"Finished {command} run", context=summary)

            progress = self.error_handler.progress
            if progress.failed_files or progress.skipped_files:
                click.echo(
                    f"✗ {progress.failed_files} file(s) failed"
                    + (f", {progress.skipped_files} not attempted" if progress.skipped_files else "")
                    + ". Check logs for details.",
                    err=True
                )
                return False
            return True
        finally:
            self.error_handler.close()


class UsageExitGroup(click.Group):
    """Group that reports usage problems with the tool's usage line and exit code 1"""

    def main(self, args=None, prog_name=None, complete_var=None, standalone_mode=True, **extra):
        try:
            return super().main(
                args=args,
                prog_name=prog_name,
                complete_var=complete_var,
                standalone_mode=False,
                **extra
            )
        except click.UsageError as e:
            click.echo(USAGE)
            click.echo(f"Error: {e.format_message()}", err=True)
            sys.exit(1)
        except click.ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except click.Abort:
            click.echo("Aborted!", err=True)
            sys.exit(1)


def _print_stats(result: ProcessingResult, show_header: bool):
    if show_header:
        click.echo(f"==> {result.file_path} <==")
    if result.success:
        for line in format_report(result.report):
            click.echo(line)
    else:
        click.echo(f"✗ {result.file_path}: {'; '.join(result.errors)}", err=True)
    if show_header:
        click.echo()


def _print_rewrite(result: ProcessingResult):
    if result.success:
        click.echo(
            f"✓ {result.file_path}: {result.resolve_result.substitution_count} fitid(s) replaced"
            f" -> {result.output_file}"
        )
    else:
        click.echo(f"✗ {result.file_path}: {'; '.join(result.errors)}", err=True)


def _validate_date(ctx, param, value):
    if not DATE_ARGUMENT.fullmatch(value):
        raise click.BadParameter(f"expected YYYYMMDD, got {value!r}")
    return value


@click.group(cls=UsageExitGroup, no_args_is_help=False)
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--seed', type=int, default=None, help='Seed for replacement fitid generation')
@click.option('--error-policy', type=click.Choice(ERROR_POLICIES), default=None,
              help='Stop at the first failed file (abort) or keep going (continue)')
@click.pass_context
def cli(ctx, config, verbose, seed, error_policy):
    """dofx - report and resolve duplicate FITIDs in OFX/QFX files"""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    overrides = {}
    if seed is not None:
        overrides['seed'] = seed
    if error_policy is not None:
        overrides['error_policy'] = error_policy

    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['overrides'] = overrides


def _get_cli(ctx) -> DofxCLI:
    try:
        return DofxCLI(ctx.obj['config_path'], ctx.obj['overrides'])
    except ConfigError as e:
        raise click.UsageError(str(e), ctx)


@cli.command()
@click.argument('files', nargs=-1, required=True)
@click.pass_context
def stats(ctx, files):
    """Print posted date range and duplicate fitids"""
    cli_instance = _get_cli(ctx)
    show_header = len(files) > 1

    ok = cli_instance.run('stats', list(files), on_result=lambda result: _print_stats(result, show_header))
    if not ok:
        sys.exit(1)


@cli.command()
@click.argument('files', nargs=-1, required=True)
@click.pass_context
def clean(ctx, files):
    """Replace repeated fitids with random ones in *_cleaned copies"""
    cli_instance = _get_cli(ctx)

    click.echo("Changing transaction with same id into different ones ...")
    ok = cli_instance.run('clean', list(files), on_result=_print_rewrite)
    if not ok:
        sys.exit(1)


@cli.command('clean-range')
@click.argument('start', callback=_validate_date)
@click.argument('end', callback=_validate_date)
@click.argument('files', nargs=-1, required=True)
@click.pass_context
def clean_range(ctx, start, end, files):
    """Replace fitids posted between START and END (YYYYMMDD, inclusive)"""
    try:
        date_range = parse_date_range(start, end)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx)

    cli_instance = _get_cli(ctx)

    click.echo(f"Replacing fitids posted between {date_range.start} and {date_range.end} ...")
    ok = cli_instance.run('clean-range', list(files), date_range=date_range, on_result=_print_rewrite)
    if not ok:
        sys.exit(1)


@cli.command('init-config')
@click.argument('output_path', default='dofx_config.json')
@click.option('--format', 'config_format', type=click.Choice(['json', 'yaml']), default=None,
              help='Configuration file format (defaults to the file extension)')
@click.pass_context
def init_config(ctx, output_path, config_format):
    """Generate a configuration file template"""
    if config_format == 'yaml' and not output_path.endswith(('.yml', '.yaml')):
        output_path = os.path.splitext(output_path)[0] + '.yml'
    elif config_format == 'json' and not output_path.endswith('.json'):
        output_path = os.path.splitext(output_path)[0] + '.json'

    try:
        ConfigManager().save_config_template(output_path)
        click.echo(f"✓ Configuration template generated: {output_path}")
    except OSError as e:
        click.echo(f"✗ Error generating config template: {str(e)}", err=True)
        sys.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()
