"""
Main CLI entry point for Field Reorder
"""

import logging
import sys
from pathlib import Path

import click

from field_reorder import __version__
from field_reorder.commands.reorder import ReorderCommand
from field_reorder.core.backup_manager import BackupManager
from field_reorder.core.base_processor import ProcessingStatus
from field_reorder.core.config import PROJECT_CONFIG_NAME, Config

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(
    version=__version__,
    prog_name="field-reorder",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output",
)
@click.pass_context
def cli(
    ctx,
    config: str | None,
    verbose: bool,
    quiet: bool,
):
    """Reorder struct literal and pattern fields to declaration order

    Rust struct literals and struct patterns list their fields in any order.
    This tool rewrites them to follow the order of the struct declaration,
    leaving comments and formatting untouched.
    """
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj["config"] = Config.from_file(Path(config))
    else:
        ctx.obj["config"] = Config.load_hierarchy(Path.cwd())

    # Apply CLI flags
    if verbose:
        ctx.obj["config"].verbose = True
    if quiet:
        ctx.obj["config"].quiet = True

    if ctx.obj["config"].verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif ctx.obj["config"].quiet:
        logging.getLogger().setLevel(logging.WARNING)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    help="Cursor position as a character offset",
)
@click.option(
    "--line",
    "-l",
    type=click.IntRange(min=1),
    help="Cursor line (1-based)",
)
@click.option(
    "--column",
    "--col",
    type=click.IntRange(min=1),
    help="Cursor column (1-based)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without applying",
)
@click.option(
    "--no-backup",
    is_flag=True,
    help="Skip creating backup files",
)
@click.pass_context
def apply(
    ctx,
    path: str,
    offset: int | None,
    line: int | None,
    column: int | None,
    dry_run: bool,
    no_backup: bool,
):
    """Reorder the fields of the struct literal or pattern at the cursor

    Examples:
        field-reorder apply src/main.rs --line 12 --column 9
        field-reorder apply src/main.rs --offset 240 --dry-run
    """
    if offset is None and (line is None or column is None):
        raise click.UsageError("Give either --offset or both --line and --column")
    if offset is not None and (line is not None or column is not None):
        raise click.UsageError("--offset cannot be combined with --line/--column")

    config = ctx.obj["config"]
    if dry_run:
        config.dry_run = True
    if no_backup:
        config.backup.enabled = False

    backup_manager = None
    if config.backup.enabled and not config.dry_run:
        backup_manager = BackupManager(
            backup_dir=config.backup.directory,
            compression=config.backup.compression,
            keep_sessions=config.backup.keep_sessions,
        )
        backup_manager.start_session("reorder_fields")

    command = ReorderCommand(config, backup_manager=backup_manager)
    result = command.process_file(Path(path), offset=offset, line=line, column=column)

    if backup_manager:
        backup_manager.finalize_session()

    if result.preview:
        click.echo(result.preview, nl=False)
    if not config.quiet or not result.is_success:
        click.echo(str(result))

    sys.exit(0 if result.is_success else 1)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Process directories recursively",
)
@click.pass_context
def check(ctx, path: str, recursive: bool):
    """List struct literals and patterns whose fields are out of order

    Nothing is rewritten. Exits with status 1 when any construct is out of
    order or a file cannot be parsed.

    Examples:
        field-reorder check src/ --recursive
    """
    config = ctx.obj["config"]
    command = ReorderCommand(config)
    findings, errors = command.check_path(Path(path), recursive=recursive)

    for finding in findings:
        click.echo(str(finding))
    for error in errors:
        click.echo(str(error), err=True)

    if not config.quiet:
        click.echo(f"{len(findings)} constructs out of order")

    sys.exit(1 if findings or errors else 0)


@cli.command()
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite an existing configuration file",
)
def init(force: bool):
    """Write a default configuration file to the current directory"""
    config_path = Path.cwd() / PROJECT_CONFIG_NAME
    if config_path.exists() and not force:
        click.echo(f"{config_path.name} already exists (use --force to overwrite)")
        sys.exit(1)

    Config().save(config_path)
    click.echo(f"Created {config_path.name}")


@cli.command()
@click.option(
    "--sessions",
    "list_sessions",
    is_flag=True,
    help="List backup sessions",
)
@click.option(
    "--restore",
    "restore_id",
    help="Restore all files of a backup session",
)
@click.option(
    "--clean",
    is_flag=True,
    help="Remove all backup sessions",
)
@click.pass_context
def backup(ctx, list_sessions: bool, restore_id: str | None, clean: bool):
    """Manage backup sessions created by apply"""
    config = ctx.obj["config"]
    manager = BackupManager(
        backup_dir=config.backup.directory,
        compression=config.backup.compression,
        keep_sessions=config.backup.keep_sessions,
    )

    if restore_id:
        if not manager.restore_session(restore_id):
            click.echo(f"Could not restore session {restore_id}", err=True)
            sys.exit(1)
        click.echo(f"Restored session {restore_id}")
    elif clean:
        removed = manager.clean_sessions()
        click.echo(f"Removed {removed} backup sessions")
    elif list_sessions:
        sessions = manager.list_sessions()
        if not sessions:
            click.echo("No backup sessions found")
        for session in sessions:
            files = len(session.get("files_backed_up", []))
            click.echo(f"{session['session_id']}  files: {files}")
    else:
        click.echo(ctx.get_help())


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
