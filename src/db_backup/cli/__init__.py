"""CLI for running, inspecting and serving database backups.

Usage:
    db-backup run                      # one backup (cron / scheduler entry point)
    db-backup dump --output dump.sql   # build the script without uploading
    db-backup list                     # stored backups
    db-backup tables                   # tables and columns that would be dumped
    db-backup serve --port 8000        # HTTP API

Commands:
    run     - Connect, dump, upload; exit 1 on failure
    dump    - Build the SQL script locally (stdout or file)
    list    - List stored backups with their creation time
    tables  - Show the schema inspector's view of the database
    serve   - Run the FastAPI app with uvicorn
"""

import argparse
import asyncio
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.table import Table

from db_backup.adapters.postgres import database_name_from_url
from db_backup.api.app import create_app
from db_backup.backup.dump import DumpBuilder
from db_backup.backup.naming import parse_filename
from db_backup.backup.orchestrator import list_backups, scheduled_backup
from db_backup.config.loader import load_backup_config
from db_backup.config.models import BackupConfig
from db_backup.errors import BackupError, ConfigError
from db_backup.factory import create_connection, create_sink
from db_backup.log import configure_logging
from db_backup.schema.inspector import SchemaInspector

console = Console()


def _load_config(args: argparse.Namespace) -> BackupConfig | None:
    """Load configuration, printing the problem and returning None on error."""
    config_path = Path(args.config) if args.config else None
    try:
        return load_backup_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return None


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_run(config: BackupConfig) -> int:
    result = await scheduled_backup(config)
    if result.success:
        console.print(
            f"[bold green]v[/bold green] Backup uploaded: [bold cyan]{result.filename}[/bold cyan] "
            f"[dim]({result.table_count} tables, {result.size_bytes / 1024:.2f} KB)[/dim]"
        )
        return 0
    console.print(f"[bold red]x[/bold red] Backup failed: {result.error}")
    return 1


async def _async_dump(config: BackupConfig, output: str | None) -> int:
    connection = create_connection(config)
    try:
        await connection.connect()
        inspector = SchemaInspector(connection, excluded_tables=set(config.exclude_tables))
        builder = DumpBuilder(
            inspector,
            database=database_name_from_url(config.database_url),
            batch_size=config.batch_size,
        )
        artifact = await builder.build(config.schema_name)
    except BackupError as e:
        console.print(f"[bold red]x[/bold red] Dump failed: {e}")
        return 1
    finally:
        await connection.close()

    if output:
        Path(output).write_text(artifact.text, encoding="utf-8")
        console.print(
            f"Wrote {len(artifact.tables)} tables ({artifact.size_bytes} bytes) to "
            f"[cyan]{output}[/cyan]"
        )
    else:
        sys.stdout.write(artifact.text)
    return 0


async def _async_list(config: BackupConfig, limit: int) -> int:
    try:
        keys = await list_backups(create_sink(config.storage), limit)
    except BackupError as e:
        console.print(f"[red]Failed to list backups: {e}[/red]")
        return 1

    if not keys:
        console.print("[yellow]No backups found.[/yellow]")
        return 0

    table = Table(title=f"Backups ({len(keys)})", show_header=True, header_style="bold")
    table.add_column("Filename")
    table.add_column("Created (UTC)")
    for key in keys:
        created = parse_filename(key)
        table.add_row(key, created.strftime("%Y-%m-%d %H:%M:%S") if created else "[dim]?[/dim]")
    console.print(table)
    return 0


async def _async_tables(config: BackupConfig) -> int:
    connection = create_connection(config)
    try:
        await connection.connect()
        inspector = SchemaInspector(connection, excluded_tables=set(config.exclude_tables))
        tables = await inspector.list_tables(config.schema_name)

        table = Table(
            title=f"Schema: {config.schema_name}", show_header=True, header_style="bold"
        )
        table.add_column("Table", style="cyan")
        table.add_column("Columns")
        for t in tables:
            columns = await inspector.list_columns(config.schema_name, t.name)
            table.add_row(t.name, ", ".join(c.definition for c in columns))
    except BackupError as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1
    finally:
        await connection.close()

    console.print(table)
    return 0


# ============================================================================
# Command handlers
# ============================================================================


def cmd_run(args: argparse.Namespace) -> int:
    """Run one backup.

    Returns:
        0 on success, 1 on failure.
    """
    config = _load_config(args)
    if config is None:
        return 1
    return asyncio.run(_async_run(config))


def cmd_dump(args: argparse.Namespace) -> int:
    """Build the dump script without uploading it."""
    config = _load_config(args)
    if config is None:
        return 1
    return asyncio.run(_async_dump(config, args.output))


def cmd_list(args: argparse.Namespace) -> int:
    """List stored backups."""
    config = _load_config(args)
    if config is None:
        return 1
    return asyncio.run(_async_list(config, args.limit))


def cmd_tables(args: argparse.Namespace) -> int:
    """Show tables and columns of the configured schema."""
    config = _load_config(args)
    if config is None:
        return 1
    return asyncio.run(_async_tables(config))


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve the HTTP API until interrupted."""
    config = _load_config(args)
    if config is None:
        return 1
    if config.api.token is None:
        console.print(
            "[yellow]Warning: no API token configured; protected routes will reject all requests.[/yellow]"
        )
    uvicorn.run(
        create_app(config),
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        log_config=None,
    )
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="db-backup",
        description="Logical PostgreSQL backups to object storage",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to db-backup.toml (default: $DB_BACKUP_CONFIG or ./db-backup.toml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: $DB_BACKUP_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_run = subparsers.add_parser("run", help="Run one backup and upload it")
    p_run.set_defaults(func=cmd_run)

    p_dump = subparsers.add_parser("dump", help="Build the SQL dump without uploading")
    p_dump.add_argument("--output", "-o", help="Write to this file instead of stdout")
    p_dump.set_defaults(func=cmd_dump)

    p_list = subparsers.add_parser("list", help="List stored backups")
    p_list.add_argument("--limit", type=int, default=1000, help="Maximum keys to list")
    p_list.set_defaults(func=cmd_list)

    p_tables = subparsers.add_parser("tables", help="Show tables and columns to be dumped")
    p_tables.set_defaults(func=cmd_tables)

    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Bind address (default: config api.host)")
    p_serve.add_argument("--port", type=int, default=None, help="Port (default: config api.port)")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
