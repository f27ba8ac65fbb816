"""CLI entry point for RosterDesk.

- serve: run the REST API with uvicorn
- import: replace the roster with a JSON export
- export: write the roster to a JSON file
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click

from rosterdesk.config import Settings
from rosterdesk.exceptions import ConfigError, RosterDeskError
from rosterdesk.logging import get_logger, setup_logging
from rosterdesk.roster import RosterService
from rosterdesk.roster_store import RosterRepository

logger = get_logger("cli")


def _load_settings(db_path: str | None) -> Settings:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    if db_path:
        settings = replace(settings, db_path=db_path)
    return settings


def _open_service(settings: Settings) -> RosterService:
    repository = RosterRepository(settings.db_path, busy_timeout=settings.busy_timeout)
    return RosterService(repository, attendance_scope=settings.attendance_scope)


@click.group()
@click.version_option(package_name="rosterdesk")
def main() -> None:
    """RosterDesk - course rosters with role-scoped editing."""
    pass


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option("--db-path", default=None, help="SQLite database file (overrides ROSTERDESK_DB_PATH)")
def serve(host: str, port: int, db_path: str | None) -> None:
    """Run the REST API."""
    import uvicorn  # noqa: PLC0415

    from rosterdesk.api.app import create_app  # noqa: PLC0415

    setup_logging()
    settings = _load_settings(db_path)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


@main.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--db-path", default=None, help="SQLite database file (overrides ROSTERDESK_DB_PATH)")
def import_roster(source: Path, db_path: str | None) -> None:
    """Replace the roster with the students in SOURCE."""
    setup_logging(console=False)
    settings = _load_settings(db_path)
    try:
        service = _open_service(settings)
        try:
            logger.info("Importing roster from %s into %s", source, settings.db_path)
            count = service.import_roster(source)
        finally:
            service.repository.close()
    except RosterDeskError as e:
        click.echo(f"Import failed: {e}", err=True)
        sys.exit(1)
    click.echo(f"Imported {count} students from {source}")


@main.command("export")
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--db-path", default=None, help="SQLite database file (overrides ROSTERDESK_DB_PATH)")
def export_roster(target: Path, db_path: str | None) -> None:
    """Write the roster to TARGET as JSON."""
    setup_logging(console=False)
    settings = _load_settings(db_path)
    try:
        service = _open_service(settings)
        try:
            count = service.export_roster(target)
        finally:
            service.repository.close()
    except RosterDeskError as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)
    click.echo(f"Exported {count} students to {target}")


if __name__ == "__main__":
    main()
