"""Main CLI entry point."""

import logging

import click
from fiscoets.database.factories import create_sqlite_database

# Import and register all commands at module level
from fiscoets.cli.commands import (
    profile,
    year,
    activity,
    movement,
    report,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FISCOETS_DB_PATH environment variable)",
    envvar="FISCOETS_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="FISCOETS_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Fiscoets - fiscal compliance for third-sector entities.

    Record the movements of an ETS, APS or ODV, allocate them to its
    activities and check the 6% test, the entity commerciality test, the
    secondary-activity limits and the IRES due.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
profile.register_commands(cli)
year.register_commands(cli)
activity.register_commands(cli)
movement.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
