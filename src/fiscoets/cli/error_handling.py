"""CLI error handling helpers."""

import click

from fiscoets.domain.errors import DomainError
from fiscoets.domain.fiscal_year import FiscalYearService
from fiscoets.utils.fiscal_year_resolver import resolve_fiscal_year


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_fiscal_year_or_exit(ctx: click.Context, year: str | int) -> int:
    """Resolve a calendar year or fiscal year ID, or exit with a CLI error."""
    try:
        return resolve_fiscal_year(FiscalYearService(ctx.obj["db"]), year)
    except ValueError as e:
        handle_domain_error(ctx, e)
