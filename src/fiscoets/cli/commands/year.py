"""Fiscal year commands."""

import click
from fiscoets.cli.error_handling import handle_domain_error, resolve_fiscal_year_or_exit
from fiscoets.domain.fiscal_year import FiscalYearService
from fiscoets.utils.money import format_euro, parse_amount


@click.group()
def year_group():
    """Manage fiscal years."""
    pass


@year_group.command("create")
@click.argument("year", type=int)
@click.option("--prior-revenue", default="0", help="Revenue of the previous year (e.g. 42.000,00)")
@click.pass_context
def create_year(ctx, year: int, prior_revenue: str):
    """Create a fiscal year.

    Examples:
        fiscoets year create 2025
        fiscoets year create 2025 --prior-revenue 90000
    """
    service = FiscalYearService(ctx.obj["db"])

    try:
        fiscal_year_id = service.create_fiscal_year(year, parse_amount(prior_revenue))
        click.echo(f"Created fiscal year {year} (ID: {fiscal_year_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@year_group.command("list")
@click.pass_context
def list_years(ctx):
    """List all fiscal years."""
    service = FiscalYearService(ctx.obj["db"])

    fiscal_years = service.list_fiscal_years()
    if not fiscal_years:
        click.echo("No fiscal years found.")
        return

    click.echo("\nFiscal years:")
    click.echo("-" * 60)
    for fy in fiscal_years:
        click.echo(f"ID: {fy.id:3d} | {fy.year} | Prior-year revenue: {format_euro(fy.prior_year_revenue)}")


@year_group.command("set-revenue")
@click.argument("year", metavar="YEAR")
@click.argument("amount")
@click.pass_context
def set_revenue(ctx, year: str, amount: str):
    """Set the prior-year revenue used for the forfetario ceiling.

    YEAR can be a calendar year or a fiscal year ID.
    """
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = FiscalYearService(ctx.obj["db"])

    try:
        revenue = parse_amount(amount)
        service.set_prior_year_revenue(fiscal_year_id, revenue)
        click.echo(f"Prior-year revenue set to {format_euro(revenue)}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@year_group.command("delete")
@click.argument("year", metavar="YEAR")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_year(ctx, year: str, yes: bool):
    """Delete a fiscal year with all its activities and movements.

    YEAR can be a calendar year or a fiscal year ID.
    """
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = FiscalYearService(ctx.obj["db"])
    fiscal_year = service.get_fiscal_year(fiscal_year_id)

    if not yes and not click.confirm(
        f"Delete fiscal year {fiscal_year.year} with all its activities and movements?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_fiscal_year(fiscal_year_id)
        click.echo(f"Deleted fiscal year {fiscal_year.year}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register fiscal year commands with main CLI."""
    cli.add_command(year_group, name="year")
