"""Movement commands."""

import click
from fiscoets.cli.error_handling import handle_domain_error, resolve_fiscal_year_or_exit
from fiscoets.domain.entities import (
    DESCRIPTION_TABLES,
    Direction,
    MoneyAccount,
    Movement,
)
from fiscoets.domain.movement import MovementService
from fiscoets.utils.money import format_euro


def _format_movement(m: Movement) -> str:
    date_str = m.date.isoformat() if m.date else "-" * 10
    if m.is_ordinary:
        label = m.category.name
        if m.description_code is not None:
            label += f" #{m.description_code}"
    else:
        label = m.kind.name
    if m.allocation is not None:
        target = f"-> {m.allocation.target_id}"
    elif m.is_unassigned:
        target = "unassigned"
    else:
        target = ""
    sign = "+" if m.is_income else "-"
    return (
        f"ID: {m.id:4d} | {date_str} | {m.account.name:4s} | {label:38s} | "
        f"{sign}{format_euro(m.amount):>14s} | {target}"
    )


@click.group()
def movement_group():
    """Record and allocate movements."""
    pass


@movement_group.command("add")
@click.argument("year", metavar="YEAR")
@click.option(
    "--direction",
    type=click.Choice([d.name for d in Direction], case_sensitive=False),
    required=True,
    help="INCOME or EXPENSE",
)
@click.option(
    "--category",
    required=True,
    help="Category name or code (e.g. AIG, DIVERSE, DONATIONS, GENERAL_COSTS)",
)
@click.option("--amount", required=True, help="Amount (e.g. 1.234,56)")
@click.option("--code", "description_code", type=int, help="Coded description, see 'movement codes'")
@click.option(
    "--account",
    type=click.Choice([a.name for a in MoneyAccount], case_sensitive=False),
    default="CASH",
    show_default=True,
)
@click.option("--date", "date_str", help="Movement date (YYYY-MM-DD, DD/MM/YYYY, today)")
@click.option("--description", help="Free-text description")
@click.option("--activity", "activity_id", type=int, help="Activity ID to allocate to")
@click.pass_context
def add_movement(
    ctx,
    year: str,
    direction: str,
    category: str,
    amount: str,
    description_code: int | None,
    account: str,
    date_str: str | None,
    description: str | None,
    activity_id: int | None,
):
    """Record an income or expense.

    Examples:
        fiscoets movement add 2025 --direction INCOME --category AIG --amount 1200 --code 3
        fiscoets movement add 2025 --direction EXPENSE --category GENERAL_COSTS --amount 450,00
        fiscoets movement add 2025 --direction INCOME --category DONATIONS --amount 300 --account BANK
    """
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = MovementService(ctx.obj["db"])

    try:
        movement_id = service.add_movement(
            fiscal_year_id=fiscal_year_id,
            direction=direction,
            category=category,
            amount=amount,
            description_code=description_code,
            account=account,
            date=date_str,
            description=description,
            activity_id=activity_id,
        )
        click.echo(f"Recorded movement {movement_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@movement_group.command("surplus")
@click.argument("year", metavar="YEAR")
@click.argument("account", type=click.Choice(["cash", "bank"], case_sensitive=False))
@click.argument("amount")
@click.pass_context
def set_surplus(ctx, year: str, account: str, amount: str):
    """Set the surplus carried over from the previous year.

    Examples:
        fiscoets movement surplus 2025 cash 350
        fiscoets movement surplus 2025 bank 12.500,00
    """
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = MovementService(ctx.obj["db"])

    try:
        service.set_surplus(fiscal_year_id, account, amount)
        click.echo(f"Prior-year {account.lower()} surplus set")
    except ValueError as e:
        handle_domain_error(ctx, e)


@movement_group.command("list")
@click.argument("year", metavar="YEAR")
@click.option("--unassigned", is_flag=True, help="Only movements still to allocate")
@click.option("--direction", type=click.Choice([d.name for d in Direction], case_sensitive=False))
@click.option("--category", help="Category name or code")
@click.pass_context
def list_movements(ctx, year: str, unassigned: bool, direction: str | None, category: str | None):
    """List the movements of a fiscal year."""
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = MovementService(ctx.obj["db"])

    try:
        movements = service.list_movements(
            fiscal_year_id, direction=direction, category=category, unassigned=unassigned
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not movements:
        click.echo("No movements found.")
        return

    click.echo("\nMovements:")
    click.echo("-" * 100)
    for m in movements:
        click.echo(_format_movement(m))


@movement_group.command("assign")
@click.argument("movement_id", type=int, metavar="MOVEMENT_ID")
@click.argument("activity_id", type=int, metavar="ACTIVITY_ID")
@click.pass_context
def assign_movement(ctx, movement_id: int, activity_id: int):
    """Allocate a movement to an activity of its category."""
    service = MovementService(ctx.obj["db"])

    try:
        service.assign(movement_id, activity_id)
        click.echo(f"Movement {movement_id} allocated to activity {activity_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@movement_group.command("unassign")
@click.argument("movement_id", type=int, metavar="MOVEMENT_ID")
@click.pass_context
def unassign_movement(ctx, movement_id: int):
    """Remove the allocation of a movement."""
    service = MovementService(ctx.obj["db"])

    try:
        service.unassign(movement_id)
        click.echo(f"Movement {movement_id} unassigned")
    except ValueError as e:
        handle_domain_error(ctx, e)


@movement_group.command("delete")
@click.argument("movement_id", type=int, metavar="MOVEMENT_ID")
@click.pass_context
def delete_movement(ctx, movement_id: int):
    """Delete a movement."""
    service = MovementService(ctx.obj["db"])

    try:
        service.delete_movement(movement_id)
        click.echo(f"Deleted movement {movement_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@movement_group.command("codes")
def list_codes():
    """Show the coded descriptions of AIG and diverse movements."""
    for (category, direction), table in DESCRIPTION_TABLES.items():
        click.echo(f"\n{category.name} {direction.name}:")
        for code, text in table.items():
            click.echo(f"  {code:2d}  {text}")


def register_commands(cli):
    """Register movement commands with main CLI."""
    cli.add_command(movement_group, name="movement")
