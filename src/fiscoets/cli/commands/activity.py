"""Activity commands."""

import click
from fiscoets.cli.error_handling import handle_domain_error, resolve_fiscal_year_or_exit
from fiscoets.domain.activity import ActivityService
from fiscoets.domain.entities import DiverseActivity, TargetType

FAMILIES = {
    "aig": TargetType.ACTIVITY_OF_GENERAL_INTEREST,
    "diverse": TargetType.DIVERSE_ACTIVITY,
    "fundraiser": TargetType.FUNDRAISER,
}

FAMILY_LABELS = {
    TargetType.ACTIVITY_OF_GENERAL_INTEREST: "AIG",
    TargetType.DIVERSE_ACTIVITY: "Diverse",
    TargetType.FUNDRAISER: "Fundraiser",
}


@click.group()
def activity_group():
    """Manage activities (AIG, diverse activities, fundraisers)."""
    pass


@activity_group.command("create")
@click.argument("year", metavar="YEAR")
@click.argument("family", type=click.Choice(list(FAMILIES), case_sensitive=False))
@click.argument("name")
@click.option("--description", default="", help="Activity description")
@click.option("--occasional", is_flag=True, help="Mark a diverse activity as occasional")
@click.pass_context
def create_activity(ctx, year: str, family: str, name: str, description: str, occasional: bool):
    """Create an activity in a fiscal year.

    Examples:
        fiscoets activity create 2025 aig "Corsi di formazione"
        fiscoets activity create 2025 diverse "Bar sociale"
        fiscoets activity create 2025 diverse "Sagra" --occasional
    """
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = ActivityService(ctx.obj["db"])

    try:
        activity_id = service.create_activity(
            fiscal_year_id=fiscal_year_id,
            target_type=FAMILIES[family.lower()],
            name=name,
            description=description,
            occasional=occasional,
        )
        click.echo(f"Created activity '{name.strip()}' (ID: {activity_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@activity_group.command("list")
@click.argument("year", metavar="YEAR")
@click.option("--type", "family", type=click.Choice(list(FAMILIES), case_sensitive=False), help="Only one family")
@click.pass_context
def list_activities(ctx, year: str, family: str | None):
    """List the activities of a fiscal year."""
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    service = ActivityService(ctx.obj["db"])

    activities = service.list_activities(fiscal_year_id, FAMILIES[family.lower()] if family else None)
    if not activities:
        click.echo("No activities found.")
        return

    click.echo("\nActivities:")
    click.echo("-" * 70)
    for a in activities:
        flag = " (occasional)" if isinstance(a, DiverseActivity) and a.occasional else ""
        click.echo(f"ID: {a.id:3d} | {FAMILY_LABELS[a.target_type]:10s} | {a.name}{flag}")


@activity_group.command("rename")
@click.argument("activity_id", type=int, metavar="ACTIVITY_ID")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--description", help="New description")
@click.pass_context
def rename_activity(ctx, activity_id: int, new_name: str, description: str | None):
    """Rename an activity."""
    service = ActivityService(ctx.obj["db"])

    try:
        service.update_activity(activity_id, name=new_name, description=description)
        click.echo(f"Renamed activity {activity_id} to '{new_name.strip()}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@activity_group.command("occasional")
@click.argument("activity_id", type=int, metavar="ACTIVITY_ID")
@click.option("--on/--off", "occasional", default=True, help="Mark or unmark as occasional")
@click.pass_context
def set_occasional(ctx, activity_id: int, occasional: bool):
    """Mark a diverse activity as occasional.

    Income of occasional diverse activities does not count on the
    commercial side of the entity test.
    """
    service = ActivityService(ctx.obj["db"])

    try:
        service.set_occasional(activity_id, occasional)
        state = "occasional" if occasional else "not occasional"
        click.echo(f"Activity {activity_id} marked as {state}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@activity_group.command("delete")
@click.argument("activity_id", type=int, metavar="ACTIVITY_ID")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_activity(ctx, activity_id: int, yes: bool):
    """Delete an activity.

    Movements allocated to it are kept and become unassigned.
    """
    service = ActivityService(ctx.obj["db"])

    activity = service.get_activity(activity_id)
    if activity is None:
        click.echo(f"Error: Activity {activity_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete activity '{activity.name}' (ID: {activity_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        cleared = service.delete_activity(activity_id)
        click.echo(f"Deleted activity '{activity.name}'")
        if cleared:
            click.echo(f"{cleared} movement{'s' if cleared != 1 else ''} now unassigned")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register activity commands with main CLI."""
    cli.add_command(activity_group, name="activity")
