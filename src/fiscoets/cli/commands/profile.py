"""Entity profile commands."""

import click
from fiscoets.cli.error_handling import handle_domain_error
from fiscoets.domain.entities import EntityType
from fiscoets.domain.profile import ProfileService


@click.group()
def profile_group():
    """Manage the entity profile."""
    pass


@profile_group.command("show")
@click.pass_context
def show_profile(ctx):
    """Show the entity profile."""
    service = ProfileService(ctx.obj["db"])

    profile = service.get_profile()
    if profile is None:
        click.echo("No profile configured. Use 'fiscoets profile set --type ...'.")
        return

    click.echo(f"Entity type: {profile.entity_type.name}")
    click.echo(f"Name:        {profile.name or '-'}")
    click.echo(f"Fiscal code: {profile.fiscal_code or '-'}")
    click.echo(f"VAT number:  {profile.vat_number or '-'}")


@profile_group.command("set")
@click.option(
    "--type",
    "entity_type",
    type=click.Choice([t.name for t in EntityType], case_sensitive=False),
    required=True,
    help="Entity type",
)
@click.option("--name", help="Entity name")
@click.option("--fiscal-code", help="Codice fiscale")
@click.option("--vat-number", help="Partita IVA (11 digits)")
@click.pass_context
def set_profile(ctx, entity_type: str, name: str | None, fiscal_code: str | None, vat_number: str | None):
    """Create or update the entity profile.

    Examples:
        fiscoets profile set --type APS --name "Circolo Arci"
        fiscoets profile set --type ODV --fiscal-code 97000000000
    """
    service = ProfileService(ctx.obj["db"])

    try:
        profile = service.set_profile(
            entity_type=entity_type,
            name=name,
            fiscal_code=fiscal_code,
            vat_number=vat_number,
        )
        click.echo(f"Profile saved: {profile.entity_type.name}" + (f" '{profile.name}'" if profile.name else ""))
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group, name="profile")
