"""Compliance report commands."""

import click
from fiscoets.cli.error_handling import handle_domain_error, resolve_fiscal_year_or_exit
from fiscoets.domain.entities import ComplianceReport, ForfetarioBreakdown, TargetTotals
from fiscoets.domain.evaluation import EvaluationService
from fiscoets.utils.money import format_euro

AMOUNT_WIDTH = 16


def _evaluate(ctx, year: str) -> ComplianceReport:
    """Evaluate a fiscal year, or exit with a CLI error."""
    fiscal_year_id = resolve_fiscal_year_or_exit(ctx, year)
    try:
        return EvaluationService(ctx.obj["db"]).evaluate(fiscal_year_id)
    except ValueError as e:
        handle_domain_error(ctx, e)


def _line(label: str, amount, width: int = 44) -> None:
    click.echo(f"{label:<{width}} {format_euro(amount):>{AMOUNT_WIDTH}}")


def _show_diagnostics(report: ComplianceReport) -> None:
    if report.unassigned:
        click.echo(f"\nWarning: {report.unassigned}, excluded from activity totals", err=True)
    for error in report.validation_errors:
        click.echo(f"Warning: skipped {error}", err=True)


def _names(ctx, fiscal_year_id: int) -> dict[int, str]:
    return {a.id: a.name for a in ctx.obj["db"].list_activities(fiscal_year_id)}


def _show_totals(title: str, totals: tuple[TargetTotals, ...], names: dict[int, str]) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 90)
    if not totals:
        click.echo("None.")
        return
    click.echo(f"{'Activity':30s} {'Income':>14s} {'Expense':>14s} {'Gen. costs':>14s} {'Result':>14s}")
    for t in totals:
        click.echo(
            f"{names.get(t.target_id, t.target_id)!s:30.30s} {format_euro(t.te):>14s} "
            f"{format_euro(t.tu):>14s} {format_euro(t.cg):>14s} {format_euro(t.te - t.tu_eff):>14s}"
        )


@click.group()
def report_group():
    """Compliance reports for a fiscal year."""
    pass


@report_group.command("activities")
@click.argument("year", metavar="YEAR")
@click.pass_context
def activities_report(ctx, year: str):
    """6% test for each Activity of General Interest.

    Also shows the totals of diverse activities and fundraisers.
    """
    report = _evaluate(ctx, year)
    names = _names(ctx, report.fiscal_year.id)

    click.echo(f"\nFiscal year {report.fiscal_year.year} - {report.entity_type.name}")
    _line("General costs to apportion", report.general_cost_pool)

    click.echo("\nActivities of general interest (6% test)")
    click.echo("-" * 90)
    if not report.activities:
        click.echo("None.")
    for r in report.activities:
        click.echo(f"\n{names.get(r.activity_id, r.activity_id)} (ID: {r.activity_id})")
        _line("  Income (TE)", r.te)
        _line("  Relevant income (TER)", r.ter)
        _line("  Direct costs (TU)", r.tu)
        _line("  Imputed general costs (CG)", r.cg)
        _line("  Effective costs (TU + CG)", r.tu_eff)
        _line("  Threshold (effective costs + 6%)", r.threshold)
        click.echo(f"  Verdict: {r.verdict.value}")

    _show_totals("Diverse activities", report.diverse_totals, names)
    _show_totals("Fundraisers", report.fundraiser_totals, names)
    _show_diagnostics(report)


@report_group.command("test")
@click.argument("year", metavar="YEAR")
@click.pass_context
def test_report(ctx, year: str):
    """Entity commerciality test and secondary-activity limits."""
    report = _evaluate(ctx, year)
    entity = report.entity
    secondary = report.secondary

    click.echo(f"\nEntity commerciality test - fiscal year {report.fiscal_year.year}")
    click.echo("-" * 62)
    _line("A  Commercial AIG income", entity.a)
    _line("B  Diverse activity income", entity.b)
    _line("C  Non-commercial AIG income", entity.c)
    _line("D  Other non-commercial income", entity.d)
    _line("A + B", entity.commercial_side)
    _line("C + D", entity.noncommercial_side)
    click.echo(f"Entity: {entity.verdict.value}")

    click.echo("\nSecondary activities")
    click.echo("-" * 62)
    _line("Diverse activity income", secondary.total_diverse_income)
    _line("30% of total income", secondary.threshold30)
    click.echo(f"  Within 30% of income: {'yes' if secondary.pass30 else 'no'}")
    _line("66% of total costs", secondary.threshold66)
    click.echo(f"  Within 66% of costs: {'yes' if secondary.pass66 else 'no'}")
    _show_diagnostics(report)


@report_group.command("ires")
@click.argument("year", metavar="YEAR")
@click.pass_context
def ires_report(ctx, year: str):
    """IRES regime and tax due."""
    report = _evaluate(ctx, year)
    ires = report.ires
    breakdown = ires.breakdown

    click.echo(f"\nIRES - fiscal year {report.fiscal_year.year}")
    click.echo("-" * 62)
    click.echo(f"Regime: {ires.regime.value}")
    if isinstance(breakdown, ForfetarioBreakdown):
        _line("Commercial AIG income", breakdown.aig_commercial_income)
        _line("Diverse activity income", breakdown.diverse_income)
        _line("Taxable base", breakdown.base)
        click.echo(f"Coefficient: {(breakdown.coefficient * 100).normalize()}%")
    else:
        _line("Total income", breakdown.income)
        _line("Total expense", breakdown.expense)
        _line("Profit", breakdown.profit)
        click.echo(f"Rate: {(breakdown.rate * 100).normalize()}%")
    _line("IRES due", ires.tax)
    _show_diagnostics(report)


@report_group.command("balances")
@click.argument("year", metavar="YEAR")
@click.pass_context
def balances_report(ctx, year: str):
    """Cash and bank position and operating result."""
    report = _evaluate(ctx, year)
    b = report.balances

    click.echo(f"\nBalances - fiscal year {report.fiscal_year.year}")
    click.echo("-" * 62)
    _line("Cash surplus from previous year", b.cash_surplus)
    _line("Cash income", b.cash_income)
    _line("Cash expense", b.cash_expense)
    _line("Cash available", b.cash_availability)
    click.echo()
    _line("Bank surplus from previous year", b.bank_surplus)
    _line("Bank income", b.bank_income)
    _line("Bank expense", b.bank_expense)
    _line("Bank available", b.bank_availability)
    click.echo()
    _line("Total income", b.total_income)
    _line("Total expense", b.total_expense)
    label = "Operating surplus" if b.operating_result >= 0 else "Operating deficit"
    _line(label, b.operating_result)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
