"""Full compliance evaluation of one fiscal year.

:func:`evaluate_context` runs the engine over an immutable
:class:`EvaluationContext`; :class:`EvaluationService` builds that context
from the record store. Callers re-evaluate after every write, nothing is
cached between calls.
"""

import logging

from fiscoets.database.base import Database
from fiscoets.domain.apportionment import apportion_general_costs, general_cost_pool
from fiscoets.domain.classifier import classify_many
from fiscoets.domain.compliance import (
    evaluate_activities,
    evaluate_entity,
    evaluate_secondary,
)
from fiscoets.domain.entities import (
    Category,
    ComplianceReport,
    EvaluationContext,
    TargetType,
)
from fiscoets.domain.errors import (
    ConfigurationError,
    fiscal_year_not_found,
    profile_missing,
)
from fiscoets.domain.ires import select_regime_and_compute_ires
from fiscoets.domain.totals import (
    category_income,
    compute_balances,
    count_unassigned,
    target_totals,
    total_expense,
    total_income,
)

logger = logging.getLogger(__name__)


def evaluate_context(context: EvaluationContext) -> ComplianceReport:
    """Run every compliance test on a fiscal year snapshot.

    General costs are apportioned separately within each activity family.

    Args:
        context: Fiscal year, profile, movements and activities

    Returns:
        ComplianceReport with per-activity results, entity and secondary
        tests, IRES, family totals, balances and diagnostics

    Raises:
        ConfigurationError: If the fiscal year or the profile is missing
    """
    if context.fiscal_year is None:
        raise ConfigurationError("No fiscal year selected")
    if context.profile is None:
        raise ConfigurationError(profile_missing())

    fiscal_year = context.fiscal_year
    entity_type = context.profile.entity_type
    movements = context.movements
    logger.info(
        "Evaluating fiscal year %d: %d movements, %d activities",
        fiscal_year.year,
        len(movements),
        len(context.activities),
    )

    aigs = context.activities_of_general_interest
    diverse = context.diverse_activities
    fundraisers = context.fundraisers

    aig_costs = apportion_general_costs(movements, aigs)
    diverse_costs = apportion_general_costs(movements, diverse)
    fundraiser_costs = apportion_general_costs(movements, fundraisers)

    activity_results = evaluate_activities(aigs, movements, aig_costs, entity_type)
    entity = evaluate_entity(activity_results, movements, diverse)
    secondary = evaluate_secondary(movements)
    ires = select_regime_and_compute_ires(
        entity.verdict,
        entity_type,
        fiscal_year.prior_year_revenue,
        activity_results,
        category_income(movements, Category.DIVERSE_ACTIVITY),
        total_income(movements),
        total_expense(movements),
    )

    return ComplianceReport(
        fiscal_year=fiscal_year,
        entity_type=entity_type,
        general_cost_pool=general_cost_pool(movements),
        activities=tuple(activity_results),
        entity=entity,
        secondary=secondary,
        ires=ires,
        diverse_totals=tuple(
            target_totals(
                movements, TargetType.DIVERSE_ACTIVITY, [a.id for a in diverse], diverse_costs
            )
        ),
        fundraiser_totals=tuple(
            target_totals(
                movements, TargetType.FUNDRAISER, [a.id for a in fundraisers], fundraiser_costs
            )
        ),
        balances=compute_balances(movements),
        unassigned=count_unassigned(movements),
        validation_errors=context.validation_errors,
    )


class EvaluationService:
    """Service building evaluation contexts from the record store."""

    def __init__(self, db: Database):
        """Initialize evaluation service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_context(self, fiscal_year_id: int) -> EvaluationContext:
        """Snapshot a fiscal year for evaluation.

        Stored rows that fail validation are left out and reported in
        ``validation_errors``.

        Raises:
            ConfigurationError: If the fiscal year or the profile is missing
        """
        fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None:
            raise ConfigurationError(fiscal_year_not_found(fiscal_year_id))
        profile = self.db.get_profile()
        if profile is None:
            raise ConfigurationError(profile_missing())

        movements, errors = classify_many(self.db.list_movement_records(fiscal_year_id))
        return EvaluationContext(
            fiscal_year=fiscal_year,
            profile=profile,
            movements=tuple(movements),
            activities=tuple(self.db.list_activities(fiscal_year_id)),
            validation_errors=tuple(errors),
        )

    def evaluate(self, fiscal_year_id: int) -> ComplianceReport:
        """Build the context of a fiscal year and evaluate it."""
        return evaluate_context(self.build_context(fiscal_year_id))
