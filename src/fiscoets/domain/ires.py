"""IRES regime selection and tax computation."""

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from fiscoets import config
from fiscoets.domain.entities import (
    ActivityResult,
    EntityType,
    ForfetarioBreakdown,
    IresResult,
    OrdinarioBreakdown,
    Regime,
    Verdict,
)
from fiscoets.domain.errors import ConfigurationError
from fiscoets.domain.totals import ZERO

logger = logging.getLogger(__name__)


def select_regime(
    entity_verdict: Verdict,
    entity_type: EntityType,
    prior_year_revenue: Decimal,
) -> Regime:
    """Forfetario for non-ETS, non-commercial entities within the revenue ceiling."""
    if (
        entity_type is not EntityType.ETS
        and entity_verdict is Verdict.NON_COMMERCIAL
        and prior_year_revenue <= config.FORFETARIO_REVENUE_CEILING
    ):
        return Regime.FORFETARIO
    return Regime.ORDINARIO


def forfetario_coefficient(entity_type: EntityType) -> Decimal:
    if entity_type is EntityType.APS:
        return config.FORFETARIO_COEFFICIENT_APS
    return config.FORFETARIO_COEFFICIENT_DEFAULT


def compute_forfetario(
    entity_type: EntityType,
    aig_commercial_income: Decimal,
    diverse_income: Decimal,
) -> IresResult:
    """Tax = (commercial AIG income + all diverse income) x coefficient."""
    base = aig_commercial_income + diverse_income
    coefficient = forfetario_coefficient(entity_type)
    return IresResult(
        regime=Regime.FORFETARIO,
        tax=base * coefficient,
        breakdown=ForfetarioBreakdown(
            aig_commercial_income=aig_commercial_income,
            diverse_income=diverse_income,
            base=base,
            coefficient=coefficient,
        ),
    )


def compute_ordinario(overall_income: Decimal, overall_expense: Decimal) -> IresResult:
    """Tax = 24% of the profit, nothing on a loss."""
    profit = overall_income - overall_expense
    return IresResult(
        regime=Regime.ORDINARIO,
        tax=max(ZERO, profit) * config.IRES_RATE,
        breakdown=OrdinarioBreakdown(
            income=overall_income,
            expense=overall_expense,
            profit=profit,
            rate=config.IRES_RATE,
        ),
    )


def select_regime_and_compute_ires(
    entity_verdict: Verdict,
    entity_type: Optional[EntityType],
    prior_year_revenue: Decimal,
    aig_results: Iterable[ActivityResult],
    diverse_income_total: Decimal,
    overall_income: Decimal,
    overall_expense: Decimal,
) -> IresResult:
    """Choose the IRES regime and compute the tax due.

    Args:
        entity_verdict: Outcome of the entity commerciality test
        entity_type: Entity type from the profile
        prior_year_revenue: Revenue of the previous fiscal year
        aig_results: 6% test results, the TER of commercial ones is taxed
            under forfetario
        diverse_income_total: All income recorded as diverse activity
        overall_income: All ordinary income
        overall_expense: All ordinary expense

    Returns:
        IresResult with regime, tax and breakdown

    Raises:
        ConfigurationError: If entity_type is missing
    """
    if entity_type is None:
        raise ConfigurationError("Entity type is required to select the IRES regime")

    regime = select_regime(entity_verdict, entity_type, prior_year_revenue)
    if regime is Regime.FORFETARIO:
        aig_commercial = sum((r.ter for r in aig_results if r.is_commercial), ZERO)
        result = compute_forfetario(entity_type, aig_commercial, diverse_income_total)
    else:
        result = compute_ordinario(overall_income, overall_expense)

    logger.info("IRES regime %s, tax %s", result.regime.name, result.tax)
    return result
