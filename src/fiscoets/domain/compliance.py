"""Commerciality and secondariness tests.

- 6% test per Activity of General Interest (art. 79 c.2-bis CTS)
- Entity-wide commerciality test (art. 79 c.5 CTS)
- Secondary-activity test on diverse activities (D.M. 107/2021)

All comparisons are strict where the rule says "exceeds": a tie is never
commercial.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Optional

from fiscoets import config
from fiscoets.domain.entities import (
    Activity,
    ActivityResult,
    Category,
    DiverseActivity,
    EntityResult,
    EntityType,
    Movement,
    SecondaryResult,
    TargetType,
    Verdict,
)
from fiscoets.domain.errors import ConfigurationError, ValidationError
from fiscoets.domain.totals import (
    ZERO,
    category_income,
    sum_amounts,
    total_expense,
    total_income,
)

logger = logging.getLogger(__name__)

AIG = TargetType.ACTIVITY_OF_GENERAL_INTEREST


def relevant_income(income: Iterable[Movement], entity_type: EntityType) -> Decimal:
    """TER: allocated income, minus member-only income for APS."""
    if entity_type is EntityType.APS:
        return sum_amounts(income, lambda m: m.description_code not in config.MEMBER_ONLY_CODES)
    return sum_amounts(income)


def evaluate_activity(
    activity: Activity,
    movements: Iterable[Movement],
    imputed_cost: Decimal,
    entity_type: Optional[EntityType],
) -> ActivityResult:
    """Run the 6% test on one Activity of General Interest.

    The activity is commercial when its relevant income exceeds its
    effective costs (own expenses plus imputed general costs) by more than
    6%.

    Args:
        activity: Activity of General Interest
        movements: Movements of the fiscal year
        imputed_cost: Share of general costs from apportionment
        entity_type: Entity type from the profile

    Returns:
        ActivityResult with TE, TU, CG, TU_eff, TER, threshold and verdict

    Raises:
        ConfigurationError: If entity_type is missing
        ValidationError: If the activity is not an Activity of General Interest
    """
    if entity_type is None:
        raise ConfigurationError("Entity type is required for the 6% test")
    if activity.target_type is not AIG:
        raise ValidationError(f"Activity {activity.id} is not an Activity of General Interest")

    income = []
    te = tu = ZERO
    for m in movements:
        if not (m.is_ordinary and m.is_allocated_to(AIG, activity.id)):
            continue
        if m.is_income:
            income.append(m)
            te += m.amount
        else:
            tu += m.amount

    ter = relevant_income(income, entity_type)
    tu_eff = tu + imputed_cost
    threshold = tu_eff * config.AIG_MARGIN_FACTOR
    verdict = Verdict.COMMERCIAL if ter > threshold else Verdict.NON_COMMERCIAL

    logger.debug(
        "AIG %s: TE=%s TU=%s CG=%s TER=%s threshold=%s -> %s",
        activity.id,
        te,
        tu,
        imputed_cost,
        ter,
        threshold,
        verdict.name,
    )
    return ActivityResult(
        activity_id=activity.id,
        te=te,
        tu=tu,
        cg=imputed_cost,
        tu_eff=tu_eff,
        ter=ter,
        threshold=threshold,
        verdict=verdict,
    )


def evaluate_activities(
    activities: Iterable[Activity],
    movements: Iterable[Movement],
    imputed_costs: Mapping[int, Decimal],
    entity_type: Optional[EntityType],
) -> list[ActivityResult]:
    """Run the 6% test on every Activity of General Interest given."""
    movements = list(movements)
    return [
        evaluate_activity(a, movements, imputed_costs.get(a.id, ZERO), entity_type)
        for a in activities
    ]


def evaluate_entity(
    activity_results: Iterable[ActivityResult],
    movements: Iterable[Movement],
    diverse_activities: Iterable[Activity],
) -> EntityResult:
    """Run the entity-wide commerciality test.

    - A: TER of commercial AIGs
    - B: income allocated to non-occasional diverse activities, sponsorship
      (code 6) excluded
    - C: TER of non-commercial AIGs
    - D: membership fees, donations, 5x1000, public contributions without
      consideration and other non-commercial income

    The entity is commercial when A + B > C + D.
    """
    activity_results = list(activity_results)
    movements = list(movements)
    occasional_ids = {
        a.id for a in diverse_activities if isinstance(a, DiverseActivity) and a.occasional
    }

    a = sum((r.ter for r in activity_results if r.verdict is Verdict.COMMERCIAL), ZERO)
    c = sum((r.ter for r in activity_results if r.verdict is Verdict.NON_COMMERCIAL), ZERO)
    b = sum_amounts(
        movements,
        lambda m: m.is_income
        and m.is_allocated_to(TargetType.DIVERSE_ACTIVITY)
        and m.allocation.target_id not in occasional_ids
        and m.description_code != config.SPONSORSHIP_CODE,
    )
    d = sum_amounts(
        movements,
        lambda m: m.is_income and m.category is not None and m.category.is_other_noncommercial,
    )

    verdict = Verdict.COMMERCIAL if a + b > c + d else Verdict.NON_COMMERCIAL
    logger.info("Entity test: A=%s B=%s C=%s D=%s -> %s", a, b, c, d, verdict.name)
    return EntityResult(a=a, b=b, c=c, d=d, verdict=verdict)


def evaluate_secondary(movements: Iterable[Movement]) -> SecondaryResult:
    """Run the 30% income and 66% cost checks on diverse activities.

    Diverse income counts every income recorded under the diverse-activity
    category, occasional or unassigned included. The two checks are
    reported separately.
    """
    movements = list(movements)
    diverse_income = category_income(movements, Category.DIVERSE_ACTIVITY)
    entity_income = total_income(movements)
    entity_expense = total_expense(movements)

    threshold30 = entity_income * config.SECONDARY_INCOME_SHARE
    threshold66 = entity_expense * config.SECONDARY_COST_SHARE

    result = SecondaryResult(
        total_diverse_income=diverse_income,
        total_entity_income=entity_income,
        total_entity_expense=entity_expense,
        threshold30=threshold30,
        threshold66=threshold66,
        pass30=diverse_income <= threshold30,
        pass66=diverse_income <= threshold66,
    )
    logger.info(
        "Secondary test: diverse income %s, 30%% limit %s (%s), 66%% limit %s (%s)",
        diverse_income,
        threshold30,
        "ok" if result.pass30 else "ko",
        threshold66,
        "ok" if result.pass66 else "ko",
    )
    return result
