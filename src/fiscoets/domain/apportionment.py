"""Apportionment of general costs across activities.

The general cost pool is split pro rata to the income allocated to each
activity. Each activity family (AIG, diverse activities, fundraisers) is
apportioned on its own: an AIG's share is computed against the income of
all AIGs only, since every test is evaluated within its own family.

Amounts stay un-rounded Decimals; only presentation rounds to cents.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from fiscoets.domain.entities import Activity, Category, Movement, TargetType
from fiscoets.domain.errors import ValidationError
from fiscoets.domain.totals import ZERO, sum_amounts

logger = logging.getLogger(__name__)


def general_cost_pool(movements: Iterable[Movement]) -> Decimal:
    """Sum of ordinary expenses recorded as general costs."""
    return sum_amounts(
        movements, lambda m: m.is_expense and m.category is Category.GENERAL_COSTS
    )


def allocated_income_by_target(
    movements: Iterable[Movement],
    target_type: TargetType,
    target_ids: Iterable[int],
) -> dict[int, Decimal]:
    """Income allocated to each target of one family.

    Every requested ID is present in the result, with zero when nothing is
    allocated to it. Income allocated to IDs outside ``target_ids`` is
    ignored.
    """
    income = {target_id: ZERO for target_id in target_ids}
    for m in movements:
        if not (m.is_ordinary and m.is_income and m.is_allocated_to(target_type)):
            continue
        target_id = m.allocation.target_id
        if target_id in income:
            income[target_id] += m.amount
    return income


def apportion_general_costs(
    movements: Iterable[Movement],
    target_population: Iterable[Activity],
) -> dict[int, Decimal]:
    """Compute each target's share of the general cost pool.

    ``imputed[t] = pool * income[t] / total_income`` over the population.
    When the population has no allocated income every share is zero.

    Args:
        movements: Movements of the fiscal year
        target_population: Activities of a single family

    Returns:
        Mapping of activity ID to imputed general cost

    Raises:
        ValidationError: If the population mixes activity families
    """
    movements = list(movements)
    population = list(target_population)
    if not population:
        return {}

    families = {activity.target_type for activity in population}
    if len(families) > 1:
        raise ValidationError(
            "Target population must belong to a single activity family, got "
            + ", ".join(sorted(f.name for f in families))
        )
    target_type = families.pop()

    pool = general_cost_pool(movements)
    income = allocated_income_by_target(
        movements, target_type, (activity.id for activity in population)
    )
    total = sum(income.values(), ZERO)

    if total == 0:
        logger.debug(
            "No income allocated to %s, general costs (%s) not apportioned",
            target_type.name,
            pool,
        )
        return {target_id: ZERO for target_id in income}

    shares = {target_id: pool * target_income / total for target_id, target_income in income.items()}
    logger.debug(
        "Apportioned general costs %s over %d %s targets (income %s)",
        pool,
        len(shares),
        target_type.name,
        total,
    )
    return shares
