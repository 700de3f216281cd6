"""Movement totals shared by the compliance tests.

Only ordinary movements are ever summed here, prior-year surpluses are
carried balances and appear in :func:`compute_balances` alone.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Optional

from fiscoets.domain.entities import (
    Balances,
    Category,
    Direction,
    MoneyAccount,
    Movement,
    MovementKind,
    TargetTotals,
    TargetType,
)
from fiscoets.domain.errors import UnassignedMovementWarning

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def sum_amounts(
    movements: Iterable[Movement],
    predicate: Optional[Callable[[Movement], bool]] = None,
) -> Decimal:
    """Sum ordinary movements, optionally filtered by a predicate."""
    return sum(
        (
            m.amount
            for m in movements
            if m.is_ordinary and (predicate is None or predicate(m))
        ),
        ZERO,
    )


def total_income(movements: Iterable[Movement]) -> Decimal:
    return sum_amounts(movements, lambda m: m.is_income)


def total_expense(movements: Iterable[Movement]) -> Decimal:
    return sum_amounts(movements, lambda m: m.is_expense)


def category_income(movements: Iterable[Movement], category: Category) -> Decimal:
    """Income recorded under a category, allocated or not."""
    return sum_amounts(movements, lambda m: m.is_income and m.category is category)


def allocated_movements(
    movements: Iterable[Movement],
    target_type: TargetType,
    target_id: int,
    direction: Direction,
) -> list[Movement]:
    """Ordinary movements of one direction allocated to a single target."""
    return [
        m
        for m in movements
        if m.is_ordinary
        and m.direction is direction
        and m.is_allocated_to(target_type, target_id)
    ]


def target_totals(
    movements: Iterable[Movement],
    target_type: TargetType,
    target_ids: Iterable[int],
    imputed_costs: Mapping[int, Decimal],
) -> list[TargetTotals]:
    """Build TE/TU/CG totals for every target of one family.

    Args:
        movements: Movements of the fiscal year
        target_type: Activity family
        target_ids: IDs of the family's activities, in display order
        imputed_costs: General-cost share per target ID

    Returns:
        One TargetTotals per target ID
    """
    movements = list(movements)
    results = []
    for target_id in target_ids:
        te = sum_amounts(allocated_movements(movements, target_type, target_id, Direction.INCOME))
        tu = sum_amounts(allocated_movements(movements, target_type, target_id, Direction.EXPENSE))
        results.append(
            TargetTotals(
                target_type=target_type,
                target_id=target_id,
                te=te,
                tu=tu,
                cg=imputed_costs.get(target_id, ZERO),
            )
        )
    return results


def count_unassigned(movements: Iterable[Movement]) -> UnassignedMovementWarning:
    """Count movements that need an activity but have none, per family."""
    counts = {target_type: 0 for target_type in TargetType}
    for m in movements:
        if m.is_unassigned:
            counts[m.category.target_type] += 1

    warning = UnassignedMovementWarning(
        activity_of_general_interest=counts[TargetType.ACTIVITY_OF_GENERAL_INTEREST],
        diverse_activity=counts[TargetType.DIVERSE_ACTIVITY],
        fundraiser=counts[TargetType.FUNDRAISER],
    )
    if warning:
        logger.warning("%s excluded from activity totals", warning)
    return warning


def compute_balances(movements: Iterable[Movement]) -> Balances:
    """Cash and bank position, including prior-year surpluses."""
    movements = list(movements)

    def on_account(account: MoneyAccount, direction: Direction) -> Decimal:
        return sum_amounts(
            movements, lambda m: m.account is account and m.direction is direction
        )

    def surplus(kind: MovementKind) -> Decimal:
        return sum((m.amount for m in movements if m.kind is kind), ZERO)

    return Balances(
        cash_surplus=surplus(MovementKind.PRIOR_YEAR_CASH_SURPLUS),
        bank_surplus=surplus(MovementKind.PRIOR_YEAR_BANK_SURPLUS),
        cash_income=on_account(MoneyAccount.CASH, Direction.INCOME),
        cash_expense=on_account(MoneyAccount.CASH, Direction.EXPENSE),
        bank_income=on_account(MoneyAccount.BANK, Direction.INCOME),
        bank_expense=on_account(MoneyAccount.BANK, Direction.EXPENSE),
    )
