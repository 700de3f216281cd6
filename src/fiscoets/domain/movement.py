"""Movement domain service."""

import dataclasses
import logging
from decimal import Decimal
from typing import Any, Optional

from fiscoets.database.base import Database
from fiscoets.domain.classifier import classify
from fiscoets.domain.entities import (
    Allocation,
    Category,
    Direction,
    FiscalYear,
    MoneyAccount,
    Movement,
    MovementKind,
    TargetType,
)
from fiscoets.domain.errors import (
    NotFoundError,
    ValidationError,
    activity_not_found,
    allocation_mismatch,
    fiscal_year_not_found,
    movement_not_found,
)
from fiscoets.utils.date_parser import year_bounds

logger = logging.getLogger(__name__)

SURPLUS_KINDS = {
    MoneyAccount.CASH: MovementKind.PRIOR_YEAR_CASH_SURPLUS,
    MoneyAccount.BANK: MovementKind.PRIOR_YEAR_BANK_SURPLUS,
}


def _movement_record(movement: Movement) -> dict[str, Any]:
    """Raw classifier record holding the fields of an existing movement."""
    record = {f.name: getattr(movement, f.name) for f in dataclasses.fields(movement)}
    record.pop("allocation")
    if movement.allocation is not None:
        record["allocation_type"] = movement.allocation.target_type
        record["allocation_id"] = movement.allocation.target_id
    return record


class MovementService:
    """Service for recording and allocating movements."""

    def __init__(self, db: Database):
        """Initialize movement service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_fiscal_year(self, fiscal_year_id: int) -> FiscalYear:
        fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None:
            raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        return fiscal_year

    def _require(self, movement_id: int) -> Movement:
        movement = self.db.get_movement(movement_id)
        if movement is None:
            raise NotFoundError(movement_not_found(movement_id))
        return movement

    def _resolve_allocation(self, fiscal_year_id: int, activity_id: int) -> Allocation:
        activity = self.db.get_activity(activity_id)
        if activity is None:
            raise NotFoundError(activity_not_found(activity_id))
        if activity.fiscal_year_id != fiscal_year_id:
            raise ValidationError(
                f"Activity {activity_id} belongs to another fiscal year"
            )
        return Allocation(activity.target_type, activity.id)

    def _check_date(self, fiscal_year: FiscalYear, movement: Movement) -> None:
        if movement.date is None:
            return
        first, last = year_bounds(fiscal_year.year)
        if not first <= movement.date <= last:
            logger.warning(
                "Movement dated %s recorded in fiscal year %d",
                movement.date.isoformat(),
                fiscal_year.year,
            )

    def add_movement(
        self,
        fiscal_year_id: int,
        direction: Direction | str,
        category: Category | str,
        amount: Decimal | str,
        description_code: Optional[int] = None,
        account: Optional[MoneyAccount | str] = None,
        date: Any = None,
        description: Optional[str] = None,
        activity_id: Optional[int] = None,
    ) -> int:
        """Record an ordinary income or expense.

        Args:
            fiscal_year_id: Fiscal year ID
            direction: INCOME or EXPENSE (name or stored code)
            category: Category (name, alias or stored code)
            amount: Positive amount, Decimal or text such as "1.234,56"
            description_code: Optional coded description of the category
            account: CASH (default) or BANK
            date: Optional movement date (date or text)
            description: Optional free-text description
            activity_id: Optional activity to allocate the movement to

        Returns:
            Movement ID

        Raises:
            NotFoundError: If the fiscal year or activity doesn't exist
            ValidationError: If the movement is not valid
        """
        fiscal_year = self._require_fiscal_year(fiscal_year_id)
        raw = {
            "direction": direction,
            "category": category,
            "amount": amount,
            "description_code": description_code,
            "account": account,
            "date": date,
            "description": description,
            "fiscal_year_id": fiscal_year_id,
        }
        if activity_id is not None:
            raw["allocation"] = self._resolve_allocation(fiscal_year_id, activity_id)

        movement = classify(raw)
        self._check_date(fiscal_year, movement)
        movement_id = self.db.create_movement(fiscal_year_id, movement)
        logger.info(
            "Recorded %s %s of %s (id %d)",
            movement.category.name,
            movement.direction.name.lower(),
            movement.amount,
            movement_id,
        )
        return movement_id

    def set_surplus(
        self,
        fiscal_year_id: int,
        account: MoneyAccount | str,
        amount: Decimal | str,
        date: Any = None,
    ) -> int:
        """Set the prior-year surplus carried on the cash or bank account.

        A fiscal year holds one surplus per account: setting it again
        replaces the stored amount.

        Returns:
            Movement ID of the surplus

        Raises:
            NotFoundError: If the fiscal year doesn't exist
            ValidationError: If the amount is not positive
        """
        self._require_fiscal_year(fiscal_year_id)
        account = MoneyAccount.from_token(account)
        kind = SURPLUS_KINDS[account]
        movement = classify(
            {
                "kind": kind,
                "amount": amount,
                "account": account,
                "date": date,
                "fiscal_year_id": fiscal_year_id,
            }
        )

        existing = [
            m for m in self.db.list_movements(fiscal_year_id, direction=Direction.INCOME)
            if m.kind is kind
        ]
        if existing:
            movement_id = existing[0].id
            self.db.update_movement(movement_id, movement)
        else:
            movement_id = self.db.create_movement(fiscal_year_id, movement)
        logger.info("Prior-year %s surplus set to %s", account.name.lower(), movement.amount)
        return movement_id

    def get_movement(self, movement_id: int) -> Optional[Movement]:
        """Get movement by ID.

        Args:
            movement_id: Movement ID

        Returns:
            Movement entity or None if not found
        """
        return self.db.get_movement(movement_id)

    def list_movements(
        self,
        fiscal_year_id: int,
        direction: Optional[Direction | str] = None,
        category: Optional[Category | str] = None,
        unassigned: bool = False,
    ) -> list[Movement]:
        """List movements of a fiscal year with optional filters."""
        if direction is not None:
            direction = Direction.from_token(direction)
        if category is not None:
            category = Category.from_token(category)
        return self.db.list_movements(
            fiscal_year_id, direction=direction, category=category, unassigned=unassigned
        )

    def list_allocated(self, activity_id: int) -> list[Movement]:
        """List the movements allocated to an activity."""
        activity = self.db.get_activity(activity_id)
        if activity is None:
            raise NotFoundError(activity_not_found(activity_id))
        return self.db.list_movements(
            activity.fiscal_year_id,
            target_type=activity.target_type,
            target_id=activity.id,
        )

    def list_available(self, fiscal_year_id: int, target_type: TargetType | str) -> list[Movement]:
        """List unassigned movements that can be allocated to a family.

        Args:
            fiscal_year_id: Fiscal year ID
            target_type: Activity family

        Returns:
            Unassigned ordinary movements whose category matches the family
        """
        target_type = TargetType.from_token(target_type)
        return self.db.list_movements(
            fiscal_year_id, category=target_type.category, unassigned=True
        )

    def assign(self, movement_id: int, activity_id: int) -> None:
        """Allocate a movement to an activity.

        Raises:
            NotFoundError: If the movement or activity doesn't exist
            ValidationError: If the activity belongs to another fiscal year
                or its family does not match the movement category
        """
        movement = self._require(movement_id)
        if not movement.is_ordinary:
            raise ValidationError("Prior-year surplus cannot be allocated")
        if movement.category is Category.GENERAL_COSTS:
            raise ValidationError(
                "General costs are apportioned automatically and cannot be allocated"
            )

        allocation = self._resolve_allocation(movement.fiscal_year_id, activity_id)
        if movement.category.target_type is not allocation.target_type:
            raise ValidationError(
                allocation_mismatch(movement.category.name, allocation.target_type.name)
            )

        self.db.update_movement_allocation(movement_id, allocation)
        logger.info("Movement %d allocated to activity %d", movement_id, activity_id)

    def unassign(self, movement_id: int) -> None:
        """Remove the allocation of a movement.

        Raises:
            NotFoundError: If the movement doesn't exist
        """
        self._require(movement_id)
        self.db.update_movement_allocation(movement_id, None)
        logger.info("Movement %d unassigned", movement_id)

    def update_movement(self, movement_id: int, **changes: Any) -> Movement:
        """Change fields of a movement.

        Keyword arguments use the classifier record keys (direction,
        category, amount, description_code, account, date, description).
        The updated movement is validated as a whole; a change of category
        that no longer fits the allocation is rejected.

        Returns:
            The updated movement

        Raises:
            NotFoundError: If the movement doesn't exist
            ValidationError: If the updated movement is not valid
        """
        current = self._require(movement_id)
        unknown = set(changes) - {
            "direction",
            "category",
            "amount",
            "description_code",
            "account",
            "date",
            "description",
        }
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        record = _movement_record(current)
        record.update(changes)
        movement = classify(record)

        fiscal_year = self._require_fiscal_year(current.fiscal_year_id)
        self._check_date(fiscal_year, movement)
        self.db.update_movement(movement_id, movement)
        logger.info("Movement %d updated", movement_id)
        return movement

    def delete_movement(self, movement_id: int) -> None:
        """Delete a movement.

        Raises:
            NotFoundError: If the movement doesn't exist
        """
        self._require(movement_id)
        self.db.delete_movement(movement_id)
        logger.info("Movement %d deleted", movement_id)
