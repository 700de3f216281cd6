"""Movement classifier: raw records to canonical Movements."""

import datetime
import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional

from fiscoets.domain.entities import (
    Allocation,
    Category,
    Direction,
    MoneyAccount,
    Movement,
    MovementKind,
    TargetType,
)
from fiscoets.domain.errors import ValidationError
from fiscoets.utils.date_parser import parse_date
from fiscoets.utils.money import parse_amount

logger = logging.getLogger(__name__)


def classify(raw: Mapping[str, Any]) -> Movement:
    """Normalize a raw movement record into a canonical Movement.

    The ``direction`` key takes either a direction (INCOME/ENTRATA,
    EXPENSE/USCITA) or, for carried balances, a surplus kind
    (AVANZO_CASSA_T_1 / AVANZO_BANCA_T_1); ``kind`` may also be given
    explicitly. Enum fields accept names, stored codes or enum members.

    Args:
        raw: Mapping with direction, category, amount and optional
            description_code, allocation (Allocation, (type, id) pair or
            allocation_type/allocation_id keys), account, date,
            description, id and fiscal_year_id

    Returns:
        Canonical Movement

    Raises:
        ValidationError: If the record cannot be a valid movement
    """
    kind, direction = _parse_kind_and_direction(raw)
    amount = _parse_amount(raw.get("amount"))

    account = _parse_optional(MoneyAccount, raw.get("account"))
    if account is None:
        account = MoneyAccount.BANK if kind is MovementKind.PRIOR_YEAR_BANK_SURPLUS else MoneyAccount.CASH

    return Movement(
        direction=direction,
        amount=amount,
        category=_parse_optional(Category, raw.get("category")),
        kind=kind,
        description_code=_parse_description_code(raw.get("description_code")),
        allocation=_parse_allocation(raw),
        account=account,
        id=raw.get("id"),
        fiscal_year_id=raw.get("fiscal_year_id"),
        date=_parse_movement_date(raw.get("date")),
        description=_parse_description(raw.get("description")),
    )


def classify_many(
    raws: Iterable[Mapping[str, Any]],
) -> tuple[list[Movement], list[ValidationError]]:
    """Classify a batch of raw records without aborting on bad ones.

    Returns:
        Tuple of (valid movements, validation errors). Each error message
        names the record by its ``id`` or, failing that, its position.
    """
    movements: list[Movement] = []
    errors: list[ValidationError] = []

    for position, raw in enumerate(raws):
        try:
            movements.append(classify(raw))
        except ValidationError as e:
            label = raw.get("id") if raw.get("id") is not None else f"#{position}"
            errors.append(ValidationError(f"Movement {label}: {e}"))

    if errors:
        logger.warning("Rejected %d of %d raw movements", len(errors), len(errors) + len(movements))
    return movements, errors


def _parse_kind_and_direction(raw: Mapping[str, Any]) -> tuple[MovementKind, Direction]:
    token = raw.get("direction")
    kind_token = raw.get("kind")

    kind = MovementKind.ORDINARY
    if kind_token is not None:
        kind = MovementKind.from_token(kind_token)

    if token is None:
        if kind.is_surplus:
            return kind, Direction.INCOME
        raise ValidationError("Direction is required")

    try:
        return kind, Direction.from_token(token)
    except ValidationError:
        # Surplus rows carry their kind where ordinary rows carry a direction
        surplus = MovementKind.from_token(token)
        if not surplus.is_surplus:
            raise
        return surplus, Direction.INCOME


def _parse_optional(enum_cls, token):
    if token is None or (isinstance(token, str) and not token.strip()):
        return None
    return enum_cls.from_token(token)


def _parse_amount(value: Any) -> Decimal:
    if value is None:
        raise ValidationError("Amount is required")
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps the shortest repr, avoiding binary expansion noise
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError as e:
            raise ValidationError(str(e))
    raise ValidationError(f"Invalid amount {value!r}")


def _parse_description_code(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid description code {value!r}")
    try:
        return int(value)
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid description code {value!r}")


def _parse_allocation(raw: Mapping[str, Any]) -> Optional[Allocation]:
    value = raw.get("allocation")
    if value is None:
        target_type = raw.get("allocation_type")
        target_id = raw.get("allocation_id")
        if target_type is None and target_id is None:
            return None
        value = (target_type, target_id)

    if isinstance(value, Allocation):
        return value

    try:
        target_type, target_id = value
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid allocation {value!r}")

    # A half-filled pair counts as unassigned
    if target_type is None or target_id is None:
        return None

    try:
        target_id = int(target_id)
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid allocation target ID {target_id!r}")
    return Allocation(TargetType.from_token(target_type), target_id)


def _parse_movement_date(value: Any) -> Optional[datetime.date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return parse_date(str(value))
    except ValueError as e:
        raise ValidationError(str(e))


def _parse_description(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
