"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum fields are stored as their codes (``Category.DONATIONS`` is stored as
``EROGAZIONI_LIBERALI``). Movements are rebuilt through the classifier, so
a row read back is held to the same invariants as one entered by hand.
"""

from typing import Any

from fiscoets.domain import entities as domain
from fiscoets.domain.classifier import classify
from fiscoets.database.models import (
    Activity as ORMActivity,
    FiscalYear as ORMFiscalYear,
    Movement as ORMMovement,
    Profile as ORMProfile,
)


def profile_to_domain(orm_profile: ORMProfile) -> domain.EntityProfile:
    """Convert SQLAlchemy Profile model to domain EntityProfile entity."""
    return domain.EntityProfile(
        entity_type=domain.EntityType(orm_profile.entity_type),
        name=orm_profile.name,
        fiscal_code=orm_profile.fiscal_code,
        vat_number=orm_profile.vat_number,
    )


def fiscal_year_to_domain(orm_fiscal_year: ORMFiscalYear) -> domain.FiscalYear:
    """Convert SQLAlchemy FiscalYear model to domain FiscalYear entity."""
    return domain.FiscalYear(
        id=orm_fiscal_year.id,
        year=orm_fiscal_year.year,
        prior_year_revenue=orm_fiscal_year.prior_year_revenue,
        created_at=orm_fiscal_year.created_at,
    )


def activity_to_domain(orm_activity: ORMActivity) -> domain.Activity:
    """Convert SQLAlchemy Activity model to the domain class of its family."""
    target_type = domain.TargetType(orm_activity.activity_type)
    fields = dict(
        id=orm_activity.id,
        name=orm_activity.name,
        fiscal_year_id=orm_activity.fiscal_year_id,
        description=orm_activity.description or "",
    )
    if target_type is domain.TargetType.DIVERSE_ACTIVITY:
        fields["occasional"] = bool(orm_activity.occasional)
    return domain.ACTIVITY_CLASSES[target_type](**fields)


def movement_to_record(orm_movement: ORMMovement) -> dict[str, Any]:
    """Convert SQLAlchemy Movement model to a raw classifier record."""
    return {
        "id": orm_movement.id,
        "fiscal_year_id": orm_movement.fiscal_year_id,
        "kind": orm_movement.kind,
        "direction": orm_movement.direction,
        "category": orm_movement.category,
        "description_code": orm_movement.description_code,
        "amount": orm_movement.amount,
        "account": orm_movement.account,
        "date": orm_movement.date,
        "description": orm_movement.description,
        "allocation_type": orm_movement.allocated_to_type,
        "allocation_id": orm_movement.allocated_to_id,
    }


def movement_to_domain(orm_movement: ORMMovement) -> domain.Movement:
    """Convert SQLAlchemy Movement model to domain Movement entity."""
    return classify(movement_to_record(orm_movement))


def movement_to_columns(movement: domain.Movement) -> dict[str, Any]:
    """Column values for storing a domain Movement."""
    allocation = movement.allocation
    return {
        "kind": movement.kind.value,
        "direction": movement.direction.value,
        "category": movement.category.value if movement.category is not None else None,
        "description_code": movement.description_code,
        "amount": movement.amount,
        "account": movement.account.value,
        "date": movement.date,
        "description": movement.description,
        "allocated_to_type": allocation.target_type.value if allocation is not None else None,
        "allocated_to_id": allocation.target_id if allocation is not None else None,
    }
