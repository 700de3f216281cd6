"""Shared domain error messages and error types."""

from dataclasses import dataclass


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConfigurationError(DomainError):
    """Required context for a computation is missing.

    Raised instead of returning a partial result, e.g. when no entity
    profile is configured or the fiscal year cannot be resolved.
    """


@dataclass(frozen=True)
class UnassignedMovementWarning:
    """Ordinary movements whose category needs an activity but have none.

    Informational only: unassigned movements are left out of every
    per-activity and entity-level total, computation still proceeds.
    """

    activity_of_general_interest: int = 0
    diverse_activity: int = 0
    fundraiser: int = 0

    @property
    def total(self) -> int:
        return self.activity_of_general_interest + self.diverse_activity + self.fundraiser

    def __bool__(self) -> bool:
        return self.total > 0

    def __str__(self) -> str:
        return (
            f"{self.total} unassigned movement{'s' if self.total != 1 else ''} "
            f"(AIG: {self.activity_of_general_interest}, "
            f"diverse: {self.diverse_activity}, "
            f"fundraisers: {self.fundraiser})"
        )


def fiscal_year_not_found(fiscal_year: int) -> str:
    """Return message for missing fiscal year (by ID or calendar year)."""
    return f"Fiscal year {fiscal_year} not found"


def activity_not_found(activity_id: int) -> str:
    """Return message for missing activity."""
    return f"Activity {activity_id} not found"


def movement_not_found(movement_id: int) -> str:
    """Return message for missing movement."""
    return f"Movement {movement_id} not found"


def profile_missing() -> str:
    """Return message when no entity profile is configured."""
    return "Entity profile not configured. Run 'fiscoets profile set --type ...' first."


def duplicate_fiscal_year(year: int) -> str:
    """Return message for a fiscal year that already exists."""
    return f"Fiscal year {year} already exists"


def allocation_mismatch(category: str, target_type: str) -> str:
    """Return message when an allocation target does not match the category."""
    return f"Movement with category {category} cannot be allocated to {target_type}"
