"""Fiscal year domain service."""

import logging
from decimal import Decimal
from typing import Optional

from fiscoets.database.base import Database
from fiscoets.domain.entities import FiscalYear, has_sub_cent_digits
from fiscoets.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_fiscal_year,
    fiscal_year_not_found,
)

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100


def _check_revenue(prior_year_revenue: Decimal) -> Decimal:
    if not isinstance(prior_year_revenue, Decimal):
        prior_year_revenue = Decimal(str(prior_year_revenue))
    if not prior_year_revenue.is_finite() or prior_year_revenue < 0:
        raise ValidationError(
            f"Prior-year revenue must be a non-negative amount, got {prior_year_revenue}"
        )
    if has_sub_cent_digits(prior_year_revenue):
        raise ValidationError(f"Prior-year revenue must be in whole cents, got {prior_year_revenue}")
    return prior_year_revenue


class FiscalYearService:
    """Service for managing fiscal years."""

    def __init__(self, db: Database):
        """Initialize fiscal year service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_fiscal_year(self, year: int, prior_year_revenue: Decimal = Decimal("0")) -> int:
        """Create a fiscal year.

        Args:
            year: Calendar year (1900-2100)
            prior_year_revenue: Revenue of the previous year, used for the
                forfetario ceiling

        Returns:
            Fiscal year ID

        Raises:
            ValidationError: If the year is out of range or revenue negative
            ConflictError: If the year already exists
        """
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")
        prior_year_revenue = _check_revenue(prior_year_revenue)

        if self.db.get_fiscal_year_by_year(year) is not None:
            raise ConflictError(duplicate_fiscal_year(year))

        fiscal_year_id = self.db.create_fiscal_year(year=year, prior_year_revenue=prior_year_revenue)
        logger.info("Created fiscal year %d (id %d)", year, fiscal_year_id)
        return fiscal_year_id

    def get_fiscal_year(self, fiscal_year_id: int) -> Optional[FiscalYear]:
        """Get fiscal year by ID.

        Args:
            fiscal_year_id: Fiscal year ID

        Returns:
            FiscalYear entity or None if not found
        """
        return self.db.get_fiscal_year(fiscal_year_id)

    def get_fiscal_year_by_year(self, year: int) -> Optional[FiscalYear]:
        """Get fiscal year by calendar year."""
        return self.db.get_fiscal_year_by_year(year)

    def list_fiscal_years(self) -> list[FiscalYear]:
        """List all fiscal years, most recent first."""
        return self.db.list_fiscal_years()

    def set_prior_year_revenue(self, fiscal_year_id: int, prior_year_revenue: Decimal) -> None:
        """Update the prior-year revenue.

        Raises:
            NotFoundError: If the fiscal year doesn't exist
            ValidationError: If revenue is negative or not finite
        """
        if self.db.get_fiscal_year(fiscal_year_id) is None:
            raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        prior_year_revenue = _check_revenue(prior_year_revenue)
        self.db.update_prior_year_revenue(fiscal_year_id, prior_year_revenue)
        logger.info("Fiscal year %d prior-year revenue set to %s", fiscal_year_id, prior_year_revenue)

    def delete_fiscal_year(self, fiscal_year_id: int) -> None:
        """Delete a fiscal year together with its activities and movements.

        Raises:
            NotFoundError: If the fiscal year doesn't exist
        """
        fiscal_year = self.db.get_fiscal_year(fiscal_year_id)
        if fiscal_year is None:
            raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        self.db.delete_fiscal_year(fiscal_year_id)
        logger.info("Deleted fiscal year %d", fiscal_year.year)
