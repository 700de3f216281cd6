"""Utility for resolving fiscal year references to IDs."""

from fiscoets.domain.errors import NotFoundError, fiscal_year_not_found
from fiscoets.domain.fiscal_year import FiscalYearService


def resolve_fiscal_year(fiscal_year_service: FiscalYearService, fiscal_year: str | int) -> int:
    """Resolve a calendar year or fiscal year ID to a fiscal year ID.

    A calendar year (e.g. "2025") is looked up first, so the common
    case of naming the year works; anything else is treated as an ID.

    Args:
        fiscal_year_service: FiscalYearService instance
        fiscal_year: Calendar year or fiscal year ID (int or string)

    Returns:
        Fiscal year ID

    Raises:
        NotFoundError: If no fiscal year matches
    """
    try:
        value = int(fiscal_year)
    except (ValueError, TypeError):
        raise NotFoundError(fiscal_year_not_found(fiscal_year))

    by_year = fiscal_year_service.get_fiscal_year_by_year(value)
    if by_year is not None:
        return by_year.id

    by_id = fiscal_year_service.get_fiscal_year(value)
    if by_id is not None:
        return by_id.id

    raise NotFoundError(fiscal_year_not_found(value))
