"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fiscoets.domain.entities import (
    Activity,
    Allocation,
    Category,
    Direction,
    EntityProfile,
    FiscalYear,
    Movement,
    TargetType,
)


class Database(ABC):
    """Abstract database interface for fiscoets."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Profile operations
    @abstractmethod
    def get_profile(self) -> Optional[EntityProfile]:
        """Get the entity profile, None if not configured."""
        pass

    @abstractmethod
    def save_profile(self, profile: EntityProfile) -> None:
        """Create or replace the entity profile."""
        pass

    # Fiscal year operations
    @abstractmethod
    def create_fiscal_year(self, year: int, prior_year_revenue: Decimal = Decimal("0")) -> int:
        """Create a fiscal year. Returns fiscal year ID."""
        pass

    @abstractmethod
    def get_fiscal_year(self, fiscal_year_id: int) -> Optional[FiscalYear]:
        """Get fiscal year by ID."""
        pass

    @abstractmethod
    def get_fiscal_year_by_year(self, year: int) -> Optional[FiscalYear]:
        """Get fiscal year by calendar year."""
        pass

    @abstractmethod
    def list_fiscal_years(self) -> list[FiscalYear]:
        """List fiscal years, most recent first."""
        pass

    @abstractmethod
    def update_prior_year_revenue(self, fiscal_year_id: int, prior_year_revenue: Decimal) -> None:
        """Update the prior-year revenue of a fiscal year."""
        pass

    @abstractmethod
    def delete_fiscal_year(self, fiscal_year_id: int) -> None:
        """Delete a fiscal year with its activities and movements."""
        pass

    # Activity operations
    @abstractmethod
    def create_activity(
        self,
        fiscal_year_id: int,
        target_type: TargetType,
        name: str,
        description: str = "",
        occasional: bool = False,
    ) -> int:
        """Create an activity. Returns activity ID."""
        pass

    @abstractmethod
    def get_activity(self, activity_id: int) -> Optional[Activity]:
        """Get activity by ID."""
        pass

    @abstractmethod
    def list_activities(
        self, fiscal_year_id: int, target_type: Optional[TargetType] = None
    ) -> list[Activity]:
        """List activities of a fiscal year, optionally filtered by family."""
        pass

    @abstractmethod
    def update_activity(
        self,
        activity_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        occasional: Optional[bool] = None,
    ) -> None:
        """Update activity fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_activity(self, activity_id: int) -> None:
        """Delete an activity."""
        pass

    @abstractmethod
    def clear_allocations(self, target_type: TargetType, target_id: int) -> int:
        """Unassign every movement allocated to a target. Returns the count."""
        pass

    # Movement operations
    @abstractmethod
    def create_movement(self, fiscal_year_id: int, movement: Movement) -> int:
        """Store a validated movement. Returns movement ID."""
        pass

    @abstractmethod
    def get_movement(self, movement_id: int) -> Optional[Movement]:
        """Get movement by ID."""
        pass

    @abstractmethod
    def list_movements(
        self,
        fiscal_year_id: int,
        direction: Optional[Direction] = None,
        category: Optional[Category] = None,
        unassigned: bool = False,
        target_type: Optional[TargetType] = None,
        target_id: Optional[int] = None,
    ) -> list[Movement]:
        """List movements of a fiscal year with optional filters.

        Args:
            fiscal_year_id: Fiscal year ID
            direction: Optional direction filter
            category: Optional category filter
            unassigned: If True, only return movements whose category needs
                an activity but have none
            target_type: Optional allocation family filter
            target_id: Optional allocation target filter
        """
        pass

    @abstractmethod
    def list_movement_records(self, fiscal_year_id: int) -> list[dict[str, Any]]:
        """List stored movement rows of a fiscal year as raw records.

        Rows are returned unvalidated, keyed like the classifier input, so
        a bad row can be reported without hiding the rest of the year.
        """
        pass

    @abstractmethod
    def update_movement(self, movement_id: int, movement: Movement) -> None:
        """Replace the stored fields of a movement."""
        pass

    @abstractmethod
    def update_movement_allocation(self, movement_id: int, allocation: Optional[Allocation]) -> None:
        """Set or clear the allocation of a movement."""
        pass

    @abstractmethod
    def delete_movement(self, movement_id: int) -> None:
        """Delete a movement."""
        pass
