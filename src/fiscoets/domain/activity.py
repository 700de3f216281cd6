"""Activity domain service."""

import logging
from typing import Optional

from fiscoets.database.base import Database
from fiscoets.domain.entities import Activity, TargetType
from fiscoets.domain.errors import (
    NotFoundError,
    ValidationError,
    activity_not_found,
    fiscal_year_not_found,
)

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Activity name cannot be empty")
    return name


class ActivityService:
    """Service for managing AIGs, diverse activities and fundraisers."""

    def __init__(self, db: Database):
        """Initialize activity service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_activity(
        self,
        fiscal_year_id: int,
        target_type: TargetType | str,
        name: str,
        description: str = "",
        occasional: bool = False,
    ) -> int:
        """Create an activity.

        Args:
            fiscal_year_id: Fiscal year ID
            target_type: Activity family (enum member, name or stored code)
            name: Activity name
            description: Optional description
            occasional: Mark a diverse activity as occasional

        Returns:
            Activity ID

        Raises:
            NotFoundError: If the fiscal year doesn't exist
            ValidationError: If the name is empty or occasional is set on
                something other than a diverse activity
        """
        target_type = TargetType.from_token(target_type)
        if self.db.get_fiscal_year(fiscal_year_id) is None:
            raise NotFoundError(fiscal_year_not_found(fiscal_year_id))
        name = _clean_name(name)
        if occasional and target_type is not TargetType.DIVERSE_ACTIVITY:
            raise ValidationError("Only diverse activities can be occasional")

        activity_id = self.db.create_activity(
            fiscal_year_id=fiscal_year_id,
            target_type=target_type,
            name=name,
            description=(description or "").strip(),
            occasional=occasional,
        )
        logger.info("Created %s activity '%s' (id %d)", target_type.name, name, activity_id)
        return activity_id

    def get_activity(self, activity_id: int) -> Optional[Activity]:
        """Get activity by ID.

        Args:
            activity_id: Activity ID

        Returns:
            Activity entity or None if not found
        """
        return self.db.get_activity(activity_id)

    def _require(self, activity_id: int) -> Activity:
        activity = self.db.get_activity(activity_id)
        if activity is None:
            raise NotFoundError(activity_not_found(activity_id))
        return activity

    def list_activities(
        self, fiscal_year_id: int, target_type: Optional[TargetType | str] = None
    ) -> list[Activity]:
        """List activities of a fiscal year, optionally of one family."""
        if target_type is not None:
            target_type = TargetType.from_token(target_type)
        return self.db.list_activities(fiscal_year_id, target_type)

    def update_activity(
        self,
        activity_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Rename an activity or change its description.

        Raises:
            NotFoundError: If the activity doesn't exist
            ValidationError: If the new name is empty
        """
        self._require(activity_id)
        if name is not None:
            name = _clean_name(name)
        if description is not None:
            description = description.strip()
        self.db.update_activity(activity_id, name=name, description=description)

    def set_occasional(self, activity_id: int, occasional: bool) -> None:
        """Mark a diverse activity as occasional or not.

        Income of occasional diverse activities is left out of the
        commercial side of the entity test.

        Raises:
            NotFoundError: If the activity doesn't exist
            ValidationError: If the activity is not a diverse activity
        """
        activity = self._require(activity_id)
        if activity.target_type is not TargetType.DIVERSE_ACTIVITY:
            raise ValidationError(f"Activity {activity_id} is not a diverse activity")
        self.db.update_activity(activity_id, occasional=occasional)
        logger.info("Activity %d occasional=%s", activity_id, occasional)

    def delete_activity(self, activity_id: int) -> int:
        """Delete an activity, unassigning its movements first.

        Movements allocated to the activity are kept and become unassigned.

        Returns:
            Number of movements that were unassigned

        Raises:
            NotFoundError: If the activity doesn't exist
        """
        activity = self._require(activity_id)
        cleared = self.db.clear_allocations(activity.target_type, activity_id)
        self.db.delete_activity(activity_id)
        logger.info("Deleted activity %d, %d movement(s) unassigned", activity_id, cleared)
        return cleared
