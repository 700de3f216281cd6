"""Entity profile domain service."""

import logging
from typing import Optional

from fiscoets.database.base import Database
from fiscoets.domain.entities import EntityProfile, EntityType
from fiscoets.domain.errors import ConfigurationError, ValidationError, profile_missing

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for managing the entity profile."""

    def __init__(self, db: Database):
        """Initialize profile service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_profile(self) -> Optional[EntityProfile]:
        """Get the entity profile, None if not configured."""
        return self.db.get_profile()

    def require_profile(self) -> EntityProfile:
        """Get the entity profile.

        Raises:
            ConfigurationError: If no profile is configured
        """
        profile = self.db.get_profile()
        if profile is None:
            raise ConfigurationError(profile_missing())
        return profile

    def set_profile(
        self,
        entity_type: EntityType | str,
        name: Optional[str] = None,
        fiscal_code: Optional[str] = None,
        vat_number: Optional[str] = None,
    ) -> EntityProfile:
        """Create or update the entity profile.

        Fields left as None keep their stored value when a profile exists.

        Args:
            entity_type: Entity type (enum member, name or stored code)
            name: Optional entity name
            fiscal_code: Optional codice fiscale
            vat_number: Optional partita IVA

        Returns:
            The saved profile

        Raises:
            ValidationError: If the entity type is unknown or an identifier
                is malformed
        """
        entity_type = EntityType.from_token(entity_type)
        current = self.db.get_profile()

        def keep(value, attr):
            if value is not None:
                return value.strip() or None
            return getattr(current, attr) if current is not None else None

        fiscal_code = keep(fiscal_code, "fiscal_code")
        vat_number = keep(vat_number, "vat_number")
        if fiscal_code is not None and not fiscal_code.isalnum():
            raise ValidationError(f"Invalid fiscal code '{fiscal_code}'")
        if vat_number is not None and not (vat_number.isdigit() and len(vat_number) == 11):
            raise ValidationError(f"Invalid VAT number '{vat_number}': expected 11 digits")

        profile = EntityProfile(
            entity_type=entity_type,
            name=keep(name, "name"),
            fiscal_code=fiscal_code.upper() if fiscal_code else None,
            vat_number=vat_number,
        )
        self.db.save_profile(profile)
        logger.info("Entity profile saved: %s", entity_type.name)
        return profile
