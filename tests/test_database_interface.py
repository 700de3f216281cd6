"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from fiscoets.domain import entities
from fiscoets.domain.entities import (
    Allocation,
    Category,
    Direction,
    EntityProfile,
    EntityType,
    MoneyAccount,
    Movement,
    MovementKind,
    TargetType,
)
from fiscoets.domain.errors import NotFoundError

AIG = TargetType.ACTIVITY_OF_GENERAL_INTEREST


def aig_income(amount, target=None):
    return Movement(
        direction=Direction.INCOME,
        amount=Decimal(amount),
        category=Category.ACTIVITY_OF_GENERAL_INTEREST,
        description_code=3,
        allocation=Allocation(AIG, target) if target is not None else None,
        date=date(2025, 5, 4),
        description="Quote corso",
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_profile_round_trip(self, temp_db):
        assert temp_db.get_profile() is None

        temp_db.save_profile(EntityProfile(entity_type=EntityType.ODV, name="Volontari"))
        temp_db.save_profile(EntityProfile(entity_type=EntityType.APS, name="Circolo"))

        profile = temp_db.get_profile()
        assert isinstance(profile, entities.EntityProfile)
        assert profile.entity_type is EntityType.APS
        assert profile.name == "Circolo"

    def test_fiscal_year_returns_domain_model(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025, Decimal("12000.50"))

        fiscal_year = temp_db.get_fiscal_year(fiscal_year_id)

        assert isinstance(fiscal_year, entities.FiscalYear)
        assert fiscal_year.year == 2025
        assert fiscal_year.prior_year_revenue == Decimal("12000.50")
        assert isinstance(fiscal_year.created_at, datetime)
        assert temp_db.get_fiscal_year_by_year(2025) == fiscal_year

    def test_list_fiscal_years_most_recent_first(self, temp_db):
        temp_db.create_fiscal_year(2023)
        temp_db.create_fiscal_year(2025)
        temp_db.create_fiscal_year(2024)

        assert [fy.year for fy in temp_db.list_fiscal_years()] == [2025, 2024, 2023]

    def test_activity_variants(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        aig_id = temp_db.create_activity(fiscal_year_id, AIG, "Corsi")
        bar_id = temp_db.create_activity(
            fiscal_year_id, TargetType.DIVERSE_ACTIVITY, "Bar", occasional=True
        )
        temp_db.create_activity(fiscal_year_id, TargetType.FUNDRAISER, "Lotteria")

        assert isinstance(temp_db.get_activity(aig_id), entities.ActivityOfGeneralInterest)
        bar = temp_db.get_activity(bar_id)
        assert isinstance(bar, entities.DiverseActivity)
        assert bar.occasional is True
        assert len(temp_db.list_activities(fiscal_year_id)) == 3
        assert [a.name for a in temp_db.list_activities(fiscal_year_id, TargetType.FUNDRAISER)] == ["Lotteria"]

    def test_movement_round_trip(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        aig_id = temp_db.create_activity(fiscal_year_id, AIG, "Corsi")

        movement_id = temp_db.create_movement(fiscal_year_id, aig_income("150.25", aig_id))
        movement = temp_db.get_movement(movement_id)

        assert isinstance(movement, entities.Movement)
        assert movement.id == movement_id
        assert movement.fiscal_year_id == fiscal_year_id
        assert movement.amount == Decimal("150.25")
        assert movement.description_code == 3
        assert movement.allocation == Allocation(AIG, aig_id)
        assert movement.date == date(2025, 5, 4)
        assert movement.description == "Quote corso"

    def test_cent_amount_round_trip(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025, Decimal("84999.99"))
        movement_id = temp_db.create_movement(fiscal_year_id, aig_income("1234.56"))

        assert temp_db.get_movement(movement_id).amount == Decimal("1234.56")
        assert temp_db.get_fiscal_year(fiscal_year_id).prior_year_revenue == Decimal("84999.99")

    def test_surplus_round_trip(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        surplus = Movement(
            direction=Direction.INCOME,
            amount=Decimal("300"),
            kind=MovementKind.PRIOR_YEAR_CASH_SURPLUS,
        )

        movement = temp_db.get_movement(temp_db.create_movement(fiscal_year_id, surplus))

        assert movement.kind is MovementKind.PRIOR_YEAR_CASH_SURPLUS
        assert movement.account is MoneyAccount.CASH
        assert movement.category is None

    def test_list_movement_filters(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        aig_id = temp_db.create_activity(fiscal_year_id, AIG, "Corsi")
        temp_db.create_movement(fiscal_year_id, aig_income("10", aig_id))
        temp_db.create_movement(fiscal_year_id, aig_income("20"))
        temp_db.create_movement(
            fiscal_year_id,
            Movement(direction=Direction.EXPENSE, amount=Decimal("5"), category=Category.GENERAL_COSTS),
        )

        assert len(temp_db.list_movements(fiscal_year_id)) == 3
        assert len(temp_db.list_movements(fiscal_year_id, direction=Direction.EXPENSE)) == 1
        assert [m.amount for m in temp_db.list_movements(fiscal_year_id, unassigned=True)] == [Decimal("20")]
        assert len(temp_db.list_movements(fiscal_year_id, target_type=AIG, target_id=aig_id)) == 1
        assert len(temp_db.list_movements(fiscal_year_id, category=Category.GENERAL_COSTS)) == 1

    def test_clear_allocations(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        aig_id = temp_db.create_activity(fiscal_year_id, AIG, "Corsi")
        temp_db.create_movement(fiscal_year_id, aig_income("10", aig_id))
        temp_db.create_movement(fiscal_year_id, aig_income("20", aig_id))

        assert temp_db.clear_allocations(AIG, aig_id) == 2
        assert len(temp_db.list_movements(fiscal_year_id, unassigned=True)) == 2

    def test_movement_records_are_raw(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        temp_db.create_movement(fiscal_year_id, aig_income("10"))

        (record,) = temp_db.list_movement_records(fiscal_year_id)

        assert record["direction"] == "ENTRATA"
        assert record["category"] == "AIG"
        assert record["allocation_id"] is None

    def test_delete_fiscal_year_cascades(self, temp_db):
        fiscal_year_id = temp_db.create_fiscal_year(2025)
        aig_id = temp_db.create_activity(fiscal_year_id, AIG, "Corsi")
        movement_id = temp_db.create_movement(fiscal_year_id, aig_income("10", aig_id))

        temp_db.delete_fiscal_year(fiscal_year_id)

        assert temp_db.get_fiscal_year(fiscal_year_id) is None
        assert temp_db.get_activity(aig_id) is None
        assert temp_db.get_movement(movement_id) is None

    def test_update_missing_movement(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_movement_allocation(42, None)
