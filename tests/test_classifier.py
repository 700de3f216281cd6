"""Tests for the movement classifier."""

import pytest
from datetime import date
from decimal import Decimal

from fiscoets.domain.classifier import classify, classify_many
from fiscoets.domain.entities import (
    Allocation,
    Category,
    Direction,
    MoneyAccount,
    MovementKind,
    TargetType,
)
from fiscoets.domain.errors import ValidationError


class TestClassify:
    """Tests for classify."""

    def test_stored_codes(self):
        """Test a record as stored in the database."""
        movement = classify(
            {
                "id": 7,
                "direction": "ENTRATA",
                "category": "AIG",
                "description_code": 3,
                "amount": Decimal("1200.00"),
                "account": "BANCA",
                "allocation_type": "AIG",
                "allocation_id": 2,
                "date": date(2025, 3, 1),
            }
        )
        assert movement.id == 7
        assert movement.direction is Direction.INCOME
        assert movement.category is Category.ACTIVITY_OF_GENERAL_INTEREST
        assert movement.account is MoneyAccount.BANK
        assert movement.allocation == Allocation(TargetType.ACTIVITY_OF_GENERAL_INTEREST, 2)
        assert movement.date == date(2025, 3, 1)

    def test_english_names_and_text_amount(self):
        movement = classify(
            {"direction": "expense", "category": "general_costs", "amount": "1.234,56", "date": "31/01/2025"}
        )
        assert movement.direction is Direction.EXPENSE
        assert movement.category is Category.GENERAL_COSTS
        assert movement.amount == Decimal("1234.56")
        assert movement.date == date(2025, 1, 31)
        assert movement.account is MoneyAccount.CASH

    def test_float_amount_has_no_binary_noise(self):
        movement = classify({"direction": "INCOME", "category": "DONATIONS", "amount": 0.1})
        assert movement.amount == Decimal("0.1")

    def test_bool_amount_rejected(self):
        with pytest.raises(ValidationError, match="Invalid amount"):
            classify({"direction": "INCOME", "category": "DONATIONS", "amount": True})

    def test_missing_amount(self):
        with pytest.raises(ValidationError, match="Amount is required"):
            classify({"direction": "INCOME", "category": "DONATIONS"})

    def test_non_positive_amount(self):
        with pytest.raises(ValidationError, match="positive"):
            classify({"direction": "INCOME", "category": "DONATIONS", "amount": "0"})

    @pytest.mark.parametrize("amount", [Decimal("1234.567"), Decimal("0.004"), "0,125"])
    def test_sub_cent_amount_rejected(self, amount):
        with pytest.raises(ValidationError, match="whole cents"):
            classify({"direction": "INCOME", "category": "DONATIONS", "amount": amount})

    def test_trailing_zeros_accepted(self):
        movement = classify({"direction": "INCOME", "category": "DONATIONS", "amount": Decimal("12.500")})
        assert movement.amount == Decimal("12.500")

    def test_missing_direction(self):
        with pytest.raises(ValidationError, match="Direction is required"):
            classify({"category": "DONATIONS", "amount": "10"})

    def test_surplus_in_direction_field(self):
        """Test that carried balances arrive with their kind as direction."""
        movement = classify({"direction": "AVANZO_BANCA_T_1", "amount": "2500"})
        assert movement.kind is MovementKind.PRIOR_YEAR_BANK_SURPLUS
        assert movement.direction is Direction.INCOME
        assert movement.account is MoneyAccount.BANK
        assert movement.category is None

    def test_surplus_with_category_rejected(self):
        with pytest.raises(ValidationError):
            classify({"direction": "AVANZO_CASSA_T_1", "category": "DONATIONS", "amount": "10"})

    def test_half_filled_allocation_is_unassigned(self):
        movement = classify(
            {"direction": "INCOME", "category": "FUNDRAISER", "amount": "10", "allocation_type": "RACCOLTE_FONDI"}
        )
        assert movement.allocation is None
        assert movement.is_unassigned

    def test_allocation_pair(self):
        movement = classify(
            {"direction": "INCOME", "category": "DIVERSE", "amount": "10", "allocation": ("DIVERSE", "4")}
        )
        assert movement.allocation == Allocation(TargetType.DIVERSE_ACTIVITY, 4)

    def test_allocation_to_wrong_family(self):
        with pytest.raises(ValidationError, match="cannot be allocated"):
            classify(
                {"direction": "INCOME", "category": "DIVERSE", "amount": "10", "allocation": ("AIG", 1)}
            )

    def test_invalid_description_code(self):
        with pytest.raises(ValidationError, match="Invalid description code"):
            classify({"direction": "INCOME", "category": "AIG", "amount": "10", "description_code": "x"})

    def test_blank_description_dropped(self):
        movement = classify({"direction": "INCOME", "category": "DONATIONS", "amount": "10", "description": "  "})
        assert movement.description is None


class TestClassifyMany:
    """Tests for batch classification."""

    def test_bad_records_reported_not_raised(self):
        movements, errors = classify_many(
            [
                {"id": 1, "direction": "INCOME", "category": "DONATIONS", "amount": "10"},
                {"id": 2, "direction": "INCOME", "category": "GENERAL_COSTS", "amount": "10"},
                {"direction": "SIDEWAYS", "category": "DONATIONS", "amount": "10"},
            ]
        )
        assert [m.id for m in movements] == [1]
        assert len(errors) == 2
        assert str(errors[0]).startswith("Movement 2:")
        assert str(errors[1]).startswith("Movement #2:")
