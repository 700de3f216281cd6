"""Tests for the 6% test, the entity test and the secondary-activity test."""

import pytest
from decimal import Decimal

from fiscoets.domain.compliance import (
    evaluate_activities,
    evaluate_activity,
    evaluate_entity,
    evaluate_secondary,
)
from fiscoets.domain.entities import (
    ActivityOfGeneralInterest,
    ActivityResult,
    Allocation,
    Category,
    Direction,
    DiverseActivity,
    EntityType,
    MoneyAccount,
    Movement,
    MovementKind,
    Verdict,
)
from fiscoets.domain.errors import ConfigurationError, ValidationError

CORSI = ActivityOfGeneralInterest(id=1, name="Corsi")


def movement(direction, category, amount, target=None, code=None):
    allocation = None
    if target is not None:
        allocation = Allocation(category.target_type, target)
    return Movement(
        direction=direction,
        amount=Decimal(amount),
        category=category,
        description_code=code,
        allocation=allocation,
    )


def aig_in(amount, target=1, code=None):
    return movement(Direction.INCOME, Category.ACTIVITY_OF_GENERAL_INTEREST, amount, target, code)


def aig_out(amount, target=1):
    return movement(Direction.EXPENSE, Category.ACTIVITY_OF_GENERAL_INTEREST, amount, target)


def diverse_in(amount, target=None, code=None):
    return movement(Direction.INCOME, Category.DIVERSE_ACTIVITY, amount, target, code)


def result(ter, verdict):
    ter = Decimal(ter)
    return ActivityResult(
        activity_id=1,
        te=ter,
        tu=Decimal("0"),
        cg=Decimal("0"),
        tu_eff=Decimal("0"),
        ter=ter,
        threshold=Decimal("0"),
        verdict=verdict,
    )


class TestActivityTest:
    """Tests for the per-activity 6% test."""

    def test_commercial_ets(self):
        """ETS with income 100.000 against costs 50.000."""
        r = evaluate_activity(CORSI, [aig_in("100000"), aig_out("50000")], Decimal("0"), EntityType.ETS)

        assert r.te == Decimal("100000")
        assert r.ter == Decimal("100000")
        assert r.threshold == Decimal("53000")
        assert r.verdict is Verdict.COMMERCIAL

    def test_aps_member_income_excluded(self):
        """APS: member-only income (code 1) does not count towards TER."""
        movements = [aig_in("60000", code=1), aig_in("40000", code=3), aig_out("50000")]

        r = evaluate_activity(CORSI, movements, Decimal("0"), EntityType.APS)

        assert r.te == Decimal("100000")
        assert r.ter == Decimal("40000")
        assert r.threshold == Decimal("53000")
        assert r.verdict is Verdict.NON_COMMERCIAL

    def test_member_codes_count_for_other_entities(self):
        movements = [aig_in("60000", code=1), aig_in("40000", code=2)]
        r = evaluate_activity(CORSI, movements, Decimal("0"), EntityType.ODV)
        assert r.ter == Decimal("100000")

    def test_imputed_cost_raises_threshold(self):
        r = evaluate_activity(CORSI, [aig_in("1000"), aig_out("500")], Decimal("500"), EntityType.ETS)
        assert r.cg == Decimal("500")
        assert r.tu_eff == Decimal("1000")
        assert r.threshold == Decimal("1060")
        assert r.verdict is Verdict.NON_COMMERCIAL

    def test_boundary_tie_is_not_commercial(self):
        """TER exactly equal to costs + 6% stays non-commercial."""
        r = evaluate_activity(CORSI, [aig_in("106"), aig_out("100")], Decimal("0"), EntityType.ETS)
        assert r.ter == r.threshold
        assert r.verdict is Verdict.NON_COMMERCIAL

    def test_just_above_boundary(self):
        r = evaluate_activity(CORSI, [aig_in("106.01"), aig_out("100")], Decimal("0"), EntityType.ETS)
        assert r.verdict is Verdict.COMMERCIAL

    def test_empty_activity_is_not_commercial(self):
        r = evaluate_activity(CORSI, [], Decimal("0"), EntityType.ETS)
        assert r.ter == Decimal("0")
        assert r.threshold == Decimal("0")
        assert r.verdict is Verdict.NON_COMMERCIAL

    def test_unassigned_and_other_activities_excluded(self):
        unassigned = movement(Direction.INCOME, Category.ACTIVITY_OF_GENERAL_INTEREST, "9999")
        movements = [aig_in("100"), aig_in("5000", target=2), unassigned]

        r = evaluate_activity(CORSI, movements, Decimal("0"), EntityType.ETS)

        assert r.te == Decimal("100")

    def test_missing_entity_type(self):
        with pytest.raises(ConfigurationError):
            evaluate_activity(CORSI, [], Decimal("0"), None)

    def test_non_aig_rejected(self):
        with pytest.raises(ValidationError):
            evaluate_activity(DiverseActivity(id=4, name="Bar"), [], Decimal("0"), EntityType.ETS)

    def test_deterministic(self):
        movements = [aig_in("70000"), aig_out("20000"), aig_in("300", target=2)]
        aigs = [CORSI, ActivityOfGeneralInterest(id=2, name="Eventi")]
        costs = {1: Decimal("1500"), 2: Decimal("10")}

        first = evaluate_activities(aigs, movements, costs, EntityType.APS)
        second = evaluate_activities(aigs, list(reversed(movements)), costs, EntityType.APS)

        assert first == second


class TestEntityTest:
    """Tests for the entity-wide commerciality test."""

    def test_non_commercial_entity(self):
        """A=0, B=5.000, C=50.000, D=2.000."""
        movements = [
            diverse_in("5000", target=4),
            movement(Direction.INCOME, Category.DONATIONS, "1500"),
            movement(Direction.INCOME, Category.FIVE_PER_MILLE, "500"),
        ]
        results = [result("50000", Verdict.NON_COMMERCIAL)]

        entity = evaluate_entity(results, movements, [DiverseActivity(id=4, name="Bar")])

        assert (entity.a, entity.b, entity.c, entity.d) == (
            Decimal("0"),
            Decimal("5000"),
            Decimal("50000"),
            Decimal("2000"),
        )
        assert entity.verdict is Verdict.NON_COMMERCIAL

    def test_commercial_entity(self):
        movements = [diverse_in("3000", target=4), movement(Direction.INCOME, Category.MEMBERSHIP_FEES, "1000")]
        results = [result("10000", Verdict.COMMERCIAL), result("8000", Verdict.NON_COMMERCIAL)]

        entity = evaluate_entity(results, movements, [DiverseActivity(id=4, name="Bar")])

        assert entity.commercial_side == Decimal("13000")
        assert entity.noncommercial_side == Decimal("9000")
        assert entity.verdict is Verdict.COMMERCIAL

    def test_tie_is_not_commercial(self):
        movements = [diverse_in("100", target=4), movement(Direction.INCOME, Category.DONATIONS, "100")]
        entity = evaluate_entity([], movements, [DiverseActivity(id=4, name="Bar")])
        assert entity.verdict is Verdict.NON_COMMERCIAL

    def test_occasional_and_sponsorship_excluded_from_b(self):
        movements = [
            diverse_in("1000", target=4),
            diverse_in("2000", target=5),
            diverse_in("400", target=4, code=6),
            diverse_in("700"),
        ]
        diverse = [DiverseActivity(id=4, name="Bar"), DiverseActivity(id=5, name="Sagra", occasional=True)]

        entity = evaluate_entity([], movements, diverse)

        assert entity.b == Decimal("1000")

    def test_public_contributions_and_other_income_in_d(self):
        movements = [
            movement(Direction.INCOME, Category.PUBLIC_CONTRIBUTIONS_NO_CONSIDERATION, "300"),
            movement(Direction.INCOME, Category.OTHER_NONCOMMERCIAL_INCOME, "200"),
            movement(Direction.EXPENSE, Category.GENERAL_COSTS, "900"),
        ]
        entity = evaluate_entity([], movements, [])
        assert entity.d == Decimal("500")

    def test_surplus_ignored(self):
        surplus = Movement(
            direction=Direction.INCOME,
            amount=Decimal("50000"),
            kind=MovementKind.PRIOR_YEAR_BANK_SURPLUS,
            account=MoneyAccount.BANK,
        )
        entity = evaluate_entity([], [surplus, diverse_in("10", target=4)], [])
        assert entity.d == Decimal("0")
        assert entity.verdict is Verdict.COMMERCIAL


class TestSecondaryTest:
    """Tests for the 30% / 66% secondary-activity checks."""

    def test_both_checks_fail(self):
        """Diverse income 40.000, total income 100.000, total expense 50.000."""
        movements = [
            diverse_in("40000", target=4),
            aig_in("60000"),
            aig_out("50000"),
        ]

        secondary = evaluate_secondary(movements)

        assert secondary.total_diverse_income == Decimal("40000")
        assert secondary.threshold30 == Decimal("30000")
        assert secondary.threshold66 == Decimal("33000")
        assert not secondary.pass30
        assert not secondary.pass66
        assert not secondary.meets_either_limit

    def test_only_cost_check_passes(self):
        movements = [diverse_in("40000"), aig_in("60000"), aig_out("70000")]

        secondary = evaluate_secondary(movements)

        assert not secondary.pass30
        assert secondary.pass66
        assert secondary.meets_either_limit

    def test_limit_is_inclusive(self):
        movements = [diverse_in("30"), aig_in("70")]
        assert evaluate_secondary(movements).pass30

    def test_unassigned_diverse_income_counts(self):
        secondary = evaluate_secondary([diverse_in("10"), diverse_in("20", target=4)])
        assert secondary.total_diverse_income == Decimal("30")

    def test_no_movements(self):
        secondary = evaluate_secondary([])
        assert secondary.pass30 and secondary.pass66
