"""Domain model entities for fiscoets.

These are pure data classes representing business concepts, independent of
database schema. Enum member names are the canonical English names, values
are the codes stored by the record store.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union

from fiscoets import config
from fiscoets.domain.errors import (
    UnassignedMovementWarning,
    ValidationError,
    allocation_mismatch,
)

# Short tokens accepted on top of member names and stored codes
_TOKEN_ALIASES = {
    "DIVERSE": "DIVERSE_ACTIVITY",
    "AD": "DIVERSE_ACTIVITY",
    "RF": "FUNDRAISER",
    "GENERAL": "GENERAL_COSTS",
    "CG": "GENERAL_COSTS",
    "MEMBERSHIP": "MEMBERSHIP_FEES",
    "5X1000": "FIVE_PER_MILLE",
    "CASH_SURPLUS": "PRIOR_YEAR_CASH_SURPLUS",
    "BANK_SURPLUS": "PRIOR_YEAR_BANK_SURPLUS",
}


def has_sub_cent_digits(amount: Decimal) -> bool:
    """True if the amount cannot be stored in whole euro cents."""
    return amount.normalize().as_tuple().exponent < -2


class CodedEnum(Enum):
    """Enum that can be resolved from its name, its stored code or an alias."""

    @classmethod
    def from_token(cls, token):
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            key = token.strip().upper().replace("-", "_").replace(" ", "_")
            key = _TOKEN_ALIASES.get(key, key)
            for member in cls:
                if key == member.name or key == member.value.upper().replace(" ", "_"):
                    return member
        raise ValidationError(f"Unknown {cls.__name__} '{token}'")


class Direction(CodedEnum):
    INCOME = "ENTRATA"
    EXPENSE = "USCITA"


class MovementKind(CodedEnum):
    ORDINARY = "ORDINARIO"
    PRIOR_YEAR_CASH_SURPLUS = "AVANZO_CASSA_T_1"
    PRIOR_YEAR_BANK_SURPLUS = "AVANZO_BANCA_T_1"

    @property
    def is_surplus(self) -> bool:
        return self is not MovementKind.ORDINARY


class MoneyAccount(CodedEnum):
    CASH = "CASSA"
    BANK = "BANCA"


class TargetType(CodedEnum):
    """Activity families a movement can be allocated to."""

    ACTIVITY_OF_GENERAL_INTEREST = "AIG"
    DIVERSE_ACTIVITY = "ATTIVITA_DIVERSE"
    FUNDRAISER = "RACCOLTE_FONDI"

    @property
    def category(self) -> "Category":
        return Category(self.value)


class Category(CodedEnum):
    ACTIVITY_OF_GENERAL_INTEREST = "AIG"
    DIVERSE_ACTIVITY = "ATTIVITA_DIVERSE"
    FUNDRAISER = "RACCOLTE_FONDI"
    MEMBERSHIP_FEES = "QUOTE_ASSOCIATIVE"
    DONATIONS = "EROGAZIONI_LIBERALI"
    FIVE_PER_MILLE = "PROVENTI_5X1000"
    PUBLIC_CONTRIBUTIONS_NO_CONSIDERATION = "CONTRIBUTI_PA_SENZA_CORRISPETTIVO"
    OTHER_NONCOMMERCIAL_INCOME = "ALTRI_PROVENTI_NON_COMMERCIALI"
    GENERAL_COSTS = "COSTI_GENERALI"

    @property
    def target_type(self) -> Optional[TargetType]:
        """Activity family this category is allocated to, if any."""
        try:
            return TargetType(self.value)
        except ValueError:
            return None

    @property
    def requires_allocation(self) -> bool:
        return self.target_type is not None

    @property
    def is_other_noncommercial(self) -> bool:
        return self in OTHER_NONCOMMERCIAL_CATEGORIES


OTHER_NONCOMMERCIAL_CATEGORIES = frozenset(
    {
        Category.MEMBERSHIP_FEES,
        Category.DONATIONS,
        Category.FIVE_PER_MILLE,
        Category.PUBLIC_CONTRIBUTIONS_NO_CONSIDERATION,
        Category.OTHER_NONCOMMERCIAL_INCOME,
    }
)

# (category, direction) -> valid description codes
DESCRIPTION_TABLES = {
    (Category.ACTIVITY_OF_GENERAL_INTEREST, Direction.INCOME): config.AIG_INCOME_DESCRIPTIONS,
    (Category.ACTIVITY_OF_GENERAL_INTEREST, Direction.EXPENSE): config.AIG_EXPENSE_DESCRIPTIONS,
    (Category.DIVERSE_ACTIVITY, Direction.INCOME): config.DIVERSE_INCOME_DESCRIPTIONS,
    (Category.DIVERSE_ACTIVITY, Direction.EXPENSE): config.DIVERSE_EXPENSE_DESCRIPTIONS,
}


class EntityType(CodedEnum):
    APS = "APS"
    ODV = "ODV"
    ETS = "ETS"
    OTHER = "ALTRO"


class Verdict(CodedEnum):
    COMMERCIAL = "COMMERCIALE"
    NON_COMMERCIAL = "NON COMMERCIALE"


class Regime(CodedEnum):
    FORFETARIO = "FORFETARIO"
    ORDINARIO = "ORDINARIO"


@dataclass(frozen=True)
class Allocation:
    """Activity a movement is allocated to."""

    target_type: TargetType
    target_id: int


@dataclass(frozen=True)
class Movement:
    """Income or expense record.

    Invariants are checked at construction, so a Movement with an amount
    that is not strictly positive, a category that does not fit the
    direction or an allocation to the wrong family cannot exist.
    """

    direction: Direction
    amount: Decimal
    category: Optional[Category] = None
    kind: MovementKind = MovementKind.ORDINARY
    description_code: Optional[int] = None
    allocation: Optional[Allocation] = None
    account: MoneyAccount = MoneyAccount.CASH
    id: Optional[int] = None
    fiscal_year_id: Optional[int] = None
    date: Optional[datetime.date] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            raise ValidationError(f"Amount must be a Decimal, got {type(self.amount).__name__}")
        if not self.amount.is_finite():
            raise ValidationError(f"Amount must be finite, got {self.amount}")
        if self.amount <= 0:
            raise ValidationError(f"Amount must be positive, got {self.amount}")
        if has_sub_cent_digits(self.amount):
            raise ValidationError(f"Amount must be in whole cents, got {self.amount}")

        if self.kind.is_surplus:
            self._check_surplus()
        else:
            self._check_ordinary()

    def _check_surplus(self) -> None:
        if self.direction is not Direction.INCOME:
            raise ValidationError("Prior-year surplus must be recorded as income")
        if self.category is not None or self.description_code is not None:
            raise ValidationError("Prior-year surplus takes no category or description code")
        if self.allocation is not None:
            raise ValidationError("Prior-year surplus cannot be allocated")
        expected = (
            MoneyAccount.CASH
            if self.kind is MovementKind.PRIOR_YEAR_CASH_SURPLUS
            else MoneyAccount.BANK
        )
        if self.account is not expected:
            raise ValidationError(f"{self.kind.name} must be held on the {expected.name} account")

    def _check_ordinary(self) -> None:
        if self.category is None:
            raise ValidationError("Category is required for ordinary movements")
        if self.category is Category.GENERAL_COSTS and self.direction is not Direction.EXPENSE:
            raise ValidationError("General costs can only be recorded as expense")
        if self.category.is_other_noncommercial and self.direction is not Direction.INCOME:
            raise ValidationError(f"Category {self.category.name} can only be recorded as income")

        if self.description_code is not None:
            table = DESCRIPTION_TABLES.get((self.category, self.direction))
            if table is None:
                raise ValidationError(
                    f"Description code not allowed for category {self.category.name}"
                )
            if self.description_code not in table:
                raise ValidationError(
                    f"Description code {self.description_code} not valid for "
                    f"{self.category.name} {self.direction.name.lower()}"
                )

        if self.allocation is not None and self.allocation.target_type is not self.category.target_type:
            raise ValidationError(
                allocation_mismatch(self.category.name, self.allocation.target_type.name)
            )

    @property
    def is_ordinary(self) -> bool:
        return self.kind is MovementKind.ORDINARY

    @property
    def is_income(self) -> bool:
        return self.direction is Direction.INCOME

    @property
    def is_expense(self) -> bool:
        return self.direction is Direction.EXPENSE

    @property
    def is_unassigned(self) -> bool:
        """True for ordinary movements that need an activity but have none."""
        return (
            self.is_ordinary
            and self.category is not None
            and self.category.requires_allocation
            and self.allocation is None
        )

    def is_allocated_to(self, target_type: TargetType, target_id: Optional[int] = None) -> bool:
        if self.allocation is None or self.allocation.target_type is not target_type:
            return False
        return target_id is None or self.allocation.target_id == target_id


@dataclass(frozen=True)
class Activity:
    """Grouping that receives allocated movements."""

    id: int
    name: str
    fiscal_year_id: Optional[int] = None
    description: str = ""

    target_type: ClassVar[TargetType]


@dataclass(frozen=True)
class ActivityOfGeneralInterest(Activity):
    target_type: ClassVar[TargetType] = TargetType.ACTIVITY_OF_GENERAL_INTEREST


@dataclass(frozen=True)
class DiverseActivity(Activity):
    occasional: bool = False

    target_type: ClassVar[TargetType] = TargetType.DIVERSE_ACTIVITY


@dataclass(frozen=True)
class Fundraiser(Activity):
    target_type: ClassVar[TargetType] = TargetType.FUNDRAISER


ACTIVITY_CLASSES: dict[TargetType, type[Activity]] = {
    TargetType.ACTIVITY_OF_GENERAL_INTEREST: ActivityOfGeneralInterest,
    TargetType.DIVERSE_ACTIVITY: DiverseActivity,
    TargetType.FUNDRAISER: Fundraiser,
}


@dataclass(frozen=True)
class EntityProfile:
    """Operator's entity profile."""

    entity_type: EntityType
    name: Optional[str] = None
    fiscal_code: Optional[str] = None
    vat_number: Optional[str] = None


@dataclass(frozen=True)
class FiscalYear:
    """Reporting period scoping movements and activities."""

    id: int
    year: int
    prior_year_revenue: Decimal = Decimal("0")
    created_at: Optional[datetime.datetime] = None


@dataclass(frozen=True)
class EvaluationContext:
    """Immutable snapshot of one fiscal year handed to the engine."""

    fiscal_year: Optional[FiscalYear]
    profile: Optional[EntityProfile]
    movements: tuple[Movement, ...] = ()
    activities: tuple[Activity, ...] = ()
    validation_errors: tuple[ValidationError, ...] = ()

    def activities_of(self, target_type: TargetType) -> tuple[Activity, ...]:
        return tuple(a for a in self.activities if a.target_type is target_type)

    @property
    def activities_of_general_interest(self) -> tuple[Activity, ...]:
        return self.activities_of(TargetType.ACTIVITY_OF_GENERAL_INTEREST)

    @property
    def diverse_activities(self) -> tuple[Activity, ...]:
        return self.activities_of(TargetType.DIVERSE_ACTIVITY)

    @property
    def fundraisers(self) -> tuple[Activity, ...]:
        return self.activities_of(TargetType.FUNDRAISER)


# ============================================================================
# RESULTS
# ============================================================================


@dataclass(frozen=True)
class TargetTotals:
    """Allocated totals of one activity, general costs included."""

    target_type: TargetType
    target_id: int
    te: Decimal
    tu: Decimal
    cg: Decimal

    @property
    def tu_eff(self) -> Decimal:
        return self.tu + self.cg


@dataclass(frozen=True)
class ActivityResult:
    """Outcome of the 6% test for one Activity of General Interest."""

    activity_id: int
    te: Decimal
    tu: Decimal
    cg: Decimal
    tu_eff: Decimal
    ter: Decimal
    threshold: Decimal
    verdict: Verdict

    @property
    def is_commercial(self) -> bool:
        return self.verdict is Verdict.COMMERCIAL


@dataclass(frozen=True)
class EntityResult:
    """Entity-wide commerciality test: commercial iff A + B > C + D."""

    a: Decimal
    b: Decimal
    c: Decimal
    d: Decimal
    verdict: Verdict

    @property
    def commercial_side(self) -> Decimal:
        return self.a + self.b

    @property
    def noncommercial_side(self) -> Decimal:
        return self.c + self.d


@dataclass(frozen=True)
class SecondaryResult:
    """Income-based (30%) and cost-based (66%) secondariness checks."""

    total_diverse_income: Decimal
    total_entity_income: Decimal
    total_entity_expense: Decimal
    threshold30: Decimal
    threshold66: Decimal
    pass30: bool
    pass66: bool

    @property
    def meets_either_limit(self) -> bool:
        return self.pass30 or self.pass66


@dataclass(frozen=True)
class ForfetarioBreakdown:
    aig_commercial_income: Decimal
    diverse_income: Decimal
    base: Decimal
    coefficient: Decimal


@dataclass(frozen=True)
class OrdinarioBreakdown:
    income: Decimal
    expense: Decimal
    profit: Decimal
    rate: Decimal


@dataclass(frozen=True)
class IresResult:
    regime: Regime
    tax: Decimal
    breakdown: Union[ForfetarioBreakdown, OrdinarioBreakdown]


@dataclass(frozen=True)
class Balances:
    """Cash and bank position of a fiscal year."""

    cash_surplus: Decimal = Decimal("0")
    bank_surplus: Decimal = Decimal("0")
    cash_income: Decimal = Decimal("0")
    cash_expense: Decimal = Decimal("0")
    bank_income: Decimal = Decimal("0")
    bank_expense: Decimal = Decimal("0")

    @property
    def cash_availability(self) -> Decimal:
        return self.cash_surplus + self.cash_income - self.cash_expense

    @property
    def bank_availability(self) -> Decimal:
        return self.bank_surplus + self.bank_income - self.bank_expense

    @property
    def total_income(self) -> Decimal:
        return self.cash_income + self.bank_income

    @property
    def total_expense(self) -> Decimal:
        return self.cash_expense + self.bank_expense

    @property
    def operating_result(self) -> Decimal:
        """Avanzo (positive) or disavanzo (negative) di gestione."""
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class ComplianceReport:
    """Everything the presentation layer needs for one fiscal year."""

    fiscal_year: FiscalYear
    entity_type: EntityType
    general_cost_pool: Decimal
    activities: tuple[ActivityResult, ...]
    entity: EntityResult
    secondary: SecondaryResult
    ires: IresResult
    diverse_totals: tuple[TargetTotals, ...]
    fundraiser_totals: tuple[TargetTotals, ...]
    balances: Balances
    unassigned: UnassignedMovementWarning = field(default_factory=UnassignedMovementWarning)
    validation_errors: tuple[ValidationError, ...] = ()
