from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

MAXIMIZE = "maximize"
CASH_ONLY = "cash_only"
POINTS_ONLY = "points_only"
EARNINGS_GOALS = (MAXIMIZE, CASH_ONLY, POINTS_ONLY)

GREEDY = "greedy"
JOINT = "joint"
ALLOCATION_STRATEGIES = (GREEDY, JOINT)

CASH_CURRENCY_TYPES = ("cash_back", "crypto", "cash")
POINTS_CURRENCY_TYPES = (
    "points",
    "miles",
    "airline_miles",
    "hotel_points",
    "transferable_points",
    "non_transferable_points",
)

CAP_UNIT_SPEND = "spend"
CAP_UNIT_REWARDS = "rewards"

DEFAULT_POINT_VALUE_CENTS = 1.0


class InvalidInputError(ValueError):
    """Raised when calculator input violates a basic invariant."""


def is_cashback_currency(currency_type: Optional[str]) -> bool:
    return (currency_type or "") in CASH_CURRENCY_TYPES


@dataclass(frozen=True)
class CurrencyInput:
    """A reward currency such as a points program or plain cash back."""

    id: str
    name: str
    code: str
    currency_type: str
    base_value_cents: Optional[float] = None
    cash_out_value_cents: Optional[float] = None


@dataclass(frozen=True)
class Category:
    """A spending category in the reference snapshot."""

    id: int
    name: str
    slug: str
    parent_category_id: Optional[int] = None
    excluded_by_default: bool = False


@dataclass
class CardInput:  # pylint: disable=too-many-instance-attributes
    """A card product. Annual fee and perks are in dollars."""

    id: str
    name: str
    issuer_id: str
    annual_fee: float
    default_earn_rate: float
    primary_currency_id: str
    primary_currency: Optional[CurrencyInput] = None
    secondary_currency_id: Optional[str] = None
    secondary_currency: Optional[CurrencyInput] = None
    default_perks_value: float = 0.0
    exclude_from_recommendations: bool = False


@dataclass
class CategorySpending:
    """Annual spend for one category, in cents.

    ``large_purchase_spend_cents`` is the >$5k portion, tracked on top of
    ``annual_spend_cents``.
    """

    category_id: int
    category_name: str
    category_slug: str
    annual_spend_cents: int
    large_purchase_spend_cents: int = 0
    excluded_by_default: bool = False
    parent_category_id: Optional[int] = None
    is_user_set: bool = False

    def __post_init__(self):
        if self.annual_spend_cents < 0 or self.large_purchase_spend_cents < 0:
            raise InvalidInputError(
                f"Spend for category {self.category_slug!r} must be non-negative"
            )

    @property
    def total_spend_cents(self) -> int:
        return self.annual_spend_cents + self.large_purchase_spend_cents


@dataclass
class EarningRuleInput:  # pylint: disable=too-many-instance-attributes
    """A (card, category) earning rate, optionally capped."""

    id: str
    card_id: str
    category_id: int
    rate: float
    has_cap: bool = False
    cap_amount: Optional[float] = None
    cap_period: str = "none"
    cap_unit: Optional[str] = None
    post_cap_rate: Optional[float] = None
    booking_method: str = "any"
    brand_name: Optional[str] = None


@dataclass
class CategoryBonusInput:
    """A card-level elevated rate shared by a set of categories."""

    id: str
    card_id: str
    cap_type: str
    elevated_rate: float
    category_ids: List[int] = field(default_factory=list)
    cap_amount: Optional[float] = None
    cap_period: Optional[str] = None
    cap_unit: str = CAP_UNIT_SPEND
    post_cap_rate: Optional[float] = None


@dataclass(frozen=True)
class MultiplierProgram:
    """An opted-in tier that multiplies points for some currencies or cards."""

    program_id: str
    multiplier: float
    applicable_currency_ids: tuple = ()
    applicable_card_ids: tuple = ()


@dataclass(frozen=True)
class TravelPreference:
    category_slug: str
    preference_type: str
    brand_name: Optional[str] = None
    portal_issuer_id: Optional[str] = None


@dataclass
class PointValueTemplate:
    id: str
    name: str
    is_default: bool = False
    values: Dict[str, float] = field(default_factory=dict)


@dataclass
class CatalogEntry:
    """A catalog card together with its earning rules and bonuses."""

    card: CardInput
    earning_rules: List[EarningRuleInput] = field(default_factory=list)
    category_bonuses: List[CategoryBonusInput] = field(default_factory=list)


@dataclass
class CalculatorInput:  # pylint: disable=too-many-instance-attributes
    """Everything one returns calculation needs, as a read-only snapshot."""

    cards: List[CardInput]
    spending: List[CategorySpending]
    earning_rules: List[EarningRuleInput] = field(default_factory=list)
    category_bonuses: List[CategoryBonusInput] = field(default_factory=list)
    user_currency_values: Dict[str, float] = field(default_factory=dict)
    default_currency_values: Dict[str, float] = field(default_factory=dict)
    cash_out_values: Dict[str, float] = field(default_factory=dict)
    perks_values: Dict[str, float] = field(default_factory=dict)
    debit_pay_values: Dict[str, float] = field(default_factory=dict)
    multiplier_programs: List[MultiplierProgram] = field(default_factory=list)
    user_selections: Dict[str, int] = field(default_factory=dict)
    travel_preferences: List[TravelPreference] = field(default_factory=list)
    enabled_secondary_cards: Set[str] = field(default_factory=set)
    earnings_goal: str = MAXIMIZE
    categories: List[Category] = field(default_factory=list)
    large_purchase_category_id: Optional[int] = None
    default_point_value_cents: float = DEFAULT_POINT_VALUE_CENTS

    def __post_init__(self):
        if self.earnings_goal not in EARNINGS_GOALS:
            raise InvalidInputError(f"Unknown earnings goal: {self.earnings_goal!r}")


@dataclass(frozen=True)
class RateOption:
    """One way a card can earn on a category.

    ``annual_cap`` is in ``cap_unit`` (spend dollars or rewards earned) and is
    infinite for uncapped options. Consumption is tracked under ``cap_key``.
    """

    rate: float
    annual_cap: float = float("inf")
    cap_unit: str = CAP_UNIT_SPEND
    post_cap_rate: Optional[float] = None
    cap_key: str = ""
    source: str = "default"

    @property
    def is_capped(self) -> bool:
        return self.annual_cap != float("inf")


@dataclass(frozen=True)
class CurrencyInfo:
    currency_id: str
    currency_type: str
    currency_name: str
    value_cents: float
    is_cashback: bool
    excluded: bool = False


@dataclass
class AllocationEntry:  # pylint: disable=too-many-instance-attributes
    """Spend placed on one card at one rate. Spend and values in dollars."""

    card_id: str
    card_name: str
    currency_type: str
    currency_name: str
    spend: float
    rate: float
    earned: float
    earned_value: float
    is_cashback: bool
    source: str = "default"
    is_large_purchase: bool = False
    debit_pay_value: float = 0.0


@dataclass
class CategoryAllocation:
    category_id: int
    category_name: str
    category_slug: str
    total_spend: float
    allocations: List[AllocationEntry] = field(default_factory=list)
    large_purchase_spend: float = 0.0
    unallocated_spend: float = 0.0

    @property
    def allocated_spend(self) -> float:
        return sum(entry.spend for entry in self.allocations)

    @property
    def earned_value(self) -> float:
        return sum(entry.earned_value for entry in self.allocations)

    @property
    def return_on_spend(self) -> float:
        """Percent of dollar value earned per dollar spent."""
        if self.total_spend <= 0:
            return 0.0
        return self.earned_value / self.total_spend * 100


@dataclass
class CardCategoryBreakdown:
    category_id: int
    category_name: str
    spend: float = 0.0
    rate: float = 0.0
    earned: float = 0.0
    earned_value: float = 0.0


@dataclass
class CardEarnings:  # pylint: disable=too-many-instance-attributes
    """Per-card totals. ``marginal_value`` is filled in by a separate pass."""

    card_id: str
    card_name: str
    currency_type: str
    currency_name: str
    is_cashback: bool
    annual_fee: float
    perks_value: float
    net_fee: float
    total_spend: float = 0.0
    total_earned: float = 0.0
    total_earned_value: float = 0.0
    debit_pay_value: float = 0.0
    category_breakdown: List[CardCategoryBreakdown] = field(default_factory=list)
    marginal_value: Optional[float] = None
    replacement_value: Optional[float] = None


@dataclass
class CurrencyEarningsBreakdown:
    currency_id: str
    currency_name: str
    currency_type: str
    points_earned: float
    points_value: float


@dataclass
class PortfolioReturns:  # pylint: disable=too-many-instance-attributes
    """Result of one portfolio calculation. Money is in dollars, rates in percent."""

    total_spend: float
    cashback_spend: float
    cashback_earned: float
    avg_cashback_rate: float
    points_spend: float
    points_earned: float
    avg_points_rate: float
    total_points_value: float
    avg_point_value: float
    debit_pay_earned: float
    currency_breakdown: List[CurrencyEarningsBreakdown]
    total_value: float
    net_annual_fees: float
    net_value_earned: float
    net_return_rate: float
    category_breakdown: List[CategoryAllocation]
    card_breakdown: List[CardEarnings]

    def card(self, card_id: str) -> Optional[CardEarnings]:
        return next((c for c in self.card_breakdown if c.card_id == card_id), None)


@dataclass
class MarginalValue:
    marginal_value: float
    replacement_value: float


@dataclass
class CardRecommendation:
    card: CardInput
    improvement: float
    default_perks_value: float
