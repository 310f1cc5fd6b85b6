"""Plan configuration - pricing and profile type for each subscription plan."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class PlanConfig:
    """Configuration for a subscription plan."""

    plan: str
    display_name: str
    price: int  # Price per billing period in cents
    currency: str
    billing_period: str | None  # 'month', 'year', or None for free plans
    profile_type: str  # Profile type a signup on this plan gets

    # Marketing features shown on the pricing page
    features: tuple[str, ...] = ()

    @property
    def is_free(self) -> bool:
        return self.price == 0

    def period_end(self, start: datetime) -> datetime | None:
        """Return the end of the first billing window starting at ``start``."""
        if self.billing_period == "month":
            return start + timedelta(days=30)
        if self.billing_period == "year":
            return start + timedelta(days=365)
        return None


# Values match the subscription_plan enum in the database
PLANS: dict[str, PlanConfig] = {
    "medical_institute_buyers": PlanConfig(
        plan="medical_institute_buyers",
        display_name="Medical Institute Buyers",
        price=0,
        currency="usd",
        billing_period=None,
        profile_type="buyer",
        features=("Browse suppliers", "Post RFQs", "Team management"),
    ),
    "medical_sellers_monthly": PlanConfig(
        plan="medical_sellers_monthly",
        display_name="Medical Sellers",
        price=10000,  # $100/mo
        currency="usd",
        billing_period="month",
        profile_type="seller",
        features=("List products", "Generate leads", "Analytics"),
    ),
    "medical_sellers_yearly": PlanConfig(
        plan="medical_sellers_yearly",
        display_name="Medical Sellers",
        price=100000,  # $1,000/yr
        currency="usd",
        billing_period="year",
        profile_type="seller",
        features=("List products", "Generate leads", "Analytics", "Save $200/year"),
    ),
    "medical_personnel": PlanConfig(
        plan="medical_personnel",
        display_name="Medical Personnel",
        price=10000,  # $100/yr
        currency="usd",
        billing_period="year",
        profile_type="medical_professional",
        features=("CME events", "Professional profile", "Networking"),
    ),
}


def get_plan(plan: str) -> PlanConfig:
    """
    Get plan configuration by plan identifier.

    Raises KeyError for identifiers outside the subscription_plan enum.
    """
    try:
        return PLANS[plan]
    except KeyError:
        raise KeyError(f"Unknown subscription plan: {plan}") from None
