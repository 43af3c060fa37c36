"""
Static subscription plan catalog. Payment processing happens elsewhere; a
confirmed payment updates the user's tier through DbClient.set_subscription_tier.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from card_api.ai_usage import TIER_QUOTAS


@dataclass(frozen=True)
class SubscriptionPlan:
    id: str
    name: str
    price: float
    currency: str
    interval: str
    features: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ai_quota(self) -> int:
        return TIER_QUOTAS[self.id]


SUBSCRIPTION_PLANS = (
    SubscriptionPlan(
        id="monthly",
        name="Monthly Premium",
        price=9.99,
        currency="USD",
        interval="month",
        features=(
            "50 AI generations per month",
            "Unlimited template access",
            "Advanced editing tools",
            "Priority support",
        ),
    ),
    SubscriptionPlan(
        id="quarterly",
        name="Quarterly Premium",
        price=24.99,
        currency="USD",
        interval="quarter",
        features=(
            "150 AI generations per month",
            "Unlimited template access",
            "Advanced editing tools",
            "Priority support",
            "Extra storage",
        ),
    ),
    SubscriptionPlan(
        id="yearly",
        name="Yearly Premium",
        price=79.99,
        currency="USD",
        interval="year",
        features=(
            "500 AI generations per month",
            "Unlimited template access",
            "Advanced editing tools",
            "24/7 dedicated support",
            "Extra storage",
            "Team collaboration",
        ),
    ),
)
