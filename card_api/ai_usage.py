"""
Monthly AI usage quotas per subscription tier.

Counting is count-then-compare without locking; a burst of concurrent calls
from one user can slightly overshoot the quota.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from card_api.db import DEFAULT_TIER, DbClient
from card_shared.errors import QuotaExceeded

TIER_QUOTAS = {
    "free": 3,
    "monthly": 50,
    "quarterly": 150,
    "yearly": 500,
}

USAGE_TEXT_GENERATION = "text_generation"
USAGE_DESIGN_SUGGESTION = "design_suggestion"
USAGE_TEXT_IMPROVEMENT = "text_improvement"


@dataclass
class UsageStats:
    used: int
    quota: int
    remaining: int
    tier: str


def start_of_month(now: datetime | None = None) -> float:
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0).timestamp()


def quota_for_tier(tier: str) -> int:
    return TIER_QUOTAS.get(tier, TIER_QUOTAS[DEFAULT_TIER])


def usage_stats(db: DbClient, user_id: str) -> UsageStats:
    tier = db.get_subscription_tier(user_id)
    quota = quota_for_tier(tier)
    used = db.count_ai_usage(user_id, since=start_of_month())
    return UsageStats(used=used, quota=quota, remaining=max(0, quota - used), tier=tier)


def check_quota(db: DbClient, user_id: str) -> UsageStats:
    stats = usage_stats(db, user_id)
    if stats.used >= stats.quota:
        raise QuotaExceeded(
            "Monthly AI usage quota reached; upgrade your plan for more requests"
        )
    return stats


def track_usage(db: DbClient, user_id: str, usage_type: str, tokens_used: int = 0) -> None:
    db.record_ai_usage(user_id, usage_type, tokens_used)
