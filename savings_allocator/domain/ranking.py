"""Ranking engine - deterministic order over account tiers"""

from decimal import Decimal
from typing import Iterable, List, Mapping

from savings_allocator.domain.models import AccountStatus, AccountTier, RateOffer
from savings_allocator.domain.policy import PER_CODE, ActivationPolicy


def status_for(statuses: Mapping[str, AccountStatus], code: str) -> AccountStatus:
    return statuses.get(code, AccountStatus.NEITHER)


def effective_offer(tier: AccountTier, status: AccountStatus) -> RateOffer:
    """Existing-customer offer once the account is owned, new-customer offer otherwise"""
    if status is AccountStatus.OWNED:
        return tier.existing_customer
    return tier.new_customer


def effective_rate(tier: AccountTier, status: AccountStatus) -> Decimal:
    return effective_offer(tier, status).rate_percent


def rank_tiers(
    tiers: Iterable[AccountTier],
    statuses: Mapping[str, AccountStatus],
    policy: ActivationPolicy = PER_CODE,
) -> List[AccountTier]:
    """
    Order tiers for display and for greedy allocation.

    Sort keys, in order:
    1. Priority bucket from the policy (bucket 1 before bucket 0)
    2. Effective rate, descending
    3. Catalog index, ascending - a deterministic tie-break only; two tiers
       with the same rate are equally good for the user
    """
    indexed = list(enumerate(tiers))

    def sort_key(item):
        index, tier = item
        status = status_for(statuses, tier.code)
        return (-policy.priority(status), -effective_rate(tier, status), index)

    return [tier for _, tier in sorted(indexed, key=sort_key)]
