"""Allocation engine - greedy highest-rate-first fill of account caps"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Iterable, List, Mapping

from savings_allocator.domain.models import AccountStatus, AccountTier, AllocationResult
from savings_allocator.domain.policy import PER_CODE, ActivationPolicy
from savings_allocator.domain.ranking import effective_offer, status_for

ZERO = Decimal("0")


def normalize_cash(value: Any) -> Decimal:
    """
    Coerce raw cash input to a non-negative Decimal.

    Negative, NaN, infinite, boolean, None and non-numeric values all become 0.
    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def _exact_precision(cash: Decimal, tiers: List[AccountTier]) -> int:
    """Digits that keep every deposit, remainder and interest sum free of rounding"""
    offers = [offer for tier in tiers for offer in (tier.new_customer, tier.existing_customer)]
    amounts = [cash] + [offer.cap_amount for offer in offers if offer.cap_amount is not None]
    rates = [offer.rate_percent for offer in offers] or [ZERO]

    amount_span = max(a.adjusted() for a in amounts) - min(a.as_tuple().exponent for a in amounts)
    rate_span = max(r.adjusted() for r in rates) - min(r.as_tuple().exponent for r in rates)
    # +1 per span for the leading digit, plus carries from summing one term per tier
    return amount_span + rate_span + 2 + len(str(len(tiers)))


def allocate(
    ranked_tiers: Iterable[AccountTier],
    statuses: Mapping[str, AccountStatus],
    cash_amount: Any,
    policy: ActivationPolicy = PER_CODE,
) -> AllocationResult:
    """
    Distribute cash across ranked tiers in a single forward pass.

    Requirements:
    - Tiers are filled strictly in ranked order, each up to its cap
    - Inactive tiers (per policy) and tiers reached after cash runs out get 0
    - sum(deposits) + remaining_cash == cash_amount exactly, at any magnitude

    This is a greedy heuristic, not a knapsack optimum: a high-rate tier is
    always filled before lower-rate ones even if skipping it could do better.
    """
    tiers = list(ranked_tiers)
    cash = normalize_cash(cash_amount)
    result = AllocationResult(cash_amount=cash, remaining_cash=cash)
    remaining = cash

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_precision(cash, tiers))

        for tier in tiers:
            status = status_for(statuses, tier.code)
            if not policy.is_active(status) or remaining <= 0:
                result.deposits[tier.tier_id] = ZERO
                continue

            offer = effective_offer(tier, status)
            deposit = remaining if offer.cap_amount is None else min(remaining, offer.cap_amount)

            result.deposits[tier.tier_id] = deposit
            result.total_interest += deposit * offer.rate_percent / 100
            remaining -= deposit

    result.remaining_cash = remaining
    return result
