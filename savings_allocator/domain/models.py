"""Domain models - pure Python dataclasses representing savings account offers"""

from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from enum import Enum
from typing import Dict, Optional


class AccountStatus(str, Enum):
    """Relationship the user has with an account code"""

    OWNED = "owned"
    CONSIDERING = "considering"
    NEITHER = "neither"


@dataclass(frozen=True)
class RateOffer:
    """Rate a bank offers to one customer segment (new or existing)"""

    rate_percent: Decimal
    cap_amount: Optional[Decimal]  # None = no cap
    display: str = ""
    quota_text: str = ""
    transfers: str = ""
    notes: str = ""


@dataclass(frozen=True)
class AccountTier:
    """One rate tier of a bank; several tiers may share a code"""

    tier_id: str
    code: str
    name: str
    new_customer: RateOffer
    existing_customer: RateOffer


@dataclass
class AllocationResult:
    """Output of a greedy allocation pass"""

    cash_amount: Decimal
    deposits: Dict[str, Decimal] = field(default_factory=dict)  # tier_id -> amount
    total_interest: Decimal = Decimal("0")
    remaining_cash: Decimal = Decimal("0")

    @property
    def allocated_cash(self) -> Decimal:
        cash, remaining = self.cash_amount, self.remaining_cash
        with localcontext() as ctx:
            # remaining never exceeds cash, so this many digits subtract exactly
            lowest = min(cash.as_tuple().exponent, remaining.as_tuple().exponent)
            ctx.prec = max(ctx.prec, cash.adjusted() - lowest + 1)
            return cash - remaining

    @property
    def blended_rate_percent(self) -> Decimal:
        """Average annual rate earned on the whole cash amount"""
        if self.cash_amount <= 0:
            return Decimal("0")
        return self.total_interest / self.cash_amount * 100

    def deposit_for(self, tier: AccountTier) -> Decimal:
        return self.deposits.get(tier.tier_id, Decimal("0"))
