"""Activation policy - decides which accounts may receive cash and which rank first"""

from dataclasses import dataclass
from enum import Enum

from savings_allocator.domain.models import AccountStatus


class PolicyKind(str, Enum):
    PER_CODE = "per_code"
    BLANKET = "blanket"


@dataclass(frozen=True)
class ActivationPolicy:
    """
    Single switch between the two ways the tool has modeled "active" accounts.

    PER_CODE (default):
    - Active = OWNED or CONSIDERING, chosen per account code
    - Active accounts form the priority bucket

    BLANKET (the blanket "include new accounts" switch):
    - include_new=True: every tier is active, no priority bucket
    - include_new=False: only OWNED tiers are active and rank first;
      CONSIDERING counts as NEITHER
    """

    kind: PolicyKind = PolicyKind.PER_CODE
    include_new: bool = True

    def is_active(self, status: AccountStatus) -> bool:
        if self.kind is PolicyKind.BLANKET:
            return self.include_new or status is AccountStatus.OWNED
        return status in (AccountStatus.OWNED, AccountStatus.CONSIDERING)

    def priority(self, status: AccountStatus) -> int:
        """Bucket 1 sorts entirely before bucket 0"""
        if self.kind is PolicyKind.BLANKET:
            if self.include_new:
                return 0
            return 1 if status is AccountStatus.OWNED else 0
        return 1 if self.is_active(status) else 0


PER_CODE = ActivationPolicy()
