"""Allocator - stateful facade the presentation layer drives"""

from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

from savings_allocator.domain.allocation import allocate, normalize_cash
from savings_allocator.domain.catalog import Catalog
from savings_allocator.domain.models import AccountStatus, AccountTier, AllocationResult
from savings_allocator.domain.policy import ActivationPolicy, PolicyKind
from savings_allocator.domain.ranking import rank_tiers
from savings_allocator.domain.status import StatusStore


class Allocator:
    """
    Owns the only mutable inputs (statuses, cash, policy) around an immutable catalog.

    Ranking and allocation are recomputed from scratch whenever one of their
    inputs changes and reused otherwise.
    """

    def __init__(
        self,
        catalog: Catalog,
        owned: Iterable[str] = (),
        considering: Iterable[str] = (),
        policy: PolicyKind = PolicyKind.PER_CODE,
        include_new: bool = True,
        cash_amount: Any = 0,
    ):
        self.catalog = catalog
        self.statuses = StatusStore(owned, considering, known_codes=catalog.codes())
        self.policy = ActivationPolicy(kind=PolicyKind(policy), include_new=include_new)
        self.cash_amount = normalize_cash(cash_amount)

        self._ranked_key: Optional[Tuple] = None
        self._ranked: List[AccountTier] = []
        self._allocation_key: Optional[Tuple] = None
        self._allocation: Optional[AllocationResult] = None

    # Status mutations

    def status_of(self, code: str) -> AccountStatus:
        return self.statuses.status_of(code)

    def mark_owned(self, code: str) -> AccountStatus:
        return self.statuses.mark_owned(code)

    def unmark_owned(self, code: str) -> AccountStatus:
        return self.statuses.unmark_owned(code)

    def mark_considering(self, code: str) -> AccountStatus:
        return self.statuses.mark_considering(code)

    def unmark_considering(self, code: str) -> AccountStatus:
        return self.statuses.unmark_considering(code)

    def restore_statuses(self, owned: Iterable[str], considering: Iterable[str]) -> None:
        self.statuses.replace(owned, considering)

    # Other inputs

    def set_cash(self, raw: Any) -> Decimal:
        self.cash_amount = normalize_cash(raw)
        return self.cash_amount

    def set_policy(self, kind: PolicyKind) -> None:
        self.policy = ActivationPolicy(kind=PolicyKind(kind), include_new=self.policy.include_new)

    def set_include_new(self, include_new: bool) -> None:
        self.policy = ActivationPolicy(kind=self.policy.kind, include_new=bool(include_new))

    # Queries

    def unique_codes(self) -> List[str]:
        return self.catalog.unique_codes()

    def ranked_tiers(self) -> List[AccountTier]:
        key = (self.statuses.version, self.policy)
        if key != self._ranked_key:
            self._ranked = rank_tiers(self.catalog, self.statuses.snapshot(), self.policy)
            self._ranked_key = key
        return list(self._ranked)

    def allocate(self, cash_amount: Any = None) -> AllocationResult:
        """Allocate the given cash, or the stored cash amount when omitted"""
        if cash_amount is not None:
            self.set_cash(cash_amount)

        ranked = self.ranked_tiers()
        key = (self._ranked_key, self.cash_amount)
        if key != self._allocation_key or self._allocation is None:
            self._allocation = allocate(ranked, self.statuses.snapshot(), self.cash_amount, self.policy)
            self._allocation_key = key
        return self._allocation
