"""Status store - per-account-code ownership and interest flags"""

import logging
from types import MappingProxyType
from typing import AbstractSet, Iterable, Mapping, Optional, Set

from savings_allocator.domain.models import AccountStatus

logger = logging.getLogger(__name__)


class StatusStore:
    """
    Mutable record of which account codes the user owns or is considering.

    Invariants:
    - A code is never both OWNED and CONSIDERING
    - Every mutation is total: illegal or unknown requests are no-ops
    - `version` increases only when a status actually changes
    """

    def __init__(
        self,
        owned: Iterable[str] = (),
        considering: Iterable[str] = (),
        known_codes: Optional[AbstractSet[str]] = None,
    ):
        self._known_codes = frozenset(known_codes) if known_codes is not None else None
        self._owned: Set[str] = set(owned)
        # Owned wins when initial values overlap
        self._considering: Set[str] = set(considering) - self._owned
        self.version = 0

    def status_of(self, code: str) -> AccountStatus:
        if code in self._owned:
            return AccountStatus.OWNED
        if code in self._considering:
            return AccountStatus.CONSIDERING
        return AccountStatus.NEITHER

    def owned_codes(self) -> frozenset:
        return frozenset(self._owned)

    def considering_codes(self) -> frozenset:
        return frozenset(self._considering)

    def snapshot(self) -> Mapping[str, AccountStatus]:
        """Read-only view of every code with a non-NEITHER status"""
        statuses = {code: AccountStatus.CONSIDERING for code in self._considering}
        statuses.update({code: AccountStatus.OWNED for code in self._owned})
        return MappingProxyType(statuses)

    def mark_owned(self, code: str) -> AccountStatus:
        """NEITHER/CONSIDERING -> OWNED; clears CONSIDERING in the same step"""
        if self._accepts(code) and code not in self._owned:
            self._considering.discard(code)
            self._owned.add(code)
            self._changed()
        return self.status_of(code)

    def unmark_owned(self, code: str) -> AccountStatus:
        """OWNED -> NEITHER"""
        if self._accepts(code) and code in self._owned:
            self._owned.remove(code)
            self._changed()
        return self.status_of(code)

    def mark_considering(self, code: str) -> AccountStatus:
        """NEITHER -> CONSIDERING; ignored for OWNED codes"""
        if self._accepts(code) and self.status_of(code) is AccountStatus.NEITHER:
            self._considering.add(code)
            self._changed()
        return self.status_of(code)

    def unmark_considering(self, code: str) -> AccountStatus:
        """CONSIDERING -> NEITHER"""
        if self._accepts(code) and code in self._considering:
            self._considering.remove(code)
            self._changed()
        return self.status_of(code)

    def replace(self, owned: Iterable[str], considering: Iterable[str]) -> None:
        """Swap in whole owned/considering sets, e.g. to undo a change that was not saved"""
        owned = set(owned)
        considering = set(considering) - owned
        if owned != self._owned or considering != self._considering:
            self._owned, self._considering = owned, considering
            self._changed()

    def _accepts(self, code: str) -> bool:
        if self._known_codes is None or code in self._known_codes:
            return True
        logger.debug("Ignoring status change for unknown code", extra={"code": code})
        return False

    def _changed(self) -> None:
        self.version += 1
