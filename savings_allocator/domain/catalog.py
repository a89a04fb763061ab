"""Account catalog - immutable reference data for rate tiers"""

import re
from typing import Dict, FrozenSet, Iterator, List, Sequence

from savings_allocator.domain.exceptions import CatalogError
from savings_allocator.domain.models import AccountTier


def _natural_key(code: str) -> list:
    """Sort key that orders "48" before "108" and keeps letters stable"""
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", code)]


class Catalog:
    """Ordered, read-only collection of account tiers.

    Catalog order is significant: it is the final tie-break when two tiers
    share the same effective rate.
    """

    def __init__(self, tiers: Sequence[AccountTier]):
        seen = set()
        for tier in tiers:
            if tier.tier_id in seen:
                raise CatalogError(f"Duplicate tier id: {tier.tier_id}")
            seen.add(tier.tier_id)
        self._tiers = tuple(tiers)

    def __iter__(self) -> Iterator[AccountTier]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    @property
    def tiers(self) -> tuple:
        return self._tiers

    def codes(self) -> FrozenSet[str]:
        return frozenset(tier.code for tier in self._tiers)

    def unique_codes(self) -> List[str]:
        """Deduplicated account codes in natural numeric order"""
        return sorted(self.codes(), key=_natural_key)

    def bank_names(self) -> Dict[str, str]:
        """Display name per code, taken from the first tier listed for it"""
        names: Dict[str, str] = {}
        for tier in self._tiers:
            names.setdefault(tier.code, tier.name)
        return names
