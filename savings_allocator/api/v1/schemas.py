"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from savings_allocator.domain.models import AccountStatus, AccountTier, RateOffer
from savings_allocator.domain.policy import PolicyKind


class RateOfferSchema(BaseModel):
    """Rate offered to one customer segment"""

    rate_percent: float
    cap_amount: Optional[float] = Field(None, description="null = no cap")
    display: str
    quota_text: str
    transfers: str
    notes: str

    @classmethod
    def from_offer(cls, offer: RateOffer) -> "RateOfferSchema":
        return cls(
            rate_percent=offer.rate_percent,
            cap_amount=offer.cap_amount,
            display=offer.display,
            quota_text=offer.quota_text,
            transfers=offer.transfers,
            notes=offer.notes,
        )


class TierSchema(BaseModel):
    """Catalog tier with both offers"""

    tier_id: str
    code: str
    name: str
    new_customer: RateOfferSchema
    existing_customer: RateOfferSchema

    @classmethod
    def from_tier(cls, tier: AccountTier) -> "TierSchema":
        return cls(
            tier_id=tier.tier_id,
            code=tier.code,
            name=tier.name,
            new_customer=RateOfferSchema.from_offer(tier.new_customer),
            existing_customer=RateOfferSchema.from_offer(tier.existing_customer),
        )


class CatalogResponse(BaseModel):
    """Response for GET /v1/catalog"""

    bank_count: int
    tiers: List[TierSchema]


class BankSchema(BaseModel):
    """One deduplicated account code"""

    code: str
    name: str
    status: AccountStatus


class BanksResponse(BaseModel):
    """Response for GET /v1/catalog/banks"""

    banks: List[BankSchema]


class RankedTierSchema(BaseModel):
    """Tier in ranked position with the offer the user qualifies for"""

    rank: int
    tier_id: str
    code: str
    name: str
    status: AccountStatus
    priority: int
    active: bool
    effective_offer: RateOfferSchema


class RankingResponse(BaseModel):
    """Response for GET /v1/ranking"""

    policy: PolicyKind
    include_new: bool
    tiers: List[RankedTierSchema]


class AllocationRequest(BaseModel):
    """Request body for POST /v1/allocation; both fields optional"""

    cash_amount: Optional[float] = Field(None, description="Cash to allocate; negative clamps to 0")
    cash_input: Optional[str] = Field(None, description="Cash as typed by the user, in ten-thousands")


class TierAllocationSchema(BaseModel):
    """Deposit placed in a single tier"""

    tier_id: str
    code: str
    name: str
    status: AccountStatus
    rate_percent: float
    cap_amount: Optional[float] = None
    deposit: float
    interest: float


class AllocationResponse(BaseModel):
    """Response for POST /v1/allocation"""

    cash_amount: float
    total_interest: float
    remaining_cash: float
    allocated_cash: float
    blended_rate_percent: float
    allocations: List[TierAllocationSchema]


class StatusResponse(BaseModel):
    """Response for account status mutations"""

    code: str
    status: AccountStatus
    owned_codes: List[str]
    considering_codes: List[str]


class PreferencesResponse(BaseModel):
    """Response for GET/PATCH /v1/preferences"""

    owned_codes: List[str]
    considering_codes: List[str]
    view_mode: Literal["card", "compact"]
    theme: Literal["system", "light", "dark"]
    setup_completed: bool
    include_new: bool
    policy: PolicyKind
    cash_amount: float
    cash_input: float = Field(..., description="Cash amount in entry units (ten-thousands by default)")


class PreferencesUpdate(BaseModel):
    """Request body for PATCH /v1/preferences; omitted fields are unchanged"""

    view_mode: Optional[Literal["card", "compact"]] = None
    theme: Optional[Literal["system", "light", "dark"]] = None
    include_new: Optional[bool] = None
    policy: Optional[PolicyKind] = None
    cash_amount: Optional[float] = None
