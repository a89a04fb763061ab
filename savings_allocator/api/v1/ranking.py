"""GET /v1/ranking - Ranked tiers for the current statuses and policy"""

from fastapi import APIRouter, Depends

from savings_allocator.api.dependencies import get_allocator
from savings_allocator.api.v1.schemas import RankedTierSchema, RankingResponse, RateOfferSchema
from savings_allocator.domain.engine import Allocator
from savings_allocator.domain.ranking import effective_offer

router = APIRouter()


@router.get("/ranking", response_model=RankingResponse)
def get_ranking(allocator: Allocator = Depends(get_allocator)):
    policy = allocator.policy
    tiers = []
    for rank, tier in enumerate(allocator.ranked_tiers(), start=1):
        status = allocator.status_of(tier.code)
        tiers.append(
            RankedTierSchema(
                rank=rank,
                tier_id=tier.tier_id,
                code=tier.code,
                name=tier.name,
                status=status,
                priority=policy.priority(status),
                active=policy.is_active(status),
                effective_offer=RateOfferSchema.from_offer(effective_offer(tier, status)),
            )
        )

    return RankingResponse(policy=policy.kind, include_new=policy.include_new, tiers=tiers)
