"""POST /v1/allocation - Greedy cash allocation endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from savings_allocator.api.v1.schemas import AllocationRequest, AllocationResponse, TierAllocationSchema
from savings_allocator.api.dependencies import get_allocator, get_preference_store, get_request_id
from savings_allocator.config import settings
from savings_allocator.domain.engine import Allocator
from savings_allocator.domain.ranking import effective_offer
from savings_allocator.infrastructure.database.session import get_db
from savings_allocator.infrastructure.observability.logging import log_allocation
from savings_allocator.infrastructure.observability.metrics import record_allocation
from savings_allocator.infrastructure.preferences import PreferenceStore
from savings_allocator.utils.cash import parse_cash_input

router = APIRouter()


@router.post("/allocation", response_model=AllocationResponse)
def create_allocation(
    request_body: AllocationRequest,
    request: Request,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """
    Spread cash over the ranked tiers, highest effective rate first.

    Flow:
    1. Resolve cash: cash_input (ten-thousands) > cash_amount > last stored amount
    2. Rank tiers and allocate greedily up to each cap
    3. Persist the cash amount as the last-entered value
    4. Return per-tier deposits, total interest, and unallocated remainder
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)
    cash_before = allocator.cash_amount

    try:
        # 1. Resolve cash amount
        if request_body.cash_input is not None:
            allocator.set_cash(parse_cash_input(request_body.cash_input, settings.cash_input_unit))
        elif request_body.cash_amount is not None:
            allocator.set_cash(request_body.cash_amount)

        # 2. Rank and allocate
        result = allocator.allocate()
        ranked = allocator.ranked_tiers()

        # 3. Remember last-entered cash
        store.save_cash_amount(result.cash_amount)
        db.commit()

        allocations = []
        for tier in ranked:
            status = allocator.status_of(tier.code)
            offer = effective_offer(tier, status)
            deposit = result.deposit_for(tier)
            allocations.append(
                TierAllocationSchema(
                    tier_id=tier.tier_id,
                    code=tier.code,
                    name=tier.name,
                    status=status,
                    rate_percent=offer.rate_percent,
                    cap_amount=offer.cap_amount,
                    deposit=deposit,
                    interest=deposit * offer.rate_percent / 100,
                )
            )

        # Record metrics and logs
        duration = time.perf_counter() - start_time
        record_allocation(result.remaining_cash, duration)
        log_allocation(
            request_id,
            result.cash_amount,
            result.total_interest,
            result.remaining_cash,
            sum(1 for amount in result.deposits.values() if amount > 0),
            duration * 1000,
        )

        return AllocationResponse(
            cash_amount=result.cash_amount,
            total_interest=result.total_interest,
            remaining_cash=result.remaining_cash,
            allocated_cash=result.allocated_cash,
            blended_rate_percent=result.blended_rate_percent,
            allocations=allocations,
        )

    except SQLAlchemyError as e:
        db.rollback()
        allocator.set_cash(cash_before)
        logging.error(f"Preference store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Preference store unavailable")
