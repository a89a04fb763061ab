"""GET /v1/catalog - Account tiers and deduplicated banks"""

from fastapi import APIRouter, Depends

from savings_allocator.api.dependencies import get_allocator
from savings_allocator.api.v1.schemas import BankSchema, BanksResponse, CatalogResponse, TierSchema
from savings_allocator.domain.engine import Allocator

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(allocator: Allocator = Depends(get_allocator)):
    """Every tier in catalog order; bank_count counts codes, not tiers"""
    return CatalogResponse(
        bank_count=len(allocator.unique_codes()),
        tiers=[TierSchema.from_tier(tier) for tier in allocator.catalog],
    )


@router.get("/catalog/banks", response_model=BanksResponse)
def get_banks(allocator: Allocator = Depends(get_allocator)):
    """
    One entry per account code, ordered numerically by code.

    This is the list the account settings screen toggles.
    """
    names = allocator.catalog.bank_names()
    return BanksResponse(
        banks=[
            BankSchema(code=code, name=names[code], status=allocator.status_of(code))
            for code in allocator.unique_codes()
        ]
    )
