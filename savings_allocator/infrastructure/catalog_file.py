"""Load the account catalog from a JSON file"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from savings_allocator.domain.catalog import Catalog
from savings_allocator.domain.exceptions import CatalogError
from savings_allocator.domain.models import AccountTier, RateOffer

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "banks.json"


class RateOfferRecord(BaseModel):
    """Rate offer as stored in the catalog file"""

    rate_percent: Decimal = Field(..., ge=0)
    cap_amount: Optional[Decimal] = Field(None, ge=0, description="null = no cap")
    display: str = ""
    quota_text: str = ""
    transfers: str = ""
    notes: str = ""


class TierRecord(BaseModel):
    """Single tier row in the catalog file"""

    tier_id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    name: str
    new_customer: RateOfferRecord
    existing_customer: RateOfferRecord


class CatalogFile(BaseModel):
    """Top-level catalog document"""

    version: str = ""
    currency: str = "TWD"
    tiers: List[TierRecord]


def _to_offer(record: RateOfferRecord) -> RateOffer:
    return RateOffer(**record.model_dump())


def to_catalog(document: CatalogFile) -> Catalog:
    return Catalog(
        [
            AccountTier(
                tier_id=row.tier_id,
                code=row.code,
                name=row.name,
                new_customer=_to_offer(row.new_customer),
                existing_customer=_to_offer(row.existing_customer),
            )
            for row in document.tiers
        ]
    )


def load_catalog(path: Optional[str | Path] = None) -> Catalog:
    """
    Read and validate a catalog file.

    Raises:
        CatalogError: On missing file, invalid JSON, schema violations, or duplicate tier ids
    """
    catalog_path = Path(path) if path else BUNDLED_CATALOG
    try:
        # Decimal parsing keeps rates like 2.085 exact
        raw = json.loads(catalog_path.read_text(encoding="utf-8"), parse_float=Decimal)
        document = CatalogFile.model_validate(raw)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise CatalogError(f"Catalog {catalog_path} failed validation: {e}") from e

    catalog = to_catalog(document)
    logger.info(
        "Catalog loaded",
        extra={"catalog_path": str(catalog_path), "tier_count": len(catalog), "catalog_version": document.version},
    )
    return catalog
