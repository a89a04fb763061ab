"""PUT/DELETE /v1/accounts/{code}/... - Account status transitions"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from savings_allocator.api.dependencies import get_allocator, get_preference_store, get_request_id
from savings_allocator.api.v1.schemas import StatusResponse
from savings_allocator.domain.engine import Allocator
from savings_allocator.domain.models import AccountStatus
from savings_allocator.infrastructure.database.session import get_db
from savings_allocator.infrastructure.observability.logging import log_status_change
from savings_allocator.infrastructure.observability.metrics import record_status_change
from savings_allocator.infrastructure.preferences import PreferenceStore

router = APIRouter()


def _apply(
    action: str,
    transition: Callable[[str], AccountStatus],
    code: str,
    request: Request,
    db: Session,
    allocator: Allocator,
    store: PreferenceStore,
) -> StatusResponse:
    """
    Run a transition and persist both status sets.

    The live allocator is put back to its previous sets when the commit
    fails, so it never ranks on state that was not saved.
    """
    request_id = get_request_id(request)
    owned_before = allocator.statuses.owned_codes()
    considering_before = allocator.statuses.considering_codes()

    status = transition(code)
    owned = allocator.statuses.owned_codes()
    considering = allocator.statuses.considering_codes()

    try:
        store.save_statuses(owned, considering)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        allocator.restore_statuses(owned_before, considering_before)
        logging.error(f"Preference store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Preference store unavailable")

    record_status_change(action, status.value)
    log_status_change(request_id, code, action, status.value)

    return StatusResponse(
        code=code,
        status=status,
        owned_codes=sorted(owned),
        considering_codes=sorted(considering),
    )


@router.put("/accounts/{code}/owned", response_model=StatusResponse)
def mark_owned(
    code: str,
    request: Request,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """Mark an account as held; clears a pending "considering" flag"""
    return _apply("mark_owned", allocator.mark_owned, code, request, db, allocator, store)


@router.delete("/accounts/{code}/owned", response_model=StatusResponse)
def unmark_owned(
    code: str,
    request: Request,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    return _apply("unmark_owned", allocator.unmark_owned, code, request, db, allocator, store)


@router.put("/accounts/{code}/considering", response_model=StatusResponse)
def mark_considering(
    code: str,
    request: Request,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """Flag interest in opening an account; ignored when already owned"""
    return _apply("mark_considering", allocator.mark_considering, code, request, db, allocator, store)


@router.delete("/accounts/{code}/considering", response_model=StatusResponse)
def unmark_considering(
    code: str,
    request: Request,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    return _apply("unmark_considering", allocator.unmark_considering, code, request, db, allocator, store)
