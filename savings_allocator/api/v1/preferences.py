"""GET/PATCH /v1/preferences - Persisted presentation preferences"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from savings_allocator.api.dependencies import get_allocator, get_preference_store
from savings_allocator.api.v1.schemas import PreferencesResponse, PreferencesUpdate
from savings_allocator.config import settings
from savings_allocator.domain.allocation import normalize_cash
from savings_allocator.domain.engine import Allocator
from savings_allocator.infrastructure.database.session import get_db
from savings_allocator.infrastructure.preferences import PreferenceStore
from savings_allocator.utils.cash import to_input_units

router = APIRouter()


def _response(store: PreferenceStore) -> PreferencesResponse:
    prefs = store.load()
    return PreferencesResponse(
        owned_codes=prefs.owned_codes,
        considering_codes=prefs.considering_codes,
        view_mode=prefs.view_mode,
        theme=prefs.theme,
        setup_completed=prefs.setup_completed,
        include_new=prefs.include_new,
        policy=prefs.policy,
        cash_amount=prefs.cash_amount,
        cash_input=to_input_units(prefs.cash_amount, settings.cash_input_unit),
    )


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(store: PreferenceStore = Depends(get_preference_store)):
    """
    Stored preferences with defaults filled in.

    A client opens its first-run setup dialog while setup_completed is false.
    """
    return _response(store)


@router.patch("/preferences", response_model=PreferencesResponse)
def update_preferences(
    update: PreferencesUpdate,
    db: Session = Depends(get_db),
    allocator: Allocator = Depends(get_allocator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """Save each provided cell; engine inputs reach the live allocator once saved"""
    cash_amount = None if update.cash_amount is None else normalize_cash(update.cash_amount)

    try:
        if update.view_mode is not None:
            store.save_view_mode(update.view_mode)
        if update.theme is not None:
            store.save_theme(update.theme)
        if update.include_new is not None:
            store.save_include_new(update.include_new)
        if update.policy is not None:
            store.save_policy(update.policy)
        if cash_amount is not None:
            store.save_cash_amount(cash_amount)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Preference store error: {e}")
        raise HTTPException(status_code=500, detail="Preference store unavailable")

    if update.include_new is not None:
        allocator.set_include_new(update.include_new)
    if update.policy is not None:
        allocator.set_policy(update.policy)
    if cash_amount is not None:
        allocator.set_cash(cash_amount)

    return _response(store)


@router.post("/preferences/setup-complete", response_model=PreferencesResponse)
def complete_setup(
    db: Session = Depends(get_db),
    store: PreferenceStore = Depends(get_preference_store),
):
    try:
        store.mark_setup_completed()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Preference store error: {e}")
        raise HTTPException(status_code=500, detail="Preference store unavailable")
    return _response(store)
