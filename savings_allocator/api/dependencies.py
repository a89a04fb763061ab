"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from savings_allocator.domain.engine import Allocator
from savings_allocator.infrastructure.database.repositories import PreferenceRepository
from savings_allocator.infrastructure.database.session import get_db
from savings_allocator.infrastructure.preferences import PreferenceStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_preference_store(db: Session = Depends(get_db)) -> PreferenceStore:
    """Provide preference store bound to the request's session"""
    return PreferenceStore(PreferenceRepository(db))


def get_allocator(request: Request, store: PreferenceStore = Depends(get_preference_store)) -> Allocator:
    """
    Provide the process-wide allocator.

    Built on first use from stored preferences, then kept in app state and
    mutated in place by status/cash/policy endpoints.
    """
    state = request.app.state
    with state.allocator_lock:
        if state.allocator is None:
            prefs = store.load()
            state.allocator = Allocator(
                state.catalog,
                owned=prefs.owned_codes,
                considering=prefs.considering_codes,
                policy=prefs.policy,
                include_new=prefs.include_new,
                cash_amount=prefs.cash_amount,
            )
        return state.allocator
