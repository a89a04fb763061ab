"""Typed preference cells over the key/value repository"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, List

from savings_allocator.config import settings
from savings_allocator.domain.allocation import normalize_cash
from savings_allocator.domain.policy import PolicyKind
from savings_allocator.infrastructure.database.repositories import PreferenceRepository

logger = logging.getLogger(__name__)

OWNED_CODES_KEY = "owned-codes"
CONSIDERING_CODES_KEY = "considering-codes"
VIEW_MODE_KEY = "view-mode"
THEME_KEY = "theme"
SETUP_COMPLETED_KEY = "setup-completed"
INCLUDE_NEW_KEY = "include-new"
POLICY_KEY = "activation-policy"
CASH_AMOUNT_KEY = "cash-amount"

VIEW_MODES = ("card", "compact")
THEMES = ("system", "light", "dark")


@dataclass
class UserPreferences:
    """Validated snapshot of every preference cell"""

    owned_codes: List[str] = field(default_factory=lambda: list(settings.default_owned_codes))
    considering_codes: List[str] = field(default_factory=list)
    view_mode: str = "card"
    theme: str = "system"
    setup_completed: bool = False
    include_new: bool = settings.default_include_new
    policy: PolicyKind = PolicyKind(settings.default_policy)
    cash_amount: Decimal = Decimal(settings.default_cash_amount)


def _code_list(value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(code, str) for code in value):
        raise ValueError("expected a list of account codes")
    return list(dict.fromkeys(value))


def _choice(options: Iterable[str]) -> Callable[[Any], str]:
    def parse(value: Any) -> str:
        if value not in options:
            raise ValueError(f"expected one of {options}")
        return value

    return parse


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected a boolean")
    return value


def _cash(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError("expected a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValueError("expected a finite number")
    return normalize_cash(amount)


class PreferenceStore:
    """
    Load/save preference cells with explicit defaults.

    Each cell is JSON-encoded under its own key. A missing cell yields its
    default; a malformed cell is logged and also yields its default, so the
    engine only ever sees validated values.
    """

    def __init__(self, repository: PreferenceRepository):
        self.repository = repository

    def _read(self, key: str, parse: Callable[[Any], Any], default: Any) -> Any:
        raw = self.repository.get(key)
        if raw is None:
            return default
        try:
            return parse(json.loads(raw))
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning("Malformed preference, using default", extra={"key": key, "error": str(e)})
            return default

    def _write(self, key: str, value: Any) -> None:
        self.repository.set(key, json.dumps(value))

    def load(self) -> UserPreferences:
        defaults = UserPreferences()
        owned = self._read(OWNED_CODES_KEY, _code_list, defaults.owned_codes)
        considering = self._read(CONSIDERING_CODES_KEY, _code_list, defaults.considering_codes)
        return UserPreferences(
            owned_codes=owned,
            considering_codes=[code for code in considering if code not in owned],
            view_mode=self._read(VIEW_MODE_KEY, _choice(VIEW_MODES), defaults.view_mode),
            theme=self._read(THEME_KEY, _choice(THEMES), defaults.theme),
            setup_completed=self._read(SETUP_COMPLETED_KEY, _flag, defaults.setup_completed),
            include_new=self._read(INCLUDE_NEW_KEY, _flag, defaults.include_new),
            policy=self._read(POLICY_KEY, PolicyKind, defaults.policy),
            cash_amount=self._read(CASH_AMOUNT_KEY, _cash, defaults.cash_amount),
        )

    def save_statuses(self, owned: Iterable[str], considering: Iterable[str]) -> None:
        self._write(OWNED_CODES_KEY, sorted(owned))
        self._write(CONSIDERING_CODES_KEY, sorted(considering))

    def save_view_mode(self, view_mode: str) -> None:
        self._write(VIEW_MODE_KEY, _choice(VIEW_MODES)(view_mode))

    def save_theme(self, theme: str) -> None:
        self._write(THEME_KEY, _choice(THEMES)(theme))

    def save_include_new(self, include_new: bool) -> None:
        self._write(INCLUDE_NEW_KEY, bool(include_new))

    def save_policy(self, policy: PolicyKind) -> None:
        self._write(POLICY_KEY, PolicyKind(policy).value)

    def save_cash_amount(self, cash_amount: Decimal) -> None:
        # JSON has no decimal type; keep the exact digits as a string
        self._write(CASH_AMOUNT_KEY, str(normalize_cash(cash_amount)))

    def mark_setup_completed(self) -> None:
        self._write(SETUP_COMPLETED_KEY, True)
