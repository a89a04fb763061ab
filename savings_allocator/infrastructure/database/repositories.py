"""Data access layer for preference cells"""

from typing import Optional
from sqlalchemy.orm import Session
from savings_allocator.infrastructure.database.models import Preference


class PreferenceRepository:
    """Repository for raw key/value preferences"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.get(Preference, key)
        return row.value if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or update a preference (caller commits)"""
        row = self.db.get(Preference, key)
        if row:
            row.value = value
        else:
            self.db.add(Preference(key=key, value=value))
        self.db.flush()

