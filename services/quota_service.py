"""
Quota service enforcing the per-user daily request budget.
"""
from datetime import date, datetime, timezone
from typing import Optional

from config import Config
from models.chat_models import QuotaDecision
from utils.logger import app_logger, mask_user
from utils.quota_store import QuotaStore, get_quota_store


class QuotaService:
    """Gates chat requests against a daily per-user counter."""

    def __init__(self, store: Optional[QuotaStore] = None, max_per_day: Optional[int] = None):
        self._store = store
        self.max_per_day = max(1, max_per_day if max_per_day is not None else Config.get_max_requests_per_day())

    @property
    def store(self) -> QuotaStore:
        if self._store is None:
            self._store = get_quota_store()
        return self._store

    @staticmethod
    def utc_today() -> date:
        """The current UTC calendar day, the unit of the quota window."""
        return datetime.now(timezone.utc).date()

    @staticmethod
    def make_key(user_id: str, day: date) -> str:
        """Counter key for a user and UTC day."""
        return f"rl:{user_id}:{day.strftime('%Y%m%d')}"

    def admit(self, user_id: str, today: Optional[date] = None) -> QuotaDecision:
        """
        Check the daily budget and consume one request if any is left.

        Args:
            user_id: Verified user identity
            today: UTC day to count against (default: now)

        Returns:
            QuotaDecision with the remaining budget after this request
        """
        key = self.make_key(user_id, today or self.utc_today())
        new_count = self.store.increment_if_below(key, self.max_per_day)

        if new_count is None:
            app_logger.warning(f"Quota exhausted for user {mask_user(user_id)} ({self.max_per_day}/day)")
            return QuotaDecision(admitted=False, remaining=0, max=self.max_per_day)

        remaining = self.max_per_day - new_count
        app_logger.debug(f"Quota admitted user {mask_user(user_id)}: {new_count}/{self.max_per_day}")
        return QuotaDecision(admitted=True, remaining=remaining, max=self.max_per_day)
