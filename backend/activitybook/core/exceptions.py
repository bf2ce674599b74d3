"""
Errors raised by the activity engine and the activity book.
"""
from typing import Iterable, Optional


class ActivityError(Exception):
    """Base class for activity errors."""


class PayerNotParticipant(ActivityError):
    """An expense batch names a payer who is not in the activity."""

    def __init__(self, payer_ids: Iterable[int], activity_key: Optional[int] = None):
        self.payer_ids = tuple(payer_ids)
        self.activity_key = activity_key
        super().__init__(
            f"Payer(s) {list(self.payer_ids)} not participating in activity {activity_key}"
        )


class ActivityNotFound(ActivityError):
    """No activity exists with the requested primary key."""

    def __init__(self, activity_key: int):
        self.activity_key = activity_key
        super().__init__(f"Activity {activity_key} not found")


class DuplicateActivity(ActivityError):
    """An activity with the same primary key is already present."""

    def __init__(self, activity_key: int):
        self.activity_key = activity_key
        super().__init__(f"Activity {activity_key} already exists")


class SettlementOverflow(ActivityError, ValueError):
    """Debt totals are too large to settle in floating point."""

    def __init__(self, activity_key: Optional[int] = None):
        self.activity_key = activity_key
        super().__init__(f"Debts of activity {activity_key} overflow and cannot be settled")
