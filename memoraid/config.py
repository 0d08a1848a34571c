import time

from pydantic import field_validator
from pydantic_settings import BaseSettings

ONE_DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Return the current time as epoch milliseconds.

    Item and plan timestamps are stored as epoch milliseconds so they can be
    handed to and from the storage layer without conversion.
    """
    return time.time_ns() // 1_000_000


class Settings(BaseSettings):
    app_name: str = "Memoraid"
    review_intervals_days: list[int] = [1, 4, 7, 10, 14, 30, 60, 90]
    retention_decay_rate: float = 0.15
    overdue_factor: float = 0.5  # Fraction of the interval past due before an item is overdue
    timezone: str = ""  # IANA name; empty means the host's local zone
    max_plan_days: int = 3660  # Longest exam horizon a plan may cover
    debug: bool = False

    model_config = {"env_prefix": "MEMORAID_", "env_file": ".env"}

    @field_validator("review_intervals_days")
    @classmethod
    def _intervals_positive(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("review_intervals_days must not be empty")
        if any(days <= 0 for days in value):
            raise ValueError("review intervals must be positive day counts")
        return value


settings = Settings()
