"""Connection retry policy model."""

from datetime import timedelta

from pydantic import BaseModel, Field, field_validator


class RetryPolicy(BaseModel):
    """Bounded retry with a fixed wait between attempts."""

    max_attempts: int = Field(
        3, ge=1, description="Total connection attempts, including the first"
    )
    backoff: timedelta = Field(
        timedelta(seconds=10), description="The fixed wait between two attempts"
    )

    class Config:
        """Pydantic config."""

        frozen = True

    @field_validator("backoff")
    @classmethod
    def _backoff_not_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("backoff must not be negative")
        return value

    @property
    def backoff_seconds(self) -> float:
        """The backoff as seconds, as accepted by ``time.sleep``."""
        return self.backoff.total_seconds()
