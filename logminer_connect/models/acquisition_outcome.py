"""Result of a connection acquisition."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from logminer_connect.exceptions import ConnectionUnavailable


class AcquisitionOutcome(BaseModel):
    """Either a live connection or the policy-exhausted result.

    The connection, when present, is owned by the caller, who must close it.
    """

    connection: Optional[Any] = Field(None, description="The live connection, if any")
    address: str = Field(..., description="The endpoint that was tried")
    attempts: int = Field(..., description="The number of attempts performed")
    last_error: Optional[BaseException] = Field(
        None, description="The failure of the last attempt, if it failed"
    )

    class Config:
        """Pydantic config."""

        arbitrary_types_allowed = True

    @property
    def available(self) -> bool:
        """Whether a connection was acquired."""
        return self.connection is not None

    def unwrap(self) -> Any:
        """Return the connection or raise if the retry budget was spent.

        Raises:
            ConnectionUnavailable: If no connection was acquired.
        """
        if self.connection is None:
            raise ConnectionUnavailable(
                f"No connection to {self.address} after {self.attempts} attempt(s)"
            ) from self.last_error
        return self.connection
