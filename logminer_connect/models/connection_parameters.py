"""Database connection parameter models."""

from pydantic import BaseModel, Field, SecretStr


class ConnectionParameters(BaseModel):
    """Connection parameters for the mined Oracle database."""

    host: str = Field(..., description="The hostname or IP address")
    port: int = Field(1521, description="The Oracle listener port")
    sid: str = Field(..., description="The Oracle SID")
    username: str = Field(..., description="The database username")
    password: SecretStr = Field(..., description="The database password")

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "ignore"

    @property
    def address(self) -> str:
        """The endpoint description in ``host:port:sid`` form.

        This is the only representation of the target used in log lines; it
        never contains credentials.
        """
        return f"{self.host}:{self.port}:{self.sid}"

    def dsn(self) -> str:
        """Generate the Oracle connect descriptor.

        Returns:
            str: DSN in format (DESCRIPTION=...)
        """
        return f"(DESCRIPTION=(ADDRESS=(PROTOCOL=TCP)(HOST={self.host})(PORT={self.port}))(CONNECT_DATA=(SID={self.sid})))"
