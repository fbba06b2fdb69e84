"""Capture target models."""

from typing import Literal, Union

from pydantic import BaseModel, Field


class TableTarget(BaseModel):
    """A single schema-qualified table to mine."""

    kind: Literal["table"] = "table"
    owner: str = Field(..., description="The owning schema (case-sensitive)")
    table: str = Field(..., description="The table name (case-sensitive)")

    class Config:
        """Pydantic config."""

        frozen = True

    def describe(self) -> str:
        """Return the qualified name used in log lines."""
        return f"{self.owner}.{self.table}"


class SchemaTarget(BaseModel):
    """Every table owned by a schema."""

    kind: Literal["schema"] = "schema"
    owner: str = Field(..., description="The owning schema (case-sensitive)")

    class Config:
        """Pydantic config."""

        frozen = True

    def describe(self) -> str:
        """Return the qualified name used in log lines."""
        return f"{self.owner}.*"


CaptureTarget = Union[TableTarget, SchemaTarget]
