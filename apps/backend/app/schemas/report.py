"""Report builder response schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TableNameSchema(BaseModel):
    """One reportable table."""

    table_name: str


class AttributeSchema(BaseModel):
    """One column of a table."""

    column_name: str
    type: str | None = None


class RelatedTableSchema(BaseModel):
    """One raw relation edge; the UI builds its adjacency from these."""

    table_name: str
    related_table: str


class DroppedArtifactSchema(BaseModel):
    """A request item that was accepted but left out of the statement."""

    kind: str
    subject: str
    reason: str


class QueryReportResponse(BaseModel):
    """Rows returned by an executed report, keyed by SELECT alias."""

    result: list[dict[str, Any]]
    dropped: list[DroppedArtifactSchema] = []


class QueryPreviewResponse(BaseModel):
    """The compiled statement, without execution."""

    model_config = ConfigDict(populate_by_name=True)

    full_query: str = Field(serialization_alias="fullQuery")
    dropped: list[DroppedArtifactSchema] = []


class ErrorResponse(BaseModel):
    """Error payload shared by every endpoint."""

    error: str
    details: str | None = None
