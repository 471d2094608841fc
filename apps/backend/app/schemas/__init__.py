"""API schemas package."""

from app.schemas.report import (
    AttributeSchema,
    DroppedArtifactSchema,
    ErrorResponse,
    QueryPreviewResponse,
    QueryReportResponse,
    RelatedTableSchema,
    TableNameSchema,
)

__all__ = [
    "AttributeSchema",
    "DroppedArtifactSchema",
    "ErrorResponse",
    "QueryPreviewResponse",
    "QueryReportResponse",
    "RelatedTableSchema",
    "TableNameSchema",
]
