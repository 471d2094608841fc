"""Report builder API routes."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from packages.core.compiler import ReportCompileError
from packages.core.sql_ast.models import ReportRequest
from packages.db.catalog import TableNotFoundError
from packages.db.execution import QueryExecutionError, builder_query

from app.core.dependencies import CatalogCacheDep, CatalogDep, CompilerDep, EngineDep
from app.schemas.report import (
    AttributeSchema,
    ErrorResponse,
    QueryPreviewResponse,
    QueryReportResponse,
    RelatedTableSchema,
    TableNameSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Any JSON value; ReportRequest.model_validate decides what is acceptable
ReportPayload = Annotated[Any, Body()]

_ERROR_RESPONSES = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}}


def _error_response(message: str, error: Exception | None = None) -> JSONResponse:
    """
    Build the error payload shared by every route.

    Validation failures also answer 500, matching what the UI expects.
    """
    body = ErrorResponse(error=message, details=str(error) if error else None)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


# -----------------------------
# Catalog
# -----------------------------


@router.get("/tables", response_model=list[TableNameSchema], responses=_ERROR_RESPONSES)
def list_tables(cache: CatalogCacheDep):
    """List reportable tables (cached until restart)."""
    try:
        return cache.table_names.get()
    except SQLAlchemyError as e:
        logger.exception("Failed to load tables")
        return _error_response("Failed to load tables", e)


@router.get(
    "/attributes/{table_name}",
    response_model=list[AttributeSchema],
    responses=_ERROR_RESPONSES,
)
def list_attributes(table_name: str, catalog: CatalogDep):
    """List the columns of one table."""
    try:
        return catalog.get_table_attributes(table_name)
    except (TableNotFoundError, SQLAlchemyError) as e:
        logger.exception("Failed to load attributes of table %s", table_name)
        return _error_response(f"Failed to load attributes of table {table_name}", e)


@router.get(
    "/all-related-tables",
    response_model=list[RelatedTableSchema],
    responses=_ERROR_RESPONSES,
)
def list_related_tables(cache: CatalogCacheDep):
    """List raw relation edges (cached until restart)."""
    try:
        return cache.relations.get()
    except SQLAlchemyError as e:
        logger.exception("Failed to load table relations")
        return _error_response("Failed to load table relations", e)


# -----------------------------
# Reports
# -----------------------------


@router.post("/query-report", response_model=QueryReportResponse, responses=_ERROR_RESPONSES)
def query_report(payload: ReportPayload, compiler: CompilerDep, engine: EngineDep):
    """
    Compile and execute a report.

    Returns rows keyed by SELECT alias, plus any request items the
    compiler had to leave out.
    """
    try:
        compiled = compiler.compile(ReportRequest.model_validate(payload))
        execution = builder_query(engine, compiled.parts())
    except (ValidationError, ReportCompileError, QueryExecutionError) as e:
        logger.exception("Failed to process /query-report")
        return _error_response("Failed to generate report", e)

    return QueryReportResponse(
        result=execution.rows,
        dropped=[artifact.to_dict() for artifact in compiled.dropped],
    )


@router.post("/query-to-view", response_model=QueryPreviewResponse, responses=_ERROR_RESPONSES)
def query_to_view(payload: ReportPayload, compiler: CompilerDep):
    """Compile a report and return the statement without executing it."""
    try:
        compiled = compiler.compile(ReportRequest.model_validate(payload))
    except (ValidationError, ReportCompileError) as e:
        logger.exception("Failed to build query preview")
        return _error_response("Failed to build query", e)

    return QueryPreviewResponse(
        full_query=compiled.to_sql(),
        dropped=[artifact.to_dict() for artifact in compiled.dropped],
    )
