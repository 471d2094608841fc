"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from packages.core.compiler import ReportCompiler
from packages.core.schema_registry.registry import GraphSource, load_relation_graph
from packages.db.cache import CatalogCache
from packages.db.catalog import CatalogReader

from app.api.reports.routes import router as reports_router
from app.core.config import get_settings
from app.core.dependencies import get_engine
from app.schemas.report import ErrorResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: the relation graph and reference caches live for the whole process
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    catalog = CatalogReader(engine, schema=settings.database_schema)
    graph = load_relation_graph(
        settings.relation_graph_source,
        path=settings.relation_graph_path,
        catalog=catalog if settings.relation_graph_source == GraphSource.CATALOG else None,
    )
    app.state.compiler = ReportCompiler(graph=graph, date_format=settings.like_date_format)
    app.state.catalog_cache = CatalogCache(catalog)
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    # Shutdown
    engine.dispose()


app = FastAPI(
    title="ReportQL API",
    version="0.1.0",
    description="Ad-hoc report builder API: compiles report requests into SQL",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Answer unreadable request bodies with the shared 500 error payload."""
    logger.warning("Rejected request to %s: %s", request.url.path, exc)
    body = ErrorResponse(error="Invalid request", details=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.environment}


# Include routers
app.include_router(reports_router, tags=["Reports"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
