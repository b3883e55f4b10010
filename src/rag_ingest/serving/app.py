"""FastAPI application exposing document ingestion as a REST API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from rag_ingest.config import get_settings
from rag_ingest.errors import ConfigurationError, EmbeddingError, IngestionError
from rag_ingest.ingestion.pipeline import IngestionPipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app.state.pipeline = None
    yield


app = FastAPI(
    title="RAG Ingest API",
    version="0.1.0",
    description="Upload text documents to be chunked, embedded and indexed.",
    lifespan=lifespan,
)


# ── Request / Response schemas ────────────────────────────────────────
class IngestResponse(BaseModel):
    """Summary of an ingested upload."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "File processed successfully"
    file_name: str = Field(alias="fileName")
    chunks: int
    namespace: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str


# ── Dependencies ──────────────────────────────────────────────────────
def get_pipeline(request: Request) -> IngestionPipeline:
    """Return the app's pipeline, building it from settings on first use."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        try:
            pipeline = IngestionPipeline.from_settings(get_settings())
        except IngestionError:
            raise
        except Exception as exc:
            logger.error("Failed to initialise ingestion clients", exc_info=True)
            raise ConfigurationError(str(exc)) from exc
        request.app.state.pipeline = pipeline
    return pipeline


# ── Error handling ────────────────────────────────────────────────────
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(IngestionError)
async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Error processing file: %s", exc.message)
    message = exc.message
    if isinstance(exc, EmbeddingError):
        message = f"Failed to process file: {message}"
    return _error(exc.status_code, message)


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/ready", response_model=None, responses={503: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def ready(pipeline: IngestionPipeline = Depends(get_pipeline)) -> dict[str, str] | JSONResponse:
    """Readiness probe: the clients are configured and the vector store answers."""
    healthy = await asyncio.to_thread(pipeline.store.health_check)
    if not healthy:
        return _error(503, f"Vector store '{pipeline.store.index_name}' is unavailable")
    return {"status": "ready"}


@app.post(
    "/api/ingest",
    response_model=IngestResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ingest(
    file: UploadFile | None = File(default=None),
    namespace: str = Form(default=""),
    pipeline: IngestionPipeline = Depends(get_pipeline),
) -> IngestResponse | JSONResponse:
    """Chunk, embed and index an uploaded TXT or MD file."""
    if file is None:
        return _error(400, "No file uploaded")

    # one byte past the limit is enough for the size check to reject the upload
    data = await file.read(pipeline.settings.max_upload_mb * 1024 * 1024 + 1)
    try:
        result = await pipeline.ingest(file.filename or "", data, namespace)
    except IngestionError:
        raise
    except Exception as exc:
        logger.exception("Error processing file %s", file.filename)
        return _error(500, f"Failed to process file: {exc}")

    return IngestResponse(file_name=result.file_name, chunks=result.chunks, namespace=result.namespace)
