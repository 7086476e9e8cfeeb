"""Main entry point for the Content Analyzer API."""
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import (
    CORPUS_BACKEND,
    CORPUS_FILE,
    CORS_ORIGINS,
    DEFAULT_PER_PAGE,
    LOG_FORMAT,
    LOG_LEVEL,
    MATCH_MODE,
    PORT,
)
from logger import setup_logging
from models.api import AnalyzeResponse, ErrorResponse, PostAnalysis
from services.analysis_engine import AnalysisEngine
from services.corpus import Corpus, InMemoryCorpus, SupabaseCorpus
from services.errors import AnalyzerError, CorpusUnavailable

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger(__name__)


def build_corpus(backend: str = CORPUS_BACKEND) -> Corpus:
    """Create the configured corpus backend."""
    if backend == "memory":
        return InMemoryCorpus.from_json_file(CORPUS_FILE)
    if backend == "supabase":
        return SupabaseCorpus()
    raise ValueError(f"Unknown CORPUS_BACKEND: {backend}")


async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Content Analyzer API"}


async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "content-analyzer",
        "version": "1.0.0"
    }


def analyze_endpoint(
    request: Request,
    keyword: Optional[str] = Query(None, description="Keyword to measure"),
    page: int = Query(1, description="1-based page number"),
    per_page: int = Query(DEFAULT_PER_PAGE, description="Posts per page"),
    match: Optional[str] = Query(None, description="'substring' (default) or 'word'")
) -> AnalyzeResponse:
    """
    Word count and keyword density for one page of published posts.

    The handler is synchronous so FastAPI runs it in its thread pool while
    the corpus query blocks.

    Raises:
        InvalidKeyword, InvalidPage: Translated to 400
        CorpusUnavailable: Translated to 500
    """
    engine: AnalysisEngine = request.app.state.engine
    result = engine.analyze(keyword, page=page, per_page=per_page, match_mode=match)

    return AnalyzeResponse(
        posts=[PostAnalysis(**asdict(post)) for post in result.posts],
        total=result.total,
        pages=result.pages
    )


ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

# (method, path, handler, documented error responses), registered in this order at startup
ROUTES = [
    ("GET", "/", root, None),
    ("GET", "/health", health, None),
    ("GET", "/analyze", analyze_endpoint, ERROR_RESPONSES),
]


async def analyzer_error_handler(request: Request, exc: AnalyzerError) -> JSONResponse:
    """Translate typed analysis errors into {error, message} bodies."""
    if isinstance(exc, CorpusUnavailable):
        logger.error(f"Corpus unavailable while serving {request.url.path}: {exc.message}")
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump()
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed query parameters (e.g. page=abc) are client errors too."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"Invalid parameter '{field}': {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"

    return JSONResponse(status_code=400, content=ErrorResponse(message=message).model_dump())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error processing {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message="Internal server error").model_dump()
    )


def create_app(engine: Optional[AnalysisEngine] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        engine: Analysis engine to serve. When omitted, one is built from
            configuration at startup.

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "engine", None) is None:
            logger.info("Initializing Content Analyzer services...")
            try:
                app.state.engine = AnalysisEngine(build_corpus(), match_mode=MATCH_MODE)
            except Exception as e:
                logger.error(f"Failed to initialize services: {e}", exc_info=True)
                raise
            logger.info("All services initialized successfully")
        yield
        logger.info("Content Analyzer API shutting down")

    app = FastAPI(
        title="Content Analyzer",
        description="Word count and keyword density analysis for published posts",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    for method, path, handler, responses in ROUTES:
        app.add_api_route(path, handler, methods=[method], responses=responses)

    app.add_exception_handler(AnalyzerError, analyzer_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Content Analyzer API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
