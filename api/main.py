"""
FastAPI main application for the Book Shelf web app.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException

from api.config import config as api_config
from api.models import ErrorResponse
from api.routes import ShelfRoutes
from api.shelf import ShelfRequestHandler
from catalog.service import BookCatalogService
from storage.file_store import FileStore
from utilities.config import ShelfConfig, config
from utilities.exceptions import InvalidInputError, MalformedNameError, NotFoundError
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Book Shelf", upload_dir=str(app.state.file_store.root_dir))
    yield
    logger.info("Shutting down Book Shelf", books=app.state.catalog.count())


def _error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, status_code=status_code).model_dump()
    )


def create_app(
    catalog: Optional[BookCatalogService] = None,
    file_store: Optional[FileStore] = None,
    settings: Optional[ShelfConfig] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators are constructed here unless passed in; there is no
    container, the handler receives the catalog and file store directly.

    Args:
        catalog: Book catalog (a new empty one by default)
        file_store: File store (rooted at the configured upload_dir by default)
        settings: Settings to use instead of the global config

    Returns:
        Configured FastAPI application
    """
    settings = settings or config

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.get_log_file_path(),
        debug=settings.debug
    )

    catalog = catalog if catalog is not None else BookCatalogService()
    file_store = file_store if file_store is not None else FileStore(settings.get_upload_dir_path())
    handler = ShelfRequestHandler(catalog, file_store)
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    debug = settings.debug or api_config.debug

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )
    app.state.catalog = catalog
    app.state.file_store = file_store
    app.state.handler = handler

    ShelfRoutes(handler, templates).register(app)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.warning("Resource not found", path=request.url.path, error=str(exc))
        return _error_response(status.HTTP_404_NOT_FOUND, "Not found", str(exc))

    @app.exception_handler(MalformedNameError)
    async def malformed_name_handler(request: Request, exc: MalformedNameError):
        logger.warning("Malformed resource name", path=request.url.path, error=str(exc))
        return _error_response(status.HTTP_400_BAD_REQUEST, "Malformed name", str(exc))

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.warning("Invalid input", path=request.url.path, error=str(exc))
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid input", str(exc))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc) if debug else None
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=True,
        log_level="info"
    )
