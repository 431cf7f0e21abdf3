"""
Routing table for the book shelf web application.

Each entry maps an HTTP method and path to an endpoint. Endpoints parse the
request into plain values, call the shelf handler, and turn its result into a
rendered page, a redirect, or a file response.
"""

from datetime import datetime
from typing import Callable, List, Tuple

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import FileResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from api.config import config as api_config
from api.models import HealthResponse, Redirect, ShelfPage
from api.shelf import ShelfRequestHandler

logger = structlog.get_logger(__name__)

SHELF_TEMPLATE = "book_shelf.html"


class ShelfRoutes:
    """Endpoints bound to one handler and one template environment."""

    def __init__(self, handler: ShelfRequestHandler, templates: Jinja2Templates):
        self.handler = handler
        self.templates = templates

    def table(self) -> List[Tuple[str, str, Callable]]:
        """(method, path, endpoint) for every route."""
        return [
            ("GET", "/genres", self.genres_page),
            ("GET", "/genres/slug", self.genre_slug_page),
            ("GET", "/books/shelf", self.books),
            ("POST", "/books/save", self.save_book),
            ("POST", "/books/remove", self.remove_book),
            ("POST", "/books/uploadFile", self.upload_file),
            ("GET", "/books/download", self.download_file),
            ("GET", "/health", self.health_check),
        ]

    def register(self, app: FastAPI) -> None:
        for method, path, endpoint in self.table():
            app.add_api_route(path, endpoint, methods=[method], include_in_schema=path == "/health")

    async def genres_page(self, request: Request) -> Response:
        return self.templates.TemplateResponse(request, "genres/index.html", {})

    async def genre_slug_page(self, request: Request) -> Response:
        return self.templates.TemplateResponse(request, "genres/slug.html", {})

    async def books(self, request: Request) -> Response:
        """Shelf page, filtered by the author/title/size query parameters."""
        logger.info("Got book shelf")
        page = await run_in_threadpool(self.handler.list_and_filter, request.query_params)
        return self._render(request, page)

    async def save_book(self, request: Request) -> Response:
        form = await request.form()
        return self._respond(request, await run_in_threadpool(self.handler.save, form))

    async def remove_book(self, request: Request) -> Response:
        form = await request.form()
        return self._respond(request, await run_in_threadpool(self.handler.remove, form))

    async def upload_file(self, request: Request) -> Response:
        """Copy the spooled multipart upload into the file store off the event loop."""
        form = await request.form()
        upload = form.get("file")

        try:
            if isinstance(upload, UploadFile) and upload.filename:
                result = await run_in_threadpool(self.handler.upload, upload.filename, upload.file)
            else:
                result = self.handler.upload(None, b"")
        finally:
            await form.close()

        return self._respond(request, result)

    async def download_file(self, request: Request) -> Response:
        path = await run_in_threadpool(self.handler.download, request.query_params.get("name"))
        return FileResponse(path=path, filename=path.name, media_type="application/octet-stream")

    def health_check(self, request: Request) -> HealthResponse:
        """Health check endpoint."""
        storage_status = "healthy"
        files = 0
        try:
            files = len(self.handler.file_store.list_all())
        except OSError as e:
            logger.error("Health check failed", error=str(e))
            storage_status = "unhealthy"

        return HealthResponse(
            status="healthy" if storage_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=api_config.api_version,
            books=self.handler.catalog.count(),
            files=files,
            storage_status=storage_status
        )

    def _respond(self, request: Request, result) -> Response:
        if isinstance(result, Redirect):
            return RedirectResponse(url=result.location, status_code=status.HTTP_303_SEE_OTHER)
        return self._render(request, result)

    def _render(self, request: Request, page: ShelfPage) -> Response:
        return self.templates.TemplateResponse(request, SHELF_TEMPLATE, {"page": page})
