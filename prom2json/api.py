"""HTTP API for converting exposition text using FastAPI."""
from typing import Optional
from urllib.parse import urlparse
from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import ValidationError
from prometheus_client import CONTENT_TYPE_LATEST
import logging
import time

from prom2json.config import FetchConfig
from prom2json.converter import Converter
from prom2json.errors import FetchError, ParseError

logger = logging.getLogger(__name__)


class ConverterAPI:
    """FastAPI-based HTTP front end for the converter."""

    def __init__(self, converter: Converter):
        """
        Initialize the API.

        Args:
            converter: Converter used to fetch, parse and render
        """
        self.converter = converter
        self.app = FastAPI(title="prom2json")

        self._setup_routes()

    def _json_response(self, document) -> Response:
        return Response(
            content=self.converter.render(document),
            media_type="application/json"
        )

    def _check_url(self, url: str):
        """Reject URLs that are malformed or point at hosts not allowed."""
        try:
            FetchConfig(url=url)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid url: {e.errors()[0]['msg']}")

        if url == self.converter.config.fetch.url:
            return

        host = urlparse(url).hostname
        if host not in self.converter.config.api.allowed_hosts:
            logger.warning(f"Refusing to fetch {url}: host {host!r} is not in api.allowed_hosts")
            raise HTTPException(status_code=403, detail=f"Host {host!r} is not allowed")

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/healthz")
        async def healthz():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": time.time()}

        @self.app.post("/parse")
        async def parse(request: Request):
            """Parse exposition text sent as the request body."""
            body = await request.body()
            try:
                text = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise HTTPException(status_code=400, detail=f"Body is not valid UTF-8: {e}")

            try:
                document = await run_in_threadpool(self.converter.parse, text)
            except ParseError as e:
                raise HTTPException(status_code=422, detail=str(e))

            return self._json_response(document)

        @self.app.get("/convert")
        def convert(url: Optional[str] = None):
            """Fetch exposition text from a URL and parse it."""
            if not url and not self.converter.config.fetch.url:
                raise HTTPException(
                    status_code=400,
                    detail="No url given and fetch.url is not configured"
                )

            if url:
                self._check_url(url)

            try:
                document = self.converter.convert(url)
            except FetchError as e:
                raise HTTPException(status_code=502, detail=str(e))
            except ParseError as e:
                raise HTTPException(status_code=422, detail=str(e))

            return self._json_response(document)

        @self.app.get("/metrics")
        async def metrics():
            """Expose the converter's own metrics."""
            return Response(
                content=self.converter.self_metrics.render(),
                media_type=CONTENT_TYPE_LATEST
            )

    def run(self, host: str = "0.0.0.0", port: int = 8082):
        """Run the API server."""
        import uvicorn
        logger.info(f"Starting prom2json API on {host}:{port}")
        uvicorn.run(self.app, host=host, port=port, log_level="info")
