"""Converter tying together fetching, parsing and rendering."""
import time
import logging
from typing import Optional

from prom2json.config import Config
from prom2json.errors import FetchError, ParseError
from prom2json.fetch import fetch_configured
from prom2json.models import Document
from prom2json.parser import parse_document
from prom2json.self_metrics import SelfMetrics

logger = logging.getLogger(__name__)


class Converter:
    """Turns exposition text into Documents and Documents into JSON."""

    def __init__(self, config: Config, self_metrics: Optional[SelfMetrics] = None):
        self.config = config
        self.self_metrics = self_metrics or SelfMetrics(prefix=config.api.self_metrics_prefix)

    def parse(self, text: str) -> Document:
        """Parse exposition text, recording timing and failures."""
        parse_start = time.perf_counter()

        try:
            document = parse_document(text)
        except ParseError as e:
            logger.error(f"Failed to parse exposition text: {e}")
            self.self_metrics.record_parse_error(type(e).__name__)
            raise

        duration = time.perf_counter() - parse_start
        self.self_metrics.record_parse(duration, len(document.families))
        logger.info(f"Parsed {len(document.families)} metric families in {duration:.4f}s")

        return document

    def fetch(self, url: Optional[str] = None) -> str:
        """Fetch exposition text from ``url`` or the configured endpoint."""
        try:
            text = fetch_configured(self.config.fetch, url)
        except FetchError as e:
            logger.error(str(e))
            self.self_metrics.record_fetch(False)
            raise

        self.self_metrics.record_fetch(True)
        return text

    def convert(self, url: Optional[str] = None) -> Document:
        """Fetch and parse in one step."""
        return self.parse(self.fetch(url))

    def render(self, document: Document) -> str:
        """Render a Document as JSON using the configured indentation."""
        return document.to_json(indent=self.config.output.effective_indent())
