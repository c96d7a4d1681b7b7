"""Exception types raised while fetching, parsing and configuring."""
from typing import Optional


class Prom2JsonError(Exception):
    """Base class for all prom2json errors."""


class ParseError(Prom2JsonError, ValueError):
    """Exposition text could not be parsed.

    Carries the offending line and, where known, the shape that was expected
    so the producer of the text can be diagnosed.
    """

    def __init__(self, message: str, line: Optional[str] = None, expected: Optional[str] = None):
        self.line = line
        self.expected = expected
        details = message
        if line is not None:
            details += f": {line!r}"
        if expected:
            details += f" (expected {expected})"
        super().__init__(details)


class MalformedLineError(ParseError):
    """A sample line matched neither the unlabeled nor the labeled shape."""


class UnknownMetricTypeError(ParseError):
    """A TYPE line named a metric type other than gauge, counter, histogram or summary."""

    def __init__(self, metric_type: str, line: Optional[str] = None):
        self.metric_type = metric_type
        super().__init__(
            f"Unknown metric type '{metric_type}'",
            line=line,
            expected="one of gauge, counter, histogram, summary",
        )


class MissingMetadataError(ParseError):
    """A metric family is not introduced by a HELP and TYPE line pair."""


class FetchError(Prom2JsonError):
    """The exposition text could not be retrieved."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class ConfigError(Prom2JsonError, ValueError):
    """Configuration file failed validation."""
