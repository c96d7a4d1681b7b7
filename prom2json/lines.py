"""Classification of individual exposition sample lines.

Two mutually exclusive shapes are recognized::

    go_goroutines 31
    go_info{version="go1.15.5"} 1

Values are kept as the literal text that was written (``NaN``, ``1e-05``,
``+Inf``), never converted to floats. A trailing millisecond timestamp, as
written by federation endpoints, is accepted and dropped.
"""
import re
from typing import Dict, NamedTuple, Optional, Tuple

from prom2json.errors import MalformedLineError

IDENTIFIER = r"[a-zA-Z_:][a-zA-Z0-9_:]*"
VALUE = r"-?[\d.]+(?:[eE][-+]?\d+)?|NaN|[+-]?Inf"
TIMESTAMP = r"(?:\s+-?\d+)?"

UNLABELED_LINE = re.compile(rf"^({IDENTIFIER})\s+({VALUE}){TIMESTAMP}\s*$")
LABELED_LINE = re.compile(rf"^({IDENTIFIER})\{{(.*)\}}\s+({VALUE}){TIMESTAMP}\s*$")
LABEL_PAIR = re.compile(r'([a-zA-Z0-9_:]+)="([^"]*)"')
LEADING_IDENTIFIER = re.compile(rf"^({IDENTIFIER})")

EXPECTED_SHAPE = '<name> <value> or <name>{label="value",...} <value>'


class SampleLine(NamedTuple):
    """Fields extracted from one sample line."""
    name: str
    value: str
    labels: Optional[Dict[str, str]]


def parse_labels(fragment: str) -> Dict[str, str]:
    """Decompose the text between braces into a label mapping.

    Duplicate names are not expected; the last one wins.
    """
    labels = {}
    for name, value in LABEL_PAIR.findall(fragment):
        labels[name] = value
    return labels


def match_line(line: str) -> SampleLine:
    """Split a sample line into identifier, value and labels.

    Raises:
        MalformedLineError: the line matches neither shape
    """
    match = UNLABELED_LINE.match(line)
    if match:
        return SampleLine(match.group(1), match.group(2), None)

    match = LABELED_LINE.match(line)
    if match:
        labels = parse_labels(match.group(2))
        return SampleLine(match.group(1), match.group(3), labels or None)

    raise MalformedLineError("Invalid sample line", line=line, expected=EXPECTED_SHAPE)


def classify_line(line: str) -> Tuple[str, Optional[Dict[str, str]]]:
    """Return ``(value, labels)`` for a sample line; labels is None when absent."""
    sample = match_line(line)
    return sample.value, sample.labels


def metric_identifier(line: str) -> str:
    """Return the metric name a sample line starts with."""
    match = LEADING_IDENTIFIER.match(line)
    if not match:
        raise MalformedLineError("Sample line has no metric name", line=line, expected=EXPECTED_SHAPE)
    return match.group(1)
