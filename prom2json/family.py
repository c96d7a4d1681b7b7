"""Building one metric family from its HELP/TYPE pair and sample lines."""
import logging
from typing import Callable, Dict, List, Sequence, Tuple

from prom2json.errors import MissingMetadataError, UnknownMetricTypeError
from prom2json.lines import match_line, metric_identifier
from prom2json.models import MetricFamily, MetricType
from prom2json.samples import parse_histogram, parse_sample, parse_summary

logger = logging.getLogger(__name__)

METRIC_TYPES: Dict[str, MetricType] = {
    "gauge": MetricType.GAUGE,
    "counter": MetricType.GAUGE,
    "histogram": MetricType.HISTOGRAM,
    "summary": MetricType.SUMMARY,
}

RUN_PARSERS: Dict[MetricType, Callable] = {
    MetricType.HISTOGRAM: parse_histogram,
    MetricType.SUMMARY: parse_summary,
}

EXPECTED_METADATA = "'# HELP <name> <text>' followed by '# TYPE <name> <type>'"


def parse_help(line: str) -> Tuple[str, str]:
    """Return ``(name, help)`` from a ``# HELP`` line."""
    tokens = line.split()
    if len(tokens) < 3 or tokens[0] != "#" or tokens[1] != "HELP":
        raise MissingMetadataError("Expected a HELP line", line=line, expected=EXPECTED_METADATA)
    return tokens[2], " ".join(tokens[3:])


def parse_type(line: str) -> Tuple[str, MetricType]:
    """Return ``(name, type)`` from a ``# TYPE`` line."""
    tokens = line.split()
    if len(tokens) < 4 or tokens[0] != "#" or tokens[1] != "TYPE":
        raise MissingMetadataError("Expected a TYPE line", line=line, expected=EXPECTED_METADATA)

    name, type_keyword = tokens[2], tokens[3]
    if type_keyword not in METRIC_TYPES:
        raise UnknownMetricTypeError(type_keyword, line=line)
    return name, METRIC_TYPES[type_keyword]


def same_labels(line: str, other: str) -> bool:
    return match_line(line).labels == match_line(other).labels


def group_runs(metric_name: str, lines: Sequence[str], run_parser: Callable) -> list:
    """
    Split histogram or summary lines into one record per label-set.

    A run ends with its ``_count`` line. A ``_sum`` line that directly
    follows a finished run without a sum of its own, and carries the same
    labels as that run's ``_count`` line, still belongs to it, as written
    by clients that emit ``_count`` before ``_sum``. Lines left over
    without a ``_count`` terminator are dropped.
    """
    sum_name = f"{metric_name}_sum"
    count_name = f"{metric_name}_count"

    records = []
    run: List[str] = []
    run_has_sum = False
    finished = None
    finished_has_sum = False

    for line in lines:
        identifier = metric_identifier(line)

        if finished is not None:
            if identifier == sum_name and not finished_has_sum and same_labels(line, finished[-1]):
                finished.append(line)
                records.append(run_parser(metric_name, finished))
                finished = None
                continue
            records.append(run_parser(metric_name, finished))
            finished = None

        run.append(line)
        run_has_sum = run_has_sum or identifier == sum_name

        if identifier == count_name:
            finished, finished_has_sum = run, run_has_sum
            run, run_has_sum = [], False

    if finished is not None:
        records.append(run_parser(metric_name, finished))

    if run:
        logger.debug(f"Dropping {len(run)} unterminated line(s) of {metric_name}")

    return records


def build_family(lines: Sequence[str]) -> MetricFamily:
    """
    Build a metric family from its raw lines.

    Args:
        lines: HELP line, TYPE line, then the family's sample lines

    Returns:
        MetricFamily holding one record per gauge sample, or per
        histogram/summary label-set
    """
    if len(lines) < 2:
        raise MissingMetadataError(
            "Metric family is missing its HELP/TYPE lines",
            line=lines[0] if lines else None,
            expected=EXPECTED_METADATA
        )

    _, help_text = parse_help(lines[0])
    metric_name, metric_type = parse_type(lines[1])
    sample_lines = lines[2:]

    if metric_type == MetricType.GAUGE:
        data = [parse_sample(line) for line in sample_lines]
    else:
        data = group_runs(metric_name, sample_lines, RUN_PARSERS[metric_type])

    logger.debug(f"Built {metric_type.value} family '{metric_name}' with {len(data)} record(s)")

    return MetricFamily(
        metric_type=metric_type,
        metric_name=metric_name,
        help=help_text,
        data=data
    )
