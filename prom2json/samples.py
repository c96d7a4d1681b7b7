"""Record parsers for each metric kind."""
from typing import Dict, Optional, Sequence, Tuple

from prom2json.errors import MalformedLineError
from prom2json.lines import match_line
from prom2json.models import HistogramRecord, Sample, SummaryRecord

QUANTILE_LABEL = "quantile"
BUCKET_LABEL = "le"


def parse_sample(line: str) -> Sample:
    """Parse one gauge or counter line."""
    sample = match_line(line)
    return Sample(labels=sample.labels, value=sample.value)


def _parse_run(
    metric_name: str,
    lines: Sequence[str],
    reserved_label: str
) -> Tuple[Optional[Dict[str, str]], Dict[str, str], str, str]:
    """
    Fold the lines of one label-set into its shared fields.

    Args:
        metric_name: Base name of the family (without _sum/_count/_bucket)
        lines: Raw sample lines of a single run
        reserved_label: Label hoisted out of the label set ("quantile" or "le")

    Returns:
        Tuple of (labels, hoisted values, count, sum)
    """
    sum_name = f"{metric_name}_sum"
    count_name = f"{metric_name}_count"

    total = ""
    count = ""
    labels: Dict[str, str] = {}
    hoisted: Dict[str, str] = {}

    for line in lines:
        sample = match_line(line)

        if sample.name == sum_name:
            total = sample.value
        elif sample.name == count_name:
            count = sample.value
        elif sample.labels and reserved_label in sample.labels:
            hoisted[sample.labels[reserved_label]] = sample.value
        else:
            raise MalformedLineError(
                f"Invalid {metric_name} sample",
                line=line,
                expected=f'{sum_name}, {count_name} or a sample with a {reserved_label}="..." label'
            )

        # _sum and _count rows contribute their labels too, so a label-set
        # without quantile/bucket rows still keeps them.
        for name, value in (sample.labels or {}).items():
            if name != reserved_label:
                labels[name] = value

    return labels or None, hoisted, count, total


def parse_summary(metric_name: str, lines: Sequence[str]) -> SummaryRecord:
    """Build one summary record from a run of quantile, _sum and _count lines."""
    labels, quantiles, count, total = _parse_run(metric_name, lines, QUANTILE_LABEL)
    return SummaryRecord(labels=labels, quantiles=quantiles, count=count, sum=total)


def parse_histogram(metric_name: str, lines: Sequence[str]) -> HistogramRecord:
    """Build one histogram record from a run of bucket, _sum and _count lines."""
    labels, buckets, count, total = _parse_run(metric_name, lines, BUCKET_LABEL)
    return HistogramRecord(labels=labels, buckets=buckets, count=count, sum=total)
