"""Tests for the gauge, summary and histogram record parsers."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from prom2json.errors import MalformedLineError
from prom2json.models import HistogramRecord, Sample, SummaryRecord
from prom2json.samples import parse_histogram, parse_sample, parse_summary

SUMMARY_LINES = """\
prometheus_engine_query_duration_seconds{slice="inner_eval",quantile="0.5"} NaN
prometheus_engine_query_duration_seconds{slice="inner_eval",quantile="0.9"} NaN
prometheus_engine_query_duration_seconds{slice="inner_eval",quantile="0.99"} NaN
prometheus_engine_query_duration_seconds_sum{slice="inner_eval"} 12
prometheus_engine_query_duration_seconds_count{slice="inner_eval"} 0""".splitlines()

HISTOGRAM_LINES = """\
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="0.1"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="0.2"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="0.4"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="1"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="3"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="8"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="20"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="60"} 10871
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="120"} 10870
prometheus_http_request_duration_seconds_bucket{handler="/metrics",le="+Inf"} 10871
prometheus_http_request_duration_seconds_sum{handler="/metrics"} 67.48398663499978
prometheus_http_request_duration_seconds_count{handler="/metrics"} 10871""".splitlines()


def test_gauge_sample():
    assert parse_sample("go_goroutines 31") == Sample(labels=None, value="31")
    assert parse_sample('go_info{version="go1.15.5"} 1') == Sample(
        labels={"version": "go1.15.5"}, value="1"
    )


def test_summary_record():
    summary = parse_summary("prometheus_engine_query_duration_seconds", SUMMARY_LINES)

    assert isinstance(summary, SummaryRecord)
    assert summary.sum == "12"
    assert summary.count == "0"
    assert summary.labels == {"slice": "inner_eval"}
    assert summary.quantiles == {"0.5": "NaN", "0.9": "NaN", "0.99": "NaN"}


def test_summary_quantile_values_are_mapped():
    lines = [
        'rpc_seconds{quantile="0.5"} 0.012',
        'rpc_seconds{quantile="0.99"} 0.25',
        "rpc_seconds_sum 17.5",
        "rpc_seconds_count 900",
    ]
    summary = parse_summary("rpc_seconds", lines)

    assert summary.quantiles == {"0.5": "0.012", "0.99": "0.25"}
    assert summary.labels is None
    assert summary.sum == "17.5"
    assert summary.count == "900"


def test_histogram_record():
    histogram = parse_histogram("prometheus_http_request_duration_seconds", HISTOGRAM_LINES)

    assert isinstance(histogram, HistogramRecord)
    assert histogram.sum == "67.48398663499978"
    assert histogram.count == "10871"
    assert histogram.labels == {"handler": "/metrics"}
    assert list(histogram.buckets) == ["0.1", "0.2", "0.4", "1", "3", "8", "20", "60", "120", "+Inf"]
    assert histogram.buckets["120"] == "10870"
    assert histogram.buckets["+Inf"] == "10871"


def test_sum_and_count_labels_are_kept_without_buckets():
    lines = [
        'payload_bytes_count{route="/upload"} 4',
        'payload_bytes_sum{route="/upload"} 2048',
    ]
    summary = parse_summary("payload_bytes", lines)

    assert summary.labels == {"route": "/upload"}
    assert summary.quantiles == {}
    assert summary.count == "4"
    assert summary.sum == "2048"


def test_line_without_reserved_label_is_rejected():
    lines = [
        'latency_seconds_bucket{handler="/"} 3',
        "latency_seconds_count 3",
    ]
    with pytest.raises(MalformedLineError) as exc_info:
        parse_histogram("latency_seconds", lines)
    assert 'le="..."' in str(exc_info.value)


def test_summary_rejects_bucket_rows():
    with pytest.raises(MalformedLineError):
        parse_summary("latency_seconds", ['latency_seconds_bucket{le="0.1"} 3'])


def test_malformed_line_in_run_is_rejected():
    with pytest.raises(MalformedLineError):
        parse_histogram("latency_seconds", ["latency_seconds_sum"])
