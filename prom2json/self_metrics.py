"""Self-monitoring metrics using prometheus_client."""
from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, generate_latest


class SelfMetrics:
    """Self-monitoring metrics for the converter."""

    def __init__(self, registry=None, prefix=""):
        if registry is None:
            registry = CollectorRegistry()
        self.registry = registry

        self.parse_total = Counter(
            f"{prefix}parse_total",
            "Total number of documents parsed",
            ["outcome"],
            registry=registry
        )

        self.parse_errors_total = Counter(
            f"{prefix}parse_errors_total",
            "Total number of parse errors by kind",
            ["kind"],
            registry=registry
        )

        self.parse_duration_seconds = Histogram(
            f"{prefix}parse_duration_seconds",
            "Duration of each parse in seconds",
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
            registry=registry
        )

        self.families_parsed = Gauge(
            f"{prefix}families_parsed",
            "Number of metric families in the last parsed document",
            registry=registry
        )

        self.fetch_total = Counter(
            f"{prefix}fetch_total",
            "Total number of fetches of exposition text",
            ["outcome"],
            registry=registry
        )

    def record_parse(self, duration: float, families: int):
        """Record a successful parse."""
        self.parse_total.labels(outcome="success").inc()
        self.parse_duration_seconds.observe(duration)
        self.families_parsed.set(families)

    def record_parse_error(self, kind: str):
        """Record a failed parse."""
        self.parse_total.labels(outcome="error").inc()
        self.parse_errors_total.labels(kind=kind).inc()

    def record_fetch(self, success: bool):
        """Record a fetch attempt."""
        self.fetch_total.labels(outcome="success" if success else "error").inc()

    def render(self) -> bytes:
        """Render the registry in the text exposition format."""
        return generate_latest(self.registry)
