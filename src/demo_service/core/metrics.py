import time
from prometheus_client import Counter, Histogram

REQUESTS = Counter(
    "demo_http_requests_total",
    "Total HTTP requests served by the demo service",
    ["path", "method", "status"],
)

LATENCY = Histogram(
    "demo_http_request_latency_seconds",
    "Demo service request latency in seconds",
    ["path", "method"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1),
)


class RequestTimer:
    """Observes the wrapped block's wall time into LATENCY."""

    def __init__(self, path: str, method: str):
        self.path = path
        self.method = method
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        LATENCY.labels(self.path, self.method).observe(self.elapsed)
