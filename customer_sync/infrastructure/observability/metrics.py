"""Prometheus metrics for remote API traffic, cache efficiency and customer lifecycle"""

from prometheus_client import Counter, Histogram

# Remote API metrics
remote_request_counter = Counter(
    "customer_sync_remote_requests_total",
    "Calls made to the remote payment API",
    ["method", "outcome"],  # outcome: ok | error
)

remote_latency_histogram = Histogram(
    "customer_sync_remote_latency_seconds",
    "Remote payment API response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Cache metrics
cache_lookup_counter = Counter(
    "customer_sync_cache_lookups_total",
    "Cache lookups for remote customer data",
    ["entry", "outcome"],  # entry: customer | sources, outcome: hit | miss
)

# Lifecycle metrics
customer_created_counter = Counter(
    "customer_sync_customers_created_total",
    "Remote customers created",
)

customer_recreated_counter = Counter(
    "customer_sync_customers_recreated_total",
    "Remote customers recreated after the stored id went stale",
)

source_added_counter = Counter(
    "customer_sync_sources_added_total",
    "Payment sources attached",
    ["token_kind"],  # card | sepa | none
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_cache_lookup(entry: str, hit: bool) -> None:
    cache_lookup_counter.labels(entry=entry, outcome="hit" if hit else "miss").inc()


def record_remote_request(method: str, ok: bool) -> None:
    remote_request_counter.labels(method=method, outcome="ok" if ok else "error").inc()
