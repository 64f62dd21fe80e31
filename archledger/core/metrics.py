"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "archledger_http_requests_total",
    "Total number of HTTP requests.",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "archledger_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    ["method", "route", "status"],
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

DECISIONS_SUPERSEDED_TOTAL = Counter(
    "archledger_decisions_superseded_total",
    "Number of decision records marked superseded.",
)

RISK_ASSESSMENTS_TOTAL = Counter(
    "archledger_risk_assessments_total",
    "Number of component risk assessments computed, by overall severity.",
    ["severity"],
)

GITHUB_SYNC_TOTAL = Counter(
    "archledger_github_sync_total",
    "Number of repository sync attempts, by outcome.",
    ["outcome"],
)


def observe_http_request(
    *,
    method: str,
    route: str,
    status_code: int,
    duration_ms: float,
) -> None:
    status = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method, route=route, status=status
    ).observe(duration_ms / 1000.0)
