from __future__ import annotations

from prometheus_client import Counter, Histogram

_HTTP_REQUESTS_TOTAL = Counter(
    "upload_http_requests_total",
    "Total HTTP requests handled by the API.",
    labelnames=("method", "path", "status_code"),
)
_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "upload_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    labelnames=("method", "path"),
)
_UPLOAD_BLOB_ATTEMPTS_TOTAL = Counter(
    "upload_blob_attempts_total",
    "Blob upload attempts by outcome.",
    labelnames=("outcome",),
)

UPLOAD_OUTCOMES = ("stored", "rejected", "failed")


def observe_http_request(
    *,
    method: str,
    path: str,
    status_code: int,
    duration_ms: int,
) -> None:
    safe_path = path or "unknown"
    safe_method = method or "UNKNOWN"

    _HTTP_REQUESTS_TOTAL.labels(
        method=safe_method,
        path=safe_path,
        status_code=str(status_code),
    ).inc()
    _HTTP_REQUEST_DURATION_SECONDS.labels(method=safe_method, path=safe_path).observe(
        max(0.0, duration_ms / 1000.0)
    )


def observe_upload_attempt(*, outcome: str) -> None:
    if outcome not in UPLOAD_OUTCOMES:
        raise ValueError(f"Unsupported upload outcome: {outcome}")
    _UPLOAD_BLOB_ATTEMPTS_TOTAL.labels(outcome=outcome).inc()
