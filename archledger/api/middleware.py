"""Middleware for request logging, correlation ids and security headers."""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from archledger.core.config import get_settings
from archledger.core.metrics import observe_http_request
from archledger.core.structured_logging import correlation_scope, log_json, new_correlation_id

logger = logging.getLogger(__name__)
settings = get_settings()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault(
            "Permissions-Policy",
            "camera=(), microphone=(), geolocation=()",
        )

        if settings.environment == "production":
            forwarded_proto = request.headers.get("x-forwarded-proto")
            scheme = forwarded_proto or request.url.scheme
            if scheme == "https":
                response.headers.setdefault(
                    "Strict-Transport-Security",
                    "max-age=63072000; includeSubDomains",
                )

        return response


_MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request) -> str | None:
    """Accept a caller-supplied correlation id if it is a sane single line."""
    raw = request.headers.get("X-Request-ID") or request.headers.get("X-Correlation-ID")
    if not raw:
        return None
    candidate = raw.strip()
    if not candidate or len(candidate) > _MAX_REQUEST_ID_LENGTH:
        return None
    if "\n" in candidate or "\r" in candidate:
        return None
    return candidate


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON log line and one Prometheus observation per request.

    Every line emitted while the request runs carries its correlation id,
    which is echoed back in ``X-Request-ID``.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = _incoming_request_id(request) or new_correlation_id()
        request.state.request_id = request_id

        started = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
            "actor": request.headers.get("X-User-ID") or "anonymous",
        }

        with correlation_scope(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - started) * 1000
                log_json(
                    logger,
                    logging.ERROR,
                    "request_error",
                    status_code=500,
                    duration_ms=round(duration_ms, 2),
                    error=str(exc),
                    exception=exc.__class__.__name__,
                    **fields,
                )
                raise

            response.headers.setdefault("X-Request-ID", request_id)
            duration_ms = (time.perf_counter() - started) * 1000

            observe_http_request(
                method=request.method,
                route=_route_template(request),
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO

            log_json(
                logger,
                level,
                "request",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                **fields,
            )
            return response
