"""
Métriques Prometheus pour l'application.

Ce module définit les métriques Prometheus utilisées pour le monitoring de l'application
astrologique et expose `/metrics` ainsi qu'un middleware de mesure par route.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Fournisseurs externes
ASTRO_API_CALLS = Counter(
    "astro_api_calls_total",
    "Calls to the astrology data provider",
    ["endpoint", "outcome"],
)
PLACES_API_CALLS = Counter(
    "places_api_calls_total",
    "Calls to the places/geocoding provider",
    ["operation", "outcome"],
)

# Métier
PREVIEW_QUESTIONS = Counter(
    "preview_questions_total",
    "AI preview questions by outcome",
    ["outcome"],
)
LLM_LATENCY = Histogram(
    "llm_latency_seconds",
    "Latency of generative text calls",
    ["provider"],
)
ONBOARDING_TRANSITIONS = Counter(
    "onboarding_transitions_total",
    "Onboarding wizard transitions",
    ["step", "result"],
)
CHARTS_RENDERED = Counter(
    "charts_rendered_total",
    "Charts rendered locally",
    ["chart_type"],
)
RATE_LIMIT_BLOCKS = Counter(
    "rate_limit_blocks_total",
    "Total requests blocked by rate limiting",
    ["reason"],
)


@metrics_router.get("/metrics")
def metrics():
    """Expose les métriques Prometheus au format texte."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte les métriques de comptage des requêtes et de latence par route.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
