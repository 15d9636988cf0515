"""
Application principale FastAPI.

Ce module assemble les composants de l'application: logging, middlewares, gestionnaires
d'erreurs, routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (timing, métriques, limitation de débit, request id)
- Enregistrer les gestionnaires d'erreurs (enveloppe standard)
- Monter les routers
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from astrohuff.api.errors import (
    APIError,
    handle_api_error,
    handle_generic_exception,
    handle_http_exception,
    handle_validation_error,
)
from astrohuff.api.routes_auth import router as auth_router
from astrohuff.api.routes_charts import router as charts_router
from astrohuff.api.routes_dashboard import router as dashboard_router
from astrohuff.api.routes_health import router as health_router
from astrohuff.api.routes_onboarding import router as onboarding_router
from astrohuff.api.routes_places import router as places_router
from astrohuff.api.routes_preview import router as preview_router
from astrohuff.api.routes_profile import router as profile_router
from astrohuff.app.metrics import PrometheusMiddleware, metrics_router
from astrohuff.app.middleware_rate_limit import RateLimitMiddleware
from astrohuff.core.container import container
from astrohuff.core.logging import setup_logging
from astrohuff.middlewares.request_id import RequestIDMiddleware
from astrohuff.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Le middleware de request id est ajouté en dernier (le plus externe) afin que l'identifiant
    soit présent dans les logs des couches internes.
    """
    setup_logging()
    settings = container.settings
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_exception)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(onboarding_router)
    app.include_router(places_router)
    app.include_router(charts_router)
    app.include_router(preview_router)
    app.include_router(dashboard_router)
    app.include_router(metrics_router)
    return app


app = create_app()
