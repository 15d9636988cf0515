"""Limitation de débit des routes qui sollicitent un fournisseur payant.

Seules les routes qui déclenchent un appel externe (LLM de l'aperçu IA, Places, fournisseur
astrologique) sont limitées, à `RATE_LIMIT_QPS` requêtes par seconde et par client. Le client est
identifié par l'en-tête `X-Client-ID` (celui de l'aperçu IA), à défaut par l'adresse distante.

Les compteurs dont la fenêtre est échue sont purgés au fil de l'eau: la table ne conserve que les
clients actifs dans la dernière seconde.

Sur blocage: 429 (`RATE_LIMITED`) et incrément de `rate_limit_blocks_total{reason="qps"}`.
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from astrohuff.api.errors import create_error_response
from astrohuff.app.metrics import RATE_LIMIT_BLOCKS
from astrohuff.core.http_constants import CLIENT_ID_HEADER, HTTP_TOO_MANY_REQUESTS
from astrohuff.core.settings import get_settings

log = structlog.get_logger(__name__)

WINDOW_SECONDS = 1.0

# Préfixes des routes adossées à un fournisseur externe
GUARDED_PREFIXES = ("/preview", "/api/places", "/charts/birth", "/onboarding/place")


class ClientLimiter:
    """Fenêtre fixe d'une seconde par client, avec purge des fenêtres échues."""

    def __init__(self, qps: int) -> None:
        self.qps = max(1, int(qps))
        # client -> (début de fenêtre, compteur)
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [c for c, (start, _) in self._windows.items() if now - start >= WINDOW_SECONDS]
        for client_id in expired:
            del self._windows[client_id]
        self._last_sweep = now

    def allow(self, client_id: str, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        if now - self._last_sweep >= WINDOW_SECONDS:
            self._sweep(now)
        start, count = self._windows.get(client_id, (now, 0))
        if now - start >= WINDOW_SECONDS:
            start, count = now, 0
        if count >= self.qps:
            return False
        self._windows[client_id] = (start, count + 1)
        return True


def client_key(request: Request) -> str:
    client_id = request.headers.get(CLIENT_ID_HEADER)
    if client_id:
        return client_id
    return request.client.host if request.client else "anonymous"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, qps: int | None = None) -> None:
        super().__init__(app)
        self.limiter = ClientLimiter(qps=qps or get_settings().RATE_LIMIT_QPS)

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(GUARDED_PREFIXES):
            return await call_next(request)
        client_id = client_key(request)
        if not self.limiter.allow(client_id):
            RATE_LIMIT_BLOCKS.labels(reason="qps").inc()
            log.warning("rate_limited", client_id=client_id, path=request.url.path)
            return create_error_response(
                HTTP_TOO_MANY_REQUESTS, "RATE_LIMITED", "rate limit exceeded"
            )
        return await call_next(request)
