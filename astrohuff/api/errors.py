"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Toutes les réponses d'erreur partagent l'enveloppe `{"code", "message", "trace_id", "details?"}`.
Les messages destinés à l'utilisateur restent génériques pour les échecs externes; le détail
technique n'est que journalisé.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from astrohuff.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_UNAUTHORIZED,
    HTTP_UNPROCESSABLE,
)

log = structlog.get_logger(__name__)

STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None

    def as_content(self) -> dict[str, Any]:
        content = {"code": self.code, "message": self.message, "trace_id": self.trace_id}
        if self.details:
            content["details"] = self.details
        return content


class APIError(HTTPException):
    """Erreur API portant un code stable et un message présentable."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.trace_id = trace_id
        self.details = details


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(code=code, message=message, trace_id=trace_id, details=details)
    return JSONResponse(status_code=status_code, content=envelope.as_content())


def extract_trace_id(request: Request) -> str | None:
    """ID de trace: en-tête `X-Trace-ID`, sinon l'ID posé par le middleware de requête."""
    trace_id = request.headers.get("X-Trace-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "request_id", None)


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    trace_id = extract_trace_id(request) or exc.trace_id
    log.warning("api_error", code=exc.code, status_code=exc.status_code, trace_id=trace_id)
    return create_error_response(exc.status_code, exc.code, exc.message, trace_id, exc.details)


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    trace_id = extract_trace_id(request)
    code = STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    log.warning("http_exception", code=code, status_code=exc.status_code, trace_id=trace_id)
    return create_error_response(exc.status_code, code, str(exc.detail), trace_id)


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Erreurs pydantic -> 422 avec un message par champ."""
    fields: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "header")]
        fields.setdefault(".".join(loc) or "request", err.get("msg", "invalid"))
    return create_error_response(
        HTTP_UNPROCESSABLE,
        "VALIDATION_ERROR",
        "Invalid request",
        extract_trace_id(request),
        {"fields": fields},
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    trace_id = extract_trace_id(request)
    log.error(
        "unexpected_error",
        trace_id=trace_id,
        exception_type=type(exc).__name__,
        exc_info=exc,
    )
    return create_error_response(
        HTTP_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        trace_id,
    )


def unauthorized(message: str = "Authentication required") -> APIError:
    return APIError(HTTP_UNAUTHORIZED, "UNAUTHORIZED", message)


def validation_failed(errors: dict[str, str]) -> APIError:
    return APIError(HTTP_UNPROCESSABLE, "VALIDATION_ERROR", "Invalid request", details={"fields": errors})


def conflict(code: str, message: str) -> APIError:
    return APIError(HTTP_CONFLICT, code, message)


def bad_gateway(message: str) -> APIError:
    return APIError(HTTP_BAD_GATEWAY, "BAD_GATEWAY", message)
