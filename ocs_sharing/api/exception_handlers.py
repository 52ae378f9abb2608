"""
===============================================================================
TARJETA CRC — ocs_sharing/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a envelopes OCS.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> 996 Server Error (con logging).
  - Observabilidad: correlación por request_id y error_id.

Colaboradores:
  - crosscutting.ocs_responses: OcsError, ocs_exception_handler, error_response
  - crosscutting.exceptions: SharingError y derivadas
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response

from ..context import request_id_var
from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import SharingError
from ..crosscutting.logger import logger
from ..crosscutting.ocs_responses import (
    META_BAD_REQUEST,
    META_SERVER_ERROR,
    OcsError,
    error_response,
    ocs_exception_handler,
)


def _request_id_from(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request_id_var.get() or None


async def sharing_error_handler(request: Request, exc: SharingError) -> Response:
    """Errores tipados que escaparon de un use case (ej. GatewayError en un lookup)."""
    logger.error(
        "Error de servicio",
        extra={
            "code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": _request_id_from(request),
        },
    )
    return error_response(request, META_SERVER_ERROR.statuscode, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    logger.info(
        "Request inválido",
        extra={"request_id": _request_id_from(request), "errors": str(exc.errors())},
    )
    return error_response(request, META_BAD_REQUEST.statuscode, "invalid request")


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica 996 (evita filtrar internos en producción).
    """
    settings = get_settings()

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )

    message = str(exc) if not settings.is_production() else META_SERVER_ERROR.message
    return error_response(request, META_SERVER_ERROR.statuscode, message)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - OcsError debe registrarse para respetar el envelope legacy.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(OcsError, ocs_exception_handler)
    app.add_exception_handler(SharingError, sharing_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
