"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> OCS envelope)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a OcsError (meta statuscode).
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener application libre de HTTP/OCS.

Reglas:
  - Los use cases devuelven errores tipados (code + message).
  - La API traduce a statuscodes OCS (crosscutting.ocs_responses).

Colaboradores:
  - application.usecases.shares (ShareError, ShareErrorCode)
  - crosscutting.ocs_responses (bad_request, not_found, server_error)
===============================================================================
"""

from __future__ import annotations

from ....application.usecases.shares import ShareError, ShareErrorCode
from ....crosscutting.ocs_responses import (
    OcsError,
    bad_request,
    not_found,
    server_error,
)


def to_ocs_error(error: ShareError) -> OcsError:
    if error.code == ShareErrorCode.BAD_REQUEST:
        return bad_request(error.message)
    if error.code == ShareErrorCode.NOT_FOUND:
        return not_found(error.message)
    # Fallback: cualquier código nuevo se trata como 996.
    return server_error(error.message)


def raise_share_error(error: ShareError) -> None:
    """Traduce ShareError -> OcsError (lo renderiza ocs_exception_handler)."""
    raise to_ocs_error(error)
