# ocs_sharing/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del servicio (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  SharingError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a envelopes OCS
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a OCS 996)
  - infrastructure/gateway/* (levantan GatewayError en fallas de transporte)
  - application/usecases/shares/* (capturan GatewayError donde importa)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class SharingError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      SharingError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "SHARING_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class GatewayError(SharingError):
    """Falla de transporte contra el gateway (conexión, timeout, payload inválido)."""

    error_code: str = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        *,
        method: str = "",
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, error_id=error_id, original_error=original_error)
        self.method = method
