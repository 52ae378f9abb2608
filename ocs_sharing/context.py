"""
===============================================================================
TARJETA CRC — ocs_sharing/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto "request-scoped" usando ContextVars (async-safe).
  - Permitir correlación de logs/métricas sin pasar parámetros por todo el stack.
  - Transportar el access token del caller hasta el cliente del gateway.

Colaboradores:
  - crosscutting.middleware: setea request_id/method/path/token al inicio.
  - crosscutting.logger: enriquece logs leyendo get_context_dict().
  - infrastructure.gateway.grpc_gateway_client: lee get_access_token().

Restricciones:
  - Solo tipos primitivos (str).
  - El access token NUNCA forma parte de get_context_dict() (no se loguea).
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# Token del caller; se reenvía al gateway como metadata.
access_token_var: ContextVar[str] = ContextVar("access_token", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = "", access_token: str = ""
) -> None:
    """
    Setea el contexto mínimo del request.

    Regla:
      - Strings vacíos significan "no disponible".
    """
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")
    access_token_var.set(access_token or "")


def get_access_token() -> str:
    return access_token_var.get()


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, omitiendo claves vacías (para logs)."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val

    return ctx


def clear_context() -> None:
    """Limpia el contexto al final del request (evita filtración entre requests)."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    access_token_var.set("")
