"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz de files_sharing que se incluye en FastAPI.
  - Componer los routers por feature.

Patrones aplicados:
  - Factory: build_router() para testear composición y evitar side-effects al importar.

Colaboradores:
  - routers.shares

Notas:
  - api/main.py lo incluye una vez por versión OCS:
      <http_root>/v1.php/apps/files_sharing/api/v1
      <http_root>/v2.php/apps/files_sharing/api/v1
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from .routers import shares_router

FILES_SHARING_PREFIX = "/apps/files_sharing/api/v1"


def build_router() -> APIRouter:
    """Construye el router de files_sharing (sin prefijo de versión)."""
    api_router = APIRouter()
    api_router.include_router(shares_router)
    return api_router


router = build_router()

__all__ = ["FILES_SHARING_PREFIX", "router", "build_router"]
