"""
===============================================================================
TARJETA CRC — ocs_sharing/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer los routers por feature para el router raíz.

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .shares import router as shares_router

__all__ = ["shares_router"]
