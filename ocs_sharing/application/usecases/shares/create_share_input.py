"""
Input DTO compartido por el dispatcher de creación y sus tres flujos.

Los campos opcionales del form usan None para "clave ausente": en varios
flujos la presencia de la clave (no su valor) decide el comportamiento.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CreateShareInput:
    share_type: str | None = None
    path: str = ""
    share_with: str = ""
    share_with_user: str = ""
    share_with_provider: str = ""
    role: str = ""
    permissions: str | None = None
    password: str = ""
    expire_date: str | None = None
    name: str = ""
    public_upload: str | None = None
