"""
===============================================================================
TARJETA CRC — domain/share_data.py (Registro externo unificado)
===============================================================================

Responsabilidades:
  - Representar ShareData: el registro OCS que ve el cliente, sin importar si
    la share es user share, public link o recibida.
  - Serializar con los nombres de campo del contrato OCS.

Reglas:
  - share_with, share_with_displayname, url y attributes se omiten si están vacíos.
  - state solo tiene sentido en shares recibidas: None (sin setear) se omite.
  - Se construye por request y se descarta luego de renderizar.
===============================================================================
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

# Se omiten del payload cuando están vacíos.
_OMIT_EMPTY = ("share_with", "share_with_displayname", "url", "attributes")

# Placeholder para ocultar grantee de public links con password.
REDACTED = "***redacted***"


@dataclass
class ShareData:
    id: str = ""
    share_type: int = 0
    uid_owner: str = ""
    displayname_owner: str = ""
    permissions: int = 0
    stime: int = 0
    parent: str = ""
    expiration: str = ""
    token: str = ""
    uid_file_owner: str = ""
    displayname_file_owner: str = ""
    additional_info_owner: str = ""
    additional_info_file_owner: str = ""
    state: int | None = None
    path: str = ""
    item_type: str = ""
    mimetype: str = ""
    storage_id: str = ""
    storage: int = 0
    item_source: str = ""
    file_source: str = ""
    file_parent: str = ""
    file_target: str = ""
    share_with: str = ""
    share_with_displayname: str = ""
    share_with_additional_info: str = ""
    mail_send: int = 0
    name: str = ""
    url: str = ""
    attributes: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in _OMIT_EMPTY:
            if not data[key]:
                del data[key]
        if data["state"] is None:
            del data["state"]
        return data
