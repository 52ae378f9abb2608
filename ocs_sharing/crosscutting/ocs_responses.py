# ocs_sharing/crosscutting/ocs_responses.py
"""
===============================================================================
MÓDULO: Respuestas OCS (envelope legacy + negociación JSON/XML)
===============================================================================

Objetivo
--------
Uniformar TODAS las respuestas del API de sharing con el envelope OCS que
esperan los clientes legacy:

    {"ocs": {"meta": {"status", "statuscode", "message"}, "data": ...}}

Los statuscodes son contrato con clientes existentes y se reproducen tal cual:
  - 100 (v1) / 200 (v2): OK
  - 400: Bad Request
  - 996: Server Error
  - 997: Unauthorised
  - 998: Not Found
  - 999: Unknown Error

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  Meta + OcsError + render_ocs()

Responsabilidades:
  - Definir el catálogo de meta codes
  - Mapear statuscode OCS -> HTTP status (v2) o 200 fijo (v1)
  - Serializar envelope como JSON o XML según ?format=
  - Proveer factories de errores y el handler FastAPI

Colaboradores:
  - interfaces/api/http/routers/shares.py (render de éxito / raise de errores)
  - api/exception_handlers.py (registra ocs_exception_handler)
===============================================================================
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.responses import Response


class OcsVersion(str, Enum):
    V1 = "v1.php"
    V2 = "v2.php"


class OcsFormat(str, Enum):
    JSON = "json"
    XML = "xml"


@dataclass(frozen=True)
class Meta:
    status: str
    statuscode: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "statuscode": self.statuscode,
            "message": self.message,
        }


META_OK = Meta("ok", 100, "OK")
META_BAD_REQUEST = Meta("error", 400, "Bad Request")
META_SERVER_ERROR = Meta("error", 996, "Server Error")
META_UNAUTHORIZED = Meta("error", 997, "Unauthorised")
META_NOT_FOUND = Meta("error", 998, "Not Found")
META_UNKNOWN_ERROR = Meta("error", 999, "Unknown Error")

# v2: statuscode OCS -> HTTP status
_V2_HTTP_STATUS = {
    100: 200,
    200: 200,
    400: 400,
    404: 404,
    996: 500,
    997: 401,
    998: 404,
    999: 500,
}

JSON_MEDIA_TYPE = "application/json; charset=utf-8"
XML_MEDIA_TYPE = "application/xml; charset=utf-8"


class OcsError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      OcsError

    Responsabilidades:
      - Transportar statuscode OCS + mensaje hasta el handler
      - El handler decide versión (v1/v2) y formato (json/xml) del request

    Colaboradores:
      - ocs_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(self, statuscode: int, message: str):
        super().__init__(message)
        self.statuscode = statuscode
        self.message = message

    @property
    def meta(self) -> Meta:
        return Meta("error", self.statuscode, self.message)


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def bad_request(message: str) -> OcsError:
    return OcsError(META_BAD_REQUEST.statuscode, message)


def server_error(message: str) -> OcsError:
    return OcsError(META_SERVER_ERROR.statuscode, message)


def unauthorized(message: str = META_UNAUTHORIZED.message) -> OcsError:
    return OcsError(META_UNAUTHORIZED.statuscode, message)


def not_found(message: str) -> OcsError:
    return OcsError(META_NOT_FOUND.statuscode, message)


# ---------------------------------------------------------------------------
# Negociación (versión / formato)
# ---------------------------------------------------------------------------
def version_from_request(request: Request) -> OcsVersion:
    raw = request.path_params.get("version")
    if raw is None:
        raw = OcsVersion.V2.value if "/v2.php/" in request.url.path else ""
    return OcsVersion.V2 if raw == OcsVersion.V2.value else OcsVersion.V1


def format_from_request(request: Request) -> OcsFormat:
    raw = (request.query_params.get("format") or "").strip().lower()
    return OcsFormat.XML if raw == OcsFormat.XML.value else OcsFormat.JSON


def http_status_for(statuscode: int, version: OcsVersion) -> int:
    """v1 siempre responde 200; v2 refleja el statuscode OCS en HTTP."""
    if version == OcsVersion.V1:
        return 200
    return _V2_HTTP_STATUS.get(statuscode, 500)


# ---------------------------------------------------------------------------
# Serialización
# ---------------------------------------------------------------------------
def _xml_append(parent: ET.Element, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for key, item in value.items():
            child = ET.SubElement(parent, str(key))
            _xml_append(child, item)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _xml_append(ET.SubElement(parent, "element"), item)
        return
    if isinstance(value, bool):
        parent.text = "true" if value else "false"
        return
    parent.text = str(value)


def to_xml(envelope: dict[str, Any]) -> bytes:
    root = ET.Element("ocs")
    _xml_append(root, envelope["ocs"])
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def build_envelope(meta: Meta, data: Any = None) -> dict[str, Any]:
    ocs: dict[str, Any] = {"meta": meta.to_dict()}
    if data is not None:
        ocs["data"] = data
    return {"ocs": ocs}


def render_ocs(
    meta: Meta,
    data: Any,
    *,
    version: OcsVersion,
    fmt: OcsFormat,
) -> Response:
    """Construye la Response OCS para una versión y formato dados."""
    if meta.statuscode == META_OK.statuscode and version == OcsVersion.V2:
        meta = Meta(meta.status, 200, meta.message)

    envelope = build_envelope(meta, data)
    status_code = http_status_for(meta.statuscode, version)

    if fmt == OcsFormat.XML:
        return Response(
            content=to_xml(envelope),
            status_code=status_code,
            media_type=XML_MEDIA_TYPE,
        )
    return Response(
        content=json.dumps(envelope, ensure_ascii=False).encode("utf-8"),
        status_code=status_code,
        media_type=JSON_MEDIA_TYPE,
    )


def ok_response(request: Request, data: Any = None) -> Response:
    return render_ocs(
        META_OK,
        data,
        version=version_from_request(request),
        fmt=format_from_request(request),
    )


def error_response(request: Request, statuscode: int, message: str) -> Response:
    return render_ocs(
        Meta("error", statuscode, message),
        None,
        version=version_from_request(request),
        fmt=format_from_request(request),
    )


# ---------------------------------------------------------------------------
# Handler FastAPI
# ---------------------------------------------------------------------------
async def ocs_exception_handler(request: Request, exc: OcsError) -> Response:
    """Handler para OcsError: renderiza el envelope de error."""
    return error_response(request, exc.statuscode, exc.message)
