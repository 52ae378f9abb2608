"""
===============================================================================
SHARE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Share Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de sharing, con un contrato estable y explícito para:
      - requests mal formados (BAD_REQUEST)
      - recursos/shares/usuarios inexistentes (NOT_FOUND)
      - cualquier otra falla del gateway o de mapeo (SERVER_ERROR)

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      hacia afuera; el router traduce a envelopes OCS.
    - La primera falla detectada corta la orquestación: nunca hay éxito parcial.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    share_results models (module)

Responsibilities:
    - Definir ShareErrorCode (taxonomía de errores del façade).
    - Representar ShareError (code + message).
    - Representar resultados:
        * ShareResult (una ShareData)
        * ShareListResult (lista de ShareData)
        * ShareActionResult (comando sin payload o con payload libre)

Collaborators:
    - domain.share_data.ShareData
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from ....domain.share_data import ShareData


class ShareErrorCode(str, Enum):
    """
    Códigos de error de los casos de uso de sharing.

    Códigos:
      - BAD_REQUEST: input inválido o faltante.
      - NOT_FOUND: el gateway reporta ausencia, o el id no resuelve a ninguna share.
      - SERVER_ERROR: cualquier otra falla (transporte, status, mapeo/enriquecimiento).
    """

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ERROR = "SERVER_ERROR"


@dataclass(frozen=True)
class ShareError:
    code: ShareErrorCode
    message: str


class ShareFailure(Exception):
    """
    Señal interna para cortar una orquestación multi-paso.

    Los use cases la capturan en execute() y la convierten en ShareError;
    nunca sale de la capa application.
    """

    def __init__(self, code: ShareErrorCode, message: str):
        super().__init__(message)
        self.error = ShareError(code=code, message=message)


def bad_request(message: str) -> ShareFailure:
    return ShareFailure(ShareErrorCode.BAD_REQUEST, message)


def not_found(message: str) -> ShareFailure:
    return ShareFailure(ShareErrorCode.NOT_FOUND, message)


def server_error(message: str) -> ShareFailure:
    return ShareFailure(ShareErrorCode.SERVER_ERROR, message)


@dataclass
class ShareResult:
    """
    Resultado para casos de uso que retornan una única ShareData.

    Contrato:
      - Si error is None => share presente (éxito)
      - Si error != None => share es None (fallo)
    """

    share: ShareData | None = None
    error: ShareError | None = None


@dataclass
class ShareListResult:
    """Resultado de listados: lista (posiblemente vacía) o error."""

    shares: List[ShareData] = field(default_factory=list)
    error: ShareError | None = None


@dataclass
class ShareActionResult:
    """
    Resultado de comandos (remove, accept/reject, create federada) y de las
    lecturas federadas, donde data es libre (str, dict, lista o None).
    """

    data: Any = None
    error: ShareError | None = None
