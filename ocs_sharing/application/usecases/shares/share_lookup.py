"""
===============================================================================
TARJETA CRC — application/usecases/shares/share_lookup.py
===============================================================================

Módulo:
    Resolución de share id (public link primero, user share después)

Responsabilidades:
    - Representar el resultado como variante cerrada:
        PublicLinkMatch | UserShareMatch | Absent
    - Fijar el orden de resolución: el namespace de ids no está tipado en el
      borde HTTP, así que el orden es parte del contrato.

Colaboradores:
    - domain.services.GatewayClient (get_public_share, get_share)
    - crosscutting.logger

Reglas:
    - La unicidad del id entre ambas colecciones se asume, no se verifica.
    - strict=False (update/remove): fallas de transporte se loguean y cuentan
      como ausencia.
    - strict=True (get): fallas de transporte y status inesperados del lookup
      de public link se propagan como GatewayError/LookupFailure.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import PublicShare, RpcStatus, Share
from ....domain.services import GatewayClient


@dataclass(frozen=True)
class PublicLinkMatch:
    share: PublicShare


@dataclass(frozen=True)
class UserShareMatch:
    share: Share


@dataclass(frozen=True)
class Absent:
    pass


ShareMatch = Union[PublicLinkMatch, UserShareMatch, Absent]


class LookupFailure(Exception):
    """Status no-OK (y distinto de NOT_FOUND) en un lookup estricto."""

    def __init__(self, kind: str, status: RpcStatus):
        super().__init__(f"error getting {kind}: {status.message or status.code.value}")
        self.kind = kind
        self.status = status


def resolve_share(
    gateway: GatewayClient, share_id: str, *, strict: bool = False
) -> ShareMatch:
    """Resuelve share_id contra public links y luego user shares."""
    public = _lookup_public_share(gateway, share_id, strict=strict)
    if public is not None:
        return PublicLinkMatch(public)

    user = _lookup_user_share(gateway, share_id, strict=strict)
    if user is not None:
        return UserShareMatch(user)

    return Absent()


def _lookup_public_share(
    gateway: GatewayClient, share_id: str, *, strict: bool
) -> PublicShare | None:
    try:
        res = gateway.get_public_share(share_id)
    except GatewayError as exc:
        if strict:
            raise
        logger.warning(
            "error getting public share",
            extra={"share_id": share_id, "error": exc.message},
        )
        return None

    if res.status.ok:
        return res.value
    if strict and not res.status.not_found:
        raise LookupFailure("public share", res.status)
    return None


def _lookup_user_share(
    gateway: GatewayClient, share_id: str, *, strict: bool
) -> Share | None:
    try:
        res = gateway.get_share(share_id)
    except GatewayError as exc:
        if strict:
            raise
        logger.warning(
            "error getting share",
            extra={"share_id": share_id, "error": exc.message},
        )
        return None

    if res.status.ok:
        return res.value
    if strict and not res.status.not_found:
        raise LookupFailure("share", res.status)
    return None
