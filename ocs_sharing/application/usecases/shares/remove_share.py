"""
===============================================================================
USE CASE: Remove Share
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    RemoveShareUseCase

Responsibilities:
    - Resolver el id (public link primero, user share después).
    - Eliminar con la RPC de la familia correspondiente.
    - Éxito sin payload.

Collaborators:
    - share_lookup.resolve_share (no estricto: fallas de lookup = ausencia)
    - GatewayClient: remove_public_share, remove_share

Error Mapping:
    - NOT_FOUND: id no resuelto ("could not find share") o remove NOT_FOUND.
    - SERVER_ERROR: transporte u otro status en el remove.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from ....crosscutting.exceptions import GatewayError
from ....domain.entities import RpcResult
from ....domain.services import GatewayClient
from .share_lookup import PublicLinkMatch, UserShareMatch, resolve_share
from .share_results import ShareActionResult, ShareFailure, not_found, server_error


class RemoveShareUseCase:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def execute(self, share_id: str) -> ShareActionResult:
        match = resolve_share(self._gateway, share_id)
        try:
            if isinstance(match, PublicLinkMatch):
                _remove(self._gateway.remove_public_share, match.share.id)
            elif isinstance(match, UserShareMatch):
                _remove(self._gateway.remove_share, match.share.id)
            else:
                raise not_found("could not find share")
        except ShareFailure as failure:
            return ShareActionResult(error=failure.error)
        return ShareActionResult()


def _remove(rpc: Callable[[str], RpcResult[None]], share_id: str) -> None:
    try:
        res = rpc(share_id)
    except GatewayError as exc:
        raise server_error(
            f"error sending a grpc delete share request: {exc.message}"
        ) from exc
    if res.status.not_found:
        raise not_found("not found")
    if not res.status.ok:
        raise server_error(f"grpc delete share request failed: {res.status.message}")
