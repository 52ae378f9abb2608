"""
===============================================================================
USE CASE: Federated Shares (lectura)
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    ListFederatedSharesUseCase, GetFederatedShareUseCase

Responsibilities:
    - Listar / obtener shares federadas (OCM) del caller.
    - Renderizarlas como dicts planos (no pasan por ShareData).

Collaborators:
    - GatewayClient: list_ocm_shares, get_ocm_share

Error Mapping:
    - SERVER_ERROR: falla de transporte o status no-OK.
    - NOT_FOUND: get con NOT_FOUND o sin share ("share not found").
===============================================================================
"""

from __future__ import annotations

from typing import Any

from ....crosscutting.exceptions import GatewayError
from ....domain.entities import OcmShare, ResourceId, UserId
from ....domain.permissions import ResourcePermissions
from ....domain.services import GatewayClient
from .share_results import ShareActionResult, ShareError, ShareErrorCode


def _user_dict(user_id: UserId | None) -> dict[str, str] | None:
    if user_id is None:
        return None
    return {"idp": user_id.idp, "opaque_id": user_id.opaque_id}


def _resource_dict(resource_id: ResourceId) -> dict[str, str]:
    return {
        "storage_id": resource_id.storage_id,
        "opaque_id": resource_id.opaque_id,
    }


def _permissions_dict(
    permissions: ResourcePermissions | None,
) -> dict[str, bool] | None:
    if permissions is None:
        return None
    return permissions.to_dict()


def ocm_share_to_dict(share: OcmShare) -> dict[str, Any]:
    return {
        "id": share.id,
        "resource_id": _resource_dict(share.resource_id),
        "name": share.name,
        "permissions": _permissions_dict(share.permissions),
        "grantee": _user_dict(share.grantee),
        "owner": _user_dict(share.owner),
        "creator": _user_dict(share.creator),
        "ctime": share.ctime,
        "mtime": share.mtime,
    }


def _server_error(message: str) -> ShareActionResult:
    return ShareActionResult(
        error=ShareError(code=ShareErrorCode.SERVER_ERROR, message=message)
    )


class ListFederatedSharesUseCase:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def execute(self) -> ShareActionResult:
        try:
            res = self._gateway.list_ocm_shares()
        except GatewayError as exc:
            return _server_error(
                f"error sending a grpc list ocm share request: {exc.message}"
            )
        if not res.status.ok:
            return _server_error(
                f"grpc list ocm share request failed: {res.status.message}"
            )
        return ShareActionResult(data=[ocm_share_to_dict(s) for s in res.value or []])


class GetFederatedShareUseCase:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def execute(self, share_id: str) -> ShareActionResult:
        try:
            res = self._gateway.get_ocm_share(share_id)
        except GatewayError as exc:
            return _server_error(
                f"error sending a grpc get ocm share request: {exc.message}"
            )
        if res.status.not_found or (res.status.ok and res.value is None):
            return ShareActionResult(
                error=ShareError(
                    code=ShareErrorCode.NOT_FOUND, message="share not found"
                )
            )
        if not res.status.ok:
            return _server_error(
                f"grpc get ocm share request failed: {res.status.message}"
            )
        return ShareActionResult(data=ocm_share_to_dict(res.value))
