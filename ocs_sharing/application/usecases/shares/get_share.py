"""
===============================================================================
USE CASE: Get Share by id
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    GetShareUseCase

Responsibilities:
    - Resolver el id (public link primero, user share después) en modo estricto.
    - Mapear la share encontrada y enriquecerla con el stat por resource id.
    - Responder una lista de un elemento (contrato OCS legacy).

Collaborators:
    - share_lookup.resolve_share
    - share_mapper
    - GatewayClient.stat

Error Mapping:
    - NOT_FOUND: el id no resuelve a ninguna share ("share not found").
    - SERVER_ERROR: transporte/status inesperado en lookups o stat, mapeo.
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.services import GatewayClient
from .share_lookup import LookupFailure, PublicLinkMatch, UserShareMatch, resolve_share
from .share_mapper import (
    ShareMappingError,
    add_file_info,
    public_share_to_share_data,
    user_share_to_share_data,
)
from .share_results import (
    ShareFailure,
    ShareListResult,
    not_found,
    server_error,
)


class GetShareUseCase:
    def __init__(self, gateway: GatewayClient, public_url: str) -> None:
        self._gateway = gateway
        self._public_url = public_url

    def execute(self, share_id: str) -> ShareListResult:
        try:
            return ShareListResult(shares=[self._get(share_id)])
        except ShareFailure as failure:
            return ShareListResult(error=failure.error)

    def _get(self, share_id: str):
        gateway = self._gateway

        try:
            match = resolve_share(gateway, share_id, strict=True)
        except GatewayError as exc:
            raise server_error(f"error getting share: {exc.message}") from exc
        except LookupFailure as exc:
            raise server_error(str(exc)) from exc

        if isinstance(match, PublicLinkMatch):
            sd = public_share_to_share_data(match.share, self._public_url)
            resource_id = match.share.resource_id
        elif isinstance(match, UserShareMatch):
            try:
                sd = user_share_to_share_data(gateway, match.share)
            except ShareMappingError as exc:
                raise server_error(f"error mapping share data: {exc}") from exc
            resource_id = match.share.resource_id
        else:
            logger.debug("no share found with this id", extra={"share_id": share_id})
            raise not_found("share not found")

        try:
            stat_res = gateway.stat(resource_id)
        except GatewayError as exc:
            logger.error("error mapping share data", extra={"error": exc.message})
            raise server_error(f"error mapping share data: {exc.message}") from exc
        if not stat_res.status.ok or stat_res.value is None:
            logger.error(
                "error mapping share data",
                extra={
                    "status": stat_res.status.code.value,
                    "status_message": stat_res.status.message,
                },
            )
            raise server_error(f"error mapping share data: {stat_res.status.message}")

        try:
            add_file_info(gateway, sd, stat_res.value)
        except ShareMappingError as exc:
            raise server_error(f"error mapping share data: {exc}") from exc
        return sd
