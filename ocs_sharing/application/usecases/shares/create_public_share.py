"""
===============================================================================
USE CASE: Create Public Link
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreatePublicShareUseCase

Responsibilities:
    - Stat del recurso (relativo al home).
    - Resolver permisos (publicUpload > permissions > clave 1).
    - Adjuntar password/expiración al grant y el nombre visible como metadata
      arbitraria del recurso, en una sola llamada.
    - Mapear (con redacción si hay password) y enriquecer.

Collaborators:
    - GatewayClient: get_home, stat, create_public_share
    - public_link_permissions.permissions_from_form
    - share_mapper: public_share_to_share_data, add_file_info, parse_timestamp

Error Mapping:
    - NOT_FOUND: recurso inexistente, clave de public link desconocida.
    - SERVER_ERROR: home/stat, permisos no parseables, expireDate inválida
      (asimetría heredada: no es BAD_REQUEST), create fallido, mapeo.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.permissions import UnknownPublicLinkPermission, public_link_permissions
from ....domain.services import GatewayClient
from .create_share_input import CreateShareInput
from .gateway_steps import home_path, resolve_home
from .public_link_permissions import (
    DEFAULT_PUBLIC_LINK_KEY,
    PublicLinkPermissionError,
    permissions_from_form,
)
from .share_mapper import (
    ShareMappingError,
    TimestampParseError,
    add_file_info,
    parse_timestamp,
    public_share_to_share_data,
)
from .share_results import ShareActionResult, ShareFailure, not_found, server_error


class CreatePublicShareUseCase:
    def __init__(self, gateway: GatewayClient, public_url: str) -> None:
        self._gateway = gateway
        self._public_url = public_url

    def execute(self, input_data: CreateShareInput) -> ShareActionResult:
        try:
            return ShareActionResult(data=self._create(input_data))
        except ShareFailure as failure:
            return ShareActionResult(error=failure.error)

    def _create(self, input_data: CreateShareInput):
        gateway = self._gateway
        home = resolve_home(gateway)

        # 1) Stat del recurso.
        try:
            stat_res = gateway.stat(home_path(home, input_data.path))
        except GatewayError as exc:
            logger.debug("stat failed", extra={"error": exc.message})
            raise server_error(f"stat: {exc.message}") from exc
        if stat_res.status.not_found:
            raise not_found(f"resource not found: {stat_res.status.message}")
        if not stat_res.status.ok or stat_res.value is None:
            raise server_error(f"stat: {stat_res.status.message}")
        info = stat_res.value

        # 2) Permisos pedidos (o default de solo lectura).
        try:
            permissions = permissions_from_form(
                input_data.public_upload, input_data.permissions
            )
        except PublicLinkPermissionError as exc:
            raise server_error(f"ocPublicPermToCs3 {exc}") from exc
        except UnknownPublicLinkPermission as exc:
            raise not_found(f"ocPublicPermToCs3 {exc}") from exc
        if permissions is None:
            permissions = public_link_permissions(DEFAULT_PUBLIC_LINK_KEY)

        # 3) Expiración opcional.
        expiration = None
        if input_data.expire_date:
            try:
                expiration = parse_timestamp(input_data.expire_date)
            except TimestampParseError as exc:
                raise server_error(f"parseTimestamp: {exc}") from exc

        # 4) Nombre visible como metadata arbitraria del recurso.
        resource = replace(info, arbitrary_metadata={"name": input_data.name})

        try:
            create_res = gateway.create_public_share(
                resource, permissions, input_data.password, expiration
            )
        except GatewayError as exc:
            raise server_error(f"create public share: {exc.message}") from exc
        if not create_res.status.ok or create_res.value is None:
            logger.debug(
                "error creating a public share",
                extra={"resource_id": info.id.opaque_id},
            )
            raise server_error(f"create public share: {create_res.status.message}")

        # 5) Mapear + enriquecer.
        sd = public_share_to_share_data(create_res.value, self._public_url)
        try:
            add_file_info(gateway, sd, info)
        except ShareMappingError as exc:
            raise server_error(f"addFileInfo: {exc}") from exc
        return sd
