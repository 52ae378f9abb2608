"""
===============================================================================
USE CASE: Update Share
===============================================================================

Business Goal:
    Modificar una share existente. El id se resuelve contra public links y
    luego contra user shares; cada familia tiene su propio flujo.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateShareUseCase

Responsibilities:
    - Public link: construir una lista ORDENADA de comandos de un solo campo
      (name, permissions, expiration, password), omitiendo no-ops, y enviarlos
      en secuencia arrastrando la última respuesta como share actual.
    - User share: sobrescribir el set completo de permisos, re-leer la share,
      mapear y enriquecer.
    - Distinguir "no vino ningún campo" (BAD_REQUEST) de "vinieron campos pero
      nada cambió" (éxito sin RPCs de update).

Collaborators:
    - share_lookup.resolve_share (modo no estricto)
    - public_link_permissions.permissions_from_form
    - share_mapper
    - GatewayClient: update_public_share, update_share, get_share, stat

Rules:
    - Un comando fallido a mitad de la secuencia corta el flujo; los comandos
      anteriores quedan aplicados (no hay rollback).
    - El password se envía siempre que la clave venga (no se puede comparar).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import (
    PublicShare,
    PublicShareField,
    PublicShareUpdate,
    Share,
)
from ....domain.permissions import (
    PermissionsRangeError,
    UnknownPublicLinkPermission,
    as_cs3_permissions,
    new_permissions,
)
from ....domain.services import GatewayClient
from ....domain.share_data import ShareData
from .public_link_permissions import PublicLinkPermissionError, permissions_from_form
from .share_lookup import PublicLinkMatch, UserShareMatch, resolve_share
from .share_mapper import (
    ShareMappingError,
    TimestampParseError,
    add_file_info,
    parse_timestamp,
    public_share_to_share_data,
    user_share_to_share_data,
)
from .share_results import (
    ShareFailure,
    ShareResult,
    bad_request,
    not_found,
    server_error,
)


@dataclass(frozen=True)
class UpdateShareInput:
    """None = clave ausente en el form (la presencia decide si se actualiza)."""

    share_id: str
    name: str | None = None
    permissions: str | None = None
    public_upload: str | None = None
    expire_date: str | None = None
    password: str | None = None


class UpdateShareUseCase:
    def __init__(self, gateway: GatewayClient, public_url: str) -> None:
        self._gateway = gateway
        self._public_url = public_url

    def execute(self, input_data: UpdateShareInput) -> ShareResult:
        match = resolve_share(self._gateway, input_data.share_id)
        try:
            if isinstance(match, PublicLinkMatch):
                sd = self._update_public_share(match.share, input_data)
            elif isinstance(match, UserShareMatch):
                sd = self._update_user_share(match.share, input_data)
            else:
                raise not_found("could not find share")
        except ShareFailure as failure:
            return ShareResult(error=failure.error)
        return ShareResult(share=sd)

    # -------------------------------------------------------------------------
    # Public links
    # -------------------------------------------------------------------------

    def _update_public_share(
        self, share: PublicShare, input_data: UpdateShareInput
    ) -> ShareData:
        updates = build_public_share_updates(share, input_data)

        updated = share
        for update in updates:
            try:
                res = self._gateway.update_public_share(share.id, update)
            except GatewayError as exc:
                logger.error(
                    "sending update request to public link provider",
                    extra={"share_id": share.id, "error": exc.message},
                )
                raise server_error(
                    f"error sending update request to public link provider: {exc.message}"
                ) from exc
            if not res.status.ok or res.value is None:
                raise server_error(
                    f"error sending update request to public link provider: {res.status.message}"
                )
            updated = res.value

        try:
            stat_res = self._gateway.stat(share.resource_id)
        except GatewayError as exc:
            logger.debug("error during stat", extra={"share_id": share.id})
            raise server_error(f"missing resource information: {exc.message}") from exc
        if stat_res.status.not_found:
            raise not_found("update public share: resource not found")
        if not stat_res.status.ok or stat_res.value is None:
            raise server_error(
                "grpc stat request failed for stat after updating public share: "
                f"{stat_res.status.message}"
            )

        sd = public_share_to_share_data(updated, self._public_url)
        try:
            add_file_info(self._gateway, sd, stat_res.value)
        except ShareMappingError as exc:
            raise server_error(
                f"error enhancing response with share data: {exc}"
            ) from exc
        return sd

    # -------------------------------------------------------------------------
    # User shares
    # -------------------------------------------------------------------------

    def _update_user_share(self, share: Share, input_data: UpdateShareInput) -> ShareData:
        gateway = self._gateway

        if not input_data.permissions:
            raise bad_request("permissions missing")
        try:
            value = int(input_data.permissions)
        except ValueError:
            raise bad_request(
                f"permissions must be an integer: {input_data.permissions!r}"
            ) from None
        try:
            permissions = new_permissions(value)
        except PermissionsRangeError as exc:
            raise bad_request(str(exc)) from exc

        try:
            update_res = gateway.update_share(share.id, as_cs3_permissions(permissions))
        except GatewayError as exc:
            raise server_error(
                f"error sending a grpc update share request: {exc.message}"
            ) from exc
        if update_res.status.not_found:
            raise not_found("not found")
        if not update_res.status.ok:
            raise server_error(f"grpc update share request failed: {update_res.status.message}")

        try:
            get_res = gateway.get_share(share.id)
        except GatewayError as exc:
            raise server_error(
                f"error sending a grpc get share request: {exc.message}"
            ) from exc
        if get_res.status.not_found:
            raise not_found("not found")
        if not get_res.status.ok or get_res.value is None:
            raise server_error(f"grpc get share request failed: {get_res.status.message}")
        updated = get_res.value

        try:
            sd = user_share_to_share_data(gateway, updated)
        except ShareMappingError as exc:
            raise server_error(f"error mapping share data: {exc}") from exc

        try:
            stat_res = gateway.stat(updated.resource_id)
        except GatewayError as exc:
            logger.debug("error during stat", extra={"share_id": share.id})
            raise server_error(
                f"error getting resource information: {exc.message}"
            ) from exc
        if stat_res.status.not_found:
            raise not_found("update user share: resource not found")
        if not stat_res.status.ok:
            raise server_error(
                "grpc stat request failed for stat after updating user share: "
                f"{stat_res.status.message}"
            )

        try:
            add_file_info(gateway, sd, stat_res.value)
        except ShareMappingError as exc:
            raise server_error(str(exc)) from exc
        return sd


def build_public_share_updates(
    share: PublicShare, input_data: UpdateShareInput
) -> List[PublicShareUpdate]:
    """
    Traduce el form a comandos de update, en orden fijo:
    display name, permissions, expiration, password.

    Raises:
        ShareFailure (BAD_REQUEST / NOT_FOUND)
    """
    updates: List[PublicShareUpdate] = []
    updates_found = False

    if input_data.name is not None:
        updates_found = True
        if input_data.name != share.display_name:
            updates.append(
                PublicShareUpdate(PublicShareField.DISPLAY_NAME, input_data.name)
            )

    try:
        permissions = permissions_from_form(
            input_data.public_upload, input_data.permissions
        )
    except PublicLinkPermissionError as exc:
        raise bad_request(f"invalid permissions: {exc}") from exc
    except UnknownPublicLinkPermission as exc:
        raise not_found(f"invalid permissions: {exc}") from exc

    if permissions is not None:
        updates_found = True
        if permissions != share.permissions:
            logger.info(
                "updating public link permissions", extra={"share_id": share.id}
            )
            updates.append(PublicShareUpdate(PublicShareField.PERMISSIONS, permissions))

    if input_data.expire_date is not None:
        updates_found = True
        expiration = None
        if input_data.expire_date:
            try:
                expiration = parse_timestamp(input_data.expire_date)
            except TimestampParseError as exc:
                raise bad_request(f"invalid datetime format: {exc}") from exc
        if expiration != share.expiration:
            updates.append(PublicShareUpdate(PublicShareField.EXPIRATION, expiration))

    if input_data.password is not None:
        updates_found = True
        logger.info("password updated", extra={"share_id": share.id})
        updates.append(PublicShareUpdate(PublicShareField.PASSWORD, input_data.password))

    if not updates_found:
        raise bad_request("No updates specified in request")
    return updates
