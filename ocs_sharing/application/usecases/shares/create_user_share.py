"""
===============================================================================
USE CASE: Create User Share (colaboración directa)
===============================================================================

Business Goal:
    Compartir un recurso del home del caller con otro usuario local, con un
    rol o un bitmask de permisos OCS.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserShareUseCase

Responsibilities:
    - Resolver home, grantee (get_user) y recurso (stat).
    - Calcular permisos: role tiene prioridad; si no, permissions; si no, ALL/coowner.
    - Quitar Create/Delete en shares de archivo único.
    - Crear la share en una sola llamada (capacidades + rol como metadata opaca).
    - Mapear y enriquecer la respuesta (nunca éxito parcial).

Collaborators:
    - GatewayClient: get_home, get_user, stat, create_share (+ get_user del mapper)
    - domain.permissions
    - share_mapper: user_share_to_share_data, add_file_info

-------------------------------------------------------------------------------
Error Mapping
-------------------------------------------------------------------------------
    - BAD_REQUEST: shareWith faltante, permissions no entero, role desconocido,
      permissions == 0.
    - NOT_FOUND: grantee inexistente, recurso inexistente, permissions fuera
      de rango (quirk legacy), create NOT_FOUND.
    - SERVER_ERROR: home, transporte en get_user/stat/create, stat no-OK,
      mapeo/enriquecimiento.
===============================================================================
"""

from __future__ import annotations

import json

from ....crosscutting.exceptions import GatewayError
from ....domain.entities import OpaqueEntry, ResourceType, UserId
from ....domain.permissions import (
    ROLE_PERMISSIONS,
    Permissions,
    PermissionsRangeError,
    Role,
    UnknownRoleError,
    as_cs3_permissions,
    new_permissions,
    permissions_to_role,
    role_from_name,
    strip_file_permissions,
)
from ....domain.services import GatewayClient
from .create_share_input import CreateShareInput
from .gateway_steps import home_path, resolve_home
from .share_mapper import ShareMappingError, add_file_info, user_share_to_share_data
from .share_results import (
    ShareActionResult,
    ShareFailure,
    bad_request,
    not_found,
    server_error,
)


def resolve_user_share_permissions(
    role: str, permissions: str | None
) -> tuple[Permissions, Role]:
    """
    Intención de permisos de una user share.

    Raises:
        ShareFailure
    """
    if role:
        try:
            parsed_role = role_from_name(role)
        except UnknownRoleError as exc:
            raise bad_request(str(exc)) from exc
        return ROLE_PERMISSIONS[parsed_role], parsed_role

    if not permissions:
        return Permissions.ALL, Role.COOWNER

    try:
        value = int(permissions)
    except ValueError:
        raise bad_request("permissions must be an integer") from None

    try:
        parsed = new_permissions(value)
    except PermissionsRangeError as exc:
        if exc.out_of_range:
            raise not_found(str(exc)) from exc
        raise bad_request(str(exc)) from exc
    return parsed, permissions_to_role(parsed)


class CreateUserShareUseCase:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def execute(self, input_data: CreateShareInput) -> ShareActionResult:
        try:
            return ShareActionResult(data=self._create(input_data))
        except ShareFailure as failure:
            return ShareActionResult(error=failure.error)

    def _create(self, input_data: CreateShareInput):
        gateway = self._gateway

        # 1) Home del caller (paths OCS son relativos al home).
        home = resolve_home(gateway)

        # 2) Grantee.
        if not input_data.share_with:
            raise bad_request("missing shareWith")

        try:
            user_res = gateway.get_user(UserId(opaque_id=input_data.share_with))
        except GatewayError as exc:
            raise server_error(f"get user: {exc.message}") from exc
        if not user_res.status.ok or user_res.value is None:
            raise not_found("user not found")
        grantee = user_res.value

        # 3) Recurso.
        try:
            stat_res = gateway.stat(home_path(home, input_data.path))
        except GatewayError as exc:
            raise server_error(f"stat: {exc.message}") from exc

        # 4) Permisos (role > permissions > default coowner).
        permissions, role = resolve_user_share_permissions(
            input_data.role, input_data.permissions
        )

        if stat_res.status.not_found:
            raise not_found("not found")
        if not stat_res.status.ok or stat_res.value is None:
            raise server_error(f"stat: {stat_res.status.message}")
        info = stat_res.value

        # Una share de archivo único nunca lleva Create/Delete.
        if info.type == ResourceType.FILE:
            permissions = strip_file_permissions(permissions)

        # 5) Crear share (capacidades + rol como metadata opaca).
        opaque = {
            "role": OpaqueEntry(decoder="json", value=json.dumps({"name": role.value}))
        }
        try:
            create_res = gateway.create_share(
                info, grantee.id, as_cs3_permissions(permissions), opaque
            )
        except GatewayError as exc:
            raise server_error(f"create share: {exc.message}") from exc
        if create_res.status.not_found:
            raise not_found("not found")
        if not create_res.status.ok or create_res.value is None:
            raise server_error(f"create share: {create_res.status.message}")

        # 6) Mapear + enriquecer.
        try:
            sd = user_share_to_share_data(gateway, create_res.value)
        except ShareMappingError as exc:
            raise server_error(f"map user share to share data: {exc}") from exc
        try:
            add_file_info(gateway, sd, info)
        except ShareMappingError as exc:
            raise server_error(f"add file info: {exc}") from exc

        return sd
