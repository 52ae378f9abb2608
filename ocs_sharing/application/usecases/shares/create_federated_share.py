"""
===============================================================================
USE CASE: Create Federated (OCM) Share
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateFederatedShareUseCase

Responsibilities:
    - Validar shareWithUser + shareWithProvider.
    - Resolver provider por dominio y el usuario remoto.
    - Permisos: default READ/viewer; explícitos validados por bitmask.
    - Mapeo por rol; si el rol no se conoce, fallback bit a bit (con warning).
    - Enviar permisos y nombre del recurso como metadata opaca.

Collaborators:
    - GatewayClient: get_home, get_info_by_domain, get_remote_user, stat,
      create_ocm_share
    - domain.permissions

Error Mapping:
    - BAD_REQUEST: parámetros faltantes, permissions inválidos.
    - NOT_FOUND: usuario remoto inexistente, recurso inexistente, create NOT_FOUND.
    - SERVER_ERROR: transporte/status en home, provider, remote user, stat o create.
===============================================================================
"""

from __future__ import annotations

import json
import posixpath

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import OpaqueEntry, UserId
from ....domain.permissions import (
    Permissions,
    PermissionsRangeError,
    ResourcePermissions,
    Role,
    UnknownRoleError,
    as_cs3_permissions,
    map_to_cs3_permissions,
    new_permissions,
    permissions_to_role,
)
from ....domain.services import GatewayClient
from .create_share_input import CreateShareInput
from .gateway_steps import home_path, resolve_home, stat_resource
from .share_results import (
    ShareActionResult,
    ShareFailure,
    bad_request,
    not_found,
    server_error,
)

OCM_SHARE_CREATED = "OCM Share created"


def federated_resource_permissions(
    role: Role | str, permissions: Permissions
) -> ResourcePermissions:
    """Mapeo por rol; un rol sin mapeo cae al mapeo bit a bit (con warning)."""
    try:
        return map_to_cs3_permissions(role, permissions)
    except UnknownRoleError:
        logger.warning(
            "unknown role, mapping legacy permissions", extra={"role": str(role)}
        )
        return as_cs3_permissions(permissions)


class CreateFederatedShareUseCase:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def execute(self, input_data: CreateShareInput) -> ShareActionResult:
        try:
            self._create(input_data)
        except ShareFailure as failure:
            return ShareActionResult(error=failure.error)
        return ShareActionResult(data=OCM_SHARE_CREATED)

    def _create(self, input_data: CreateShareInput) -> None:
        gateway = self._gateway
        home = resolve_home(gateway)

        share_with_user = input_data.share_with_user
        share_with_provider = input_data.share_with_provider
        if not share_with_user or not share_with_provider:
            raise bad_request("missing shareWith parameters")

        # 1) Provider + usuario remoto.
        try:
            provider_res = gateway.get_info_by_domain(share_with_provider)
        except GatewayError as exc:
            raise server_error(f"get info by domain: {exc.message}") from exc
        if not provider_res.status.ok or provider_res.value is None:
            raise server_error(f"get info by domain: {provider_res.status.message}")

        try:
            remote_res = gateway.get_remote_user(
                UserId(opaque_id=share_with_user, idp=share_with_provider)
            )
        except GatewayError as exc:
            raise server_error(f"get remote user: {exc.message}") from exc
        if not remote_res.status.ok or remote_res.value is None:
            raise not_found("user not found")

        # 2) Permisos (default: solo lectura / viewer).
        permissions, role = self._resolve_permissions(input_data.permissions)
        resource_permissions = federated_resource_permissions(role, permissions)

        # 3) Recurso.
        info = stat_resource(gateway, home_path(home, input_data.path))

        opaque = {
            "permissions": OpaqueEntry(
                decoder="json", value=json.dumps({"name": str(int(permissions))})
            ),
            "name": OpaqueEntry(decoder="plain", value=posixpath.basename(info.path)),
        }

        # 4) Crear share federada.
        try:
            create_res = gateway.create_ocm_share(
                info.id,
                remote_res.value.id,
                resource_permissions,
                provider_res.value,
                opaque,
            )
        except GatewayError as exc:
            raise server_error(f"create ocm share: {exc.message}") from exc
        if create_res.status.not_found:
            raise not_found("not found")
        if not create_res.status.ok:
            raise server_error(f"create ocm share: {create_res.status.message}")

    @staticmethod
    def _resolve_permissions(raw: str | None) -> tuple[Permissions, Role | str]:
        if not raw:
            return Permissions.READ, Role.VIEWER
        try:
            value = int(raw)
        except ValueError:
            raise bad_request(f"parse permissions: invalid integer {raw!r}") from None
        try:
            parsed = new_permissions(value)
        except PermissionsRangeError as exc:
            raise bad_request(f"new permissions: {exc}") from exc
        return parsed, permissions_to_role(parsed)
