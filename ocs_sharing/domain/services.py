"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puerto del gateway de storage/sharing (Protocol)

Responsabilidades:
    - Definir el contrato que consumen los casos de uso de shares.
    - Aislar a application de la tecnología de transporte (gRPC, fake in-memory).

Colaboradores:
    - infrastructure/gateway/*: implementaciones concretas.
    - application/usecases/shares: consumen este puerto.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Status no-OK se devuelve en RpcResult.status (no es excepción).
    - Fallas de transporte se levantan como crosscutting.exceptions.GatewayError.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol

from .entities import (
    OcmShare,
    OpaqueEntry,
    ProviderInfo,
    PublicShare,
    PublicShareUpdate,
    ReceivedShare,
    ResourceId,
    ResourceInfo,
    RpcResult,
    Share,
    ShareFilter,
    ShareState,
    User,
    UserId,
)
from .permissions import ResourcePermissions


class GatewayClient(Protocol):
    """Contrato del gateway remoto (home/stat, identidad y tres familias de shares)."""

    # -- storage -------------------------------------------------------------

    def get_home(self) -> RpcResult[str]:
        """Path absoluto del home del usuario autenticado."""
        ...

    def stat(self, ref: str | ResourceId) -> RpcResult[ResourceInfo]:
        """Stat por path absoluto o por resource id."""
        ...

    # -- identidad -----------------------------------------------------------

    def get_user(self, user_id: UserId) -> RpcResult[User]: ...

    def get_remote_user(self, user_id: UserId) -> RpcResult[User]: ...

    def get_info_by_domain(self, domain: str) -> RpcResult[ProviderInfo]: ...

    # -- user shares ---------------------------------------------------------

    def create_share(
        self,
        resource_info: ResourceInfo,
        grantee: UserId,
        permissions: ResourcePermissions,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[Share]: ...

    def get_share(self, share_id: str) -> RpcResult[Share]: ...

    def list_shares(self, filters: list[ShareFilter]) -> RpcResult[list[Share]]: ...

    def update_share(
        self, share_id: str, permissions: ResourcePermissions
    ) -> RpcResult[Share]: ...

    def remove_share(self, share_id: str) -> RpcResult[None]: ...

    def list_received_shares(self) -> RpcResult[list[ReceivedShare]]: ...

    def update_received_share(
        self, share_id: str, state: ShareState
    ) -> RpcResult[ReceivedShare]: ...

    # -- public links --------------------------------------------------------

    def create_public_share(
        self,
        resource_info: ResourceInfo,
        permissions: ResourcePermissions,
        password: str = "",
        expiration: int | None = None,
    ) -> RpcResult[PublicShare]: ...

    def get_public_share(self, share_id: str) -> RpcResult[PublicShare]: ...

    def list_public_shares(
        self, filters: list[ShareFilter]
    ) -> RpcResult[list[PublicShare]]: ...

    def update_public_share(
        self, share_id: str, update: PublicShareUpdate
    ) -> RpcResult[PublicShare]: ...

    def remove_public_share(self, share_id: str) -> RpcResult[None]: ...

    # -- federadas (OCM) -----------------------------------------------------

    def create_ocm_share(
        self,
        resource_id: ResourceId,
        grantee: UserId,
        permissions: ResourcePermissions,
        provider: ProviderInfo,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[OcmShare]: ...

    def get_ocm_share(self, share_id: str) -> RpcResult[OcmShare]: ...

    def list_ocm_shares(self) -> RpcResult[list[OcmShare]]: ...
