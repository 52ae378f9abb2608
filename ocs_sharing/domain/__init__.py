"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el "surface area" del dominio.

Colaboradores:
    - domain.permissions: bitmask OCS, roles y capacidades del gateway
    - domain.entities: registros del gateway (shares, recursos, usuarios)
    - domain.share_data: registro OCS unificado
    - domain.services: puerto GatewayClient

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    OcmShare,
    OpaqueEntry,
    ProviderInfo,
    PublicShare,
    PublicShareField,
    PublicShareUpdate,
    ReceivedShare,
    ResourceId,
    ResourceInfo,
    ResourceType,
    RpcCode,
    RpcResult,
    RpcStatus,
    Share,
    ShareFilter,
    ShareState,
    ShareType,
    User,
    UserId,
)
from .permissions import (
    Permissions,
    PermissionsRangeError,
    ResourcePermissions,
    Role,
    UnknownPublicLinkPermission,
    UnknownRoleError,
)
from .services import GatewayClient
from .share_data import REDACTED, ShareData

__all__ = [
    # Entities
    "OcmShare",
    "OpaqueEntry",
    "ProviderInfo",
    "PublicShare",
    "PublicShareField",
    "PublicShareUpdate",
    "ReceivedShare",
    "ResourceId",
    "ResourceInfo",
    "ResourceType",
    "RpcCode",
    "RpcResult",
    "RpcStatus",
    "Share",
    "ShareFilter",
    "ShareState",
    "ShareType",
    "User",
    "UserId",
    # Permissions
    "Permissions",
    "PermissionsRangeError",
    "ResourcePermissions",
    "Role",
    "UnknownPublicLinkPermission",
    "UnknownRoleError",
    # Ports
    "GatewayClient",
    # Share data
    "REDACTED",
    "ShareData",
]
