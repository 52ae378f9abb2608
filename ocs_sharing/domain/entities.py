"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del gateway de storage/sharing (vista de este servicio)

Responsabilidades:
    - Representar los registros que devuelve el gateway: recursos, usuarios,
      user shares, shares recibidas, public links y shares federadas (OCM).
    - Representar el resultado de una RPC (status + valor).
    - Representar comandos de actualización de public links (un campo por comando).

Colaboradores:
    - domain.services.GatewayClient: produce/consume estas entidades.
    - application.usecases.shares.*: orquestan y mapean.
    - infrastructure.gateway.codec: adapta hacia/desde mensajes protobuf CS3.

Reglas:
    - Este servicio NO persiste nada: todo vive en el gateway.
    - Timestamps en segundos UNIX (int).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Generic, TypeVar, Union

from .permissions import ResourcePermissions

T = TypeVar("T")


class RpcCode(str, Enum):
    """Subset de códigos de status del gateway que este servicio distingue."""

    OK = "CODE_OK"
    NOT_FOUND = "CODE_NOT_FOUND"
    INVALID_ARGUMENT = "CODE_INVALID_ARGUMENT"
    PERMISSION_DENIED = "CODE_PERMISSION_DENIED"
    ALREADY_EXISTS = "CODE_ALREADY_EXISTS"
    UNIMPLEMENTED = "CODE_UNIMPLEMENTED"
    INTERNAL = "CODE_INTERNAL"
    UNKNOWN = "CODE_UNKNOWN"


@dataclass(frozen=True)
class RpcStatus:
    code: RpcCode = RpcCode.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code == RpcCode.OK

    @property
    def not_found(self) -> bool:
        return self.code == RpcCode.NOT_FOUND


@dataclass
class RpcResult(Generic[T]):
    """
    Respuesta de una RPC del gateway.

    Contrato:
      - status.ok => value presente (salvo RPCs sin payload, ej. remove).
      - status no-ok => value es None.
    """

    status: RpcStatus = field(default_factory=RpcStatus)
    value: T | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "RpcResult[T]":
        return cls(status=RpcStatus(), value=value)

    @classmethod
    def error(cls, code: RpcCode, message: str = "") -> "RpcResult[T]":
        return cls(status=RpcStatus(code=code, message=message))


class ResourceType(IntEnum):
    INVALID = 0
    FILE = 1
    CONTAINER = 2
    REFERENCE = 3

    @property
    def ocs_name(self) -> str:
        """Nombre usado en `item_type`."""
        return _RESOURCE_TYPE_NAMES[self]


_RESOURCE_TYPE_NAMES = {
    ResourceType.INVALID: "invalid",
    ResourceType.FILE: "file",
    ResourceType.CONTAINER: "folder",
    ResourceType.REFERENCE: "reference",
}


class ShareType(IntEnum):
    USER = 0
    PUBLIC_LINK = 3
    FEDERATED_CLOUD_SHARE = 6


class ShareState(str, Enum):
    INVALID = "SHARE_STATE_INVALID"
    PENDING = "SHARE_STATE_PENDING"
    ACCEPTED = "SHARE_STATE_ACCEPTED"
    REJECTED = "SHARE_STATE_REJECTED"

    @property
    def ocs_code(self) -> int:
        """Código OCS: accepted=0, pending=1, rejected=2, otro=-1."""
        return _SHARE_STATE_CODES.get(self, -1)


_SHARE_STATE_CODES = {
    ShareState.ACCEPTED: 0,
    ShareState.PENDING: 1,
    ShareState.REJECTED: 2,
}


@dataclass(frozen=True)
class UserId:
    opaque_id: str
    idp: str = ""


@dataclass(frozen=True)
class User:
    id: UserId
    username: str = ""
    display_name: str = ""
    mail: str = ""


@dataclass(frozen=True)
class ResourceId:
    storage_id: str
    opaque_id: str


@dataclass
class ResourceInfo:
    id: ResourceId
    path: str
    type: ResourceType = ResourceType.INVALID
    mime_type: str = ""
    owner: UserId | None = None
    arbitrary_metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OpaqueEntry:
    """Metadata opaca adjunta a una RPC (decoder: json | plain)."""

    decoder: str
    value: str


@dataclass
class Share:
    """User share (colaboración directa)."""

    id: str
    resource_id: ResourceId
    grantee: UserId
    owner: UserId
    creator: UserId
    permissions: ResourcePermissions | None = None
    ctime: int = 0
    mtime: int = 0


@dataclass
class ReceivedShare:
    share: Share
    state: ShareState = ShareState.PENDING


@dataclass
class PublicShare:
    id: str
    token: str
    resource_id: ResourceId
    owner: UserId
    creator: UserId
    permissions: ResourcePermissions | None = None
    password_protected: bool = False
    expiration: int | None = None
    display_name: str = ""
    ctime: int = 0
    mtime: int = 0


@dataclass
class OcmShare:
    """Share federada (cross-domain)."""

    id: str
    resource_id: ResourceId
    name: str
    grantee: UserId
    owner: UserId
    creator: UserId
    permissions: ResourcePermissions | None = None
    ctime: int = 0
    mtime: int = 0


@dataclass(frozen=True)
class ProviderInfo:
    domain: str
    name: str = ""
    full_name: str = ""


@dataclass(frozen=True)
class ShareFilter:
    """Filtro de igualdad por resource id (listados)."""

    resource_id: ResourceId


class PublicShareField(str, Enum):
    DISPLAY_NAME = "display_name"
    PERMISSIONS = "permissions"
    EXPIRATION = "expiration"
    PASSWORD = "password"


PublicShareUpdateValue = Union[str, int, ResourcePermissions, None]


@dataclass(frozen=True)
class PublicShareUpdate:
    """
    Comando de actualización de un único campo de un public link.

    value:
      - DISPLAY_NAME / PASSWORD: str ("" limpia el password)
      - PERMISSIONS: ResourcePermissions
      - EXPIRATION: int (segundos) o None para limpiar
    """

    kind: PublicShareField
    value: PublicShareUpdateValue = None
