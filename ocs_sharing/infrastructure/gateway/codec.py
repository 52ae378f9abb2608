"""
===============================================================================
TARJETA CRC — infrastructure/gateway/codec.py
===============================================================================

Módulo:
    Adaptadores protobuf del gateway (entidades de dominio <-> mensajes CS3)

Responsabilidades:
    - Construir los mensajes CS3 (ResourceId, Reference, grants, updates) a
      partir de entidades de dominio.
    - Convertir los mensajes de respuesta en entidades de dominio.
    - Mantener el mapeo de campos en UN solo lugar: el cliente gRPC solo arma
      requests y delega aquí.

Colaboradores:
    - cs3apis (stubs publicados de CS3 APIs)
    - domain.entities / domain.permissions
    - infrastructure.gateway.grpc_gateway_client

Reglas:
    - Timestamps viajan como cs3.types.v1beta1.Timestamp (segundos).
    - Una respuesta sin un sub-mensaje obligatorio levanta CodecError (el
      cliente lo convierte en GatewayError).
===============================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeVar

from cs3.identity.user.v1beta1 import resources_pb2 as identity_res
from cs3.ocm.provider.v1beta1 import resources_pb2 as ocm_provider_res
from cs3.rpc.v1beta1 import code_pb2
from cs3.sharing.collaboration.v1beta1 import resources_pb2 as collaboration_res
from cs3.sharing.link.v1beta1 import link_api_pb2
from cs3.sharing.link.v1beta1 import resources_pb2 as link_res
from cs3.sharing.ocm.v1beta1 import resources_pb2 as ocm_res
from cs3.storage.provider.v1beta1 import resources_pb2 as provider_res
from cs3.types.v1beta1 import types_pb2
from google.protobuf.json_format import MessageToDict
from google.protobuf.message import Message

from ...domain.entities import (
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
    User,
    UserId,
)
from ...domain.permissions import ResourcePermissions

T = TypeVar("T")

PublicUpdate = link_api_pb2.UpdatePublicShareRequest.Update

_UPDATE_TYPES = {
    PublicShareField.DISPLAY_NAME: PublicUpdate.TYPE_DISPLAYNAME,
    PublicShareField.PERMISSIONS: PublicUpdate.TYPE_PERMISSIONS,
    PublicShareField.EXPIRATION: PublicUpdate.TYPE_EXPIRATION,
    PublicShareField.PASSWORD: PublicUpdate.TYPE_PASSWORD,
}


class CodecError(ValueError):
    """Respuesta del gateway que no respeta el contrato."""


def _require(message: Message, field: str) -> Any:
    if not message.HasField(field):
        raise CodecError(f"{type(message).__name__}.{field} is missing")
    return getattr(message, field)


# =============================================================================
# Encoders (dominio -> protobuf)
# =============================================================================


def encode_user_id(user_id: UserId) -> identity_res.UserId:
    return identity_res.UserId(idp=user_id.idp, opaque_id=user_id.opaque_id)


def encode_resource_id(resource_id: ResourceId) -> provider_res.ResourceId:
    return provider_res.ResourceId(
        storage_id=resource_id.storage_id, opaque_id=resource_id.opaque_id
    )


def encode_reference(ref: str | ResourceId) -> provider_res.Reference:
    if isinstance(ref, ResourceId):
        return provider_res.Reference(resource_id=encode_resource_id(ref))
    return provider_res.Reference(path=ref)


def encode_share_reference(share_id: str) -> collaboration_res.ShareReference:
    return collaboration_res.ShareReference(
        id=collaboration_res.ShareId(opaque_id=share_id)
    )


def encode_public_share_reference(share_id: str) -> link_res.PublicShareReference:
    return link_res.PublicShareReference(id=link_res.PublicShareId(opaque_id=share_id))


def encode_ocm_share_reference(share_id: str) -> ocm_res.ShareReference:
    return ocm_res.ShareReference(id=ocm_res.ShareId(opaque_id=share_id))


def encode_timestamp(seconds: int) -> types_pb2.Timestamp:
    return types_pb2.Timestamp(seconds=int(seconds))


def encode_permissions(
    permissions: ResourcePermissions,
) -> provider_res.ResourcePermissions:
    return provider_res.ResourcePermissions(**permissions.to_dict())


def encode_resource_info(info: ResourceInfo) -> provider_res.ResourceInfo:
    message = provider_res.ResourceInfo(
        id=encode_resource_id(info.id),
        path=info.path,
        type=int(info.type),
        mime_type=info.mime_type,
        arbitrary_metadata=provider_res.ArbitraryMetadata(
            metadata=dict(info.arbitrary_metadata)
        ),
    )
    if info.owner is not None:
        message.owner.CopyFrom(encode_user_id(info.owner))
    return message


def encode_opaque(opaque: dict[str, OpaqueEntry] | None) -> types_pb2.Opaque | None:
    if not opaque:
        return None
    message = types_pb2.Opaque()
    for key, entry in opaque.items():
        message.map[key].decoder = entry.decoder
        message.map[key].value = entry.value.encode("utf-8")
    return message


def add_resource_filters(container: Any, filters: Iterable[ShareFilter]) -> None:
    """Agrega filtros TYPE_RESOURCE_ID al campo repetido `filters` de un request."""
    for item in filters:
        entry = container.add()
        entry.type = entry.TYPE_RESOURCE_ID
        entry.resource_id.CopyFrom(encode_resource_id(item.resource_id))


def encode_user_grantee(user_id: UserId) -> provider_res.Grantee:
    return provider_res.Grantee(
        type=provider_res.GRANTEE_TYPE_USER, user_id=encode_user_id(user_id)
    )


def encode_user_grant(
    grantee: UserId, permissions: ResourcePermissions
) -> collaboration_res.ShareGrant:
    return collaboration_res.ShareGrant(
        grantee=encode_user_grantee(grantee),
        permissions=collaboration_res.SharePermissions(
            permissions=encode_permissions(permissions)
        ),
    )


def encode_public_grant(
    permissions: ResourcePermissions | None = None,
    password: str | None = None,
    expiration: int | None = None,
) -> link_res.Grant:
    grant = link_res.Grant()
    if permissions is not None:
        grant.permissions.permissions.CopyFrom(encode_permissions(permissions))
    if password is not None:
        grant.password = password
    if expiration is not None:
        grant.expiration.CopyFrom(encode_timestamp(expiration))
    return grant


def encode_public_share_update(update: PublicShareUpdate) -> PublicUpdate:
    message = PublicUpdate(type=_UPDATE_TYPES[update.kind])
    if update.kind == PublicShareField.DISPLAY_NAME:
        message.display_name = update.value or ""
    elif update.kind == PublicShareField.PERMISSIONS:
        message.grant.CopyFrom(encode_public_grant(permissions=update.value))
    elif update.kind == PublicShareField.EXPIRATION:
        # Grant sin expiration => limpiar
        message.grant.CopyFrom(encode_public_grant(expiration=update.value))
    else:
        message.grant.CopyFrom(encode_public_grant(password=update.value or ""))
    return message


def encode_ocm_access_methods(
    permissions: ResourcePermissions,
) -> list[ocm_res.AccessMethod]:
    return [
        ocm_res.AccessMethod(
            webdav_options=ocm_res.WebDAVAccessMethod(
                permissions=encode_permissions(permissions)
            )
        )
    ]


def encode_provider_info(provider: ProviderInfo) -> ocm_provider_res.ProviderInfo:
    return ocm_provider_res.ProviderInfo(
        domain=provider.domain, name=provider.name, full_name=provider.full_name
    )


def encode_share_state(state: ShareState) -> int:
    return collaboration_res.ShareState.Value(state.value)


# =============================================================================
# Decoders (protobuf -> dominio)
# =============================================================================


def decode_status(response: Message) -> RpcStatus:
    status = response.status
    try:
        rpc_code = RpcCode(code_pb2.Code.Name(status.code))
    except ValueError:
        rpc_code = RpcCode.UNKNOWN
    return RpcStatus(code=rpc_code, message=status.message)


def decode_result(
    response: Message,
    field: str | None,
    decoder: Callable[[Any], T] | None = None,
) -> RpcResult[T]:
    """Status + (si OK) el campo `field` decodificado."""
    status = decode_status(response)
    if not status.ok or field is None:
        return RpcResult(status=status)
    try:
        present = response.HasField(field)
    except ValueError:
        # campos repetidos y escalares no tienen presencia
        present = True
    if not present:
        return RpcResult(status=status)
    raw = getattr(response, field)
    try:
        value = decoder(raw) if decoder else raw
    except (KeyError, TypeError, ValueError) as exc:
        raise CodecError(f"invalid {field} in gateway response: {exc}") from exc
    return RpcResult(status=status, value=value)


def decode_list(decoder: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def _decode(raw: Iterable[Any]) -> list[T]:
        return [decoder(item) for item in raw]

    return _decode


def decode_user_id(message: identity_res.UserId) -> UserId:
    return UserId(opaque_id=message.opaque_id, idp=message.idp)


def _optional_user_id(parent: Message, field: str) -> Optional[UserId]:
    if not parent.HasField(field):
        return None
    return decode_user_id(getattr(parent, field))


def decode_resource_id(message: provider_res.ResourceId) -> ResourceId:
    return ResourceId(storage_id=message.storage_id, opaque_id=message.opaque_id)


def _seconds(parent: Message, field: str) -> int | None:
    if not parent.HasField(field):
        return None
    return int(getattr(parent, field).seconds)


def decode_permissions(
    message: provider_res.ResourcePermissions,
) -> ResourcePermissions:
    return ResourcePermissions.from_dict(
        MessageToDict(message, preserving_proto_field_name=True)
    )


def _wrapped_permissions(parent: Message) -> ResourcePermissions | None:
    # SharePermissions / PublicSharePermissions envuelven ResourcePermissions
    if not parent.HasField("permissions"):
        return None
    return decode_permissions(parent.permissions.permissions)


def _resource_type(value: int) -> ResourceType:
    try:
        return ResourceType(value)
    except ValueError:
        return ResourceType.INVALID


def decode_resource_info(message: provider_res.ResourceInfo) -> ResourceInfo:
    return ResourceInfo(
        id=decode_resource_id(_require(message, "id")),
        path=message.path,
        type=_resource_type(message.type),
        mime_type=message.mime_type,
        owner=_optional_user_id(message, "owner"),
        arbitrary_metadata=dict(message.arbitrary_metadata.metadata),
    )


def decode_user(message: identity_res.User) -> User:
    return User(
        id=decode_user_id(message.id),
        username=message.username,
        display_name=message.display_name,
        mail=message.mail,
    )


def decode_provider_info(message: ocm_provider_res.ProviderInfo) -> ProviderInfo:
    return ProviderInfo(
        domain=message.domain, name=message.name, full_name=message.full_name
    )


def decode_share(message: collaboration_res.Share) -> Share:
    return Share(
        id=message.id.opaque_id,
        resource_id=decode_resource_id(_require(message, "resource_id")),
        grantee=decode_user_id(message.grantee.user_id),
        owner=decode_user_id(message.owner),
        creator=decode_user_id(message.creator),
        permissions=_wrapped_permissions(message),
        ctime=_seconds(message, "ctime") or 0,
        mtime=_seconds(message, "mtime") or 0,
    )


def decode_received_share(message: collaboration_res.ReceivedShare) -> ReceivedShare:
    try:
        state = ShareState(collaboration_res.ShareState.Name(message.state))
    except ValueError:
        state = ShareState.INVALID
    return ReceivedShare(share=decode_share(_require(message, "share")), state=state)


def decode_public_share(message: link_res.PublicShare) -> PublicShare:
    return PublicShare(
        id=message.id.opaque_id,
        token=message.token,
        resource_id=decode_resource_id(_require(message, "resource_id")),
        owner=decode_user_id(message.owner),
        creator=decode_user_id(message.creator),
        permissions=_wrapped_permissions(message),
        password_protected=message.password_protected,
        expiration=_seconds(message, "expiration"),
        display_name=message.display_name,
        ctime=_seconds(message, "ctime") or 0,
        mtime=_seconds(message, "mtime") or 0,
    )


def _ocm_permissions(message: ocm_res.Share) -> ResourcePermissions | None:
    for method in message.access_methods:
        if method.HasField("webdav_options"):
            return decode_permissions(method.webdav_options.permissions)
    return None


def decode_ocm_share(message: ocm_res.Share) -> OcmShare:
    return OcmShare(
        id=message.id.opaque_id,
        resource_id=decode_resource_id(_require(message, "resource_id")),
        name=message.name,
        grantee=decode_user_id(message.grantee.user_id),
        owner=decode_user_id(message.owner),
        creator=decode_user_id(message.creator),
        permissions=_ocm_permissions(message),
        ctime=_seconds(message, "ctime") or 0,
        mtime=_seconds(message, "mtime") or 0,
    )
