"""
===============================================================================
TARJETA CRC — application/usecases/shares/share_mapper.py
===============================================================================

Módulo:
    Share Data Mapper (registros del gateway -> ShareData OCS)

Responsabilidades:
    - Convertir user shares y public links del gateway en ShareData.
    - Resolver nombres visibles (creator/owner/grantee) vía get_user.
    - Enriquecer con metadata del recurso (path, item_type, mimetype, ids).
    - Redactar el grantee de public links protegidos con password.
    - Parsear y formatear timestamps del contrato OCS.

Colaboradores:
    - domain.services.GatewayClient (get_user)
    - domain.permissions.from_cs3_permissions
    - crosscutting.logger

Reglas:
    - Cualquier falla de lookup de identidad es un error (ShareMappingError):
      nunca se devuelve una ShareData con nombres vacíos por falla.
    - Sin cache: cada share dispara sus propios lookups.
===============================================================================
"""

from __future__ import annotations

import base64
import posixpath
import re
from datetime import date, datetime, timezone

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import (
    PublicShare,
    ResourceId,
    ResourceInfo,
    Share,
    ShareType,
    UserId,
)
from ....domain.permissions import from_cs3_permissions
from ....domain.services import GatewayClient
from ....domain.share_data import REDACTED, ShareData

EXPIRATION_FORMAT = "%Y-%m-%d %H:%M:%S"

# 2006-01-02T15:04:05Z0700 (offset opcional: Z, +0100, -0300)
_FULL_TIMESTAMP = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(Z|[+-]\d{4})$"
)
_MEDIA_TYPE = re.compile(r"^[\w!#$&^.+-]+/[\w!#$&^.+-]+$")


class ShareMappingError(Exception):
    """Falla al construir o enriquecer una ShareData."""


class TimestampParseError(ValueError):
    pass


# =============================================================================
# Helpers puros
# =============================================================================


def user_id_to_string(user_id: UserId | None) -> str:
    if user_id is None or not user_id.opaque_id:
        return ""
    return user_id.opaque_id


def wrap_resource_id(resource_id: ResourceId) -> str:
    """Encoding url/xml-safe de "storage:opaque" (item_source / file_source)."""
    raw = f"{resource_id.storage_id}:{resource_id.opaque_id}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def parse_timestamp(value: str) -> int:
    """
    Parsea una expiración OCS a segundos UNIX.

    Formatos aceptados:
      - YYYY-MM-DDTHH:MM:SS con Z o ±HHMM
      - YYYY-MM-DD (medianoche UTC)

    Raises:
        TimestampParseError
    """
    text = (value or "").strip()
    match = _FULL_TIMESTAMP.match(text)
    if match:
        year, month, day, hour, minute, second, zone = match.groups()
        fmt_zone = "+0000" if zone == "Z" else zone
        try:
            parsed = datetime.strptime(
                f"{year}-{month}-{day}T{hour}:{minute}:{second}{fmt_zone}",
                "%Y-%m-%dT%H:%M:%S%z",
            )
        except ValueError as exc:
            raise TimestampParseError(f"time parse failed: {exc}") from exc
        return int(parsed.timestamp())

    try:
        parsed_date = date.fromisoformat(text)
    except ValueError as exc:
        raise TimestampParseError(f"time parse failed: {value!r}") from exc
    midnight = datetime(
        parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=timezone.utc
    )
    return int(midnight.timestamp())


def format_expiration(seconds: int | None) -> str:
    if seconds is None:
        return ""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(
        EXPIRATION_FORMAT
    )


def _parse_media_type(mime_type: str) -> str:
    media_type = (mime_type or "").split(";", 1)[0].strip().lower()
    if not _MEDIA_TYPE.match(media_type):
        logger.warning("failed to parse mimetype", extra={"mimetype": mime_type})
        return ""
    return media_type


def public_link_url(public_url: str, token: str) -> str:
    return public_url + posixpath.join("/", "#/s/" + token)


# =============================================================================
# Lookups de identidad
# =============================================================================


def _display_name(gateway: GatewayClient, user_id: UserId, role: str) -> str:
    """get_user -> display_name; cualquier falla aborta el mapeo."""
    try:
        res = gateway.get_user(user_id)
    except GatewayError as exc:
        raise ShareMappingError(f"could not look up {role}: {exc.message}") from exc

    if not res.status.ok or res.value is None:
        logger.error(
            f"could not look up {role}",
            extra={
                "user_idp": user_id.idp,
                "user_opaque_id": user_id.opaque_id,
                "code": res.status.code.value,
                "status_message": res.status.message,
            },
        )
        raise ShareMappingError(f"could not look up {role}")
    return res.value.display_name


# =============================================================================
# Mappers
# =============================================================================


def user_share_to_share_data(gateway: GatewayClient, share: Share) -> ShareData:
    """
    User share -> ShareData (resuelve creator, owner y grantee).

    Raises:
        ShareMappingError
    """
    sd = ShareData(
        permissions=int(from_cs3_permissions(share.permissions)),
        share_type=int(ShareType.USER),
    )

    if share.creator is not None:
        sd.displayname_owner = _display_name(gateway, share.creator, "creator")
        sd.uid_owner = user_id_to_string(share.creator)

    if share.owner is not None:
        sd.displayname_file_owner = _display_name(gateway, share.owner, "owner")
        sd.uid_file_owner = user_id_to_string(share.owner)

    if share.grantee is not None:
        sd.share_with_displayname = _display_name(gateway, share.grantee, "grantee")
        sd.share_with = user_id_to_string(share.grantee)

    if share.id:
        sd.id = share.id
    sd.stime = share.ctime
    return sd


def public_share_to_share_data(share: PublicShare, public_url: str) -> ShareData:
    """Public link -> ShareData. No hace lookups; el password nunca se expone."""
    share_with = REDACTED if share.password_protected else ""

    return ShareData(
        id=share.id,
        share_type=int(ShareType.PUBLIC_LINK),
        share_with=share_with,
        share_with_displayname=share_with,
        stime=share.ctime,
        token=share.token,
        expiration=format_expiration(share.expiration),
        name=share.display_name,
        mail_send=0,
        url=public_link_url(public_url, share.token),
        permissions=int(from_cs3_permissions(share.permissions)),
        uid_owner=user_id_to_string(share.creator),
        uid_file_owner=user_id_to_string(share.owner),
    )


def add_file_info(
    gateway: GatewayClient, sd: ShareData, info: ResourceInfo | None
) -> None:
    """
    Enriquece sd con la metadata del recurso.

    Si owner/file owner todavía no están resueltos, se completan desde
    info.owner (con lookup de display name).

    Raises:
        ShareMappingError
    """
    if info is None:
        return

    sd.mimetype = _parse_media_type(info.mime_type)
    sd.storage_id = info.id.storage_id
    sd.item_source = wrap_resource_id(info.id)
    sd.file_source = sd.item_source
    sd.file_target = posixpath.join("/", posixpath.basename(info.path))
    sd.path = sd.file_target
    sd.item_type = info.type.ocs_name

    if not sd.uid_file_owner:
        sd.uid_file_owner = user_id_to_string(info.owner)
    if not sd.displayname_file_owner and info.owner is not None:
        sd.displayname_file_owner = _display_name(gateway, info.owner, "file owner")

    if not sd.uid_owner:
        sd.uid_owner = user_id_to_string(info.owner)
    if not sd.displayname_owner and info.owner is not None:
        sd.displayname_owner = _display_name(gateway, info.owner, "share owner")
