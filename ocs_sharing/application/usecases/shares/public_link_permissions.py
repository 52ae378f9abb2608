"""
===============================================================================
TARJETA CRC — application/usecases/shares/public_link_permissions.py
===============================================================================

Módulo:
    Resolución de permisos de public links desde el form

Responsabilidades:
    - Aplicar el orden de prioridad de la intención de permisos:
        1) publicUpload (bool legacy): true => clave 15, false => clave 1
        2) permissions (entero)
        3) ninguno => None (el caller decide el default, clave 1)
    - Traducir la clave legacy a capacidades vía domain.permissions.

Colaboradores:
    - domain.permissions (public_link_permissions, UnknownPublicLinkPermission)
    - create_public_share / update_share

Reglas:
    - publicUpload presente pisa a permissions, sea cual sea su valor.
    - Errores de parseo -> PublicLinkPermissionError.
    - Clave desconocida -> UnknownPublicLinkPermission (se clasifica NotFound).
===============================================================================
"""

from __future__ import annotations

from ....domain.permissions import ResourcePermissions, public_link_permissions

DEFAULT_PUBLIC_LINK_KEY = 1
PUBLIC_UPLOAD_KEY = 15

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


class PublicLinkPermissionError(ValueError):
    """El form trae publicUpload/permissions con un valor no parseable."""


def parse_bool(value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def permission_key_from_form(
    public_upload: str | None, permissions: str | None
) -> int | None:
    """
    Devuelve la clave legacy pedida, o None si el form no expresa intención.

    Raises:
        PublicLinkPermissionError
    """
    if public_upload is not None:
        try:
            upload = parse_bool(public_upload)
        except ValueError as exc:
            raise PublicLinkPermissionError(
                f"parsing publicUploadFlag failed: {exc}"
            ) from exc
        return PUBLIC_UPLOAD_KEY if upload else DEFAULT_PUBLIC_LINK_KEY

    if permissions is None:
        return None

    try:
        return int(permissions)
    except ValueError as exc:
        raise PublicLinkPermissionError(
            f"parsing permissionsString failed: {permissions!r}"
        ) from exc


def permissions_from_form(
    public_upload: str | None, permissions: str | None
) -> ResourcePermissions | None:
    """
    Capacidades pedidas por el form (None si no hay intención explícita).

    Raises:
        PublicLinkPermissionError
        UnknownPublicLinkPermission
    """
    key = permission_key_from_form(public_upload, permissions)
    if key is None:
        return None
    return public_link_permissions(key)
