"""
===============================================================================
TARJETA CRC — domain/permissions.py (Modelo de permisos OCS)
===============================================================================

Responsabilidades:
  - Definir el bitmask OCS (Read/Write/Create/Delete/Share) como enum cerrado.
  - Validar rangos: 0 es inválido (distinto de "sin permisos pedidos").
  - Derivar roles a partir de bits y resolver la tabla de roles de public links.
  - Expandir permisos OCS al set de capacidades del gateway (ResourcePermissions)
    y hacer el camino inverso para renderizar.

Colaboradores:
  - application.usecases.shares.*: validan y mapean permisos de requests.
  - application.usecases.shares.share_mapper: calcula permisos OCS de una share.

Reglas:
  - contain() es un test de solapamiento (AND != 0), no de igualdad.
  - El rol arranca en legacy; Read => viewer; Write => editor; Share => coowner.
  - Create/Delete nunca cambian el rol derivado.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum, IntFlag


class Permissions(IntFlag):
    """Bitmask OCS de permisos sobre un recurso compartido."""

    INVALID = 0
    READ = 1
    WRITE = 2
    CREATE = 4
    DELETE = 8
    SHARE = 16
    ALL = READ | WRITE | CREATE | DELETE | SHARE


class Role(str, Enum):
    """Roles conocidos (shares completas y public links)."""

    LEGACY = "legacy"
    VIEWER = "viewer"
    EDITOR = "editor"
    COOWNER = "coowner"
    UPLOADER = "uploader"
    CONTRIBUTOR = "contributor"


class PermissionsRangeError(ValueError):
    """
    Valor de permisos fuera de [1, ALL].

    out_of_range distingue "negativo o mayor a ALL" del caso especial 0.
    """

    def __init__(self, message: str, *, out_of_range: bool):
        super().__init__(message)
        self.out_of_range = out_of_range


class UnknownPublicLinkPermission(KeyError):
    """La clave entera de permisos de public link no está en la tabla."""

    def __init__(self, key: int):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"role to permKey {self.key} not found"


class UnknownRoleError(ValueError):
    """El rol no tiene mapeo conocido a capacidades."""


# Tabla fija de claves legacy de public links (oc10).
PUBLIC_LINK_ROLES: dict[int, Role] = {
    1: Role.VIEWER,
    15: Role.EDITOR,
    4: Role.UPLOADER,
    5: Role.CONTRIBUTOR,
}

# Bits asociados a cada rol cuando el cliente manda `role` en vez de `permissions`.
ROLE_PERMISSIONS: dict[Role, Permissions] = {
    Role.LEGACY: Permissions.READ,
    Role.VIEWER: Permissions.READ,
    Role.EDITOR: Permissions.READ
    | Permissions.WRITE
    | Permissions.CREATE
    | Permissions.DELETE,
    Role.COOWNER: Permissions.ALL,
    Role.UPLOADER: Permissions.CREATE,
    Role.CONTRIBUTOR: Permissions.READ | Permissions.CREATE,
}


def new_permissions(value: int) -> Permissions:
    """
    Construye Permissions validando el rango.

    Raises:
        PermissionsRangeError: si value == 0 o si value está fuera de [0, ALL].
    """
    if value == 0:
        raise PermissionsRangeError(
            f"permissions {value} out of range {int(Permissions.READ)} - "
            f"{int(Permissions.ALL)}",
            out_of_range=False,
        )
    if value < 0 or value > int(Permissions.ALL):
        raise PermissionsRangeError(
            "the provided permission is not between 0 and 31", out_of_range=True
        )
    return Permissions(value)


def contain(p: Permissions | int, other: Permissions | int) -> bool:
    return int(p) & int(other) != 0


def permissions_to_role(p: Permissions | int) -> Role:
    role = Role.LEGACY
    if contain(p, Permissions.READ):
        role = Role.VIEWER
    if contain(p, Permissions.WRITE):
        role = Role.EDITOR
    if contain(p, Permissions.SHARE):
        role = Role.COOWNER
    return role


def public_link_role(key: int) -> Role:
    try:
        return PUBLIC_LINK_ROLES[key]
    except KeyError:
        raise UnknownPublicLinkPermission(key) from None


def role_from_name(name: str) -> Role:
    try:
        return Role(name)
    except ValueError:
        raise UnknownRoleError(f"unknown role {name!r}") from None


def strip_file_permissions(p: Permissions) -> Permissions:
    """Una share de archivo único nunca lleva Create ni Delete."""
    return p & ~(Permissions.CREATE | Permissions.DELETE)


@dataclass(frozen=True)
class ResourcePermissions:
    """Set de capacidades fino que entiende el gateway."""

    add_grant: bool = False
    create_container: bool = False
    delete: bool = False
    get_path: bool = False
    get_quota: bool = False
    initiate_file_download: bool = False
    initiate_file_upload: bool = False
    list_grants: bool = False
    list_container: bool = False
    list_file_versions: bool = False
    list_recycle: bool = False
    move: bool = False
    remove_grant: bool = False
    purge_recycle: bool = False
    restore_file_version: bool = False
    restore_recycle_item: bool = False
    stat: bool = False
    update_grant: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, raw: dict | None) -> "ResourcePermissions":
        raw = raw or {}
        return cls(**{f.name: bool(raw.get(f.name, False)) for f in fields(cls)})


_READ_CAPABILITIES = {
    "list_container": True,
    "list_grants": True,
    "list_file_versions": True,
    "list_recycle": True,
    "stat": True,
    "get_path": True,
    "get_quota": True,
    "initiate_file_download": True,
}

_SHARE_CAPABILITIES = {"add_grant": True, "remove_grant": True, "update_grant": True}


def as_cs3_permissions(
    p: Permissions | int, existing: ResourcePermissions | None = None
) -> ResourcePermissions:
    """
    Expande bits OCS sobre un set existente (solo agrega, nunca quita).

    Create implica upload; move solo si además hay Write.
    """
    rp = existing or ResourcePermissions()
    changes: dict[str, bool] = {}

    if contain(p, Permissions.READ):
        changes.update(_READ_CAPABILITIES)
    if contain(p, Permissions.WRITE):
        changes.update(
            initiate_file_upload=True,
            restore_file_version=True,
            restore_recycle_item=True,
        )
    if contain(p, Permissions.CREATE):
        changes.update(create_container=True, initiate_file_upload=True)
        if contain(p, Permissions.WRITE):
            changes["move"] = True
    if contain(p, Permissions.DELETE):
        changes.update(delete=True, purge_recycle=True)
    if contain(p, Permissions.SHARE):
        changes.update(_SHARE_CAPABILITIES)

    return replace(rp, **changes)


def map_to_cs3_permissions(role: Role | str, p: Permissions | int) -> ResourcePermissions:
    """
    Mapeo basado en rol (public links y shares federadas).

    Raises:
        UnknownRoleError: si role no pertenece al enum Role.
    """
    if not isinstance(role, Role):
        role = role_from_name(role)

    has_read = contain(p, Permissions.READ)
    has_write = contain(p, Permissions.WRITE)
    has_delete = contain(p, Permissions.DELETE)
    has_share = contain(p, Permissions.SHARE)

    return ResourcePermissions(
        list_container=has_read,
        list_grants=has_read,
        list_file_versions=has_read,
        list_recycle=has_read,
        stat=has_read,
        get_path=has_read,
        get_quota=has_read,
        initiate_file_download=has_read,
        move=has_write,
        initiate_file_upload=has_write,
        create_container=contain(p, Permissions.CREATE),
        delete=has_delete,
        restore_file_version=has_write,
        restore_recycle_item=has_write,
        purge_recycle=has_delete,
        add_grant=has_share,
        remove_grant=has_share,
        update_grant=has_share,
    )


def public_link_permissions(key: int) -> ResourcePermissions:
    """
    Capacidades para una clave legacy de public link (1/15/4/5).

    Raises:
        UnknownPublicLinkPermission: clave fuera de la tabla.
    """
    role = public_link_role(key)
    return map_to_cs3_permissions(role, new_permissions(key))


def from_cs3_permissions(rp: ResourcePermissions | None) -> Permissions:
    """Camino inverso (capacidades -> bits OCS) usado al renderizar."""
    p = Permissions.INVALID
    if rp is None:
        return p
    if rp.list_container:
        p |= Permissions.READ
    if rp.initiate_file_upload:
        p |= Permissions.WRITE
    if rp.create_container:
        p |= Permissions.CREATE
    if rp.delete:
        p |= Permissions.DELETE
    if rp.add_grant:
        p |= Permissions.SHARE
    return p
