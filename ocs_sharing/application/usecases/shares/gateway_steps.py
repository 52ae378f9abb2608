"""
Pasos de gateway compartidos por varios casos de uso de shares.

Cada helper levanta ShareFailure (share_results) con el código que corresponde;
los use cases la capturan en execute().
"""

from __future__ import annotations

import posixpath

from ....crosscutting.exceptions import GatewayError
from ....domain.entities import ResourceId, ResourceInfo
from ....domain.services import GatewayClient
from .share_results import not_found, server_error


def resolve_home(gateway: GatewayClient) -> str:
    """Home del caller; todos los paths OCS son relativos a él."""
    try:
        res = gateway.get_home()
    except GatewayError as exc:
        raise server_error(f"get home: {exc.message}") from exc
    if not res.status.ok or res.value is None:
        raise server_error(f"get home: {res.status.message}")
    return res.value


def home_path(home: str, path: str) -> str:
    return posixpath.normpath(posixpath.join(home, (path or "").lstrip("/")))


def stat_resource(
    gateway: GatewayClient, ref: str | ResourceId, *, context: str = "stat"
) -> ResourceInfo:
    """
    Stat por path o resource id.

    NOT_FOUND -> not_found; transporte u otro status -> server_error.
    """
    try:
        res = gateway.stat(ref)
    except GatewayError as exc:
        raise server_error(f"{context}: {exc.message}") from exc
    if res.status.not_found:
        raise not_found("not found")
    if not res.status.ok or res.value is None:
        raise server_error(f"{context}: {res.status.message}")
    return res.value
