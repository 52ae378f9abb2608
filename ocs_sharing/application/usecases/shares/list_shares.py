"""
===============================================================================
USE CASE: List Shares
===============================================================================

Business Goal:
    Listar shares desde dos perspectivas:
      - shared_with_me=true: shares que otros usuarios compartieron conmigo,
        con su estado (accepted/pending/rejected).
      - por defecto: shares que yo creé (user shares y luego public links),
        opcionalmente restringidas a un path.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListSharesUseCase

Responsibilities:
    - Decidir la perspectiva según shared_with_me (vacío => false).
    - Aceptar el filtro `state` sin aplicarlo (comportamiento conocido).
    - Construir el filtro por resource id cuando viene `path`.
    - Mapear y enriquecer CADA entrada (stat + lookups de identidad).
    - Abortar ante la primera falla: nunca listas parciales.

Collaborators:
    - GatewayClient: list_received_shares, list_shares, list_public_shares,
      get_home, stat
    - share_mapper

Error Mapping:
    - SERVER_ERROR: shared_with_me no parseable, fallas de received shares,
      path no resoluble, fallas de public links, mapeo/enriquecimiento.
    - NOT_FOUND: list_received_shares devuelve NOT_FOUND.
    - BAD_REQUEST: falla del listado de user shares (quirk legacy).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import ResourceId, ResourceInfo, ShareFilter
from ....domain.services import GatewayClient
from ....domain.share_data import ShareData
from .gateway_steps import home_path, resolve_home
from .public_link_permissions import parse_bool
from .share_mapper import (
    ShareMappingError,
    add_file_info,
    public_share_to_share_data,
    user_share_to_share_data,
)
from .share_results import (
    ShareFailure,
    ShareListResult,
    bad_request,
    not_found,
    server_error,
)

STATE_ALL = "all"


@dataclass(frozen=True)
class ListSharesInput:
    shared_with_me: str = ""
    state: str = ""
    path: str = ""


class ListSharesUseCase:
    def __init__(self, gateway: GatewayClient, public_url: str) -> None:
        self._gateway = gateway
        self._public_url = public_url

    def execute(self, input_data: ListSharesInput) -> ShareListResult:
        try:
            shared_with_me = _is_shared_with_me(input_data.shared_with_me)
            if shared_with_me:
                shares = self._shared_with_me(input_data.state)
            else:
                shares = self._shared_with_others(input_data.path)
        except ShareFailure as failure:
            return ShareListResult(error=failure.error)
        return ShareListResult(shares=shares)

    # -------------------------------------------------------------------------
    # Shared with me
    # -------------------------------------------------------------------------

    def _shared_with_me(self, state: str) -> List[ShareData]:
        # El filtro por estado se acepta pero no se aplica.
        if state and state != STATE_ALL:
            logger.debug("state filter not applied", extra={"state": state})

        gateway = self._gateway
        try:
            res = gateway.list_received_shares()
        except GatewayError as exc:
            raise server_error(f"list received shares: {exc.message}") from exc
        if res.status.not_found:
            raise not_found("not found")
        if not res.status.ok:
            raise server_error(f"list received shares: {res.status.message}")

        shares: List[ShareData] = []
        for received in res.value or []:
            info = self._stat_by_id(received.share.resource_id)
            try:
                sd = user_share_to_share_data(gateway, received.share)
                sd.state = received.state.ocs_code
                add_file_info(gateway, sd, info)
            except ShareMappingError as exc:
                raise server_error(str(exc)) from exc
            shares.append(sd)
        return shares

    # -------------------------------------------------------------------------
    # Shared with others
    # -------------------------------------------------------------------------

    def _shared_with_others(self, path: str) -> List[ShareData]:
        filters: List[ShareFilter] = []
        if path:
            filters = [ShareFilter(resource_id=self._resource_id_for(path))]

        try:
            user_shares = self._list_user_shares(filters)
        except ShareFailure as failure:
            raise bad_request(failure.error.message) from failure

        return user_shares + self._list_public_shares(filters)

    def _resource_id_for(self, path: str) -> ResourceId:
        gateway = self._gateway
        home = resolve_home(gateway)
        try:
            res = gateway.stat(home_path(home, path))
        except GatewayError as exc:
            raise server_error(
                f"error sending a grpc stat request: {exc.message}"
            ) from exc
        if res.status.not_found:
            raise server_error("not found")
        if not res.status.ok or res.value is None:
            raise server_error("grpc stat request failed")
        return res.value.id

    def _list_user_shares(self, filters: List[ShareFilter]) -> List[ShareData]:
        gateway = self._gateway
        try:
            res = gateway.list_shares(filters)
        except GatewayError as exc:
            raise server_error(f"could not list shares: {exc.message}") from exc
        if not res.status.ok:
            raise server_error(f"could not list shares: {res.status.message}")

        shares: List[ShareData] = []
        for share in res.value or []:
            try:
                sd = user_share_to_share_data(gateway, share)
            except ShareMappingError as exc:
                raise server_error(
                    f"could not map user share to sharedata: {exc}"
                ) from exc
            info = self._stat_by_id(share.resource_id, "could not stat share target")
            try:
                add_file_info(gateway, sd, info)
            except ShareMappingError as exc:
                raise server_error(f"could not add file info to share: {exc}") from exc
            shares.append(sd)
        return shares

    def _list_public_shares(self, filters: List[ShareFilter]) -> List[ShareData]:
        gateway = self._gateway
        try:
            res = gateway.list_public_shares(filters)
        except GatewayError as exc:
            raise server_error(f"could not list public shares: {exc.message}") from exc
        if not res.status.ok:
            raise server_error(f"could not list public shares: {res.status.message}")

        shares: List[ShareData] = []
        for share in res.value or []:
            info = self._stat_by_id(share.resource_id, "could not stat share target")
            sd = public_share_to_share_data(share, self._public_url)
            sd.name = share.display_name
            try:
                add_file_info(gateway, sd, info)
            except ShareMappingError as exc:
                raise server_error(f"could not add file info: {exc}") from exc
            shares.append(sd)
        return shares

    def _stat_by_id(self, resource_id: ResourceId, context: str = "stat") -> ResourceInfo:
        try:
            res = self._gateway.stat(resource_id)
        except GatewayError as exc:
            raise server_error(f"{context}: {exc.message}") from exc
        if not res.status.ok or res.value is None:
            raise server_error(f"{context}: {res.status.message}")
        return res.value


def _is_shared_with_me(raw: str) -> bool:
    if not raw:
        return False
    try:
        return parse_bool(raw)
    except ValueError as exc:
        raise server_error(f"error mapping share data: {exc}") from exc
