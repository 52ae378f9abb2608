"""
===============================================================================
TARJETA CRC — ocs_sharing/interfaces/api/http/routers/shares.py
===============================================================================

Class/Module:
    Shares Router (files_sharing OCS API)

Responsibilities:
    - Exponer los endpoints OCS de sharing (create/list/get/update/remove,
      accept/reject de pendientes y lectura de shares federadas).
    - Convertir requests HTTP -> inputs de casos de uso, preservando la
      PRESENCIA de las claves del form (varias reglas dependen de ella).
    - Traducir ShareError -> OcsError y renderizar el envelope OCS.

Collaborators:
    - ocs_sharing.application.usecases.shares
    - ocs_sharing.container (factories DI)
    - crosscutting.ocs_responses.ok_response
    - error_mapping.raise_share_error

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping

Notes:
    - Los use cases son síncronos (gRPC bloqueante): se ejecutan en el
      threadpool de Starlette, que propaga las ContextVars del request.
===============================================================================
"""

from __future__ import annotations

from typing import Mapping

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from .....application.usecases.shares import (
    CreateShareInput,
    CreateShareUseCase,
    GetFederatedShareUseCase,
    GetShareUseCase,
    ListFederatedSharesUseCase,
    ListSharesInput,
    ListSharesUseCase,
    RemoveShareUseCase,
    UpdatePendingShareUseCase,
    UpdateShareInput,
    UpdateShareUseCase,
)
from .....container import (
    get_create_share_use_case,
    get_get_federated_share_use_case,
    get_get_share_use_case,
    get_list_federated_shares_use_case,
    get_list_shares_use_case,
    get_remove_share_use_case,
    get_update_pending_share_use_case,
    get_update_share_use_case,
)
from .....crosscutting.logger import logger
from .....crosscutting.ocs_responses import ok_response
from ..error_mapping import raise_share_error

router = APIRouter(prefix="/shares", tags=["shares"])


# =============================================================================
# Helpers internos (form)
# =============================================================================


async def _form_values(request: Request) -> dict[str, str]:
    """
    Valores del request (body form + query), primer valor por clave.

    El body tiene prioridad sobre la query. Las claves ausentes NO aparecen
    en el dict: el caller distingue "ausente" de "vacío".
    """
    values: dict[str, str] = {}
    form = await request.form()
    for key in form.keys():
        value = form.get(key)
        if isinstance(value, str):
            values[key] = value
    for key in request.query_params.keys():
        values.setdefault(key, request.query_params.get(key, ""))
    return values


def _create_input(form: Mapping[str, str]) -> CreateShareInput:
    return CreateShareInput(
        share_type=form.get("shareType"),
        path=form.get("path", ""),
        share_with=form.get("shareWith", ""),
        share_with_user=form.get("shareWithUser", ""),
        share_with_provider=form.get("shareWithProvider", ""),
        role=form.get("role", ""),
        permissions=form.get("permissions"),
        password=form.get("password", ""),
        expire_date=form.get("expireDate"),
        name=form.get("name", ""),
        public_upload=form.get("publicUpload"),
    )


def _update_input(share_id: str, form: Mapping[str, str]) -> UpdateShareInput:
    return UpdateShareInput(
        share_id=share_id,
        name=form.get("name"),
        permissions=form.get("permissions"),
        public_upload=form.get("publicUpload"),
        expire_date=form.get("expireDate"),
        password=form.get("password"),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.options("")
def shares_options() -> Response:
    return Response(status_code=200)


@router.post("")
async def create_share(
    request: Request,
    use_case: CreateShareUseCase = Depends(get_create_share_use_case),
):
    form = await _form_values(request)
    result = await run_in_threadpool(use_case.execute, _create_input(form))
    if result.error:
        raise_share_error(result.error)

    data = result.data
    if hasattr(data, "to_dict"):
        data = data.to_dict()
    return ok_response(request, data)


@router.get("")
def list_shares(
    request: Request,
    use_case: ListSharesUseCase = Depends(get_list_shares_use_case),
):
    params = request.query_params
    result = use_case.execute(
        ListSharesInput(
            shared_with_me=params.get("shared_with_me", ""),
            state=params.get("state", ""),
            path=params.get("path", ""),
        )
    )
    if result.error:
        raise_share_error(result.error)
    return ok_response(request, [sd.to_dict() for sd in result.shares])


@router.get("/remote_shares")
def list_federated_shares(
    request: Request,
    use_case: ListFederatedSharesUseCase = Depends(get_list_federated_shares_use_case),
):
    result = use_case.execute()
    if result.error:
        raise_share_error(result.error)
    return ok_response(request, result.data)


@router.get("/remote_shares/{share_id}")
def get_federated_share(
    share_id: str,
    request: Request,
    use_case: GetFederatedShareUseCase = Depends(get_get_federated_share_use_case),
):
    result = use_case.execute(share_id)
    if result.error:
        raise_share_error(result.error)
    return ok_response(request, result.data)


@router.post("/pending/{share_id}")
def accept_share(
    share_id: str,
    use_case: UpdatePendingShareUseCase = Depends(get_update_pending_share_use_case),
):
    logger.debug("http routing", extra={"share_id": share_id})
    result = use_case.accept(share_id)
    if result.error:
        raise_share_error(result.error)
    return Response(status_code=200)


@router.delete("/pending/{share_id}")
def reject_share(
    share_id: str,
    use_case: UpdatePendingShareUseCase = Depends(get_update_pending_share_use_case),
):
    logger.debug("http routing", extra={"share_id": share_id})
    result = use_case.reject(share_id)
    if result.error:
        raise_share_error(result.error)
    return Response(status_code=200)


@router.get("/{share_id}")
def get_share(
    share_id: str,
    request: Request,
    use_case: GetShareUseCase = Depends(get_get_share_use_case),
):
    result = use_case.execute(share_id)
    if result.error:
        raise_share_error(result.error)
    return ok_response(request, [sd.to_dict() for sd in result.shares])


@router.put("/{share_id}")
async def update_share(
    share_id: str,
    request: Request,
    use_case: UpdateShareUseCase = Depends(get_update_share_use_case),
):
    form = await _form_values(request)
    result = await run_in_threadpool(use_case.execute, _update_input(share_id, form))
    if result.error:
        raise_share_error(result.error)
    return ok_response(request, result.share.to_dict())


@router.delete("/{share_id}")
def remove_share(
    share_id: str,
    request: Request,
    use_case: RemoveShareUseCase = Depends(get_remove_share_use_case),
):
    result = use_case.execute(share_id)
    if result.error:
        raise_share_error(result.error)
    return ok_response(request)
