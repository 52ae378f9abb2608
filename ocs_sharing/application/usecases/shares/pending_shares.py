"""
Accept / reject de shares recibidas.

Una sola RPC (update_received_share) con el estado destino; la última
escritura gana (aceptar y luego rechazar deja la share rechazada).
"""

from __future__ import annotations

from ....crosscutting.exceptions import GatewayError
from ....crosscutting.logger import logger
from ....domain.entities import ShareState
from ....domain.services import GatewayClient
from .share_results import ShareActionResult, ShareFailure, not_found, server_error


class UpdatePendingShareUseCase:
    """Cambia el estado de una share recibida (ACCEPTED / REJECTED)."""

    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def accept(self, share_id: str) -> ShareActionResult:
        return self._set_state(share_id, ShareState.ACCEPTED, "accept")

    def reject(self, share_id: str) -> ShareActionResult:
        return self._set_state(share_id, ShareState.REJECTED, "reject")

    def _set_state(
        self, share_id: str, state: ShareState, action: str
    ) -> ShareActionResult:
        logger.debug(
            "updating received share state",
            extra={"share_id": share_id, "state": state.value},
        )
        try:
            self._update(share_id, state, action)
        except ShareFailure as failure:
            return ShareActionResult(error=failure.error)
        return ShareActionResult()

    def _update(self, share_id: str, state: ShareState, action: str) -> None:
        try:
            res = self._gateway.update_received_share(share_id, state)
        except GatewayError as exc:
            raise server_error(
                f"grpc update received share request ({action}) failed: {exc.message}"
            ) from exc
        if res.status.not_found:
            raise not_found("not found")
        if not res.status.ok:
            raise server_error(
                f"grpc update received share request ({action}) failed: "
                f"{res.status.message}"
            )
