"""
===============================================================================
USE CASE: Create Share (dispatcher por shareType)
===============================================================================

Business Goal:
    Un único endpoint de creación atiende tres familias de shares; el campo
    shareType decide el flujo:
      - 0 -> user share
      - 3 -> public link
      - 6 -> federated cloud share

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateShareUseCase

Responsibilities:
    - Parsear shareType y delegar al flujo correspondiente.
    - Rechazar tipos no enteros o desconocidos (BAD_REQUEST).

Collaborators:
    - CreateUserShareUseCase
    - CreatePublicShareUseCase
    - CreateFederatedShareUseCase
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import ShareType
from .create_federated_share import CreateFederatedShareUseCase
from .create_public_share import CreatePublicShareUseCase
from .create_share_input import CreateShareInput
from .create_user_share import CreateUserShareUseCase
from .share_results import ShareActionResult, ShareError, ShareErrorCode


class CreateShareUseCase:
    def __init__(
        self,
        user_shares: CreateUserShareUseCase,
        public_shares: CreatePublicShareUseCase,
        federated_shares: CreateFederatedShareUseCase,
    ) -> None:
        self._flows = {
            ShareType.USER: user_shares,
            ShareType.PUBLIC_LINK: public_shares,
            ShareType.FEDERATED_CLOUD_SHARE: federated_shares,
        }

    def execute(self, input_data: CreateShareInput) -> ShareActionResult:
        try:
            share_type = int(input_data.share_type or "")
        except ValueError:
            return self._bad_request("shareType must be an integer")

        try:
            flow = self._flows[ShareType(share_type)]
        except ValueError:
            return self._bad_request(f"unknown share type {share_type}")

        return flow.execute(input_data)

    @staticmethod
    def _bad_request(message: str) -> ShareActionResult:
        return ShareActionResult(
            error=ShareError(code=ShareErrorCode.BAD_REQUEST, message=message)
        )
