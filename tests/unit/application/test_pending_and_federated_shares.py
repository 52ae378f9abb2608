"""
Name: Pending / Federated Share Use Case Tests

Responsibilities:
  - Validate accept/reject of received shares (last write wins)
  - Validate federated share listing and lookup
"""

import pytest

from ocs_sharing.application.usecases.shares import (
    GetFederatedShareUseCase,
    ListFederatedSharesUseCase,
    ShareErrorCode,
    UpdatePendingShareUseCase,
)
from ocs_sharing.crosscutting.exceptions import GatewayError
from ocs_sharing.domain.entities import RpcCode, RpcResult, ShareState, UserId
from ocs_sharing.domain.permissions import Permissions, as_cs3_permissions
from ocs_sharing.infrastructure.gateway import InMemoryGateway

pytestmark = pytest.mark.unit

EINSTEIN = UserId("einstein", "localhost")


@pytest.fixture
def received(gateway):
    paper = gateway.add_resource("/einstein/paper.pdf", owner=EINSTEIN)
    return gateway.share_with_current_user(
        paper, EINSTEIN, as_cs3_permissions(Permissions.READ)
    )


class TestPendingShares:
    def test_accept(self, gateway, received):
        result = UpdatePendingShareUseCase(gateway).accept(received.id)

        assert result.error is None
        assert gateway.received_states[received.id] == ShareState.ACCEPTED

    def test_accept_then_reject_leaves_share_rejected(self, gateway, received):
        use_case = UpdatePendingShareUseCase(gateway)

        use_case.accept(received.id)
        result = use_case.reject(received.id)

        assert result.error is None
        assert gateway.received_states[received.id] == ShareState.REJECTED

    def test_unknown_share(self, gateway):
        result = UpdatePendingShareUseCase(gateway).accept("404")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert result.error.message == "not found"

    def test_transport_failure_names_the_action(self):
        class _Broken(InMemoryGateway):
            def update_received_share(self, share_id, state):
                raise GatewayError("deadline exceeded", method="UpdateReceivedShare")

        result = UpdatePendingShareUseCase(_Broken()).reject("1")

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert result.error.message == (
            "grpc update received share request (reject) failed: deadline exceeded"
        )


@pytest.fixture
def ocm_share(gateway):
    info = gateway.resources["/home/file.txt"]
    return gateway.create_ocm_share(
        info.id,
        UserId("richard", "cern.example.org"),
        as_cs3_permissions(Permissions.READ),
        gateway.providers["cern.example.org"],
    ).value


class TestFederatedShares:
    def test_list(self, gateway, ocm_share):
        result = ListFederatedSharesUseCase(gateway).execute()

        assert result.error is None
        (data,) = result.data
        assert data["id"] == ocm_share.id
        assert data["name"] == "file.txt"
        assert data["grantee"] == {"idp": "cern.example.org", "opaque_id": "richard"}
        assert data["resource_id"]["storage_id"] == "storage-1"
        assert data["permissions"]["stat"] is True

    def test_list_empty(self, gateway):
        assert ListFederatedSharesUseCase(gateway).execute().data == []

    def test_get(self, gateway, ocm_share):
        result = GetFederatedShareUseCase(gateway).execute(ocm_share.id)

        assert result.error is None
        assert result.data["id"] == ocm_share.id
        assert result.data["owner"]["opaque_id"] == "admin"

    def test_get_unknown(self, gateway):
        result = GetFederatedShareUseCase(gateway).execute("404")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert result.error.message == "share not found"

    def test_list_transport_failure(self):
        class _Broken(InMemoryGateway):
            def list_ocm_shares(self):
                raise GatewayError("unavailable", method="ListOCMShares")

        result = ListFederatedSharesUseCase(_Broken()).execute()

        assert result.error.code == ShareErrorCode.SERVER_ERROR

    def test_list_failed_status_is_server_error(self, gateway, monkeypatch):
        monkeypatch.setattr(
            gateway,
            "list_ocm_shares",
            lambda: RpcResult.error(RpcCode.INTERNAL, "boom"),
        )

        result = ListFederatedSharesUseCase(gateway).execute()

        assert result.data is None
        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert "boom" in result.error.message

    def test_get_failed_status_is_server_error(self, gateway, ocm_share, monkeypatch):
        monkeypatch.setattr(
            gateway,
            "get_ocm_share",
            lambda share_id: RpcResult.error(RpcCode.PERMISSION_DENIED, "denied"),
        )

        result = GetFederatedShareUseCase(gateway).execute(ocm_share.id)

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert "denied" in result.error.message
