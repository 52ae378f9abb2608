"""
Name: Create Share Use Case Tests

Responsibilities:
  - Validate shareType dispatching
  - Validate user share, public link and federated share creation flows
  - Validate the error classification of each flow

Notes:
  - Uses the seeded InMemoryGateway fixture; failures are injected with
    small subclasses overriding a single RPC
"""

import json

import pytest

from ocs_sharing.application.usecases.shares import (
    OCM_SHARE_CREATED,
    CreateFederatedShareUseCase,
    CreatePublicShareUseCase,
    CreateShareInput,
    CreateShareUseCase,
    CreateUserShareUseCase,
    ShareErrorCode,
)
from ocs_sharing.application.usecases.shares.create_federated_share import (
    federated_resource_permissions,
)
from ocs_sharing.crosscutting.exceptions import GatewayError
from ocs_sharing.domain.entities import RpcCode, RpcResult
from ocs_sharing.domain.permissions import (
    Permissions,
    Role,
    as_cs3_permissions,
    map_to_cs3_permissions,
)
from ocs_sharing.domain.share_data import REDACTED
from ocs_sharing.infrastructure.gateway import InMemoryGateway

pytestmark = pytest.mark.unit

PUBLIC_URL = "https://cloud.example.com"


def _use_case(gateway):
    return CreateShareUseCase(
        CreateUserShareUseCase(gateway),
        CreatePublicShareUseCase(gateway, PUBLIC_URL),
        CreateFederatedShareUseCase(gateway),
    )


def _create(gateway, **fields):
    return _use_case(gateway).execute(CreateShareInput(**fields))


class _StatTransportFailure(InMemoryGateway):
    def stat(self, ref):
        raise GatewayError("connection refused", method="Stat")


# =============================================================================
# Dispatcher
# =============================================================================


class TestDispatcher:
    @pytest.mark.parametrize("share_type", [None, "", "user"])
    def test_non_integer_share_type(self, gateway, share_type):
        result = _create(gateway, share_type=share_type)

        assert result.error.code == ShareErrorCode.BAD_REQUEST
        assert result.error.message == "shareType must be an integer"

    def test_unknown_share_type(self, gateway):
        result = _create(gateway, share_type="2")

        assert result.error.code == ShareErrorCode.BAD_REQUEST
        assert result.error.message == "unknown share type 2"


# =============================================================================
# User shares
# =============================================================================


class TestCreateUserShare:
    def test_folder_defaults_to_all_permissions(self, gateway):
        result = _create(gateway, share_type="0", path="/folder", share_with="einstein")

        assert result.error is None
        sd = result.data
        assert sd.share_type == 0
        assert sd.permissions == 31
        assert sd.share_with == "einstein"
        assert sd.share_with_displayname == "Albert Einstein"
        assert sd.item_type == "folder"
        assert sd.path == "/folder"
        assert sd.uid_owner == "admin"

        opaque = gateway.share_opaque[sd.id]["role"]
        assert opaque.decoder == "json"
        assert json.loads(opaque.value) == {"name": "coowner"}

    def test_file_share_never_carries_create_or_delete(self, gateway):
        result = _create(gateway, share_type="0", path="file.txt", share_with="einstein")

        assert result.error is None
        assert result.data.permissions == 19

    def test_role_takes_precedence_over_permissions(self, gateway):
        result = _create(
            gateway,
            share_type="0",
            path="/folder",
            share_with="marie",
            role="viewer",
            permissions="31",
        )

        assert result.error is None
        assert result.data.permissions == 1
        assert json.loads(gateway.share_opaque[result.data.id]["role"].value) == {
            "name": "viewer"
        }

    def test_explicit_permissions(self, gateway):
        result = _create(
            gateway, share_type="0", path="/folder", share_with="marie", permissions="3"
        )

        assert result.error is None
        assert result.data.permissions == 3

    def test_missing_share_with(self, gateway):
        result = _create(gateway, share_type="0", path="/folder")

        assert result.error.code == ShareErrorCode.BAD_REQUEST
        assert result.error.message == "missing shareWith"

    def test_unknown_grantee(self, gateway):
        result = _create(gateway, share_type="0", path="/folder", share_with="ghost")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert result.error.message == "user not found"

    def test_missing_resource(self, gateway):
        result = _create(gateway, share_type="0", path="/nope", share_with="einstein")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert gateway.shares == {}

    @pytest.mark.parametrize(
        "permissions, code",
        [
            ("abc", ShareErrorCode.BAD_REQUEST),
            ("0", ShareErrorCode.BAD_REQUEST),
            ("32", ShareErrorCode.NOT_FOUND),
            ("-1", ShareErrorCode.NOT_FOUND),
        ],
    )
    def test_invalid_permissions(self, gateway, permissions, code):
        result = _create(
            gateway,
            share_type="0",
            path="/folder",
            share_with="einstein",
            permissions=permissions,
        )

        assert result.error.code == code
        assert gateway.shares == {}

    def test_unknown_role(self, gateway):
        result = _create(
            gateway, share_type="0", path="/folder", share_with="einstein", role="janitor"
        )

        assert result.error.code == ShareErrorCode.BAD_REQUEST

    def test_stat_transport_failure_is_server_error(self):
        gateway = _StatTransportFailure()
        gateway.add_user("einstein")

        result = _create(gateway, share_type="0", path="/folder", share_with="einstein")

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert "connection refused" in result.error.message

    def test_create_failure_is_server_error(self, gateway):
        class _Failing(InMemoryGateway):
            def create_share(self, *args, **kwargs):
                return RpcResult.error(RpcCode.INTERNAL, "boom")

        failing = _Failing()
        failing.add_user("einstein")
        failing.add_resource("/home/folder")

        result = _create(failing, share_type="0", path="/folder", share_with="einstein")

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert result.error.message == "create share: boom"


# =============================================================================
# Public links
# =============================================================================


class TestCreatePublicShare:
    def test_defaults_to_read_only(self, gateway):
        result = _create(gateway, share_type="3", path="/file.txt", name="my link")

        assert result.error is None
        sd = result.data
        assert sd.share_type == 3
        assert sd.permissions == 1
        assert sd.name == "my link"
        assert sd.token == f"token{sd.id}"
        assert sd.url == f"{PUBLIC_URL}/#/s/{sd.token}"
        assert sd.item_type == "file"
        assert sd.expiration == ""
        assert "share_with" not in sd.to_dict()

    def test_public_upload_overrides_permissions(self, gateway):
        result = _create(
            gateway,
            share_type="3",
            path="/folder",
            public_upload="true",
            permissions="1",
        )

        assert result.error is None
        assert result.data.permissions == 15

    def test_upload_only_key(self, gateway):
        result = _create(gateway, share_type="3", path="/folder", permissions="4")

        assert result.error is None
        assert result.data.permissions == 4

    def test_unknown_permission_key_is_not_found(self, gateway):
        result = _create(gateway, share_type="3", path="/folder", permissions="3")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert "role to permKey 3 not found" in result.error.message

    @pytest.mark.parametrize(
        "fields", [{"permissions": "read"}, {"public_upload": "maybe"}]
    )
    def test_unparseable_permissions_is_server_error(self, gateway, fields):
        result = _create(gateway, share_type="3", path="/folder", **fields)

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert result.error.message.startswith("ocPublicPermToCs3")

    def test_password_is_stored_and_redacted(self, gateway):
        result = _create(gateway, share_type="3", path="/file.txt", password="s3cret")

        assert result.error is None
        assert result.data.share_with == REDACTED
        assert result.data.share_with_displayname == REDACTED
        assert gateway.public_passwords[result.data.id] == "s3cret"

    def test_expire_date(self, gateway):
        result = _create(
            gateway, share_type="3", path="/file.txt", expire_date="2030-01-02"
        )

        assert result.error is None
        assert result.data.expiration == "2030-01-02 00:00:00"

    def test_invalid_expire_date_is_server_error(self, gateway):
        result = _create(
            gateway, share_type="3", path="/file.txt", expire_date="next week"
        )

        assert result.error.code == ShareErrorCode.SERVER_ERROR
        assert result.error.message.startswith("parseTimestamp")
        assert gateway.public_shares == {}

    def test_missing_resource(self, gateway):
        result = _create(gateway, share_type="3", path="/missing.txt")

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert result.error.message.startswith("resource not found")


# =============================================================================
# Federated shares
# =============================================================================


class TestCreateFederatedShare:
    def test_creates_read_only_share_by_default(self, gateway):
        result = _create(
            gateway,
            share_type="6",
            path="/file.txt",
            share_with_user="richard",
            share_with_provider="cern.example.org",
        )

        assert result.error is None
        assert result.data == OCM_SHARE_CREATED

        (share,) = gateway.ocm_shares.values()
        assert share.name == "file.txt"
        assert share.grantee.opaque_id == "richard"
        assert share.grantee.idp == "cern.example.org"
        assert share.permissions.stat
        assert not share.permissions.initiate_file_upload

        opaque = gateway.ocm_opaque[share.id]
        assert json.loads(opaque["permissions"].value) == {"name": "1"}
        assert opaque["name"].decoder == "plain"

    def test_explicit_permissions_use_role_mapping(self, gateway):
        result = _create(
            gateway,
            share_type="6",
            path="/folder",
            share_with_user="richard",
            share_with_provider="cern.example.org",
            permissions="3",
        )

        assert result.error is None
        (share,) = gateway.ocm_shares.values()
        assert share.permissions.initiate_file_upload
        assert share.permissions.move
        assert not share.permissions.delete

    @pytest.mark.parametrize(
        "fields",
        [
            {"share_with_user": "richard"},
            {"share_with_provider": "cern.example.org"},
            {},
        ],
    )
    def test_missing_share_with_parameters(self, gateway, fields):
        result = _create(gateway, share_type="6", path="/file.txt", **fields)

        assert result.error.code == ShareErrorCode.BAD_REQUEST
        assert result.error.message == "missing shareWith parameters"

    def test_unknown_provider_is_server_error(self, gateway):
        result = _create(
            gateway,
            share_type="6",
            path="/file.txt",
            share_with_user="richard",
            share_with_provider="unknown.example.org",
        )

        assert result.error.code == ShareErrorCode.SERVER_ERROR

    def test_unknown_remote_user(self, gateway):
        result = _create(
            gateway,
            share_type="6",
            path="/file.txt",
            share_with_user="nobody",
            share_with_provider="cern.example.org",
        )

        assert result.error.code == ShareErrorCode.NOT_FOUND
        assert result.error.message == "user not found"

    @pytest.mark.parametrize("permissions", ["many", "0", "40"])
    def test_invalid_permissions(self, gateway, permissions):
        result = _create(
            gateway,
            share_type="6",
            path="/file.txt",
            share_with_user="richard",
            share_with_provider="cern.example.org",
            permissions=permissions,
        )

        assert result.error.code == ShareErrorCode.BAD_REQUEST
        assert gateway.ocm_shares == {}

    def test_missing_resource(self, gateway):
        result = _create(
            gateway,
            share_type="6",
            path="/nope",
            share_with_user="richard",
            share_with_provider="cern.example.org",
        )

        assert result.error.code == ShareErrorCode.NOT_FOUND

    def test_unknown_role_falls_back_to_bitwise_mapping(self):
        permissions = Permissions.READ | Permissions.WRITE

        mapped = federated_resource_permissions("janitor", permissions)

        assert mapped == as_cs3_permissions(permissions)
        assert mapped.initiate_file_upload

    def test_known_role_uses_role_mapping(self):
        mapped = federated_resource_permissions(Role.VIEWER, Permissions.READ)

        assert mapped == map_to_cs3_permissions(Role.VIEWER, Permissions.READ)
