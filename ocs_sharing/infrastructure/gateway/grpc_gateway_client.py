"""
Name: gRPC Gateway Client

Responsibilities:
  - Implement domain.services.GatewayClient over the CS3 GatewayAPI stub
  - Forward the caller's access token as `x-access-token` call metadata
  - Turn transport faults (grpc.RpcError, malformed responses) into GatewayError
  - Count every call by method and outcome (ok / status / transport_error)

Collaborators:
  - grpc + cs3apis: channel and generated GatewayAPIStub / request messages
  - codec: protobuf <-> domain adapters
  - context.get_access_token: token of the current request
  - crosscutting.metrics.record_gateway_call

Constraints:
  - One channel per process (the container caches the client)
  - No retries, no timeouts beyond the configured one: failures surface at once

Notes:
  - Non-OK statuses are returned in RpcResult.status, never raised
"""

from __future__ import annotations

import time
from typing import Any, Callable

import grpc
from cs3.gateway.v1beta1 import gateway_api_pb2_grpc
from cs3.identity.user.v1beta1 import user_api_pb2
from cs3.ocm.invite.v1beta1 import invite_api_pb2
from cs3.ocm.provider.v1beta1 import provider_api_pb2 as ocm_provider_api_pb2
from cs3.sharing.collaboration.v1beta1 import collaboration_api_pb2
from cs3.sharing.collaboration.v1beta1 import resources_pb2 as collaboration_res
from cs3.sharing.link.v1beta1 import link_api_pb2
from cs3.sharing.ocm.v1beta1 import ocm_api_pb2
from cs3.storage.provider.v1beta1 import provider_api_pb2
from google.protobuf.field_mask_pb2 import FieldMask
from google.protobuf.message import Message

from ...context import get_access_token
from ...crosscutting.exceptions import GatewayError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_gateway_call
from ...domain.entities import (
    OcmShare,
    OpaqueEntry,
    ProviderInfo,
    PublicShare,
    PublicShareUpdate,
    ReceivedShare,
    ResourceId,
    ResourceInfo,
    RpcResult,
    Share,
    ShareFilter,
    ShareState,
    User,
    UserId,
)
from ...domain.permissions import ResourcePermissions
from . import codec

ACCESS_TOKEN_HEADER = "x-access-token"


class GrpcGatewayClient:
    """
    R: gRPC implementation of GatewayClient.

    Each public method builds a CS3 request message, performs a single unary
    call on the GatewayAPI stub and decodes the response into domain entities.
    """

    def __init__(
        self,
        address: str,
        channel: grpc.Channel | None = None,
        timeout_seconds: float | None = None,
    ):
        self.address = address
        self._channel = channel or grpc.insecure_channel(address)
        self._stub = gateway_api_pb2_grpc.GatewayAPIStub(self._channel)
        self._timeout = timeout_seconds
        logger.info("GrpcGatewayClient initialized", extra={"address": address})

    def close(self) -> None:
        self._channel.close()

    # -- plumbing ------------------------------------------------------------

    def _metadata(self) -> tuple[tuple[str, str], ...]:
        token = get_access_token()
        if not token:
            return ()
        return ((ACCESS_TOKEN_HEADER, token),)

    def _call(
        self,
        method: str,
        request: Message,
        field: str | None = None,
        decoder: Callable[[Any], Any] | None = None,
    ) -> RpcResult[Any]:
        """R: Unary call + decode. Raises GatewayError on transport faults."""
        start = time.perf_counter()
        try:
            response = getattr(self._stub, method)(
                request, metadata=self._metadata(), timeout=self._timeout
            )
            result = codec.decode_result(response, field, decoder)
        except grpc.RpcError as exc:
            record_gateway_call(method, "transport_error", time.perf_counter() - start)
            logger.error(
                "gateway call failed",
                extra={"method": method, "grpc_code": str(exc.code())},
            )
            raise GatewayError(
                f"{method}: {exc.details() or exc.code()}",
                method=method,
                original_error=exc,
            ) from exc
        except codec.CodecError as exc:
            record_gateway_call(method, "transport_error", time.perf_counter() - start)
            raise GatewayError(
                f"{method}: {exc}", method=method, original_error=exc
            ) from exc

        outcome = "ok" if result.status.ok else "status"
        record_gateway_call(method, outcome, time.perf_counter() - start)
        return result

    # -- storage -------------------------------------------------------------

    def get_home(self) -> RpcResult[str]:
        return self._call("GetHome", provider_api_pb2.GetHomeRequest(), "path")

    def stat(self, ref: str | ResourceId) -> RpcResult[ResourceInfo]:
        return self._call(
            "Stat",
            provider_api_pb2.StatRequest(ref=codec.encode_reference(ref)),
            "info",
            codec.decode_resource_info,
        )

    # -- identidad -----------------------------------------------------------

    def get_user(self, user_id: UserId) -> RpcResult[User]:
        return self._call(
            "GetUser",
            user_api_pb2.GetUserRequest(user_id=codec.encode_user_id(user_id)),
            "user",
            codec.decode_user,
        )

    def get_remote_user(self, user_id: UserId) -> RpcResult[User]:
        request = invite_api_pb2.GetAcceptedUserRequest(
            remote_user_id=codec.encode_user_id(user_id)
        )
        return self._call("GetAcceptedUser", request, "remote_user", codec.decode_user)

    def get_info_by_domain(self, domain: str) -> RpcResult[ProviderInfo]:
        return self._call(
            "GetInfoByDomain",
            ocm_provider_api_pb2.GetInfoByDomainRequest(domain=domain),
            "provider_info",
            codec.decode_provider_info,
        )

    # -- user shares ---------------------------------------------------------

    def create_share(
        self,
        resource_info: ResourceInfo,
        grantee: UserId,
        permissions: ResourcePermissions,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[Share]:
        request = collaboration_api_pb2.CreateShareRequest(
            resource_info=codec.encode_resource_info(resource_info),
            grant=codec.encode_user_grant(grantee, permissions),
        )
        encoded = codec.encode_opaque(opaque)
        if encoded is not None:
            request.opaque.CopyFrom(encoded)
        return self._call("CreateShare", request, "share", codec.decode_share)

    def get_share(self, share_id: str) -> RpcResult[Share]:
        return self._call(
            "GetShare",
            collaboration_api_pb2.GetShareRequest(
                ref=codec.encode_share_reference(share_id)
            ),
            "share",
            codec.decode_share,
        )

    def list_shares(self, filters: list[ShareFilter]) -> RpcResult[list[Share]]:
        request = collaboration_api_pb2.ListSharesRequest()
        codec.add_resource_filters(request.filters, filters)
        return self._call(
            "ListShares", request, "shares", codec.decode_list(codec.decode_share)
        )

    def update_share(
        self, share_id: str, permissions: ResourcePermissions
    ) -> RpcResult[Share]:
        request = collaboration_api_pb2.UpdateShareRequest(
            share=collaboration_res.Share(
                id=collaboration_res.ShareId(opaque_id=share_id),
                permissions=collaboration_res.SharePermissions(
                    permissions=codec.encode_permissions(permissions)
                ),
            ),
            update_mask=FieldMask(paths=["permissions"]),
        )
        return self._call("UpdateShare", request, "share", codec.decode_share)

    def remove_share(self, share_id: str) -> RpcResult[None]:
        return self._call(
            "RemoveShare",
            collaboration_api_pb2.RemoveShareRequest(
                ref=codec.encode_share_reference(share_id)
            ),
        )

    def list_received_shares(self) -> RpcResult[list[ReceivedShare]]:
        return self._call(
            "ListReceivedShares",
            collaboration_api_pb2.ListReceivedSharesRequest(),
            "shares",
            codec.decode_list(codec.decode_received_share),
        )

    def update_received_share(
        self, share_id: str, state: ShareState
    ) -> RpcResult[ReceivedShare]:
        request = collaboration_api_pb2.UpdateReceivedShareRequest(
            share=collaboration_res.ReceivedShare(
                share=collaboration_res.Share(
                    id=collaboration_res.ShareId(opaque_id=share_id)
                ),
                state=codec.encode_share_state(state),
            ),
            update_mask=FieldMask(paths=["state"]),
        )
        return self._call(
            "UpdateReceivedShare", request, "share", codec.decode_received_share
        )

    # -- public links --------------------------------------------------------

    def create_public_share(
        self,
        resource_info: ResourceInfo,
        permissions: ResourcePermissions,
        password: str = "",
        expiration: int | None = None,
    ) -> RpcResult[PublicShare]:
        request = link_api_pb2.CreatePublicShareRequest(
            resource_info=codec.encode_resource_info(resource_info),
            grant=codec.encode_public_grant(permissions, password, expiration),
        )
        return self._call(
            "CreatePublicShare", request, "share", codec.decode_public_share
        )

    def get_public_share(self, share_id: str) -> RpcResult[PublicShare]:
        return self._call(
            "GetPublicShare",
            link_api_pb2.GetPublicShareRequest(
                ref=codec.encode_public_share_reference(share_id)
            ),
            "share",
            codec.decode_public_share,
        )

    def list_public_shares(
        self, filters: list[ShareFilter]
    ) -> RpcResult[list[PublicShare]]:
        request = link_api_pb2.ListPublicSharesRequest()
        codec.add_resource_filters(request.filters, filters)
        # el response de links usa `share` (repetido) como nombre de campo
        return self._call(
            "ListPublicShares",
            request,
            "share",
            codec.decode_list(codec.decode_public_share),
        )

    def update_public_share(
        self, share_id: str, update: PublicShareUpdate
    ) -> RpcResult[PublicShare]:
        request = link_api_pb2.UpdatePublicShareRequest(
            ref=codec.encode_public_share_reference(share_id),
            update=codec.encode_public_share_update(update),
        )
        return self._call(
            "UpdatePublicShare", request, "share", codec.decode_public_share
        )

    def remove_public_share(self, share_id: str) -> RpcResult[None]:
        return self._call(
            "RemovePublicShare",
            link_api_pb2.RemovePublicShareRequest(
                ref=codec.encode_public_share_reference(share_id)
            ),
        )

    # -- federadas (OCM) -----------------------------------------------------

    def create_ocm_share(
        self,
        resource_id: ResourceId,
        grantee: UserId,
        permissions: ResourcePermissions,
        provider: ProviderInfo,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[OcmShare]:
        request = ocm_api_pb2.CreateOCMShareRequest(
            resource_id=codec.encode_resource_id(resource_id),
            grantee=codec.encode_user_grantee(grantee),
            recipient_mesh_provider=codec.encode_provider_info(provider),
            access_methods=codec.encode_ocm_access_methods(permissions),
        )
        encoded = codec.encode_opaque(opaque)
        if encoded is not None:
            request.opaque.CopyFrom(encoded)
        return self._call("CreateOCMShare", request, "share", codec.decode_ocm_share)

    def get_ocm_share(self, share_id: str) -> RpcResult[OcmShare]:
        return self._call(
            "GetOCMShare",
            ocm_api_pb2.GetOCMShareRequest(
                ref=codec.encode_ocm_share_reference(share_id)
            ),
            "share",
            codec.decode_ocm_share,
        )

    def list_ocm_shares(self) -> RpcResult[list[OcmShare]]:
        return self._call(
            "ListOCMShares",
            ocm_api_pb2.ListOCMSharesRequest(),
            "shares",
            codec.decode_list(codec.decode_ocm_share),
        )
