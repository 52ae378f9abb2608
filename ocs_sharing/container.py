"""
Name: Dependency Injection Container

Responsibilities:
  - Wire up the gateway client and the share use cases
  - Provide factory functions consumed by FastAPI Depends()
  - Manage the singleton gateway client (one gRPC channel per process)

Collaborators:
  - infrastructure.gateway: GrpcGatewayClient, InMemoryGateway
  - application.usecases.shares: use cases
  - crosscutting.config: Settings

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache
  - Environment-based configuration

Notes:
  - This is the composition root (where dependencies are wired)
  - Tests override get_gateway_client via app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends

from .application.usecases.shares import (
    CreateFederatedShareUseCase,
    CreatePublicShareUseCase,
    CreateShareUseCase,
    CreateUserShareUseCase,
    GetFederatedShareUseCase,
    GetShareUseCase,
    ListFederatedSharesUseCase,
    ListSharesUseCase,
    RemoveShareUseCase,
    UpdatePendingShareUseCase,
    UpdateShareUseCase,
)
from .crosscutting.config import get_settings
from .domain.services import GatewayClient
from .infrastructure.gateway import GrpcGatewayClient, InMemoryGateway

_TEST_ENVS = {"test", "testing"}


# R: Gateway client factory (singleton)
@lru_cache
def get_gateway_client() -> GatewayClient:
    """
    R: Get singleton instance of the gateway client.

    Returns:
        InMemoryGateway when FAKE_GATEWAY is set or APP_ENV is test,
        GrpcGatewayClient otherwise.
    """
    settings = get_settings()
    if settings.fake_gateway or settings.app_env.strip().lower() in _TEST_ENVS:
        return InMemoryGateway()
    return GrpcGatewayClient(address=settings.gateway_address)


# R: Create share (dispatcher + three flows)
def get_create_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> CreateShareUseCase:
    public_url = get_settings().public_url
    return CreateShareUseCase(
        user_shares=CreateUserShareUseCase(gateway),
        public_shares=CreatePublicShareUseCase(gateway, public_url),
        federated_shares=CreateFederatedShareUseCase(gateway),
    )


def get_list_shares_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> ListSharesUseCase:
    return ListSharesUseCase(gateway, get_settings().public_url)


def get_get_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> GetShareUseCase:
    return GetShareUseCase(gateway, get_settings().public_url)


def get_update_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> UpdateShareUseCase:
    return UpdateShareUseCase(gateway, get_settings().public_url)


def get_remove_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> RemoveShareUseCase:
    return RemoveShareUseCase(gateway)


def get_update_pending_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> UpdatePendingShareUseCase:
    return UpdatePendingShareUseCase(gateway)


def get_list_federated_shares_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> ListFederatedSharesUseCase:
    return ListFederatedSharesUseCase(gateway)


def get_get_federated_share_use_case(
    gateway: GatewayClient = Depends(get_gateway_client),
) -> GetFederatedShareUseCase:
    return GetFederatedShareUseCase(gateway)
