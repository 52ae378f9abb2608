"""Infrastructure gateway clients"""

from .grpc_gateway_client import GrpcGatewayClient
from .in_memory_gateway import InMemoryGateway

__all__ = [
    "GrpcGatewayClient",
    "InMemoryGateway",
]
