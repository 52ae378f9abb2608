"""Share use cases"""

from .create_federated_share import OCM_SHARE_CREATED, CreateFederatedShareUseCase
from .create_public_share import CreatePublicShareUseCase
from .create_share import CreateShareUseCase
from .create_share_input import CreateShareInput
from .create_user_share import CreateUserShareUseCase
from .federated_shares import GetFederatedShareUseCase, ListFederatedSharesUseCase
from .get_share import GetShareUseCase
from .list_shares import ListSharesInput, ListSharesUseCase
from .pending_shares import UpdatePendingShareUseCase
from .remove_share import RemoveShareUseCase
from .share_lookup import Absent, PublicLinkMatch, UserShareMatch, resolve_share
from .share_results import (
    ShareActionResult,
    ShareError,
    ShareErrorCode,
    ShareListResult,
    ShareResult,
)
from .update_share import UpdateShareInput, UpdateShareUseCase

__all__ = [
    "Absent",
    "CreateFederatedShareUseCase",
    "CreatePublicShareUseCase",
    "CreateShareInput",
    "CreateShareUseCase",
    "CreateUserShareUseCase",
    "GetFederatedShareUseCase",
    "GetShareUseCase",
    "ListFederatedSharesUseCase",
    "ListSharesInput",
    "ListSharesUseCase",
    "OCM_SHARE_CREATED",
    "PublicLinkMatch",
    "RemoveShareUseCase",
    "ShareActionResult",
    "ShareError",
    "ShareErrorCode",
    "ShareListResult",
    "ShareResult",
    "UpdatePendingShareUseCase",
    "UpdateShareInput",
    "UpdateShareUseCase",
    "UserShareMatch",
    "resolve_share",
]
