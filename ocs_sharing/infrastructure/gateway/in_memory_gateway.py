"""
Name: In-Memory Gateway (Deterministic)

Responsibilities:
  - Provide a GatewayClient for local development, tests and CI
  - Keep users, resources and the three share families in process memory
  - Reproduce the gateway's status semantics (CODE_OK / CODE_NOT_FOUND)

Collaborators:
  - domain.services.GatewayClient (implements it)
  - container (selected when FAKE_GATEWAY=true or APP_ENV=test)

Notes:
  - Ids are sequential and shared across user shares, public links and
    federated shares, so an id resolves to at most one collection
  - Not thread-safe beyond the GIL; meant for a single test process
"""

from __future__ import annotations

import itertools
import posixpath
import time
from dataclasses import replace
from typing import Callable, Dict, List

from ...crosscutting.logger import logger
from ...domain.entities import (
    OcmShare,
    OpaqueEntry,
    ProviderInfo,
    PublicShare,
    PublicShareField,
    PublicShareUpdate,
    ReceivedShare,
    ResourceId,
    ResourceInfo,
    ResourceType,
    RpcCode,
    RpcResult,
    Share,
    ShareFilter,
    ShareState,
    User,
    UserId,
)
from ...domain.permissions import ResourcePermissions

DEFAULT_STORAGE_ID = "storage-1"


def _matches(resource_id: ResourceId, filters: List[ShareFilter]) -> bool:
    return all(f.resource_id == resource_id for f in filters)


class InMemoryGateway:
    """R: Deterministic GatewayClient backed by dicts."""

    def __init__(
        self,
        current_user: str = "admin",
        home: str = "/home",
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._clock = clock or (lambda: int(time.time()))
        self._ids = itertools.count(1)
        self.current_user = UserId(opaque_id=current_user, idp="localhost")
        self.home = home

        self.users: Dict[str, User] = {}
        self.remote_users: Dict[tuple[str, str], User] = {}
        self.providers: Dict[str, ProviderInfo] = {}
        self.resources: Dict[str, ResourceInfo] = {}

        self.shares: Dict[str, Share] = {}
        self.share_opaque: Dict[str, Dict[str, OpaqueEntry]] = {}
        self.received_states: Dict[str, ShareState] = {}
        self.public_shares: Dict[str, PublicShare] = {}
        self.public_passwords: Dict[str, str] = {}
        self.ocm_shares: Dict[str, OcmShare] = {}
        self.ocm_opaque: Dict[str, Dict[str, OpaqueEntry]] = {}

        self.add_user(current_user, display_name=current_user.capitalize())
        self.add_resource(home, ResourceType.CONTAINER, "httpd/unix-directory")
        logger.info("InMemoryGateway initialized", extra={"user": current_user})

    # -- seeding -------------------------------------------------------------

    def _next_id(self) -> str:
        return str(next(self._ids))

    def add_user(self, username: str, display_name: str = "", mail: str = "") -> User:
        user = User(
            id=UserId(opaque_id=username, idp="localhost"),
            username=username,
            display_name=display_name or username,
            mail=mail,
        )
        self.users[username] = user
        return user

    def add_remote_user(self, username: str, provider: str, display_name: str = "") -> User:
        user = User(
            id=UserId(opaque_id=username, idp=provider),
            username=username,
            display_name=display_name or username,
        )
        self.remote_users[(provider, username)] = user
        return user

    def add_provider(self, domain: str, name: str = "", full_name: str = "") -> ProviderInfo:
        provider = ProviderInfo(domain=domain, name=name or domain, full_name=full_name)
        self.providers[domain] = provider
        return provider

    def add_resource(
        self,
        path: str,
        rtype: ResourceType = ResourceType.FILE,
        mime_type: str = "text/plain",
        owner: UserId | None = None,
    ) -> ResourceInfo:
        path = posixpath.normpath(path)
        info = ResourceInfo(
            id=ResourceId(storage_id=DEFAULT_STORAGE_ID, opaque_id=f"res-{len(self.resources) + 1}"),
            path=path,
            type=rtype,
            mime_type=mime_type,
            owner=owner or self.current_user,
        )
        self.resources[path] = info
        return info

    def share_with_current_user(
        self, resource: ResourceInfo, owner: UserId, permissions: ResourcePermissions
    ) -> Share:
        """R: Seed a share received by the current user (state pending)."""
        share = self._new_share(resource, self.current_user, owner, permissions)
        self.received_states[share.id] = ShareState.PENDING
        return share

    # -- storage -------------------------------------------------------------

    def get_home(self) -> RpcResult[str]:
        return RpcResult.ok(self.home)

    def stat(self, ref: str | ResourceId) -> RpcResult[ResourceInfo]:
        if isinstance(ref, ResourceId):
            for info in self.resources.values():
                if info.id == ref:
                    return RpcResult.ok(info)
            return RpcResult.error(RpcCode.NOT_FOUND, "resource not found")

        info = self.resources.get(posixpath.normpath(ref))
        if info is None:
            return RpcResult.error(RpcCode.NOT_FOUND, f"{ref} not found")
        return RpcResult.ok(info)

    # -- identidad -----------------------------------------------------------

    def get_user(self, user_id: UserId) -> RpcResult[User]:
        user = self.users.get(user_id.opaque_id)
        if user is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "user not found")
        return RpcResult.ok(user)

    def get_remote_user(self, user_id: UserId) -> RpcResult[User]:
        user = self.remote_users.get((user_id.idp, user_id.opaque_id))
        if user is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "remote user not found")
        return RpcResult.ok(user)

    def get_info_by_domain(self, domain: str) -> RpcResult[ProviderInfo]:
        provider = self.providers.get(domain)
        if provider is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "provider not found")
        return RpcResult.ok(provider)

    # -- user shares ---------------------------------------------------------

    def _new_share(
        self,
        resource: ResourceInfo,
        grantee: UserId,
        owner: UserId,
        permissions: ResourcePermissions,
    ) -> Share:
        now = self._clock()
        share = Share(
            id=self._next_id(),
            resource_id=resource.id,
            grantee=grantee,
            owner=resource.owner or owner,
            creator=owner,
            permissions=permissions,
            ctime=now,
            mtime=now,
        )
        self.shares[share.id] = share
        return share

    def create_share(
        self,
        resource_info: ResourceInfo,
        grantee: UserId,
        permissions: ResourcePermissions,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[Share]:
        if self.stat(resource_info.id).value is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "resource not found")
        share = self._new_share(resource_info, grantee, self.current_user, permissions)
        self.share_opaque[share.id] = dict(opaque or {})
        return RpcResult.ok(share)

    def get_share(self, share_id: str) -> RpcResult[Share]:
        share = self.shares.get(share_id)
        if share is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "share not found")
        return RpcResult.ok(share)

    def list_shares(self, filters: list[ShareFilter]) -> RpcResult[list[Share]]:
        return RpcResult.ok(
            [
                s
                for s in self.shares.values()
                if s.creator == self.current_user and _matches(s.resource_id, filters)
            ]
        )

    def update_share(
        self, share_id: str, permissions: ResourcePermissions
    ) -> RpcResult[Share]:
        share = self.shares.get(share_id)
        if share is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "share not found")
        updated = replace(share, permissions=permissions, mtime=self._clock())
        self.shares[share_id] = updated
        return RpcResult.ok(updated)

    def remove_share(self, share_id: str) -> RpcResult[None]:
        if self.shares.pop(share_id, None) is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "share not found")
        self.received_states.pop(share_id, None)
        self.share_opaque.pop(share_id, None)
        return RpcResult.ok()

    def list_received_shares(self) -> RpcResult[list[ReceivedShare]]:
        return RpcResult.ok(
            [
                ReceivedShare(share=s, state=self.received_states.get(s.id, ShareState.PENDING))
                for s in self.shares.values()
                if s.grantee == self.current_user
            ]
        )

    def update_received_share(
        self, share_id: str, state: ShareState
    ) -> RpcResult[ReceivedShare]:
        share = self.shares.get(share_id)
        if share is None or share.grantee != self.current_user:
            return RpcResult.error(RpcCode.NOT_FOUND, "received share not found")
        self.received_states[share_id] = state
        return RpcResult.ok(ReceivedShare(share=share, state=state))

    # -- public links --------------------------------------------------------

    def create_public_share(
        self,
        resource_info: ResourceInfo,
        permissions: ResourcePermissions,
        password: str = "",
        expiration: int | None = None,
    ) -> RpcResult[PublicShare]:
        if self.stat(resource_info.id).value is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "resource not found")
        now = self._clock()
        share_id = self._next_id()
        share = PublicShare(
            id=share_id,
            token=f"token{share_id}",
            resource_id=resource_info.id,
            owner=resource_info.owner or self.current_user,
            creator=self.current_user,
            permissions=permissions,
            password_protected=bool(password),
            expiration=expiration,
            display_name=resource_info.arbitrary_metadata.get("name", ""),
            ctime=now,
            mtime=now,
        )
        self.public_shares[share_id] = share
        if password:
            self.public_passwords[share_id] = password
        return RpcResult.ok(share)

    def get_public_share(self, share_id: str) -> RpcResult[PublicShare]:
        share = self.public_shares.get(share_id)
        if share is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "public share not found")
        return RpcResult.ok(share)

    def list_public_shares(
        self, filters: list[ShareFilter]
    ) -> RpcResult[list[PublicShare]]:
        return RpcResult.ok(
            [s for s in self.public_shares.values() if _matches(s.resource_id, filters)]
        )

    def update_public_share(
        self, share_id: str, update: PublicShareUpdate
    ) -> RpcResult[PublicShare]:
        share = self.public_shares.get(share_id)
        if share is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "public share not found")

        if update.kind == PublicShareField.DISPLAY_NAME:
            share = replace(share, display_name=update.value or "")
        elif update.kind == PublicShareField.PERMISSIONS:
            share = replace(share, permissions=update.value)
        elif update.kind == PublicShareField.EXPIRATION:
            share = replace(share, expiration=update.value)
        else:
            password = update.value or ""
            if password:
                self.public_passwords[share_id] = password
            else:
                self.public_passwords.pop(share_id, None)
            share = replace(share, password_protected=bool(password))

        share = replace(share, mtime=self._clock())
        self.public_shares[share_id] = share
        return RpcResult.ok(share)

    def remove_public_share(self, share_id: str) -> RpcResult[None]:
        if self.public_shares.pop(share_id, None) is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "public share not found")
        self.public_passwords.pop(share_id, None)
        return RpcResult.ok()

    # -- federadas (OCM) -----------------------------------------------------

    def create_ocm_share(
        self,
        resource_id: ResourceId,
        grantee: UserId,
        permissions: ResourcePermissions,
        provider: ProviderInfo,
        opaque: dict[str, OpaqueEntry] | None = None,
    ) -> RpcResult[OcmShare]:
        info = self.stat(resource_id).value
        if info is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "resource not found")
        now = self._clock()
        opaque = dict(opaque or {})
        name_entry = opaque.get("name")
        share = OcmShare(
            id=self._next_id(),
            resource_id=resource_id,
            name=name_entry.value if name_entry else posixpath.basename(info.path),
            grantee=grantee,
            owner=info.owner or self.current_user,
            creator=self.current_user,
            permissions=permissions,
            ctime=now,
            mtime=now,
        )
        self.ocm_shares[share.id] = share
        self.ocm_opaque[share.id] = opaque
        return RpcResult.ok(share)

    def get_ocm_share(self, share_id: str) -> RpcResult[OcmShare]:
        share = self.ocm_shares.get(share_id)
        if share is None:
            return RpcResult.error(RpcCode.NOT_FOUND, "ocm share not found")
        return RpcResult.ok(share)

    def list_ocm_shares(self) -> RpcResult[list[OcmShare]]:
        return RpcResult.ok(list(self.ocm_shares.values()))

