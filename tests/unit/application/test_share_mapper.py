"""
Name: Share Mapper Tests

Responsibilities:
  - Validate timestamp parsing/formatting of the OCS contract
  - Validate resource id wrapping and public link URLs
  - Validate user share / public link mapping and file info enrichment
"""

import base64
from datetime import datetime, timedelta, timezone

import pytest

from ocs_sharing.application.usecases.shares.share_mapper import (
    ShareMappingError,
    TimestampParseError,
    add_file_info,
    format_expiration,
    parse_timestamp,
    public_link_url,
    public_share_to_share_data,
    user_share_to_share_data,
    wrap_resource_id,
)
from ocs_sharing.domain.entities import PublicShare, ResourceId, UserId
from ocs_sharing.domain.permissions import Permissions, as_cs3_permissions
from ocs_sharing.domain.share_data import REDACTED

pytestmark = pytest.mark.unit


def _epoch(*args, offset_hours=0):
    tz = timezone(timedelta(hours=offset_hours))
    return int(datetime(*args, tzinfo=tz).timestamp())


class TestParseTimestamp:
    def test_full_timestamp_with_z(self):
        assert parse_timestamp("2030-01-02T03:04:05Z") == _epoch(2030, 1, 2, 3, 4, 5)

    def test_full_timestamp_with_offset(self):
        assert parse_timestamp("2030-01-02T03:04:05+0100") == _epoch(
            2030, 1, 2, 3, 4, 5, offset_hours=1
        )

    def test_date_only_is_utc_midnight(self):
        assert parse_timestamp("2030-01-02") == _epoch(2030, 1, 2)

    @pytest.mark.parametrize(
        "value", ["", "tomorrow", "2030-13-01", "2030/01/02", "2030-01-02T25:00:00Z"]
    )
    def test_rejects_other_formats(self, value):
        with pytest.raises(TimestampParseError):
            parse_timestamp(value)


def test_format_expiration():
    assert format_expiration(None) == ""
    assert format_expiration(0) == "1970-01-01 00:00:00"
    assert format_expiration(_epoch(2030, 1, 2)) == "2030-01-02 00:00:00"


def test_wrap_resource_id_is_urlsafe_base64():
    wrapped = wrap_resource_id(ResourceId(storage_id="storage-1", opaque_id="res-1"))

    assert base64.urlsafe_b64decode(wrapped) == b"storage-1:res-1"


def test_public_link_url():
    assert (
        public_link_url("https://cloud.example.com", "abc")
        == "https://cloud.example.com/#/s/abc"
    )


def _public_share(**overrides):
    values = dict(
        id="7",
        token="tok7",
        resource_id=ResourceId("storage-1", "res-1"),
        owner=UserId("admin", "localhost"),
        creator=UserId("admin", "localhost"),
        permissions=as_cs3_permissions(Permissions.READ),
        expiration=_epoch(2030, 1, 2),
        display_name="my link",
        ctime=1234,
    )
    values.update(overrides)
    return PublicShare(**values)


class TestPublicShareToShareData:
    def test_maps_fields(self):
        sd = public_share_to_share_data(_public_share(), "https://cloud.example.com")

        assert sd.id == "7"
        assert sd.share_type == 3
        assert sd.token == "tok7"
        assert sd.name == "my link"
        assert sd.expiration == "2030-01-02 00:00:00"
        assert sd.permissions == 1
        assert sd.stime == 1234
        assert sd.url == "https://cloud.example.com/#/s/tok7"
        assert sd.uid_owner == "admin"
        assert sd.share_with == ""

    def test_password_protected_grantee_is_redacted(self):
        sd = public_share_to_share_data(
            _public_share(password_protected=True), "https://cloud.example.com"
        )

        assert sd.share_with == REDACTED
        assert sd.share_with_displayname == REDACTED

    def test_empty_fields_are_omitted_from_payload(self):
        data = public_share_to_share_data(_public_share(), "").to_dict()

        assert "share_with" not in data
        assert "share_with_displayname" not in data
        assert "url" in data

    def test_state_is_unset_outside_received_shares(self):
        sd = public_share_to_share_data(_public_share(), "")

        assert sd.state is None
        assert "state" not in sd.to_dict()


class TestUserShareToShareData:
    def test_resolves_display_names(self, gateway):
        info = gateway.resources["/home/folder"]
        share = gateway.create_share(
            info, UserId("einstein", "localhost"), as_cs3_permissions(Permissions.READ)
        ).value

        sd = user_share_to_share_data(gateway, share)

        assert sd.share_type == 0
        assert sd.permissions == 1
        assert sd.uid_owner == "admin"
        assert sd.displayname_owner == "Admin"
        assert sd.share_with == "einstein"
        assert sd.share_with_displayname == "Albert Einstein"

    def test_unknown_grantee_aborts_mapping(self, gateway):
        info = gateway.resources["/home/folder"]
        share = gateway.create_share(
            info, UserId("ghost", "localhost"), as_cs3_permissions(Permissions.READ)
        ).value

        with pytest.raises(ShareMappingError, match="could not look up grantee"):
            user_share_to_share_data(gateway, share)


class TestAddFileInfo:
    def test_enriches_with_resource_metadata(self, gateway):
        info = gateway.resources["/home/file.txt"]
        sd = public_share_to_share_data(_public_share(owner=None, creator=None), "")

        add_file_info(gateway, sd, info)

        assert sd.item_type == "file"
        assert sd.mimetype == "text/plain"
        assert sd.path == "/file.txt"
        assert sd.file_target == "/file.txt"
        assert sd.storage_id == "storage-1"
        assert sd.item_source == wrap_resource_id(info.id)
        assert sd.file_source == sd.item_source
        assert sd.uid_owner == "admin"
        assert sd.displayname_file_owner == "Admin"

    def test_mimetype_parameters_are_dropped(self, gateway):
        info = gateway.add_resource("/home/page.html", mime_type="text/HTML; charset=utf-8")
        sd = public_share_to_share_data(_public_share(), "")

        add_file_info(gateway, sd, info)

        assert sd.mimetype == "text/html"

    def test_invalid_mimetype_renders_empty(self, gateway):
        info = gateway.add_resource("/home/blob", mime_type="not a mimetype")
        sd = public_share_to_share_data(_public_share(), "")

        add_file_info(gateway, sd, info)

        assert sd.mimetype == ""

    def test_none_info_is_a_noop(self, gateway):
        sd = public_share_to_share_data(_public_share(), "")

        add_file_info(gateway, sd, None)

        assert sd.path == ""
