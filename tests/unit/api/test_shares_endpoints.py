"""
Name: Shares Endpoint Tests

Responsibilities:
  - Validate the HTTP surface of the files_sharing OCS API
  - Validate form/query handling and OCS envelope per version and format
  - Validate health, metrics and request context plumbing

Notes:
  - The gateway is the seeded InMemoryGateway (see conftest.py)
"""

import xml.etree.ElementTree as ET

import pytest

from ocs_sharing.context import get_access_token
from ocs_sharing.domain.entities import ShareState, UserId
from ocs_sharing.domain.permissions import Permissions, as_cs3_permissions

pytestmark = pytest.mark.unit

V1 = "/ocs/v1.php/apps/files_sharing/api/v1/shares"
V2 = "/ocs/v2.php/apps/files_sharing/api/v1/shares"


def _meta(response):
    return response.json()["ocs"]["meta"]


def _data(response):
    return response.json()["ocs"]["data"]


# =============================================================================
# Create
# =============================================================================


def test_create_user_share(client):
    response = client.post(
        V2, data={"shareType": "0", "path": "/folder", "shareWith": "einstein"}
    )

    assert response.status_code == 200
    assert _meta(response) == {"status": "ok", "statuscode": 200, "message": "OK"}
    data = _data(response)
    assert data["share_type"] == 0
    assert data["permissions"] == 31
    assert data["share_with"] == "einstein"
    assert data["share_with_displayname"] == "Albert Einstein"
    assert data["item_type"] == "folder"


def test_create_public_link(client):
    response = client.post(
        V2,
        data={
            "shareType": "3",
            "path": "/file.txt",
            "name": "doc",
            "password": "s3cret",
            "expireDate": "2030-01-02",
        },
    )

    assert response.status_code == 200
    data = _data(response)
    assert data["share_type"] == 3
    assert data["name"] == "doc"
    assert data["share_with"] == "***redacted***"
    assert data["expiration"] == "2030-01-02 00:00:00"
    assert data["url"].endswith(f"/#/s/{data['token']}")


def test_create_federated_share(client, gateway):
    response = client.post(
        V2,
        data={
            "shareType": "6",
            "path": "/file.txt",
            "shareWithUser": "richard",
            "shareWithProvider": "cern.example.org",
        },
    )

    assert response.status_code == 200
    assert _data(response) == "OCM Share created"
    assert len(gateway.ocm_shares) == 1


def test_create_reads_query_parameters(client):
    response = client.post(V2, params={"shareType": "3", "path": "/file.txt"})

    assert response.status_code == 200
    assert _data(response)["share_type"] == 3


def test_create_body_wins_over_query(client):
    response = client.post(
        V2,
        params={"name": "from-query"},
        data={"shareType": "3", "path": "/file.txt", "name": "from-body"},
    )

    assert _data(response)["name"] == "from-body"


def test_create_error_v2_maps_http_status(client):
    response = client.post(V2, data={"shareType": "0", "path": "/folder"})

    assert response.status_code == 400
    assert _meta(response) == {
        "status": "error",
        "statuscode": 400,
        "message": "missing shareWith",
    }
    assert "data" not in response.json()["ocs"]


def test_create_error_v1_answers_200(client):
    response = client.post(V1, data={"shareType": "0", "path": "/folder"})

    assert response.status_code == 200
    assert _meta(response)["statuscode"] == 400


def test_create_unknown_resource_v2_is_404(client):
    response = client.post(
        V2, data={"shareType": "0", "path": "/nope", "shareWith": "einstein"}
    )

    assert response.status_code == 404
    assert _meta(response)["statuscode"] == 998


def test_create_without_share_type(client):
    response = client.post(V2, data={"path": "/folder"})

    assert response.status_code == 400
    assert _meta(response)["message"] == "shareType must be an integer"


# =============================================================================
# List / get
# =============================================================================


def test_list_shares_v1_ok_statuscode(client):
    client.post(V1, data={"shareType": "0", "path": "/folder", "shareWith": "marie"})
    client.post(V1, data={"shareType": "3", "path": "/folder"})

    response = client.get(V1)

    assert response.status_code == 200
    assert _meta(response)["statuscode"] == 100
    assert [share["share_type"] for share in _data(response)] == [0, 3]


def test_list_shares_xml(client):
    client.post(V2, data={"shareType": "0", "path": "/folder", "shareWith": "marie"})

    response = client.get(V2, params={"format": "xml"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    root = ET.fromstring(response.content)
    assert root.findtext("meta/statuscode") == "200"
    assert root.findtext("data/element/share_with") == "marie"


def test_list_shared_with_me(client, gateway):
    einstein = UserId("einstein", "localhost")
    paper = gateway.add_resource("/einstein/paper.pdf", owner=einstein)
    gateway.share_with_current_user(paper, einstein, as_cs3_permissions(Permissions.READ))

    response = client.get(V2, params={"shared_with_me": "true"})

    assert response.status_code == 200
    (share,) = _data(response)
    assert share["state"] == 1
    assert share["uid_owner"] == "einstein"


def test_list_with_unknown_path(client):
    response = client.get(V2, params={"path": "/missing"})

    assert response.status_code == 500
    assert _meta(response)["statuscode"] == 996


def test_get_share(client):
    created = _data(
        client.post(V2, data={"shareType": "3", "path": "/file.txt", "name": "doc"})
    )

    response = client.get(f"{V2}/{created['id']}")

    assert response.status_code == 200
    (share,) = _data(response)
    assert share["id"] == created["id"]
    assert share["name"] == "doc"


def test_get_unknown_share(client):
    response = client.get(f"{V2}/404")

    assert response.status_code == 404
    assert _meta(response) == {
        "status": "error",
        "statuscode": 998,
        "message": "share not found",
    }


# =============================================================================
# Update / delete
# =============================================================================


def test_update_public_link(client):
    created = _data(client.post(V2, data={"shareType": "3", "path": "/folder"}))

    response = client.put(
        f"{V2}/{created['id']}", data={"name": "renamed", "publicUpload": "true"}
    )

    assert response.status_code == 200
    data = _data(response)
    assert data["name"] == "renamed"
    assert data["permissions"] == 15


def test_update_without_fields(client):
    created = _data(client.post(V2, data={"shareType": "3", "path": "/folder"}))

    response = client.put(f"{V2}/{created['id']}")

    assert response.status_code == 400
    assert _meta(response)["message"] == "No updates specified in request"


def test_update_user_share_permissions(client):
    created = _data(
        client.post(V2, data={"shareType": "0", "path": "/folder", "shareWith": "marie"})
    )

    response = client.put(f"{V2}/{created['id']}", data={"permissions": "1"})

    assert response.status_code == 200
    assert _data(response)["permissions"] == 1


def test_delete_share(client, gateway):
    created = _data(client.post(V2, data={"shareType": "3", "path": "/folder"}))

    response = client.delete(f"{V2}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {
        "ocs": {"meta": {"status": "ok", "statuscode": 200, "message": "OK"}}
    }
    assert gateway.public_shares == {}


def test_delete_unknown_share(client):
    response = client.delete(f"{V2}/404")

    assert response.status_code == 404
    assert _meta(response)["message"] == "could not find share"


# =============================================================================
# Pending / remote shares
# =============================================================================


def test_accept_and_reject_pending_share(client, gateway):
    einstein = UserId("einstein", "localhost")
    paper = gateway.add_resource("/einstein/paper.pdf", owner=einstein)
    share = gateway.share_with_current_user(
        paper, einstein, as_cs3_permissions(Permissions.READ)
    )

    accepted = client.post(f"{V2}/pending/{share.id}")
    assert accepted.status_code == 200
    assert accepted.content == b""
    assert gateway.received_states[share.id] == ShareState.ACCEPTED

    rejected = client.delete(f"{V2}/pending/{share.id}")
    assert rejected.status_code == 200
    assert gateway.received_states[share.id] == ShareState.REJECTED


def test_accept_unknown_pending_share(client):
    response = client.post(f"{V2}/pending/404")

    assert response.status_code == 404
    assert _meta(response)["statuscode"] == 998


def test_remote_shares(client):
    client.post(
        V2,
        data={
            "shareType": "6",
            "path": "/folder",
            "shareWithUser": "richard",
            "shareWithProvider": "cern.example.org",
        },
    )

    listing = client.get(f"{V2}/remote_shares")
    (share,) = _data(listing)
    assert share["name"] == "folder"

    single = client.get(f"{V2}/remote_shares/{share['id']}")
    assert _data(single)["id"] == share["id"]

    missing = client.get(f"{V2}/remote_shares/404")
    assert missing.status_code == 404


# =============================================================================
# Plumbing
# =============================================================================


def test_options_preflight(client):
    response = client.options(V2)

    assert response.status_code == 200


def test_healthz(client):
    response = client.get("/healthz", headers={"X-Request-Id": "req-123"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "request_id": "req-123"}
    assert response.headers["X-Request-Id"] == "req-123"


def test_metrics(client):
    client.get(V2)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "ocs_requests_total" in response.text


def test_access_token_is_available_to_the_gateway(client, gateway, monkeypatch):
    seen = []
    original = gateway.get_home

    def _get_home():
        seen.append(get_access_token())
        return original()

    monkeypatch.setattr(gateway, "get_home", _get_home)

    client.post(
        V2,
        data={"shareType": "3", "path": "/file.txt"},
        headers={"X-Access-Token": "tkn-abc"},
    )

    assert seen == ["tkn-abc"]
