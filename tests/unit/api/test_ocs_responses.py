"""
Name: OCS Envelope Tests

Responsibilities:
  - Validate JSON / XML rendering of the OCS envelope
  - Validate v1 (always 200) vs v2 (mirrors statuscode) HTTP status
"""

import json
import xml.etree.ElementTree as ET

import pytest

from ocs_sharing.crosscutting.ocs_responses import (
    META_NOT_FOUND,
    META_OK,
    META_SERVER_ERROR,
    Meta,
    OcsFormat,
    OcsVersion,
    http_status_for,
    not_found,
    render_ocs,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "statuscode, expected",
    [(100, 200), (400, 400), (996, 500), (997, 401), (998, 404), (123, 500)],
)
def test_v2_http_status_mirrors_statuscode(statuscode, expected):
    assert http_status_for(statuscode, OcsVersion.V2) == expected


@pytest.mark.parametrize("statuscode", [100, 400, 996, 998])
def test_v1_always_answers_200(statuscode):
    assert http_status_for(statuscode, OcsVersion.V1) == 200


def test_json_ok_envelope_v1():
    response = render_ocs(
        META_OK, [{"id": "1"}], version=OcsVersion.V1, fmt=OcsFormat.JSON
    )

    body = json.loads(response.body)
    assert response.status_code == 200
    assert response.media_type.startswith("application/json")
    assert body == {
        "ocs": {
            "meta": {"status": "ok", "statuscode": 100, "message": "OK"},
            "data": [{"id": "1"}],
        }
    }


def test_json_ok_envelope_v2_uses_statuscode_200():
    response = render_ocs(META_OK, None, version=OcsVersion.V2, fmt=OcsFormat.JSON)

    body = json.loads(response.body)
    assert body["ocs"]["meta"]["statuscode"] == 200
    assert "data" not in body["ocs"]


def test_json_error_envelope_v2():
    response = render_ocs(
        Meta("error", 998, "share not found"),
        None,
        version=OcsVersion.V2,
        fmt=OcsFormat.JSON,
    )

    assert response.status_code == 404
    assert json.loads(response.body)["ocs"]["meta"] == {
        "status": "error",
        "statuscode": 998,
        "message": "share not found",
    }


def test_xml_envelope():
    response = render_ocs(
        META_OK,
        [{"id": "7", "share_type": 3}],
        version=OcsVersion.V1,
        fmt=OcsFormat.XML,
    )

    assert response.media_type.startswith("application/xml")
    root = ET.fromstring(response.body)
    assert root.tag == "ocs"
    assert root.findtext("meta/status") == "ok"
    assert root.findtext("meta/statuscode") == "100"
    elements = root.findall("data/element")
    assert len(elements) == 1
    assert elements[0].findtext("id") == "7"
    assert elements[0].findtext("share_type") == "3"


def test_error_factories():
    error = not_found("nope")

    assert error.statuscode == META_NOT_FOUND.statuscode
    assert error.meta == Meta("error", 998, "nope")
    assert META_SERVER_ERROR.statuscode == 996
