"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from modemlink.api.app import create_app
from modemlink.api.error_mapper import (
    ERROR_CHECKSUM_MISMATCH,
    ERROR_INVALID_VALUE,
    ERROR_MALFORMED_CHECKSUM,
    ERROR_NOT_CONNECTED,
    ERROR_TRUNCATED_MESSAGE,
)
from modemlink.api.models import make_response
from modemlink.protocol.link import CommandLink
from modemlink.protocol.logger import init_protocol_logger
from modemlink.simulator.loopback import LoopbackLink
from modemlink.utils.exceptions import InvalidValueError


@pytest.fixture
def loopback():
    transport = LoopbackLink()
    transport.connect()
    return transport


@pytest.fixture
def client(loopback):
    init_protocol_logger()
    return TestClient(create_app(CommandLink(loopback)))


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_encode(client):
    response = client.post(
        "/api/v1/codec/encode",
        json={"name": "PING", "version": 1, "source": 3, "destinations": [7]},
    )
    body = response.json()
    assert body["ErrorNumber"] == 0
    assert body["Value"] == "V1,3,1,7,PING,402B\n"


def test_encode_rejects_separator_in_argument(client):
    response = client.post(
        "/api/v1/codec/encode",
        json={"name": "SET", "arguments": ["a,b"]},
    )
    assert response.status_code == 422


def test_encode_rejects_negative_destination(client):
    response = client.post(
        "/api/v1/codec/encode",
        json={"name": "PING", "destinations": [2, -1]},
    )
    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "destinations", 1]


def test_encode_negative_version_and_destination_rejected_alike(client):
    for payload in ({"name": "PING", "version": -1}, {"name": "PING", "destinations": [-1]}):
        assert client.post("/api/v1/codec/encode", json=payload).status_code == 422


def test_invalid_value_error_envelope():
    response = make_response(None, 5, InvalidValueError("Destination must be non-negative, got -1"))
    assert response.ErrorNumber == ERROR_INVALID_VALUE
    assert response.ServerTransactionID == 5
    assert response.Value is None


def test_decode(client):
    response = client.post("/api/v1/codec/decode", json={"frame": "V0,1,3,2,5,9,GOTO,10,20,AEA2\n"})
    body = response.json()
    assert body["ErrorNumber"] == 0
    assert body["Value"] == {
        "name": "GOTO",
        "version": 0,
        "source": 1,
        "destinations": [2, 5, 9],
        "arguments": ["10", "20"],
    }


@pytest.mark.parametrize(
    "frame, error_number, kind",
    [
        ("V0,0,1,3,PING,8573\n", ERROR_CHECKSUM_MISMATCH, "ChecksumMismatchError"),
        ("V0,0,1,2,PING,857\n", ERROR_MALFORMED_CHECKSUM, "MalformedChecksumError"),
        ("V0,1,2,5,PING,4915\n", ERROR_TRUNCATED_MESSAGE, "TruncatedMessageError"),
    ],
)
def test_decode_errors(client, frame, error_number, kind):
    body = client.post("/api/v1/codec/decode", json={"frame": frame}).json()
    assert body["Value"] is None
    assert body["ErrorNumber"] == error_number
    assert body["ErrorKind"] == kind
    assert body["ErrorMessage"]


def test_link_send_and_receive(client, loopback):
    sent = client.post(
        "/api/v1/link/send",
        json={"name": "GOTO", "source": 1, "destinations": [9, 2], "arguments": ["10"]},
    ).json()
    assert sent["ErrorNumber"] == 0
    assert loopback.pending() == 1

    received = client.get("/api/v1/link/receive").json()
    assert received["Value"]["destinations"] == [2, 9]
    assert received["Value"]["arguments"] == ["10"]

    empty = client.get("/api/v1/link/receive").json()
    assert empty["Value"] is None
    assert empty["ErrorNumber"] == 0


def test_link_status(client):
    body = client.get("/api/v1/link/status").json()
    assert body["Value"]["connected"] is True
    assert body["Value"]["sent"] == 0


def test_link_not_configured():
    client = TestClient(create_app(None))
    body = client.get("/api/v1/link/status").json()
    assert body["ErrorNumber"] == ERROR_NOT_CONNECTED


def test_link_closed(client, loopback):
    loopback.disconnect()
    body = client.post("/api/v1/link/send", json={"name": "PING"}).json()
    assert body["ErrorNumber"] == ERROR_NOT_CONNECTED


def test_protocol_log_endpoints(client):
    client.post("/api/v1/link/send", json={"name": "PING", "destinations": [2]})
    client.get("/api/v1/link/receive")

    log = client.get("/api/v1/protocol/log", params={"limit": 10}).json()["Value"]
    assert [m["direction"] for m in log] == ["TX", "RX"]
    assert log[0]["raw"] == "V0,0,1,2,PING,8573\n"

    stats = client.get("/api/v1/protocol/stats").json()["Value"]
    assert stats["tx_count"] == 1
    assert stats["rx_count"] == 1

    assert client.delete("/api/v1/protocol/log").json()["Value"] is True
    assert client.get("/api/v1/protocol/stats").json()["Value"]["total_messages"] == 0


def test_server_transaction_ids_increase(client):
    first = client.get("/api/v1/link/status").json()["ServerTransactionID"]
    second = client.get("/api/v1/link/status").json()["ServerTransactionID"]
    assert second > first
