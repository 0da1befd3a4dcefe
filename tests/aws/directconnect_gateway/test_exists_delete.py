"""Tests for DirectConnectGateway."""

from unittest import mock

import pytest
from botocore.exceptions import ClientError

from awsprovider_core.aws.directconnect_gateway import DirectConnectGateway

GATEWAY_ID = "5f294f92-bafb-4011-916d-9b0bec0a6d9f"


def _make_client_error(code, message="test"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "test_operation")


def _gateways(*states, error=None):
    responses = []
    for state in states:
        gateway = {"directConnectGatewayId": GATEWAY_ID, "directConnectGatewayState": state}
        if error:
            gateway["stateChangeError"] = error
        responses.append({"directConnectGateways": [gateway] if state else []})
    return responses


def _patch_client(mock_client):
    return mock.patch.object(DirectConnectGateway, "_client", new_callable=mock.PropertyMock, return_value=mock_client)


def test_association_id():
    gateway = DirectConnectGateway(GATEWAY_ID)
    assert gateway.association_id("vgw-1") == f"ga-{GATEWAY_ID}vgw-1"


@pytest.mark.parametrize("state, exists", [("available", True), ("deleted", False), (None, False)])
def test_exists(state, exists):
    gateway = DirectConnectGateway(GATEWAY_ID, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_direct_connect_gateways.side_effect = _gateways(state)

    with _patch_client(mock_client):
        assert gateway.exists is exists

    mock_client.describe_direct_connect_gateways.assert_called_once_with(directConnectGatewayId=GATEWAY_ID)


def test_delete(fake_clock):
    gateway = DirectConnectGateway(GATEWAY_ID, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_direct_connect_gateways.side_effect = _gateways("deleting", None)

    with _patch_client(mock_client):
        gateway.delete()

    mock_client.delete_direct_connect_gateway.assert_called_once_with(directConnectGatewayId=GATEWAY_ID)


def test_delete_does_not_exist(fake_clock):
    """Direct Connect reports missing gateways with a generic code and a message."""
    gateway = DirectConnectGateway(GATEWAY_ID, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.delete_direct_connect_gateway.side_effect = _make_client_error(
        "DirectConnectClientException", f"Direct Connect Gateway {GATEWAY_ID} does not exist"
    )

    with _patch_client(mock_client):
        gateway.delete()  # Should not raise

    mock_client.describe_direct_connect_gateways.assert_not_called()


def test_delete_other_client_exception(fake_clock):
    gateway = DirectConnectGateway(GATEWAY_ID, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.delete_direct_connect_gateway.side_effect = _make_client_error(
        "DirectConnectClientException", "Gateway has associations"
    )

    with _patch_client(mock_client):
        with pytest.raises(ClientError):
            gateway.delete()
