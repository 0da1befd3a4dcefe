"""Tests for EventBridgeRule."""

from unittest import mock

import pytest
from botocore.exceptions import ClientError

from awsprovider_core.aws.eventbridge_rule import EventBridgeRule
from awsprovider_core.exceptions import MalformedIDError

RULE_NAME = "my-rule"
PARTNER_BUS = "aws.partner/example.com/123"


def _make_client_error(code, message="test"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "test_operation")


def _mock_paginator(pages):
    paginator = mock.MagicMock()
    paginator.paginate.side_effect = lambda **kwargs: iter(pages)
    return paginator


def _patch_client(mock_client):
    return mock.patch.object(EventBridgeRule, "_client", new_callable=mock.PropertyMock, return_value=mock_client)


# -- IDs ------------------------------------------------------------------------


@pytest.mark.parametrize(
    "event_bus_name, resource_id",
    [
        ("default", RULE_NAME),
        (None, RULE_NAME),
        ("custom-bus", f"custom-bus/{RULE_NAME}"),
        (PARTNER_BUS, f"{PARTNER_BUS}/{RULE_NAME}"),
    ],
)
def test_resource_id(event_bus_name, resource_id):
    rule = EventBridgeRule(RULE_NAME, event_bus_name=event_bus_name)
    assert rule.resource_id == resource_id


def test_from_id_partner_bus():
    """A partner bus name keeps its slashes."""
    rule = EventBridgeRule.from_id(f"{PARTNER_BUS}/{RULE_NAME}", region="us-east-1")

    assert rule.event_bus_name == PARTNER_BUS
    assert rule.rule_name == RULE_NAME


def test_from_id_default_bus():
    rule = EventBridgeRule.from_id(RULE_NAME)

    assert rule.event_bus_name == "default"
    assert rule.rule_name == RULE_NAME


def test_from_id_malformed():
    with pytest.raises(MalformedIDError):
        EventBridgeRule.from_id("some/unknown/bus/rule")


# -- exists -------------------------------------------------------------------


def test_exists_true():
    rule = EventBridgeRule(RULE_NAME, event_bus_name="custom-bus", region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_rule.return_value = {"Name": RULE_NAME}

    with _patch_client(mock_client):
        assert rule.exists is True

    mock_client.describe_rule.assert_called_once_with(Name=RULE_NAME, EventBusName="custom-bus")


def test_exists_not_found():
    rule = EventBridgeRule(RULE_NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_rule.side_effect = _make_client_error("ResourceNotFoundException")

    with _patch_client(mock_client):
        assert rule.exists is False


def test_exists_unexpected_error():
    rule = EventBridgeRule(RULE_NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_rule.side_effect = _make_client_error("AccessDeniedException")

    with _patch_client(mock_client):
        with pytest.raises(ClientError):
            _ = rule.exists


# -- targets ------------------------------------------------------------------


def test_target_ids():
    """Target state IDs are prefixed by the bus on non-default buses."""
    rule = EventBridgeRule(RULE_NAME, event_bus_name="custom-bus", region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.get_paginator.return_value = _mock_paginator(
        [{"Targets": [{"Id": "t1"}]}, {"Targets": [{"Id": "t2"}]}]
    )

    with _patch_client(mock_client):
        assert rule.target_ids == ["custom-bus-my-rule-t1", "custom-bus-my-rule-t2"]

    mock_client.get_paginator.assert_called_once_with("list_targets_by_rule")


# -- delete -------------------------------------------------------------------


def test_delete_with_targets():
    """Targets are removed page by page before the rule is deleted."""
    rule = EventBridgeRule(RULE_NAME, event_bus_name=PARTNER_BUS, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.get_paginator.return_value = _mock_paginator(
        [
            {"Targets": [{"Id": "t1", "Arn": "arn:1"}, {"Id": "t2", "Arn": "arn:2"}]},
            {"Targets": []},
            {"Targets": [{"Id": "t3", "Arn": "arn:3"}]},
        ]
    )

    with _patch_client(mock_client):
        rule.delete()

    assert mock_client.remove_targets.call_args_list == [
        mock.call(Rule=RULE_NAME, EventBusName=PARTNER_BUS, Ids=["t1", "t2"]),
        mock.call(Rule=RULE_NAME, EventBusName=PARTNER_BUS, Ids=["t3"]),
    ]
    mock_client.delete_rule.assert_called_once_with(Name=RULE_NAME, EventBusName=PARTNER_BUS)


def test_delete_not_found():
    """delete() on a missing rule is a no-op."""
    rule = EventBridgeRule(RULE_NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.get_paginator.return_value.paginate.side_effect = _make_client_error("ResourceNotFoundException")

    with _patch_client(mock_client):
        rule.delete()

    mock_client.delete_rule.assert_not_called()


def test_delete_unexpected_error():
    rule = EventBridgeRule(RULE_NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.get_paginator.return_value = _mock_paginator([{"Targets": []}])
    mock_client.delete_rule.side_effect = _make_client_error("AccessDeniedException")

    with _patch_client(mock_client):
        with pytest.raises(ClientError) as exc_info:
            rule.delete()

    assert exc_info.value.response["Error"]["Code"] == "AccessDeniedException"
