"""Waiter tests for SageMakerFeatureGroup."""

from unittest import mock

import pytest

from awsprovider_core.aws.sagemaker_feature_group import SageMakerFeatureGroup
from awsprovider_core.resource.exceptions import UnexpectedStateError

NAME = "customers"


def _feature_group(status, reason=None):
    output = {"FeatureGroupName": NAME, "FeatureGroupStatus": status}
    if reason:
        output["FailureReason"] = reason
    return output


def _patch_client(mock_client):
    return mock.patch.object(
        SageMakerFeatureGroup, "_client", new_callable=mock.PropertyMock, return_value=mock_client
    )


def test_wait_created(fake_clock):
    group = SageMakerFeatureGroup(NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_feature_group.side_effect = [_feature_group("Creating"), _feature_group("Created")]

    with _patch_client(mock_client):
        assert group.wait_created()["FeatureGroupStatus"] == "Created"


def test_wait_created_failure_reason(fake_clock):
    """CreateFailed carries the FailureReason into the error."""
    group = SageMakerFeatureGroup(NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_feature_group.side_effect = [
        _feature_group("Creating"),
        _feature_group("CreateFailed", "Role is missing glue permissions"),
    ]

    with _patch_client(mock_client):
        with pytest.raises(UnexpectedStateError) as exc_info:
            group.wait_created()

    err = exc_info.value
    assert err.state == "CreateFailed"
    assert err.last_error == "Role is missing glue permissions"
    assert "Role is missing glue permissions" in str(err)


def test_wait_deleted_failure_reason(fake_clock):
    group = SageMakerFeatureGroup(NAME, region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.describe_feature_group.side_effect = [
        _feature_group("Deleting"),
        _feature_group("DeleteFailed", "Offline store is in use"),
    ]

    with _patch_client(mock_client):
        with pytest.raises(UnexpectedStateError) as exc_info:
            group.wait_deleted()

    assert exc_info.value.last_error == "Offline store is in use"
