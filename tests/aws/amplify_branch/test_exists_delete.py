"""Tests for AmplifyBranch."""

from unittest import mock

import pytest
from botocore.exceptions import ClientError

from awsprovider_core.aws.amplify_branch import AmplifyBranch
from awsprovider_core.exceptions import MalformedIDError

APP_ID = "app-123"


def _make_client_error(code, message="test"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "test_operation")


def test_resource_id():
    branch = AmplifyBranch(APP_ID, "main")
    assert branch.resource_id == "app-123/main"


def test_from_id_branch_with_slash():
    """Everything after the first slash is the branch name."""
    branch = AmplifyBranch.from_id("app-123/feature/login", region="us-east-1")

    assert branch.app_id == APP_ID
    assert branch.branch_name == "feature/login"


def test_from_id_malformed():
    with pytest.raises(MalformedIDError, match="APPID/BRANCHNAME"):
        AmplifyBranch.from_id("app-123")


def test_exists():
    branch = AmplifyBranch(APP_ID, "main", region="us-east-1")
    mock_client = mock.MagicMock()

    with mock.patch.object(AmplifyBranch, "_client", new_callable=mock.PropertyMock, return_value=mock_client):
        assert branch.exists is True

    mock_client.get_branch.assert_called_once_with(appId=APP_ID, branchName="main")


def test_exists_not_found():
    branch = AmplifyBranch(APP_ID, "main", region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.get_branch.side_effect = _make_client_error("NotFoundException")

    with mock.patch.object(AmplifyBranch, "_client", new_callable=mock.PropertyMock, return_value=mock_client):
        assert branch.exists is False


def test_delete():
    branch = AmplifyBranch(APP_ID, "feature/login", region="us-east-1")
    mock_client = mock.MagicMock()

    with mock.patch.object(AmplifyBranch, "_client", new_callable=mock.PropertyMock, return_value=mock_client):
        branch.delete()

    mock_client.delete_branch.assert_called_once_with(appId=APP_ID, branchName="feature/login")


def test_delete_not_found():
    branch = AmplifyBranch(APP_ID, "main", region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.delete_branch.side_effect = _make_client_error("NotFoundException")

    with mock.patch.object(AmplifyBranch, "_client", new_callable=mock.PropertyMock, return_value=mock_client):
        branch.delete()  # Should not raise


def test_delete_unexpected_error():
    branch = AmplifyBranch(APP_ID, "main", region="us-east-1")
    mock_client = mock.MagicMock()
    mock_client.delete_branch.side_effect = _make_client_error("BadRequestException")

    with mock.patch.object(AmplifyBranch, "_client", new_callable=mock.PropertyMock, return_value=mock_client):
        with pytest.raises(ClientError):
            branch.delete()
