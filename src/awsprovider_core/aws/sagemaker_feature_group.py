"""
SageMaker feature group resource wrapper.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.resource.exceptions import NotFoundError, WaitError, set_last_error

LOG = getLogger(__name__)

STATUS_CREATING = "Creating"
STATUS_CREATED = "Created"
STATUS_CREATE_FAILED = "CreateFailed"
STATUS_DELETING = "Deleting"
STATUS_DELETE_FAILED = "DeleteFailed"

CREATED_TIMEOUT = 10 * 60
DELETED_TIMEOUT = 10 * 60


class SageMakerFeatureGroup(AWSResource):
    """Wrapper around a SageMaker Feature Store feature group.

    :param name: Feature group name.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, name, region=None, role_arn=None, session=None):
        super().__init__(name, "sagemaker", region=region, role_arn=role_arn, session=session)

    @property
    def name(self) -> str:
        """Return the feature group name.

        :rtype: str
        """
        return self._resource_id

    @property
    def feature_group(self) -> dict:
        """Return the ``DescribeFeatureGroup`` response.

        :raises NotFoundError: If the feature group doesn't exist.
        """
        try:
            return self._client.describe_feature_group(FeatureGroupName=self._resource_id)
        except ClientError as err:
            if error_code(err) == "ResourceNotFound":
                raise NotFoundError(f"Feature group {self._resource_id} not found", last_error=err) from err
            raise

    @property
    def exists(self) -> bool:
        """Return ``True`` if the feature group exists."""
        try:
            _ = self.feature_group
            return True
        except NotFoundError:
            return False

    def status_refresh(self):
        """Return a refresh function reporting the feature group status."""
        return self._status_refresh(lambda: self.feature_group, "FeatureGroupStatus")

    # -- Waiters -------------------------------------------------------------

    def wait_created(self, timeout=CREATED_TIMEOUT) -> dict:
        """Wait for the feature group to become ``Created``.

        :raises UnexpectedStateError: On ``CreateFailed``, with the
            failure reason attached.
        """
        try:
            return self._wait(
                self.status_refresh(),
                pending=[STATUS_CREATING],
                target=[STATUS_CREATED],
                timeout=timeout,
            )
        except WaitError as err:
            self._set_failure_reason(err, STATUS_CREATE_FAILED)
            raise

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the feature group to disappear.

        :raises UnexpectedStateError: On ``DeleteFailed``, with the
            failure reason attached.
        """
        try:
            self._wait(
                self.status_refresh(),
                pending=[STATUS_DELETING],
                target=[],
                timeout=timeout,
            )
        except WaitError as err:
            self._set_failure_reason(err, STATUS_DELETE_FAILED)
            raise

    @staticmethod
    def _set_failure_reason(err, failed_status):
        output = err.last_result
        if output and output.get("FeatureGroupStatus") == failed_status:
            set_last_error(err, output.get("FailureReason"))

    # -- Delete --------------------------------------------------------------

    def delete(self, wait=True) -> None:
        """Delete the feature group.

        Idempotent -- does nothing if the feature group does not exist.

        :param wait: Block until the feature group is gone.
        """
        try:
            self._client.delete_feature_group(FeatureGroupName=self._resource_id)
            LOG.info("Deleted feature group %s", self._resource_id)
        except ClientError as err:
            if error_code(err) == "ResourceNotFound":
                LOG.info("Feature group %s does not exist.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
