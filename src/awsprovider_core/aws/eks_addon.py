"""
EKS add-on resource wrapper.

Add-ons are addressed by ``cluster-name:addon-name``.  When an add-on
fails to settle, its health issues explain why; waits attach them to the
raised error.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.aws.ids import EKS_ADDON_ID
from awsprovider_core.resource.exceptions import NotFoundError, WaitError, set_last_error

LOG = getLogger(__name__)

STATUS_ACTIVE = "ACTIVE"
STATUS_CREATING = "CREATING"
STATUS_CREATE_FAILED = "CREATE_FAILED"
STATUS_DEGRADED = "DEGRADED"
STATUS_DELETING = "DELETING"
STATUS_DELETE_FAILED = "DELETE_FAILED"
STATUS_UPDATING = "UPDATING"

UPDATE_STATUS_IN_PROGRESS = "InProgress"
UPDATE_STATUS_SUCCESSFUL = "Successful"

CREATED_TIMEOUT = 20 * 60
DELETED_TIMEOUT = 40 * 60
UPDATED_TIMEOUT = 20 * 60


def health_issues_error(addon) -> str:
    """Join the health issues of an add-on into a single message.

    :param addon: The ``addon`` structure of a ``DescribeAddon`` response.
    :return: One ``CODE: message (resources)`` line per issue, or an empty string.
    """
    lines = []
    for issue in addon.get("health", {}).get("issues", []):
        line = f"{issue.get('code', '')}: {issue.get('message', '')}"
        if issue.get("resourceIds"):
            line += f" ({', '.join(issue['resourceIds'])})"
        lines.append(line)
    return "\n".join(lines)


class EKSAddon(AWSResource):
    """Wrapper around an EKS add-on.

    :param cluster_name: Name of the EKS cluster.
    :param addon_name: Name of the add-on, e.g. ``vpc-cni``.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, cluster_name, addon_name, region=None, role_arn=None, session=None
    ):
        super().__init__(
            EKS_ADDON_ID.create(cluster_name, addon_name),
            "eks",
            region=region,
            role_arn=role_arn,
            session=session,
        )
        self._cluster_name = cluster_name
        self._addon_name = addon_name

    @classmethod
    def from_id(cls, resource_id, region=None, role_arn=None, session=None) -> EKSAddon:
        """Build the wrapper from a ``cluster-name:addon-name`` ID.

        :raises MalformedIDError: If ``resource_id`` can't be parsed.
        """
        cluster_name, addon_name = EKS_ADDON_ID.parse(resource_id)
        return cls(cluster_name, addon_name, region=region, role_arn=role_arn, session=session)

    @property
    def cluster_name(self) -> str:
        """Return the cluster name."""
        return self._cluster_name

    @property
    def addon_name(self) -> str:
        """Return the add-on name."""
        return self._addon_name

    @property
    def addon(self) -> dict:
        """Return the add-on as described by the EKS API.

        :raises NotFoundError: If the add-on doesn't exist.
        """
        try:
            return self._client.describe_addon(clusterName=self._cluster_name, addonName=self._addon_name)["addon"]
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundException":
                raise NotFoundError(f"EKS add-on {self._resource_id} not found", last_error=err) from err
            raise

    def update(self, update_id) -> dict:
        """Return an add-on update.

        :raises NotFoundError: If the update doesn't exist.
        """
        try:
            return self._client.describe_update(
                name=self._cluster_name,
                updateId=update_id,
                addonName=self._addon_name,
            )["update"]
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundException":
                raise NotFoundError(f"EKS add-on update {update_id} not found", last_error=err) from err
            raise

    @property
    def exists(self) -> bool:
        """Return ``True`` if the add-on exists."""
        try:
            _ = self.addon
            return True
        except NotFoundError:
            return False

    def status_refresh(self):
        """Return a refresh function reporting the add-on status."""
        return self._status_refresh(lambda: self.addon, "status")

    def update_status_refresh(self, update_id):
        """Return a refresh function reporting the status of an add-on update."""
        return self._status_refresh(lambda: self.update(update_id), "status")

    # -- Waiters -------------------------------------------------------------

    def wait_created(self, timeout=CREATED_TIMEOUT) -> dict:
        """Wait for the add-on to become ``ACTIVE``."""
        try:
            return self._wait(
                self.status_refresh(),
                pending=[STATUS_CREATING, STATUS_DEGRADED],
                target=[STATUS_ACTIVE],
                timeout=timeout,
            )
        except WaitError as err:
            self._set_health_issues(err, STATUS_CREATE_FAILED)
            raise

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the add-on to disappear."""
        try:
            self._wait(
                self.status_refresh(),
                pending=[STATUS_ACTIVE, STATUS_DELETING],
                target=[],
                timeout=timeout,
            )
        except WaitError as err:
            self._set_health_issues(err, STATUS_DELETE_FAILED)
            raise

    def wait_update_successful(self, update_id, timeout=UPDATED_TIMEOUT) -> dict:
        """Wait for an add-on update to succeed.

        :raises UnexpectedStateError: If the update fails or is cancelled,
            with the update errors attached.
        """
        try:
            return self._wait(
                self.update_status_refresh(update_id),
                pending=[UPDATE_STATUS_IN_PROGRESS],
                target=[UPDATE_STATUS_SUCCESSFUL],
                timeout=timeout,
            )
        except WaitError as err:
            if err.last_result:
                set_last_error(
                    err,
                    "\n".join(
                        f"{error.get('errorCode', '')}: {error.get('errorMessage', '')}"
                        for error in err.last_result.get("errors", [])
                    ),
                )
            raise

    @staticmethod
    def _set_health_issues(err, failed_status):
        addon = err.last_result
        if addon and addon.get("status") == failed_status:
            set_last_error(err, health_issues_error(addon))

    # -- Delete --------------------------------------------------------------

    def delete(self, wait=True) -> None:
        """Delete the add-on.

        Idempotent -- does nothing if the add-on does not exist.

        :param wait: Block until the add-on is gone.
        """
        try:
            self._client.delete_addon(clusterName=self._cluster_name, addonName=self._addon_name)
            LOG.info("Deleted EKS add-on %s", self._resource_id)
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundException":
                LOG.info("EKS add-on %s does not exist.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
