"""
DMS replication task resource wrapper.

Provides ``exists`` / ``delete()`` support and waiters for the task
lifecycle.  Replication tasks take a while to settle after every change,
so each wait starts with a :data:`_WAIT_DELAY` pause.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.resource.exceptions import NotFoundError

LOG = getLogger(__name__)

STATUS_CREATING = "creating"
STATUS_DELETING = "deleting"
STATUS_MODIFYING = "modifying"
STATUS_READY = "ready"
STATUS_RUNNING = "running"
STATUS_STOPPED = "stopped"
STATUS_STOPPING = "stopping"

DELETED_TIMEOUT = 20 * 60
READY_TIMEOUT = 20 * 60
STOPPED_TIMEOUT = 20 * 60

_WAIT_DELAY = 30
_WAIT_MIN_TIMEOUT = 10


class DMSReplicationTask(AWSResource):
    """Wrapper around a DMS replication task.

    :param task_id: Replication task identifier.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, task_id, region=None, role_arn=None, session=None):
        super().__init__(task_id, "dms", region=region, role_arn=role_arn, session=session)

    @property
    def task_id(self) -> str:
        """Return the replication task identifier.

        :rtype: str
        """
        return self._resource_id

    @property
    def task(self) -> dict:
        """Return the replication task as described by the DMS API.

        :raises NotFoundError: If the task doesn't exist.
        """
        paginator = self._client.get_paginator("describe_replication_tasks")
        try:
            for page in paginator.paginate(
                Filters=[{"Name": "replication-task-id", "Values": [self._resource_id]}],
            ):
                for task in page.get("ReplicationTasks", []):
                    if task.get("ReplicationTaskIdentifier") == self._resource_id:
                        return task
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundFault":
                raise NotFoundError(f"DMS replication task {self._resource_id} not found", last_error=err) from err
            raise
        raise NotFoundError(f"DMS replication task {self._resource_id} not found")

    @property
    def status(self) -> str:
        """Return the current task status, e.g. ``ready`` or ``running``."""
        return self.task["Status"]

    @property
    def exists(self) -> bool:
        """Return ``True`` if the replication task exists."""
        try:
            _ = self.task
            return True
        except NotFoundError:
            return False

    def status_refresh(self):
        """Return a refresh function reporting the task status."""
        return self._status_refresh(lambda: self.task, "Status")

    # -- Waiters -------------------------------------------------------------

    def wait_ready(self, timeout=READY_TIMEOUT) -> dict:
        """Wait for the task to become ``ready`` after a create or modify call."""
        return self._wait(
            self.status_refresh(),
            pending=[STATUS_CREATING, STATUS_MODIFYING],
            target=[STATUS_READY],
            timeout=timeout,
            delay=_WAIT_DELAY,
            min_timeout=_WAIT_MIN_TIMEOUT,
        )

    def wait_stopped(self, timeout=STOPPED_TIMEOUT) -> dict:
        """Wait for the task to become ``stopped``."""
        return self._wait(
            self.status_refresh(),
            pending=[STATUS_READY, STATUS_STOPPING],
            target=[STATUS_STOPPED],
            timeout=timeout,
            delay=_WAIT_DELAY,
            min_timeout=_WAIT_MIN_TIMEOUT,
        )

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the task to disappear."""
        self._wait(
            self.status_refresh(),
            pending=[STATUS_DELETING],
            target=[],
            timeout=timeout,
            delay=_WAIT_DELAY,
            min_timeout=_WAIT_MIN_TIMEOUT,
        )

    # -- Stop / Delete -------------------------------------------------------

    def stop(self, wait=True) -> None:
        """Stop the task if it's running.

        :param wait: Block until the task is ``stopped``.
        """
        if self.status != STATUS_RUNNING:
            LOG.info("DMS replication task %s is not running.", self._resource_id)
            return
        self._client.stop_replication_task(ReplicationTaskArn=self.task["ReplicationTaskArn"])
        LOG.info("Stopping DMS replication task %s", self._resource_id)
        if wait:
            self.wait_stopped()

    def delete(self, wait=True) -> None:
        """Stop (if running) and delete the task.

        Idempotent -- does nothing if the task does not exist.

        :param wait: Block until the task is gone.
        """
        try:
            self.stop()
            self._client.delete_replication_task(ReplicationTaskArn=self.task["ReplicationTaskArn"])
            LOG.info("Deleted DMS replication task %s", self._resource_id)
        except NotFoundError:
            LOG.info("DMS replication task %s does not exist.", self._resource_id)
            return
        except ClientError as err:
            if error_code(err) == "ResourceNotFoundFault":
                LOG.info("DMS replication task %s does not exist.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
