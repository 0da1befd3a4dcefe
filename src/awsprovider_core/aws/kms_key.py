"""
KMS key resource wrapper.

KMS is eventually consistent across its endpoints: a change made through
one request may be invisible to the next one.  Property changes are
therefore confirmed over several consecutive reads before they are
trusted.  A key scheduled for deletion is treated as gone.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.resource.exceptions import NotFoundError
from awsprovider_core.resource.retry import retry_when_aws_error_code_equals
from awsprovider_core.resource.state import wait_until

LOG = getLogger(__name__)

STATE_ENABLED = "Enabled"
STATE_DISABLED = "Disabled"
STATE_PENDING_DELETION = "PendingDeletion"
STATE_PENDING_IMPORT = "PendingImport"

DEFAULT_POLICY_NAME = "default"

DELETED_TIMEOUT = 20 * 60
DESCRIPTION_PROPAGATION_TIMEOUT = 5 * 60
KEY_MATERIAL_IMPORTED_TIMEOUT = 10 * 60
STATE_PROPAGATION_TIMEOUT = 20 * 60
# How long a new IAM principal may take to become usable in a key policy.
IAM_PROPAGATION_TIMEOUT = 2 * 60

_PROPAGATION_OCCURENCE = 5
_STATE_PROPAGATION_OCCURENCE = 15
_PROPAGATION_MIN_TIMEOUT = 2


class KMSKey(AWSResource):
    """Wrapper around a KMS key.

    :param key_id: Key ID or ARN.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, key_id, region=None, role_arn=None, session=None):
        super().__init__(key_id, "kms", region=region, role_arn=role_arn, session=session)

    @property
    def key_id(self) -> str:
        """Return the key ID.

        :rtype: str
        """
        return self._resource_id

    @property
    def metadata(self) -> dict:
        """Return the key metadata.

        :raises NotFoundError: If the key doesn't exist or is pending deletion.
        """
        try:
            metadata = self._client.describe_key(KeyId=self._resource_id)["KeyMetadata"]
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                raise NotFoundError(f"KMS key {self._resource_id} not found", last_error=err) from err
            raise
        if metadata.get("KeyState") == STATE_PENDING_DELETION:
            raise NotFoundError(f"KMS key {self._resource_id} is pending deletion")
        return metadata

    @property
    def exists(self) -> bool:
        """Return ``True`` if the key exists and is not pending deletion."""
        try:
            _ = self.metadata
            return True
        except NotFoundError:
            return False

    def status_refresh(self):
        """Return a refresh function reporting the key state."""
        return self._status_refresh(lambda: self.metadata, "KeyState")

    # -- Waiters -------------------------------------------------------------

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the key to be scheduled for deletion."""
        self._wait(
            self.status_refresh(),
            pending=[STATE_DISABLED, STATE_ENABLED],
            target=[],
            timeout=timeout,
        )

    def wait_key_material_imported(self, timeout=KEY_MATERIAL_IMPORTED_TIMEOUT) -> dict:
        """Wait for imported key material to be accepted."""
        return self._wait(
            self.status_refresh(),
            pending=[STATE_PENDING_IMPORT],
            target=[STATE_DISABLED, STATE_ENABLED],
            timeout=timeout,
        )

    def wait_description_propagated(self, description, timeout=DESCRIPTION_PROPAGATION_TIMEOUT) -> None:
        """Wait until every read returns ``description``."""
        self._wait_propagated(
            lambda metadata: metadata.get("Description", "") == description,
            timeout=timeout,
            occurence=_PROPAGATION_OCCURENCE,
        )

    def wait_enabled_propagated(self, enabled, timeout=STATE_PROPAGATION_TIMEOUT) -> None:
        """Wait until every read reports the key as ``enabled``."""
        self._wait_propagated(
            lambda metadata: bool(metadata.get("Enabled")) == enabled,
            timeout=timeout,
            occurence=_STATE_PROPAGATION_OCCURENCE,
        )

    def _wait_propagated(self, predicate, timeout, occurence):
        def _check():
            try:
                return predicate(self.metadata)
            except NotFoundError:
                return False

        wait_until(
            timeout,
            _check,
            continuous_target_occurence=occurence,
            min_timeout=_PROPAGATION_MIN_TIMEOUT,
        )

    # -- Mutations -----------------------------------------------------------

    def put_policy(self, policy) -> None:
        """Replace the key policy.

        ``MalformedPolicyDocumentException`` is retried for
        :data:`IAM_PROPAGATION_TIMEOUT`: KMS rejects principals that
        IAM hasn't propagated yet.
        """
        retry_when_aws_error_code_equals(
            IAM_PROPAGATION_TIMEOUT,
            lambda: self._client.put_key_policy(
                KeyId=self._resource_id,
                PolicyName=DEFAULT_POLICY_NAME,
                Policy=policy,
            ),
            "MalformedPolicyDocumentException",
        )
        LOG.info("Updated policy of KMS key %s", self._resource_id)

    def set_enabled(self, enabled) -> None:
        """Enable or disable the key and wait for the change to propagate."""
        if enabled:
            self._client.enable_key(KeyId=self._resource_id)
        else:
            self._client.disable_key(KeyId=self._resource_id)
        LOG.info("%s KMS key %s", "Enabled" if enabled else "Disabled", self._resource_id)
        self.wait_enabled_propagated(enabled)

    def delete(self, pending_window_in_days=30, wait=True) -> None:
        """Schedule the key for deletion.

        Idempotent -- does nothing if the key does not exist or is already
        pending deletion.

        :param pending_window_in_days: Waiting period before KMS destroys the key.
        :param wait: Block until the key is reported as pending deletion.
        """
        try:
            self._client.schedule_key_deletion(
                KeyId=self._resource_id,
                PendingWindowInDays=pending_window_in_days,
            )
            LOG.info("Scheduled KMS key %s for deletion", self._resource_id)
        except ClientError as err:
            if error_code(err) == "NotFoundException":
                LOG.info("KMS key %s does not exist.", self._resource_id)
                return
            if error_code(err) == "KMSInvalidStateException" and not self.exists:
                LOG.info("KMS key %s is already pending deletion.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
