"""
Direct Connect gateway resource wrapper.

Gateway waits surface the ``stateChangeError`` reported by Direct Connect
when the gateway fails to reach the expected state.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import is_aws_error
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.aws.ids import directconnect_gateway_association_id
from awsprovider_core.resource.exceptions import NotFoundError, WaitError, set_last_error

LOG = getLogger(__name__)

STATE_PENDING = "pending"
STATE_AVAILABLE = "available"
STATE_DELETING = "deleting"
STATE_DELETED = "deleted"

CREATED_TIMEOUT = 10 * 60
DELETED_TIMEOUT = 10 * 60


class DirectConnectGateway(AWSResource):
    """Wrapper around a Direct Connect gateway.

    :param gateway_id: Direct Connect gateway ID.
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, gateway_id, region=None, role_arn=None, session=None):
        super().__init__(gateway_id, "directconnect", region=region, role_arn=role_arn, session=session)

    @property
    def gateway_id(self) -> str:
        """Return the gateway ID.

        :rtype: str
        """
        return self._resource_id

    @property
    def gateway(self) -> dict:
        """Return the gateway as described by the Direct Connect API.

        A gateway in the ``deleted`` state is reported as not found.

        :raises NotFoundError: If the gateway doesn't exist.
        """
        response = self._client.describe_direct_connect_gateways(directConnectGatewayId=self._resource_id)
        for gateway in response.get("directConnectGateways", []):
            if gateway.get("directConnectGatewayState") == STATE_DELETED:
                continue
            return gateway
        raise NotFoundError(f"Direct Connect gateway {self._resource_id} not found")

    @property
    def exists(self) -> bool:
        """Return ``True`` if the gateway exists and is not deleted."""
        try:
            _ = self.gateway
            return True
        except NotFoundError:
            return False

    def association_id(self, associated_gateway_id) -> str:
        """Return the state ID of this gateway's association with ``associated_gateway_id``."""
        return directconnect_gateway_association_id(self._resource_id, associated_gateway_id)

    def status_refresh(self):
        """Return a refresh function reporting the gateway state."""
        return self._status_refresh(lambda: self.gateway, "directConnectGatewayState")

    # -- Waiters -------------------------------------------------------------

    def wait_created(self, timeout=CREATED_TIMEOUT) -> dict:
        """Wait for the gateway to become ``available``."""
        return self._wait_enriched(
            pending=[STATE_PENDING],
            target=[STATE_AVAILABLE],
            timeout=timeout,
        )

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the gateway to disappear."""
        self._wait_enriched(
            pending=[STATE_PENDING, STATE_AVAILABLE, STATE_DELETING],
            target=[],
            timeout=timeout,
        )

    def _wait_enriched(self, pending, target, timeout):
        try:
            return self._wait(self.status_refresh(), pending=pending, target=target, timeout=timeout)
        except WaitError as err:
            if err.last_result:
                set_last_error(err, err.last_result.get("stateChangeError"))
            raise

    # -- Delete --------------------------------------------------------------

    def delete(self, wait=True) -> None:
        """Delete the gateway.

        Idempotent -- does nothing if the gateway does not exist.

        :param wait: Block until the gateway is gone.
        """
        try:
            self._client.delete_direct_connect_gateway(directConnectGatewayId=self._resource_id)
            LOG.info("Deleted Direct Connect gateway %s", self._resource_id)
        except ClientError as err:
            if is_aws_error(err, "DirectConnectClientException", "does not exist"):
                LOG.info("Direct Connect gateway %s does not exist.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
