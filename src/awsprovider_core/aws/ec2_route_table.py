"""
EC2 route table resource wrapper.

Route tables, their routes and subnet associations are eventually
consistent: a freshly created table may not show up in
``DescribeRouteTables`` for a while, and a route may flicker in and out of
the table right after it's added or removed.  The waiters below absorb
both effects.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code
from awsprovider_core.aws.base import AWSResource
from awsprovider_core.resource.exceptions import NotFoundError, WaitError, set_last_error

LOG = getLogger(__name__)

# Pseudo status of a route table or a route that could be found.
STATUS_READY = "ready"

ASSOCIATION_ASSOCIATING = "associating"
ASSOCIATION_ASSOCIATED = "associated"
ASSOCIATION_DISASSOCIATING = "disassociating"
ASSOCIATION_DISASSOCIATED = "disassociated"
ASSOCIATION_FAILED = "failed"

READY_TIMEOUT = 10 * 60
DELETED_TIMEOUT = 5 * 60
ASSOCIATION_TIMEOUT = 5 * 60
PROPAGATION_TIMEOUT = 2 * 60

# Consecutive "not found" results tolerated while a new route table propagates.
_READY_NOT_FOUND_CHECKS = 40

# A route must be seen (or missed) twice in a row.
_ROUTE_CONTINUOUS_OCCURENCE = 2

_NOT_FOUND_CODES = ("InvalidRouteTableID.NotFound", "InvalidRouteTableId.NotFound")


class EC2RouteTable(AWSResource):
    """Wrapper around a VPC route table.

    :param route_table_id: Route table ID (e.g. ``rtb-0123456789abcdef0``).
    :param region: AWS region.
    :param role_arn: IAM role ARN for cross-account access.
    :param session: Pre-configured ``boto3.Session``.
    """

    def __init__(self, route_table_id, region=None, role_arn=None, session=None):
        super().__init__(route_table_id, "ec2", region=region, role_arn=role_arn, session=session)

    @property
    def route_table_id(self) -> str:
        """Return the route table ID.

        :rtype: str
        """
        return self._resource_id

    # -- Finders -------------------------------------------------------------

    def _find_route_table(self, **kwargs) -> dict:
        try:
            response = self._client.describe_route_tables(**kwargs)
        except ClientError as err:
            if error_code(err) in _NOT_FOUND_CODES:
                raise NotFoundError(f"Route table {self._resource_id} not found", last_error=err) from err
            raise
        route_tables = response.get("RouteTables", [])
        if not route_tables:
            raise NotFoundError("Empty result")
        return route_tables[0]

    @property
    def route_table(self) -> dict:
        """Return the route table as described by the EC2 API.

        :raises NotFoundError: If the route table doesn't exist.
        """
        return self._find_route_table(RouteTableIds=[self._resource_id])

    def association(self, association_id) -> dict:
        """Return the subnet or gateway association ``association_id``.

        A ``disassociated`` association is reported as not found.

        :raises NotFoundError: If the association doesn't exist.
        """
        route_table = self._find_route_table(
            Filters=[{"Name": "association.route-table-association-id", "Values": [association_id]}],
        )
        for association in route_table.get("Associations", []):
            if association.get("RouteTableAssociationId") != association_id:
                continue
            if association.get("AssociationState", {}).get("State") == ASSOCIATION_DISASSOCIATED:
                raise NotFoundError(ASSOCIATION_DISASSOCIATED)
            return association
        raise NotFoundError(f"Route table association {association_id} not found")

    def route(self, destination_cidr_block) -> dict:
        """Return the route to ``destination_cidr_block``.

        :raises NotFoundError: If there is no such route.
        """
        for route in self.route_table.get("Routes", []):
            if destination_cidr_block in (route.get("DestinationCidrBlock"), route.get("DestinationIpv6CidrBlock")):
                return route
        raise NotFoundError(f"Route to {destination_cidr_block} not found in {self._resource_id}")

    @property
    def exists(self) -> bool:
        """Return ``True`` if the route table exists."""
        try:
            _ = self.route_table
            return True
        except NotFoundError:
            return False

    # -- Refresh functions ---------------------------------------------------

    def status_refresh(self):
        """Return a refresh function reporting ``ready`` while the table can be found."""
        return self._found_refresh(lambda: self.route_table)

    def route_status_refresh(self, destination_cidr_block):
        """Return a refresh function reporting ``ready`` while the route can be found."""
        return self._found_refresh(lambda: self.route(destination_cidr_block))

    def association_status_refresh(self, association_id):
        """Return a refresh function reporting the association state.

        The snapshot is the ``AssociationState`` structure.
        """

        def _refresh():
            try:
                association = self.association(association_id)
            except NotFoundError:
                return None, ""
            state = association.get("AssociationState", {})
            return state, state.get("State", "")

        return _refresh

    @staticmethod
    def _found_refresh(finder):
        def _refresh():
            try:
                return finder(), STATUS_READY
            except NotFoundError:
                return None, ""

        return _refresh

    # -- Waiters -------------------------------------------------------------

    def wait_ready(self, timeout=READY_TIMEOUT) -> dict:
        """Wait for a new route table to become visible."""
        return self._wait(
            self.status_refresh(),
            pending=[],
            target=[STATUS_READY],
            timeout=timeout,
            not_found_checks=_READY_NOT_FOUND_CHECKS,
        )

    def wait_deleted(self, timeout=DELETED_TIMEOUT) -> None:
        """Wait for the route table to disappear."""
        self._wait(
            self.status_refresh(),
            pending=[STATUS_READY],
            target=[],
            timeout=timeout,
        )

    def wait_route_ready(self, destination_cidr_block, timeout=PROPAGATION_TIMEOUT) -> dict:
        """Wait for a route to show up consistently."""
        return self._wait(
            self.route_status_refresh(destination_cidr_block),
            pending=[],
            target=[STATUS_READY],
            timeout=timeout,
            continuous_target_occurence=_ROUTE_CONTINUOUS_OCCURENCE,
        )

    def wait_route_deleted(self, destination_cidr_block, timeout=PROPAGATION_TIMEOUT) -> None:
        """Wait for a route to be gone consistently."""
        self._wait(
            self.route_status_refresh(destination_cidr_block),
            pending=[STATUS_READY],
            target=[],
            timeout=timeout,
            continuous_target_occurence=_ROUTE_CONTINUOUS_OCCURENCE,
        )

    def wait_association_created(self, association_id, timeout=ASSOCIATION_TIMEOUT) -> dict:
        """Wait for an association to become ``associated``."""
        return self._wait_association(
            association_id,
            pending=[ASSOCIATION_ASSOCIATING],
            target=[ASSOCIATION_ASSOCIATED],
            timeout=timeout,
        )

    def wait_association_updated(self, association_id, timeout=ASSOCIATION_TIMEOUT) -> dict:
        """Wait for a replaced association to become ``associated``."""
        return self._wait_association(
            association_id,
            pending=[ASSOCIATION_ASSOCIATING],
            target=[ASSOCIATION_ASSOCIATED],
            timeout=timeout,
        )

    def wait_association_deleted(self, association_id, timeout=ASSOCIATION_TIMEOUT) -> None:
        """Wait for an association to disappear."""
        self._wait_association(
            association_id,
            pending=[ASSOCIATION_DISASSOCIATING, ASSOCIATION_ASSOCIATED],
            target=[],
            timeout=timeout,
        )

    def _wait_association(self, association_id, pending, target, timeout):
        try:
            return self._wait(
                self.association_status_refresh(association_id),
                pending=pending,
                target=target,
                timeout=timeout,
            )
        except WaitError as err:
            state = err.last_result
            if state and state.get("State") == ASSOCIATION_FAILED:
                set_last_error(err, state.get("StatusMessage"))
            raise

    # -- Associate / Disassociate --------------------------------------------

    def associate(self, subnet_id=None, gateway_id=None, wait=True) -> str:
        """Associate the route table with a subnet or a gateway.

        :return: The association ID.
        """
        kwargs = {"RouteTableId": self._resource_id}
        if subnet_id:
            kwargs["SubnetId"] = subnet_id
        if gateway_id:
            kwargs["GatewayId"] = gateway_id
        association_id = self._client.associate_route_table(**kwargs)["AssociationId"]
        LOG.info("Associated route table %s (%s)", self._resource_id, association_id)
        if wait:
            self.wait_association_created(association_id)
        return association_id

    def disassociate(self, association_id, wait=True) -> None:
        """Remove an association.

        Idempotent -- does nothing if the association does not exist.
        """
        try:
            self._client.disassociate_route_table(AssociationId=association_id)
            LOG.info("Disassociated %s from route table %s", association_id, self._resource_id)
        except ClientError as err:
            if error_code(err) == "InvalidAssociationID.NotFound":
                LOG.info("Route table association %s does not exist.", association_id)
                return
            raise
        if wait:
            self.wait_association_deleted(association_id)

    # -- Delete --------------------------------------------------------------

    def delete(self, wait=True) -> None:
        """Remove non-main associations, then delete the route table.

        Idempotent -- does nothing if the route table does not exist.
        """
        try:
            for association in self.route_table.get("Associations", []):
                if association.get("Main"):
                    continue
                self.disassociate(association["RouteTableAssociationId"])
            self._client.delete_route_table(RouteTableId=self._resource_id)
            LOG.info("Deleted route table %s", self._resource_id)
        except NotFoundError:
            LOG.info("Route table %s does not exist.", self._resource_id)
            return
        except ClientError as err:
            if error_code(err) in _NOT_FOUND_CODES:
                LOG.info("Route table %s does not exist.", self._resource_id)
                return
            raise
        if wait:
            self.wait_deleted()
