"""
Common ground of the resource wrappers.

Every wrapper answers ``exists`` and ``delete()``, talks to AWS through one
lazily created boto3 client, and turns its finder into a status refresh
function that the waiter in :mod:`awsprovider_core.resource.state` can poll.
"""

from abc import ABC, abstractmethod
from logging import getLogger

from awsprovider_core.aws import get_client
from awsprovider_core.resource.exceptions import NotFoundError
from awsprovider_core.resource.state import StateChangeConf, wait_for_state

LOG = getLogger(__name__)


class AWSResource(ABC):
    """A single AWS resource addressed by an identifier.

    :param resource_id: Identifier the resource is stored under: an ID, a
        name, an ARN or a composite ID.
    :param service_name: boto3 service name, e.g. ``"dms"`` or ``"lex-models"``.
    :param region: AWS region.
    :param role_arn: IAM role to assume when no ``session`` is given.
    :param session: ``boto3.Session`` to create the client from, typically
        the provider session.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, resource_id, service_name, region=None, role_arn=None, session=None
    ):
        self._resource_id = resource_id
        self._service_name = service_name
        self._region = region
        self._role_arn = role_arn
        self._session = session
        self._client_instance = None

    @property
    def resource_id(self) -> str:
        """Identifier the resource is stored under."""
        return self._resource_id

    @property
    def _client(self):
        """boto3 client, created on first use."""
        if self._client_instance is None:
            self._client_instance = self._make_client()
            LOG.debug("Created %s client in %s region", self._service_name, self._client_instance.meta.region_name)
        return self._client_instance

    def _make_client(self):
        if self._session is None:
            return get_client(self._service_name, region=self._region, role_arn=self._role_arn)
        return self._session.client(self._service_name, region_name=self._region)

    @property
    @abstractmethod
    def exists(self) -> bool:
        """``True`` if the resource can be found."""

    @abstractmethod
    def delete(self) -> None:
        """Delete the resource. Deleting a missing resource is not an error."""

    def _status_refresh(self, finder, status_key):
        """Build a refresh function out of a finder.

        :param finder: Zero-argument callable returning the API object or
            raising :class:`NotFoundError`.
        :param status_key: Key of the status field in the API object.
        """

        def _refresh():
            try:
                output = finder()
            except NotFoundError:
                return None, ""
            return output, output.get(status_key, "")

        return _refresh

    def _wait(self, refresh, pending, target, timeout, **kwargs):  # pylint: disable=too-many-arguments
        """Wait for the resource to move from ``pending`` to ``target`` states.

        Extra keyword arguments are passed to :class:`StateChangeConf`.
        """
        LOG.debug(
            "Waiting up to %ss for %s %s to become %s",
            timeout,
            self.__class__.__name__,
            self._resource_id,
            list(target) or "absent",
        )
        return wait_for_state(
            StateChangeConf(
                pending=pending,
                target=target,
                refresh=refresh,
                timeout=timeout,
                **kwargs,
            )
        )
