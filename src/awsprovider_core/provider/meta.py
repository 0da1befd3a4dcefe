"""
Provider meta: the typed object handed to every CRUD handler.

It carries the boto3 session, account and region metadata, the tag
configuration and the configured service packages, so handlers never have
to guess what they were given.
"""

from __future__ import annotations

from logging import getLogger

from cached_property import cached_property_with_ttl

from awsprovider_core.aws import get_session
from awsprovider_core.provider.services import default_registry
from awsprovider_core.provider.tags import (
    DefaultTagsConfig,
    IgnoreTagsConfig,
    dict_to_tags,
    tags_to_dict,
)

LOG = getLogger(__name__)


class ProviderMeta:
    """Configured provider state.

    :param session: ``boto3.Session`` all clients are created from.
        Built with :func:`~awsprovider_core.aws.get_session` when omitted.
    :param region: AWS region. Defaults to the session region.
    :param role_arn: IAM role to assume when no session is given.
    :param registry: Service package registry. Defaults to
        :func:`~awsprovider_core.provider.services.default_registry`.
    :param default_tags: Provider-level tags.
    :param ignore_tags: Tags to ignore.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        session=None,
        region=None,
        role_arn=None,
        registry=None,
        default_tags: DefaultTagsConfig = None,
        ignore_tags: IgnoreTagsConfig = None,
    ):
        self._session = session or get_session(region=region, role_arn=role_arn)
        self._region = region or self._session.region_name
        self._registry = registry or default_registry()
        self._default_tags = default_tags or DefaultTagsConfig()
        self._ignore_tags = ignore_tags or IgnoreTagsConfig()
        self._registry.configure(self._session, region=self._region)
        LOG.debug("Configured provider in %s region", self._region)

    @property
    def session(self):
        """The ``boto3.Session``."""
        return self._session

    @property
    def region(self) -> str:
        """The provider region."""
        return self._region

    @property
    def registry(self):
        """The frozen service package registry."""
        return self._registry

    @property
    def default_tags(self) -> DefaultTagsConfig:
        """Provider-level ``default_tags`` configuration."""
        return self._default_tags

    @property
    def ignore_tags(self) -> IgnoreTagsConfig:
        """Provider-level ``ignore_tags`` configuration."""
        return self._ignore_tags

    @cached_property_with_ttl(ttl=3600)
    def account_id(self) -> str:
        """AWS account ID of the provider credentials."""
        return self._session.client("sts", region_name=self._region).get_caller_identity()["Account"]

    @cached_property_with_ttl(ttl=3600)
    def partition(self) -> str:
        """AWS partition of the provider region, e.g. ``aws`` or ``aws-cn``."""
        return self._session.get_partition_for_region(self._region)

    def client(self, service_package_name):
        """Return the client of a configured service package."""
        return self._registry.get(service_package_name).client

    def resource(self, type_name, *args, **kwargs):
        """Instantiate the wrapper of resource type ``type_name`` on the provider session."""
        _, resource_class = self._registry.resource_type(type_name)
        return resource_class(*args, region=self._region, session=self._session, **kwargs)

    def resource_from_id(self, type_name, resource_id):
        """Instantiate the wrapper of ``type_name`` from a stored resource ID.

        Composite IDs are parsed with the wrapper's ``from_id()``.

        :raises MalformedIDError: If the ID can't be parsed.
        """
        _, resource_class = self._registry.resource_type(type_name)
        from_id = getattr(resource_class, "from_id", None)
        if from_id is not None:
            return from_id(resource_id, region=self._region, session=self._session)
        return resource_class(resource_id, region=self._region, session=self._session)

    def tags_for_create(self, resource_tags) -> list[dict]:
        """Return the AWS tag list to send: default tags merged with ``resource_tags``."""
        return dict_to_tags(self._ignore_tags.ignore(self._default_tags.merge_tags(resource_tags)))

    def tags_from_api(self, tags) -> dict:
        """Return tags read from AWS without the ignored ones."""
        return self._ignore_tags.ignore(tags_to_dict(tags))
