"""
Service packages.

A service package groups the resource types of one AWS service together
with the boto3 client they share.  Packages are registered with a
:class:`~awsprovider_core.provider.registry.ServicePackageRegistry`
and configured once, when the provider session is known.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger

from awsprovider_core.provider.exceptions import ServicePackageNotConfiguredError

LOG = getLogger(__name__)


class ServicePackage(ABC):
    """Interface every service package implements."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name of the service package."""

    @abstractmethod
    def configure(self, session, region=None) -> None:
        """Create the service client(s) from a ``boto3.Session``."""

    @property
    @abstractmethod
    def client(self):
        """The configured boto3 client."""

    @abstractmethod
    def resources(self) -> dict:
        """Return resource type names mapped to their wrapper classes."""

    @abstractmethod
    def data_sources(self) -> dict:
        """Return data source names mapped to their implementations."""

    @abstractmethod
    def documentation_categories(self) -> list[str]:
        """Return the documentation sidebar categories of the package."""


class BotoServicePackage(ServicePackage):
    """Service package backed by a single boto3 client.

    Subclasses set :attr:`package_name`, :attr:`service_name` and the
    class-level mappings.
    """

    #: Unique package name.
    package_name = None
    #: boto3 service name.
    service_name = None
    #: Resource type name -> :class:`~awsprovider_core.aws.base.AWSResource` subclass.
    resource_types = {}
    data_source_types = {}
    categories = []

    def __init__(self):
        self._client = None
        self._session = None
        self._region = None

    @property
    def name(self) -> str:
        return self.package_name

    def configure(self, session, region=None) -> None:
        self._session = session
        self._region = region
        self._client = session.client(self.service_name, region_name=region)
        LOG.debug("Configured service package %s", self.package_name)

    @property
    def client(self):
        if self._client is None:
            raise ServicePackageNotConfiguredError(f"Service package {self.package_name} is not configured")
        return self._client

    def resources(self) -> dict:
        return dict(self.resource_types)

    def data_sources(self) -> dict:
        return dict(self.data_source_types)

    def documentation_categories(self) -> list[str]:
        return list(self.categories)
