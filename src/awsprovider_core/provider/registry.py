"""
Service package registry.

The registry is built once at provider start, then frozen: the first call
to :meth:`ServicePackageRegistry.service_packages` (or an explicit
:meth:`~ServicePackageRegistry.freeze`) closes it for registration.
"""

from __future__ import annotations

import threading
from logging import getLogger

from awsprovider_core.provider.exceptions import (
    DuplicateServicePackageError,
    RegistrationClosedError,
    ResourceTypeNotFoundError,
    ServicePackageNotFoundError,
)

LOG = getLogger(__name__)


class ServicePackageRegistry:
    """Table of service packages keyed by name.

    :param service_packages: Packages to register right away.
    """

    def __init__(self, service_packages=None):
        self._lock = threading.Lock()
        self._packages = {}
        self._closed = False
        for service_package in service_packages or []:
            self.register(service_package)

    @property
    def closed(self) -> bool:
        """``True`` once registration is closed."""
        return self._closed

    def register(self, service_package) -> None:
        """Register ``service_package``.

        :raises RegistrationClosedError: If the registry is frozen.
        :raises DuplicateServicePackageError: If the name is taken.
        """
        with self._lock:
            if self._closed:
                raise RegistrationClosedError("Service package registration is closed")
            name = service_package.name
            if name in self._packages:
                raise DuplicateServicePackageError(f"A service package named {name!r} is already registered")
            self._packages[name] = service_package
            LOG.debug("Registered service package %s", name)

    def freeze(self) -> None:
        """Close the registry for registration."""
        with self._lock:
            self._closed = True

    def service_packages(self) -> dict:
        """Return registered packages by name. Closes registration."""
        with self._lock:
            self._closed = True
            return dict(self._packages)

    def get(self, name):
        """Return the service package registered as ``name``.

        :raises ServicePackageNotFoundError: If there is no such package.
        """
        with self._lock:
            try:
                return self._packages[name]
            except KeyError:
                raise ServicePackageNotFoundError(f"No service package named {name!r}") from None

    def resource_type(self, type_name):
        """Return the wrapper class of resource type ``type_name`` and its package.

        :raises ResourceTypeNotFoundError: If no package implements it.
        """
        for service_package in self.service_packages().values():
            resource_class = service_package.resources().get(type_name)
            if resource_class is not None:
                return service_package, resource_class
        raise ResourceTypeNotFoundError(f"No service package implements {type_name!r}")

    def configure(self, session, region=None) -> None:
        """Configure every registered package with ``session``. Closes registration."""
        for service_package in self.service_packages().values():
            service_package.configure(session, region=region)
