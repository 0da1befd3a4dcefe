"""Provider exceptions."""

from awsprovider_core.exceptions import AWSProviderException


class ProviderException(AWSProviderException):
    """Provider configuration related exception"""


class RegistrationClosedError(ProviderException):
    """A service package was registered after the registry got frozen"""


class DuplicateServicePackageError(ProviderException):
    """A service package with the same name is already registered"""


class ServicePackageNotFoundError(ProviderException, KeyError):
    """No service package is registered under the requested name"""


class ResourceTypeNotFoundError(ProviderException, KeyError):
    """No service package implements the requested resource type"""


class ServicePackageNotConfiguredError(ProviderException):
    """A service package client was requested before ``configure()``"""
