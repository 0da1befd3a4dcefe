"""
Provider layer: service package registry, provider meta and tag configuration.
"""

from awsprovider_core.provider.meta import ProviderMeta
from awsprovider_core.provider.registry import ServicePackageRegistry
from awsprovider_core.provider.service_package import BotoServicePackage, ServicePackage
from awsprovider_core.provider.services import default_registry
from awsprovider_core.provider.tags import DefaultTagsConfig, IgnoreTagsConfig

__all__ = [
    "BotoServicePackage",
    "DefaultTagsConfig",
    "IgnoreTagsConfig",
    "ProviderMeta",
    "ServicePackage",
    "ServicePackageRegistry",
    "default_registry",
]
