"""
Core of the AWS provider: state-transition waiters, retry-wrapped mutations,
composite resource identifiers and the service package registry.
"""

__version__ = "0.1.0"
