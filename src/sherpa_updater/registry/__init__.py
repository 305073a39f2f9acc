"""
Sherpa Updater Registry Module.

HTTP access to the CI artifact registry.
"""

__all__ = ["RegistryClient"]

from sherpa_updater.registry.client import RegistryClient
