"""
Sherpa Updater Core Module.

Provides the data model and error taxonomy shared by every component.
"""

__all__ = [
    "Artifact",
    "ByteSize",
    "Catalog",
    "SizeUnit",
    # Exceptions
    "UpdaterError",
    "ConfigurationError",
    "RegistryError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "NotFoundError",
    "LocalFilesystemError",
    "WriteError",
    "DirectoryCreateError",
    "DirectoryCleanError",
    "CleanupError",
    "ArchiveError",
    "ArchiveOpenError",
    "IllegalPathError",
]

from sherpa_updater.core.exceptions import (
    ArchiveError,
    ArchiveOpenError,
    CleanupError,
    ConfigurationError,
    DecodeError,
    DirectoryCleanError,
    DirectoryCreateError,
    HTTPStatusError,
    IllegalPathError,
    LocalFilesystemError,
    NotFoundError,
    RegistryError,
    TransportError,
    UpdaterError,
    WriteError,
)
from sherpa_updater.core.models import Artifact, ByteSize, Catalog, SizeUnit
