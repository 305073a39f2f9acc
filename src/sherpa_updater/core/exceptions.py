"""
Sherpa Updater Exception Hierarchy.

Defines every error the update pipeline can raise. All of them are fatal
to a run: nothing is retried or recovered internally, the first failure
is surfaced to the caller.
"""

from typing import Any


class UpdaterError(Exception):
    """
    Root of every error an update run can end with.

    The CLI catches this one type and prints it as the single cause of a
    failed run; subclasses add the path, URL or status code involved.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Args:
            message: What went wrong, shown to the user as is
            details: Context such as path or url, appended by __str__
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Render the message followed by key=value details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Return the error type, message and details as plain data."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(UpdaterError):
    """
    Errors in configuration validation.

    Raised before any network activity when a required option
    (repository, token, directory) is missing or malformed.
    """

    def __init__(
        self,
        message: str,
        *,
        missing: list[str] | None = None,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if missing:
            details["missing"] = missing
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, details=details)
        self.missing = missing or []
        self.config_key = config_key


class RegistryError(UpdaterError):
    """
    Errors talking to the artifact registry.

    Raised when:
    - The request cannot be sent or the connection drops
    - The registry answers with a non-success status
    - The response body cannot be decoded
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if url:
            details["url"] = url

        super().__init__(message, details=details)
        self.url = url


class TransportError(RegistryError):
    """Raised when a request fails at the network level."""


class HTTPStatusError(RegistryError):
    """Raised when the registry answers with anything other than 200."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        url: str | None = None,
    ):
        super().__init__(message, url=url, details={"status_code": status_code})
        self.status_code = status_code


class DecodeError(RegistryError):
    """Raised when a response body is not valid JSON or does not match the schema."""

    def __init__(
        self,
        message: str = "Failed to decode registry response",
        *,
        url: str | None = None,
        validation_errors: list[str] | None = None,
    ):
        details = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        super().__init__(message, url=url, details=details)
        self.validation_errors = validation_errors or []


class NotFoundError(UpdaterError):
    """Raised when no artifact in the catalog qualifies for selection."""

    def __init__(
        self,
        message: str = "No suitable artifacts found",
        *,
        name: str | None = None,
    ):
        details = {}
        if name:
            details["name"] = name
        super().__init__(message, details=details)
        self.name = name


class LocalFilesystemError(UpdaterError):
    """
    Errors while touching the local filesystem.

    The target directory has no transactional guarantee: a failure
    part-way through leaves whatever state the filesystem reached.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if path:
            details["path"] = path

        super().__init__(message, details=details)
        self.path = path


class WriteError(LocalFilesystemError):
    """Raised when a local file cannot be created or written."""


class DirectoryCreateError(LocalFilesystemError):
    """Raised when the target directory cannot be created."""


class DirectoryCleanError(LocalFilesystemError):
    """Raised when an entry of the target directory cannot be removed."""


class CleanupError(LocalFilesystemError):
    """Raised when the temporary archive cannot be deleted after extraction."""


class ArchiveError(UpdaterError):
    """
    Errors in archive integrity or safety.

    Entries extracted before the failure are left in place.
    """

    def __init__(
        self,
        message: str,
        *,
        archive_path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if archive_path:
            details["archive_path"] = archive_path

        super().__init__(message, details=details)
        self.archive_path = archive_path


class ArchiveOpenError(ArchiveError):
    """Raised when the archive is missing, unreadable or not a zip file."""


class IllegalPathError(ArchiveError):
    """
    Raised when an archive entry resolves outside the destination directory.

    This security-critical error aborts extraction at the offending entry.
    """

    def __init__(
        self,
        message: str,
        *,
        entry_name: str | None = None,
        resolved_path: str | None = None,
        archive_path: str | None = None,
    ):
        details = {}
        if entry_name:
            details["entry_name"] = entry_name
        if resolved_path:
            details["resolved_path"] = resolved_path
        super().__init__(message, archive_path=archive_path, details=details)
        self.entry_name = entry_name
        self.resolved_path = resolved_path


def format_exception(error: Exception) -> str:
    """Return the one-line text the CLI prints for a failed run."""
    if isinstance(error, UpdaterError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
