"""
Updater configuration.

One immutable value built from the CLI options (or their environment
variables) and handed to the orchestrator.
"""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from sherpa_updater.core.exceptions import ConfigurationError

ARTIFACT_NAME = "sherpa4selfie"

DEFAULT_REPOSITORY = "pjotrsavitski/sherpa-helper"
DEFAULT_DIRECTORY = "sherpa4selfie"
DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_ARCHIVE_PATH = "dist.zip"

_REPOSITORY_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")


class UpdaterConfig(BaseModel):
    """Configuration for one update run."""

    repository: str
    token: str
    directory: Path
    api_base_url: str = DEFAULT_API_BASE_URL
    archive_path: Path = Path(DEFAULT_ARCHIVE_PATH)
    timeout_seconds: float | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def artifacts_url(self) -> str:
        """URL of the repository's artifact listing."""
        return f"{self.api_base_url.rstrip('/')}/repos/{self.repository}/actions/artifacts"


def load_config(
    repository: str | None,
    token: str | None,
    directory: str | Path | None,
    *,
    api_base_url: str | None = None,
    archive_path: str | Path | None = None,
    timeout_seconds: float | None = None,
) -> UpdaterConfig:
    """
    Validate raw option values and build an UpdaterConfig.

    Raises:
        ConfigurationError: If a required value is empty or the repository
            is not of the ``owner/name`` form
    """
    provided = {"repository": repository, "token": token, "directory": directory}
    missing = [key for key, value in provided.items() if not value or not str(value).strip()]
    if missing:
        raise ConfigurationError(
            "At least one of the parameters is missing!",
            missing=missing,
        )

    if not _REPOSITORY_PATTERN.match(repository):
        raise ConfigurationError(
            f"Repository must look like owner/name, got '{repository}'",
            config_key="repository",
        )

    if timeout_seconds is not None and timeout_seconds <= 0:
        raise ConfigurationError(
            "Timeout must be a positive number of seconds",
            config_key="timeout_seconds",
        )

    return UpdaterConfig(
        repository=repository,
        token=token,
        directory=Path(directory),
        api_base_url=api_base_url or DEFAULT_API_BASE_URL,
        archive_path=Path(archive_path or DEFAULT_ARCHIVE_PATH),
        timeout_seconds=timeout_seconds,
    )
