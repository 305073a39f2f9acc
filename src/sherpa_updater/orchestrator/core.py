"""
Orchestrator Core - the download, verify and replace pipeline.

Runs one update as a linear sequence of steps. Any failure stops the run
where it happened; nothing is retried and nothing is rolled back.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from sherpa_updater.archive.extractor import extract
from sherpa_updater.config import ARTIFACT_NAME, UpdaterConfig
from sherpa_updater.core.exceptions import (
    CleanupError,
    DirectoryCleanError,
    DirectoryCreateError,
    UpdaterError,
)
from sherpa_updater.core.models import Artifact
from sherpa_updater.registry.client import RegistryClient

logger = logging.getLogger(__name__)


class UpdateState(Enum):
    """Steps of an update run."""

    FETCHING = "fetching"
    SELECTING = "selecting"
    DOWNLOADING = "downloading"
    PREPARING_TARGET = "preparing_target"
    EXTRACTING = "extracting"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    NOTHING_TO_DO = "nothing_to_do"
    FAILED = "failed"


class TargetPreparation(Enum):
    """What preparing the target directory did."""

    CREATED = "created"
    CLEARED = "cleared"


@dataclass
class UpdateResult:
    """Outcome of a run that reached a successful terminal state."""

    state: UpdateState
    artifact: Artifact | None = None
    archive_bytes: int = 0
    preparation: TargetPreparation | None = None
    extracted_paths: list[Path] = field(default_factory=list)

    def summary(self) -> str:
        """Generate a human-readable summary of the run."""
        if self.artifact is None:
            return f"Status: {self.state.value}"

        return "\n".join(
            [
                f"Status: {self.state.value}",
                f"Artifact: {self.artifact.name} (id {self.artifact.id})",
                f"Size: {self.artifact.size()}",
                f"Created at: {self.artifact.created_at}",
                f"Target: {self.preparation.value if self.preparation else '-'}",
                f"Extracted entries: {len(self.extracted_paths)}",
            ]
        )


TransitionCallback = Callable[[UpdateState, Artifact | None], None]
Extractor = Callable[[Path, Path], list[Path]]


def prepare_target_directory(directory: Path) -> TargetPreparation:
    """
    Make ``directory`` an existing, empty directory.

    A missing directory is created (single level). An existing one keeps
    its own inode but loses every child.

    Raises:
        DirectoryCreateError: If the directory cannot be created
        DirectoryCleanError: If a child cannot be removed; earlier children
            are already gone
    """
    if not directory.exists():
        logger.info(f"Target directory {directory} does not exist, creating it")
        try:
            directory.mkdir(mode=0o755, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(
                f"Cannot create target directory: {e}", path=str(directory)
            ) from e
        return TargetPreparation.CREATED

    logger.info(f"Removing contents of {directory}")
    try:
        children = sorted(directory.iterdir())
    except OSError as e:
        raise DirectoryCleanError(
            f"Cannot list target directory: {e}", path=str(directory)
        ) from e

    removed = 0
    for child in children:
        try:
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        except OSError as e:
            logger.warning(
                f"Target directory {directory} left partially cleaned: "
                f"{removed} of {len(children)} entries removed"
            )
            raise DirectoryCleanError(
                f"Cannot remove {child}: {e}", path=str(child)
            ) from e
        removed += 1

    return TargetPreparation.CLEARED


def cleanup(archive_path: Path) -> None:
    """
    Delete the temporary archive.

    Raises:
        CleanupError: If the file cannot be removed
    """
    try:
        os.remove(archive_path)
    except OSError as e:
        raise CleanupError(f"Cannot remove archive: {e}", path=str(archive_path)) from e


class UpdateOrchestrator:
    """
    Update pipeline engine.

    Fetching -> Selecting -> Downloading -> PreparingTarget -> Extracting
    -> CleaningUp -> Done, with a short-circuit to NothingToDo when the
    registry reports no artifacts. The temporary archive is left in place
    when a later step fails.
    """

    def __init__(
        self,
        config: UpdaterConfig,
        client: RegistryClient | None = None,
        extractor: Extractor = extract,
        on_transition: TransitionCallback | None = None,
        artifact_name: str = ARTIFACT_NAME,
    ):
        """Initialize orchestrator with configuration and collaborators."""
        self._config = config
        self._client = client
        self._extractor = extractor
        self._on_transition = on_transition
        self._artifact_name = artifact_name
        self.state: UpdateState | None = None
        self.failed_state: UpdateState | None = None

    def _enter(self, state: UpdateState, artifact: Artifact | None = None) -> None:
        self.state = state
        logger.debug(f"Entering state {state.value}")
        if self._on_transition:
            self._on_transition(state, artifact)

    def run(self) -> UpdateResult:
        """
        Execute the full update pipeline.

        Returns:
            UpdateResult in state DONE or NOTHING_TO_DO

        Raises:
            UpdaterError: The first error raised by any step, unchanged
        """
        client = self._client or RegistryClient(
            self._config.token,
            timeout_seconds=self._config.timeout_seconds,
        )
        try:
            return self._run(client)
        except UpdaterError as e:
            self.failed_state = self.state
            self.state = UpdateState.FAILED
            logger.error(f"Update failed while {self.failed_state.value}: {e}")
            raise
        finally:
            if self._client is None:
                client.close()

    def _run(self, client: RegistryClient) -> UpdateResult:
        config = self._config

        self._enter(UpdateState.FETCHING)
        catalog = client.list_artifacts(config.artifacts_url)

        self._enter(UpdateState.SELECTING)
        if not catalog.has_artifacts():
            logger.info(f"No artifacts reported for {config.repository}")
            self._enter(UpdateState.NOTHING_TO_DO)
            return UpdateResult(state=UpdateState.NOTHING_TO_DO)
        artifact = catalog.select_latest_active(self._artifact_name)

        self._enter(UpdateState.DOWNLOADING, artifact)
        archive_bytes = client.download(artifact.archive_download_url, config.archive_path)

        self._enter(UpdateState.PREPARING_TARGET, artifact)
        preparation = prepare_target_directory(config.directory)

        self._enter(UpdateState.EXTRACTING, artifact)
        extracted = self._extractor(config.archive_path, config.directory)

        self._enter(UpdateState.CLEANING_UP, artifact)
        cleanup(config.archive_path)

        self._enter(UpdateState.DONE, artifact)
        return UpdateResult(
            state=UpdateState.DONE,
            artifact=artifact,
            archive_bytes=archive_bytes,
            preparation=preparation,
            extracted_paths=extracted,
        )
