"""
Sherpa Updater Orchestrator Module.

Coordinates fetch, selection, download, directory replacement and cleanup.
"""

__all__ = [
    "TargetPreparation",
    "UpdateOrchestrator",
    "UpdateResult",
    "UpdateState",
    "cleanup",
    "prepare_target_directory",
]

from sherpa_updater.orchestrator.core import (
    TargetPreparation,
    UpdateOrchestrator,
    UpdateResult,
    UpdateState,
    cleanup,
    prepare_target_directory,
)
