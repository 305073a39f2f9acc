"""
Core data models for Sherpa Updater.

Registry payloads are deserialized into these immutable, type-safe schemas.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sherpa_updater.core.exceptions import NotFoundError

KILOBYTE = 1024
MEGABYTE = KILOBYTE * 1024
GIGABYTE = MEGABYTE * 1024
TERABYTE = GIGABYTE * 1024


class SizeUnit(Enum):
    """Units used when presenting an artifact size."""

    BYTES = "bytes"
    KILOBYTES = "kilobytes"
    MEGABYTES = "megabytes"
    GIGABYTES = "gigabytes"
    TERABYTES = "terabytes"


@dataclass(frozen=True)
class ByteSize:
    """A size magnitude paired with its unit."""

    value: float
    unit: SizeUnit

    @classmethod
    def from_bytes(cls, size_in_bytes: int) -> "ByteSize":
        """Pick the largest unit the size strictly exceeds."""
        for threshold, unit in (
            (TERABYTE, SizeUnit.TERABYTES),
            (GIGABYTE, SizeUnit.GIGABYTES),
            (MEGABYTE, SizeUnit.MEGABYTES),
            (KILOBYTE, SizeUnit.KILOBYTES),
        ):
            if size_in_bytes > threshold:
                return cls(value=size_in_bytes / threshold, unit=unit)
        return cls(value=float(size_in_bytes), unit=SizeUnit.BYTES)

    def __str__(self) -> str:
        return f"{self.value:.2f} {self.unit.value}"


class Artifact(BaseModel):
    """One build output record from the CI registry."""

    id: int
    node_id: str
    name: str
    size_in_bytes: int = Field(ge=0)
    url: str
    archive_download_url: str
    expired: bool
    # Timestamps are kept as the registry sends them
    created_at: str = ""
    updated_at: str = ""
    expires_at: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("created_at", "updated_at", "expires_at", mode="before")
    @classmethod
    def _null_timestamp(cls, value: str | None) -> str:
        return "" if value is None else value

    def size(self) -> ByteSize:
        """Return the artifact size in a human-friendly unit."""
        return ByteSize.from_bytes(self.size_in_bytes)


class Catalog(BaseModel):
    """
    Artifact listing returned by one registry query.

    ``count`` is the registry's ``total_count`` and is advisory: it is not
    required to match ``len(artifacts)``.
    """

    count: int = Field(alias="total_count")
    artifacts: tuple[Artifact, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    def has_artifacts(self) -> bool:
        """Return True if the registry reported at least one artifact."""
        return self.count > 0

    def select_latest_active(self, name: str) -> Artifact:
        """
        Return the first non-expired artifact called ``name``.

        The registry lists artifacts newest first, so the first match in
        received order is treated as the latest. Timestamps are not compared.

        Raises:
            NotFoundError: If no artifact qualifies
        """
        for artifact in self.artifacts:
            if artifact.name == name and not artifact.expired:
                return artifact

        raise NotFoundError(f"No suitable artifacts found for '{name}'", name=name)
