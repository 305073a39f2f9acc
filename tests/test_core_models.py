"""Tests for core models and exceptions."""

from typing import Any, Callable

import pytest
from pydantic import ValidationError

from sherpa_updater.core.exceptions import (
    ArchiveError,
    HTTPStatusError,
    IllegalPathError,
    LocalFilesystemError,
    NotFoundError,
    RegistryError,
    TransportError,
    UpdaterError,
    WriteError,
    format_exception,
)
from sherpa_updater.core.models import Artifact, ByteSize, Catalog, SizeUnit


class TestByteSize:
    """Tests for ByteSize formatting."""

    @pytest.mark.parametrize(
        "size_in_bytes,value,unit",
        [
            (0, 0.0, SizeUnit.BYTES),
            (1024, 1024.0, SizeUnit.BYTES),
            (1536, 1.5, SizeUnit.KILOBYTES),
            (3 * 1024 * 1024, 3.0, SizeUnit.MEGABYTES),
            (5 * 1024**3 + 512 * 1024**2, 5.5, SizeUnit.GIGABYTES),
            (2 * 1024**4, 2.0, SizeUnit.TERABYTES),
        ],
    )
    def test_from_bytes(self, size_in_bytes: int, value: float, unit: SizeUnit) -> None:
        """Sizes pick the largest unit they strictly exceed."""
        size = ByteSize.from_bytes(size_in_bytes)
        assert size.unit == unit
        assert size.value == pytest.approx(value)

    def test_str(self) -> None:
        """ByteSize renders with two decimals and the unit name."""
        assert str(ByteSize(1.5, SizeUnit.MEGABYTES)) == "1.50 megabytes"

    def test_frozen(self) -> None:
        """ByteSize is immutable."""
        size = ByteSize(1.0, SizeUnit.BYTES)
        with pytest.raises(AttributeError):
            size.value = 2.0


class TestArtifact:
    """Tests for Artifact model."""

    def test_from_registry_payload(self, artifact_data: Callable[..., dict[str, Any]]) -> None:
        """Artifact deserializes the registry fields."""
        artifact = Artifact.model_validate(artifact_data(7, size_in_bytes=1536))
        assert artifact.id == 7
        assert artifact.name == "sherpa4selfie"
        assert artifact.expired is False
        assert artifact.created_at == "2021-03-01T10:00:00Z"
        assert artifact.size() == ByteSize(1.5, SizeUnit.KILOBYTES)

    def test_negative_size_rejected(self, artifact_data: Callable[..., dict[str, Any]]) -> None:
        """A negative size is not a valid artifact."""
        with pytest.raises(ValidationError):
            Artifact.model_validate(artifact_data(1, size_in_bytes=-1))

    def test_extra_fields_ignored(self, artifact_data: Callable[..., dict[str, Any]]) -> None:
        """Unknown registry fields do not break deserialization."""
        payload = artifact_data(1)
        payload["workflow_run"] = {"id": 99}
        artifact = Artifact.model_validate(payload)
        assert not hasattr(artifact, "workflow_run")

    def test_immutable(self, artifact_data: Callable[..., dict[str, Any]]) -> None:
        """Artifacts cannot be mutated."""
        artifact = Artifact.model_validate(artifact_data(1))
        with pytest.raises(ValidationError):
            artifact.name = "other"


class TestCatalog:
    """Tests for Catalog selection policy."""

    def test_has_artifacts_trusts_count(
        self,
        artifact_data: Callable[..., dict[str, Any]],
        catalog_data: Callable[..., dict[str, Any]],
    ) -> None:
        """has_artifacts follows total_count even when the list disagrees."""
        empty_count = Catalog.model_validate(catalog_data(artifact_data(1), total_count=0))
        assert empty_count.has_artifacts() is False

        empty_list = Catalog.model_validate(catalog_data(total_count=3))
        assert empty_list.has_artifacts() is True

    def test_populate_by_field_name(self) -> None:
        """Catalog can be built with the Python field name."""
        assert Catalog(count=0).has_artifacts() is False

    def test_select_first_match(
        self,
        artifact_data: Callable[..., dict[str, Any]],
        catalog_data: Callable[..., dict[str, Any]],
    ) -> None:
        """The first active match wins even if a later one is also active."""
        catalog = Catalog.model_validate(
            catalog_data(
                artifact_data(1, name="other"),
                artifact_data(2, expired=True),
                artifact_data(3, created_at="2021-01-01T00:00:00Z"),
                artifact_data(4, created_at="2022-01-01T00:00:00Z"),
            )
        )
        assert catalog.select_latest_active("sherpa4selfie").id == 3

    def test_select_requires_exact_name(
        self,
        artifact_data: Callable[..., dict[str, Any]],
        catalog_data: Callable[..., dict[str, Any]],
    ) -> None:
        """Names are compared exactly."""
        catalog = Catalog.model_validate(
            catalog_data(artifact_data(1, name="Sherpa4Selfie"), artifact_data(2, name="sherpa4selfie-dev"))
        )
        with pytest.raises(NotFoundError):
            catalog.select_latest_active("sherpa4selfie")

    def test_select_all_expired(
        self,
        artifact_data: Callable[..., dict[str, Any]],
        catalog_data: Callable[..., dict[str, Any]],
    ) -> None:
        """Only expired matches raise NotFoundError carrying the name."""
        catalog = Catalog.model_validate(catalog_data(artifact_data(1, expired=True)))
        with pytest.raises(NotFoundError) as exc_info:
            catalog.select_latest_active("sherpa4selfie")
        assert exc_info.value.name == "sherpa4selfie"
        assert exc_info.value.details == {"name": "sherpa4selfie"}


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self) -> None:
        """Errors are grouped under UpdaterError."""
        assert issubclass(TransportError, RegistryError)
        assert issubclass(HTTPStatusError, RegistryError)
        assert issubclass(WriteError, LocalFilesystemError)
        assert issubclass(IllegalPathError, ArchiveError)
        for cls in (RegistryError, LocalFilesystemError, ArchiveError, NotFoundError):
            assert issubclass(cls, UpdaterError)

    def test_str_includes_details(self) -> None:
        """String form appends structured details."""
        error = HTTPStatusError("bad status", status_code=404, url="https://x")
        assert str(error) == "bad status (status_code=404, url=https://x)"
        assert error.status_code == 404

    def test_to_dict(self) -> None:
        """to_dict serializes type, message and details."""
        error = IllegalPathError("escape", entry_name="../evil", resolved_path="/tmp/evil")
        assert error.to_dict() == {
            "error_type": "IllegalPathError",
            "message": "escape",
            "details": {"entry_name": "../evil", "resolved_path": "/tmp/evil"},
        }

    def test_format_exception(self) -> None:
        """Foreign exceptions are prefixed with their class name."""
        assert format_exception(ValueError("boom")) == "ValueError: boom"
        assert format_exception(UpdaterError("plain")) == "plain"
