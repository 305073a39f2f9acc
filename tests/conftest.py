"""Pytest configuration and fixtures."""

import tempfile
import zipfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

ARCHIVE_URL = "https://api.github.com/repos/owner/repo/actions/artifacts/{id}/zip"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep updater environment variables from leaking into tests."""
    for name in (
        "SHERPA_REPOSITORY",
        "SHERPA_TOKEN",
        "SHERPA_DIRECTORY",
        "SHERPA_API_URL",
        "SHERPA_ARCHIVE_PATH",
        "SHERPA_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_zip(temp_dir: Path) -> Callable[..., Path]:
    """
    Build a zip archive from ``{entry_name: content}``.

    Entry names ending in "/" become directory entries. Content may be
    bytes, str, or a (bytes, mode) tuple to store Unix permission bits.
    """

    def _make(entries: dict[str, Any], name: str = "archive.zip") -> Path:
        archive_path = temp_dir / name
        with zipfile.ZipFile(archive_path, "w") as zf:
            for entry_name, content in entries.items():
                info = zipfile.ZipInfo(entry_name)
                info.create_system = 3
                if entry_name.endswith("/"):
                    info.external_attr = (0o40755 << 16) | 0x10
                    zf.writestr(info, b"")
                    continue
                mode = 0o644
                if isinstance(content, tuple):
                    content, mode = content
                if isinstance(content, str):
                    content = content.encode()
                info.external_attr = (0o100000 | mode) << 16
                zf.writestr(info, content)
        return archive_path

    return _make


def artifact_payload(
    artifact_id: int,
    name: str = "sherpa4selfie",
    *,
    expired: bool = False,
    size_in_bytes: int = 2048,
    created_at: str = "2021-03-01T10:00:00Z",
) -> dict[str, Any]:
    """Return one artifact as the registry serializes it."""
    return {
        "id": artifact_id,
        "node_id": f"MDg6QXJ0aWZhY3Q{artifact_id}",
        "name": name,
        "size_in_bytes": size_in_bytes,
        "url": f"https://api.github.com/repos/owner/repo/actions/artifacts/{artifact_id}",
        "archive_download_url": ARCHIVE_URL.format(id=artifact_id),
        "expired": expired,
        "created_at": created_at,
        "updated_at": created_at,
        "expires_at": "2021-05-30T10:00:00Z",
    }


def catalog_payload(*artifacts: dict[str, Any], total_count: int | None = None) -> dict[str, Any]:
    """Return an artifact listing body."""
    return {
        "total_count": len(artifacts) if total_count is None else total_count,
        "artifacts": list(artifacts),
    }


@pytest.fixture
def artifact_data() -> Callable[..., dict[str, Any]]:
    """Factory for registry artifact payloads."""
    return artifact_payload


@pytest.fixture
def catalog_data() -> Callable[..., dict[str, Any]]:
    """Factory for registry listing payloads."""
    return catalog_payload
