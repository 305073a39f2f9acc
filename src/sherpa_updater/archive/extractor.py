"""
Zip archive extraction with path-traversal protection.

Entries are written one at a time in archive order. An entry whose
resolved path leaves the destination directory aborts the whole
extraction; entries already written stay on disk.
"""

import logging
import os
import shutil
import stat
import zipfile
from pathlib import Path

from sherpa_updater.core.exceptions import (
    ArchiveOpenError,
    IllegalPathError,
    WriteError,
)

logger = logging.getLogger(__name__)

# zipfile.ZipInfo.create_system value for archives built on Unix
_UNIX_CREATE_SYSTEM = 3
_COPY_CHUNK_SIZE = 64 * 1024


def is_within_directory(directory: str | Path, target: str | Path) -> bool:
    """
    Return True if ``target`` lies strictly inside ``directory``.

    Both paths are normalized (``..`` collapsed) and made absolute before
    comparison. The directory itself does not count as inside.
    """
    root = os.path.abspath(directory).rstrip(os.sep) + os.sep
    return os.path.abspath(target).startswith(root)


def _entry_mode(info: zipfile.ZipInfo) -> int | None:
    """Return the permission bits stored for an entry, if any."""
    if info.create_system != _UNIX_CREATE_SYSTEM:
        return None
    mode = stat.S_IMODE(info.external_attr >> 16)
    return mode or None


def extract(archive_path: str | Path, dest_dir: str | Path) -> list[Path]:
    """
    Extract a zip archive into ``dest_dir``.

    Args:
        archive_path: Path of the zip file to read
        dest_dir: Directory receiving the entries

    Returns:
        Destination paths of every entry (files and directories) in
        archive order

    Raises:
        ArchiveOpenError: If the archive is missing, unreadable or corrupt
        IllegalPathError: If an entry resolves outside ``dest_dir``
        WriteError: If an entry cannot be written to disk
    """
    archive = str(archive_path)
    destination = os.path.normpath(dest_dir)
    extracted: list[Path] = []

    try:
        zf = zipfile.ZipFile(archive)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveOpenError(
            f"Cannot open archive: {e}",
            archive_path=archive,
        ) from e

    with zf:
        for info in zf.infolist():
            target = os.path.normpath(os.path.join(destination, info.filename))

            if not is_within_directory(destination, target):
                logger.warning(
                    f"Aborting extraction of {archive}: entry {info.filename!r} "
                    f"escapes {destination}, {len(extracted)} entries already written"
                )
                raise IllegalPathError(
                    f"{target}: illegal file path",
                    entry_name=info.filename,
                    resolved_path=target,
                    archive_path=archive,
                )

            extracted.append(Path(target))

            if info.is_dir():
                try:
                    os.makedirs(target, exist_ok=True)
                except OSError as e:
                    raise WriteError(f"Cannot create directory: {e}", path=target) from e
                logger.debug(f"Created directory {target}")
                continue

            _write_entry(zf, info, target, archive)
            logger.debug(f"Extracted {target} ({info.file_size} bytes)")

    logger.info(f"Extracted {len(extracted)} entries from {archive} into {destination}")
    return extracted


def _write_entry(
    zf: zipfile.ZipFile, info: zipfile.ZipInfo, target: str, archive: str
) -> None:
    """Copy one file entry to ``target``, closing both handles before returning."""
    try:
        os.makedirs(os.path.dirname(target), exist_ok=True)
    except OSError as e:
        raise WriteError(f"Cannot create directory: {e}", path=target) from e

    try:
        with zf.open(info) as source, open(target, "wb") as sink:
            shutil.copyfileobj(source, sink, _COPY_CHUNK_SIZE)
    except (zipfile.BadZipFile, EOFError) as e:
        raise ArchiveOpenError(
            f"Corrupt archive entry {info.filename!r}: {e}",
            archive_path=archive,
        ) from e
    # Encrypted entries and unsupported compression methods
    except (NotImplementedError, RuntimeError) as e:
        raise ArchiveOpenError(
            f"Cannot read archive entry {info.filename!r}: {e}",
            archive_path=archive,
        ) from e
    except OSError as e:
        raise WriteError(f"Cannot write file: {e}", path=target) from e

    mode = _entry_mode(info)
    if mode is not None:
        try:
            os.chmod(target, mode)
        except OSError as e:
            raise WriteError(f"Cannot set permissions: {e}", path=target) from e
