"""
Sherpa Updater Archive Module.

Safe extraction of downloaded zip archives.
"""

__all__ = ["extract", "is_within_directory"]

from sherpa_updater.archive.extractor import extract, is_within_directory
