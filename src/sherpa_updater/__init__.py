"""
Sherpa Updater - CI artifact directory synchronisation.

Fetches the latest non-expired build artifact from a hosted CI registry
and replaces the contents of a local directory with the archive contents.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
