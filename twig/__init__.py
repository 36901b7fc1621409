"""
twig - a local, single-user version-control engine.

Snapshots a directory tree into content-addressed storage, keeps an
immutable commit graph, and reconciles branches with three-way merge.
"""

__version__ = "0.1.0"

from twig.config import Config
from twig.repository import Repository

__all__ = ["Config", "Repository", "__version__"]
