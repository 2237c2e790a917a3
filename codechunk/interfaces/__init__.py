"""Public interface definitions for external collaborators.

The core only talks to storage through :class:`IObjectStore`; concrete
adapters live in ``codechunk/providers/`` and are chosen at the composition
root (``handler.py``, ``main.py``, the CLI).

    Interface       →  Concrete implementations
    ─────────────────────────────────────────────────
    IObjectStore    →  S3ObjectStore, LocalObjectStore
"""

from codechunk.interfaces.object_store import IObjectStore

__all__ = ["IObjectStore"]
