"""
Services module.

Contains the export job orchestrating the Pemo and Qoyod clients.
"""

from .sync_job import (
    MethodNotAllowedError,
    SourceFetchError,
    SyncJob,
    SyncResponse,
    SyncSummary,
)

__all__ = [
    "MethodNotAllowedError",
    "SourceFetchError",
    "SyncJob",
    "SyncResponse",
    "SyncSummary",
]
