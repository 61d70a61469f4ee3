"""Clients and scheduling for writing records to the target CMS."""

from .base import BaseRecordClient, DryRunRecordClient
from .api_client import APIRecordClient
from .scheduler import CreationScheduler, CreationJob

__all__ = [
    "BaseRecordClient",
    "DryRunRecordClient",
    "APIRecordClient",
    "CreationScheduler",
    "CreationJob",
]
