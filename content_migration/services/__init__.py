"""Service layer for the migration application."""

from .schema_registry import SchemaRegistry
from .transformer import ValueTransformer
from .record_builder import RecordAttributeBuilder
from .progress import ProgressReporter

__all__ = [
    "SchemaRegistry",
    "ValueTransformer",
    "RecordAttributeBuilder",
    "ProgressReporter",
]
