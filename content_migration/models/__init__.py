"""Data models for the migration application."""

from .schema import (
    FieldType,
    FieldDefinition,
    ItemTypeDefinition,
    LocaleSet,
    RELATIONAL_FIELD_TYPES,
)
from .record import (
    RecordAttributes,
    SourceEntry,
    SourceData,
    RunResult,
)
from .migration import (
    MigrationConfig,
    MigrationRun,
    MigrationStep,
    MigrationStatus,
    DEFAULT_CONCURRENCY,
)
from .gallery import Gallery

__all__ = [
    "FieldType",
    "FieldDefinition",
    "ItemTypeDefinition",
    "LocaleSet",
    "RELATIONAL_FIELD_TYPES",
    "RecordAttributes",
    "SourceEntry",
    "SourceData",
    "RunResult",
    "MigrationConfig",
    "MigrationRun",
    "MigrationStep",
    "MigrationStatus",
    "DEFAULT_CONCURRENCY",
    "Gallery",
]
