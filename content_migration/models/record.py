"""Record models for migration data."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .schema import LocaleSet

# Target attribute set for one record, keyed by camelized field api key.
RecordAttributes = Dict[str, Any]


@dataclass
class SourceEntry:
    """An entry exported from the source content platform."""
    id: str
    content_type_id: str
    fields: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    published_version: Optional[int] = None

    @property
    def is_published(self) -> bool:
        """Whether the entry had a published version at the source."""
        return bool(self.published_version)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "content_type_id": self.content_type_id,
            "published_version": self.published_version,
            "fields": self.fields,
        }


@dataclass
class SourceData:
    """Everything read from a source export that the migration needs."""
    entries: List[SourceEntry]
    locales: LocaleSet

    @property
    def default_locale(self) -> str:
        return self.locales.default_locale


@dataclass
class RunResult:
    """Outcome of a record-creation run."""
    id_map: Dict[str, str] = field(default_factory=dict)
    publish_list: List[str] = field(default_factory=list)

    def add(self, entry: SourceEntry, record_id: str) -> None:
        """Record one successful creation."""
        self.id_map[entry.id] = record_id
        if entry.is_published:
            self.publish_list.append(record_id)

    def merge(self, other: "RunResult") -> "RunResult":
        """Fold another result into this one, keeping the first id seen per entry."""
        to_publish = set(other.publish_list)
        for entry_id, record_id in other.id_map.items():
            if entry_id in self.id_map:
                continue
            self.id_map[entry_id] = record_id
            if record_id in to_publish:
                self.publish_list.append(record_id)
        return self

    @property
    def created_count(self) -> int:
        return len(self.id_map)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id_map": dict(self.id_map),
            "publish_list": list(self.publish_list),
        }
