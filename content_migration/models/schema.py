"""Schema models for target item types and their fields."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class FieldType(str, Enum):
    """Field types known to the target CMS."""
    LINK = "link"
    LINKS = "links"
    FILE = "file"
    GALLERY = "gallery"
    LAT_LON = "lat_lon"
    STRING = "string"
    TEXT = "text"
    JSON = "json"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    DATE_TIME = "date_time"
    COLOR = "color"
    SEO = "seo"
    SLUG = "slug"
    VIDEO = "video"
    RICH_TEXT = "rich_text"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        """Parse a raw type tag, mapping unknown tags to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def is_relational(self) -> bool:
        """Whether values of this type reference other records or assets."""
        return self in RELATIONAL_FIELD_TYPES


RELATIONAL_FIELD_TYPES = frozenset({
    FieldType.LINK,
    FieldType.LINKS,
    FieldType.FILE,
    FieldType.GALLERY,
})


@dataclass
class FieldDefinition:
    """Definition of a field on a target item type."""
    api_key: str
    field_type: FieldType = FieldType.STRING
    localized: bool = False
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "api_key": self.api_key,
            "field_type": self.field_type.value,
            "localized": self.localized,
        }
        if self.label:
            result["label"] = self.label
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDefinition":
        """Create from dictionary representation."""
        return cls(
            api_key=data.get("api_key", ""),
            field_type=FieldType.parse(data.get("field_type", "string")),
            localized=bool(data.get("localized", False)),
            label=data.get("label", ""),
        )


@dataclass
class ItemTypeDefinition:
    """Schema for one kind of record in the target CMS."""
    api_key: str
    id: str
    fields: List[FieldDefinition] = field(default_factory=list)
    name: str = ""

    def get_field(self, api_key: str) -> Optional[FieldDefinition]:
        """Look up a field definition by its api key."""
        for field_def in self.fields:
            if field_def.api_key == api_key:
                return field_def
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "api_key": self.api_key,
            "id": self.id,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemTypeDefinition":
        """Create from dictionary representation."""
        return cls(
            api_key=data.get("api_key", ""),
            id=str(data.get("id", "")),
            fields=[FieldDefinition.from_dict(f) for f in data.get("fields", [])],
            name=data.get("name", ""),
        )


@dataclass
class LocaleSet:
    """Locales configured for a run and the one used as fallback."""
    locales: List[str]
    default_locale: str

    def __post_init__(self):
        if self.default_locale not in self.locales:
            raise ValueError(
                f"Default locale {self.default_locale!r} is not one of {self.locales}"
            )

    def __iter__(self):
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    def empty_values(self) -> Dict[str, Any]:
        """A mapping of every configured locale to None."""
        return {locale: None for locale in self.locales}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"locales": list(self.locales), "default_locale": self.default_locale}

