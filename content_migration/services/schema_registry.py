"""Schema registry for the target CMS item types."""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..models.schema import FieldDefinition, ItemTypeDefinition
from ..models.record import SourceEntry
from .api_keys import to_item_api_key

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Registry of the target item types a migration can write to.

    Resolves source content types to item types by normalized api key.
    A content type with no matching item type is not an error: callers
    skip the entries that use it.
    """

    def __init__(
        self,
        item_types: Optional[Iterable[ItemTypeDefinition]] = None,
        fields_mapping: Optional[Dict[str, List[FieldDefinition]]] = None
    ):
        """
        Initialize the schema registry.

        Args:
            item_types: Item types available on the target
            fields_mapping: Item type api key -> field definitions, for item
                types listed without their fields
        """
        self.item_types: Dict[str, ItemTypeDefinition] = {}
        fields_mapping = fields_mapping or {}

        for item_type in item_types or []:
            if not item_type.fields and item_type.api_key in fields_mapping:
                item_type.fields = list(fields_mapping[item_type.api_key])
            self.register_item_type(item_type)

    def register_item_type(self, item_type: ItemTypeDefinition) -> None:
        """Register an item type under its api key."""
        if item_type.api_key in self.item_types:
            logger.warning(f"Replacing item type definition for {item_type.api_key}")
        self.item_types[item_type.api_key] = item_type

    def get_item_type(self, api_key: str) -> Optional[ItemTypeDefinition]:
        """Get an item type by its target api key."""
        return self.item_types.get(api_key)

    def resolve(self, content_type_id: str) -> Optional[ItemTypeDefinition]:
        """
        Resolve a source content type id to a target item type.

        Args:
            content_type_id: Content type id as found in the source export

        Returns:
            The item type, or None when the content type is not mapped
        """
        return self.item_types.get(to_item_api_key(content_type_id))

    def list_item_types(self) -> List[str]:
        """List all registered item type api keys."""
        return list(self.item_types.keys())

    def unresolved_content_types(self, entries: Iterable[SourceEntry]) -> Dict[str, int]:
        """Count entries per content type that has no item type."""
        counts: Dict[str, int] = {}
        for entry in entries:
            if self.resolve(entry.content_type_id) is None:
                counts[entry.content_type_id] = counts.get(entry.content_type_id, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"item_types": [it.to_dict() for it in self.item_types.values()]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaRegistry":
        """
        Create from a catalog dictionary.

        The catalog holds ``item_types`` (each with ``api_key``, ``id`` and
        optionally ``fields``) and an optional ``fields`` mapping of item type
        api key -> field list.
        """
        item_types = [ItemTypeDefinition.from_dict(it) for it in data.get("item_types", [])]
        fields_mapping = {
            api_key: [FieldDefinition.from_dict(f) for f in fields]
            for api_key, fields in data.get("fields", {}).items()
        }
        registry = cls(item_types, fields_mapping)
        logger.info(f"Loaded {len(registry.item_types)} item types")
        return registry

    @classmethod
    def from_json_file(cls, file_path: str) -> "SchemaRegistry":
        """Load a catalog from a JSON file."""
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save_to_json(self, file_path: str) -> None:
        """Save the catalog to a JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
