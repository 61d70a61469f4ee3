"""Builds the attribute set for a target record from a source entry."""

import logging
from typing import Optional

from ..errors import ConfigurationMismatch
from ..models.record import RecordAttributes, SourceEntry
from ..models.schema import ItemTypeDefinition, LocaleSet
from .api_keys import camelize, to_field_api_key
from .transformer import ValueTransformer

logger = logging.getLogger(__name__)


class RecordAttributeBuilder:
    """
    Produces the complete attribute set for one entry.

    Every field declared on the item type gets a key: None when the field
    is not localized, a mapping of every configured locale to None when it
    is. Transformed source values then overwrite those defaults. Relational
    fields keep their placeholder.
    """

    def __init__(self, locales: LocaleSet, transformer: Optional[ValueTransformer] = None):
        self.locales = locales
        self.transformer = transformer or ValueTransformer()

    def empty_attributes(self, item_type: ItemTypeDefinition) -> RecordAttributes:
        """Default attribute values for every field of an item type."""
        attributes: RecordAttributes = {}
        for field_def in item_type.fields:
            key = camelize(field_def.api_key)
            attributes[key] = self.locales.empty_values() if field_def.localized else None
        return attributes

    def build(self, entry: SourceEntry, item_type: ItemTypeDefinition) -> RecordAttributes:
        """
        Build the attributes for one entry.

        Args:
            entry: Source entry
            item_type: Item type the entry's content type resolved to

        Returns:
            Attribute mapping keyed by camelized field api key

        Raises:
            ConfigurationMismatch: a source field has no definition on the item type
        """
        attributes = self.empty_attributes(item_type)

        for source_key, raw_value in entry.fields.items():
            api_key = to_field_api_key(source_key)
            field_def = item_type.get_field(api_key)

            if field_def is None:
                raise ConfigurationMismatch(
                    f"Field {source_key!r} of entry {entry.id} has no definition "
                    f"on item type {item_type.api_key!r}",
                    content_type=entry.content_type_id,
                    field_key=source_key,
                )

            if field_def.field_type.is_relational:
                continue

            attributes[camelize(api_key)] = self.transformer.transform(
                field_def, raw_value, self.locales
            )

        return attributes
