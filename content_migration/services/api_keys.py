"""Conversion between source identifiers and target api keys."""

import re
from typing import Dict, Iterable

from ..errors import ConfigurationMismatch

# Attribute names the target API reserves on records and item types.
RESERVED_FIELD_KEYS = frozenset({
    "id",
    "type",
    "position",
    "is_valid",
    "created_at",
    "updated_at",
    "attributes",
    "fields",
    "item_type",
    "is_singleton",
    "seo_meta_tags",
    "parent_id",
    "parent",
    "children",
    "status",
    "meta",
    "eq",
    "neq",
    "all_in",
    "any_in",
    "exists",
    "not_in",
    "in",
    "lt",
    "lte",
    "gt",
    "gte",
    "matches",
    "not_matches",
    "publication_scheduled_at",
    "unpublishing_scheduled_at",
    "published_at",
    "first_published_at",
    "creator",
    "locales",
})

RESERVED_ITEM_KEYS = frozenset({"item", "items"})

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s\-]+")
_UNDERSCORE_WORD = re.compile(r"_+([a-zA-Z0-9])")


def _check_key(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationMismatch(f"Invalid identifier: {value!r}", field_key=value)
    return value.strip()


def decamelize(value: str) -> str:
    """Convert a camelCase identifier to snake_case (``heroImage`` -> ``hero_image``)."""
    value = _check_key(value)
    value = _SEPARATORS.sub("_", value)
    return _WORD_BOUNDARY.sub("_", value).lower()


def camelize(value: str) -> str:
    """Convert a snake_case api key to camelCase (``hero_image`` -> ``heroImage``)."""
    value = _check_key(value)
    head, *rest = value.split("_", 1)
    if not rest:
        return value
    return head + _UNDERSCORE_WORD.sub(lambda m: m.group(1).upper(), "_" + rest[0])


def to_item_api_key(content_type_id: str) -> str:
    """Api key of the item type a source content type maps to."""
    api_key = decamelize(content_type_id)
    if api_key in RESERVED_ITEM_KEYS:
        return f"{api_key}_model"
    return api_key


def to_field_api_key(field_id: str) -> str:
    """Api key of the target field a source field maps to."""
    api_key = decamelize(field_id)
    if api_key in RESERVED_FIELD_KEYS:
        return f"{api_key}_field"
    return api_key


def attribute_key_map(api_keys: Iterable[str]) -> Dict[str, str]:
    """Map camelized attribute keys back to the field api keys they were built from."""
    return {camelize(api_key): api_key for api_key in api_keys}
