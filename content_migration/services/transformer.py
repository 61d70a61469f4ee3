"""Transformation of source field values into target field values."""

import json
import logging
from typing import Any, Callable, Dict, Mapping

from ..errors import ConfigurationMismatch
from ..models.schema import FieldDefinition, FieldType, LocaleSet

logger = logging.getLogger(__name__)


class ValueTransformer:
    """
    Converts raw per-locale source values into the shape the target expects.

    Each field type maps to one conversion function, applied to every
    locale's inner value independently:

    - lat_lon: {lat, lon} -> {latitude, longitude}
    - string: a list of strings is joined with ", "
    - json: serialized to pretty-printed JSON text
    - everything else: passed through unchanged

    Relational types (link, links, file, gallery) are resolved by a later
    linking pass and must be skipped by the caller.
    """

    def __init__(self):
        """Initialize the transformer."""
        self._transforms = self._register_transforms()

    def _register_transforms(self) -> Dict[FieldType, Callable[[Any], Any]]:
        """Map every field type to its conversion function."""
        transforms: Dict[FieldType, Callable[[Any], Any]] = {
            field_type: self._transform_direct for field_type in FieldType
        }
        transforms.update({
            FieldType.LINK: self._transform_relational,
            FieldType.LINKS: self._transform_relational,
            FieldType.FILE: self._transform_relational,
            FieldType.GALLERY: self._transform_relational,
            FieldType.LAT_LON: self._transform_lat_lon,
            FieldType.STRING: self._transform_string,
            FieldType.JSON: self._transform_json,
        })
        return transforms

    def transform(
        self,
        field: FieldDefinition,
        raw_value: Mapping[str, Any],
        locales: LocaleSet
    ) -> Any:
        """
        Transform one field's raw value.

        Args:
            field: Target field definition
            raw_value: Mapping of locale -> raw inner value
            locales: Locales configured for the run

        Returns:
            A mapping over every configured locale for localized fields,
            otherwise the converted default-locale value
        """
        if not isinstance(raw_value, Mapping):
            raise ConfigurationMismatch(
                f"Expected a locale mapping for field {field.api_key}, "
                f"got {type(raw_value).__name__}",
                field_key=field.api_key,
            )

        convert = self._transforms[field.field_type]

        if not field.localized:
            return convert(raw_value.get(locales.default_locale))

        converted = {locale: convert(value) for locale, value in raw_value.items()}
        fallback = converted.get(locales.default_locale)

        dropped = set(converted) - set(locales.locales)
        if dropped:
            logger.debug(f"Ignoring unconfigured locales {sorted(dropped)} on {field.api_key}")

        return {
            locale: converted[locale] if locale in converted else fallback
            for locale in locales
        }

    def convert(self, field_type: FieldType, value: Any) -> Any:
        """Convert a single inner value according to its field type."""
        return self._transforms[field_type](value)

    # Conversions

    def _transform_direct(self, value: Any) -> Any:
        return value

    def _transform_relational(self, value: Any) -> Any:
        raise ValueError("Relational fields are not transformed; skip them instead")

    def _transform_lat_lon(self, value: Any) -> Any:
        if value is None:
            return None
        return {
            "latitude": value.get("lat"),
            "longitude": value.get("lon"),
        }

    def _transform_string(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return value

    def _transform_json(self, value: Any) -> Any:
        if value is None:
            return None
        return json.dumps(value, indent=2, ensure_ascii=False)
