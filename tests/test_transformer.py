import json

import pytest

from content_migration.errors import ConfigurationMismatch
from content_migration.models.schema import FieldDefinition, FieldType
from content_migration.services.transformer import ValueTransformer


@pytest.fixture
def transformer():
    return ValueTransformer()


class TestLocalizedFields:
    def test_default_locale_value_fills_every_locale(self, transformer, locales):
        field = FieldDefinition("title", FieldType.STRING, localized=True)
        result = transformer.transform(field, {"en-US": "Hello"}, locales)
        assert result == {"en-US": "Hello", "it": "Hello", "de": "Hello"}

    def test_present_locale_wins_over_fallback(self, transformer, locales):
        field = FieldDefinition("title", FieldType.STRING, localized=True)
        result = transformer.transform(field, {"en-US": "Hello", "it": "Ciao"}, locales)
        assert result == {"en-US": "Hello", "it": "Ciao", "de": "Hello"}

    def test_present_none_is_not_replaced_by_fallback(self, transformer, locales):
        field = FieldDefinition("title", FieldType.STRING, localized=True)
        result = transformer.transform(field, {"en-US": "Hello", "de": None}, locales)
        assert result["de"] is None

    def test_missing_default_locale_falls_back_to_none(self, transformer, locales):
        field = FieldDefinition("title", FieldType.STRING, localized=True)
        result = transformer.transform(field, {"it": "Ciao"}, locales)
        assert result == {"en-US": None, "it": "Ciao", "de": None}

    def test_unconfigured_locales_are_dropped(self, transformer, locales):
        field = FieldDefinition("title", FieldType.STRING, localized=True)
        result = transformer.transform(field, {"en-US": "Hello", "fr": "Bonjour"}, locales)
        assert set(result) == {"en-US", "it", "de"}

    def test_lat_lon_converted_per_locale(self, transformer, locales):
        field = FieldDefinition("location", FieldType.LAT_LON, localized=True)
        raw = {"en-US": {"lat": 1, "lon": 2}, "it": {"lat": 3, "lon": 4}}
        result = transformer.transform(field, raw, locales)
        assert result == {
            "en-US": {"latitude": 1, "longitude": 2},
            "it": {"latitude": 3, "longitude": 4},
            "de": {"latitude": 1, "longitude": 2},
        }


class TestNonLocalizedFields:
    def test_takes_default_locale_only(self, transformer, locales):
        field = FieldDefinition("rating", FieldType.INTEGER)
        assert transformer.transform(field, {"en-US": 4, "it": 5}, locales) == 4

    def test_missing_default_locale_gives_none(self, transformer, locales):
        field = FieldDefinition("rating", FieldType.INTEGER)
        assert transformer.transform(field, {"it": 5}, locales) is None

    def test_lat_lon(self, transformer, locales):
        field = FieldDefinition("location", FieldType.LAT_LON)
        result = transformer.transform(field, {"en-US": {"lat": 1, "lon": 2}}, locales)
        assert result == {"latitude": 1, "longitude": 2}

    def test_string_list_is_joined(self, transformer, locales):
        field = FieldDefinition("tags", FieldType.STRING)
        assert transformer.transform(field, {"en-US": ["a", "b"]}, locales) == "a, b"

    def test_plain_string_unchanged(self, transformer, locales):
        field = FieldDefinition("tags", FieldType.STRING)
        assert transformer.transform(field, {"en-US": "a"}, locales) == "a"

    def test_list_on_other_types_unchanged(self, transformer, locales):
        field = FieldDefinition("choices", FieldType.OTHER)
        assert transformer.transform(field, {"en-US": ["a", "b"]}, locales) == ["a", "b"]

    def test_json_is_pretty_printed(self, transformer, locales):
        field = FieldDefinition("metadata", FieldType.JSON)
        result = transformer.transform(field, {"en-US": {"x": 1}}, locales)
        assert isinstance(result, str)
        assert '"x": 1' in result
        assert "\n" in result
        assert json.loads(result) == {"x": 1}


def test_relational_types_are_rejected(transformer, locales):
    for field_type in (FieldType.LINK, FieldType.LINKS, FieldType.FILE, FieldType.GALLERY):
        field = FieldDefinition("ref", field_type)
        with pytest.raises(ValueError):
            transformer.transform(field, {"en-US": {"sys": {"id": "x"}}}, locales)


def test_raw_value_must_be_locale_mapping(transformer, locales):
    field = FieldDefinition("title", FieldType.STRING)
    with pytest.raises(ConfigurationMismatch):
        transformer.transform(field, "not a mapping", locales)


def test_unknown_type_tag_passes_through(transformer):
    assert FieldType.parse("structured_text") is FieldType.OTHER
    assert transformer.convert(FieldType.OTHER, {"a": 1}) == {"a": 1}
