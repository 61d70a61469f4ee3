import pytest

from content_migration.errors import ConfigurationMismatch
from content_migration.services.api_keys import camelize
from content_migration.services.record_builder import RecordAttributeBuilder


@pytest.fixture
def builder(locales):
    return RecordAttributeBuilder(locales)


def test_key_set_matches_declared_fields(builder, article_type, entry_factory):
    entry = entry_factory("e1", title={"en-US": "Hello"})
    attributes = builder.build(entry, article_type)
    assert set(attributes) == {camelize(f.api_key) for f in article_type.fields}


def test_empty_entry_gets_defaults(builder, article_type, locales, entry_factory):
    attributes = builder.build(entry_factory("e1"), article_type)

    for field_def in article_type.fields:
        value = attributes[camelize(field_def.api_key)]
        if field_def.localized:
            assert value == {locale: None for locale in locales}
        else:
            assert value is None


def test_localized_values_cover_every_locale(builder, article_type, locales, entry_factory):
    entry = entry_factory(
        "e1",
        title={"en-US": "Hello", "it": "Ciao"},
        location={"en-US": {"lat": 45.4, "lon": 9.2}},
    )
    attributes = builder.build(entry, article_type)

    assert attributes["title"] == {"en-US": "Hello", "it": "Ciao", "de": "Hello"}
    assert set(attributes["location"]) == set(locales.locales)
    assert attributes["location"]["de"] == {"latitude": 45.4, "longitude": 9.2}


def test_values_are_transformed_by_type(builder, article_type, entry_factory):
    entry = entry_factory(
        "e1",
        tags={"en-US": ["a", "b"]},
        metadata={"en-US": {"x": 1}},
        rating={"en-US": 5},
    )
    attributes = builder.build(entry, article_type)

    assert attributes["tags"] == "a, b"
    assert '"x": 1' in attributes["metadata"]
    assert attributes["rating"] == 5


def test_relational_fields_keep_placeholders(builder, article_type, locales, entry_factory):
    link = {"sys": {"type": "Link", "linkType": "Entry", "id": "other"}}
    entry = entry_factory(
        "e1",
        heroImage={"en-US": {"sys": {"type": "Link", "linkType": "Asset", "id": "a1"}}},
        author={"en-US": link, "it": link},
        relatedPosts={"en-US": [link]},
        photos={"en-US": [link, link]},
    )
    attributes = builder.build(entry, article_type)

    assert attributes["heroImage"] is None
    assert attributes["relatedPosts"] is None
    assert attributes["photos"] is None
    assert attributes["author"] == {locale: None for locale in locales}


def test_camel_case_source_keys_are_mapped(builder, article_type, entry_factory):
    entry = entry_factory("e1", relatedPosts={"en-US": []}, rating={"en-US": 1})
    attributes = builder.build(entry, article_type)
    assert "relatedPosts" in attributes
    assert "related_posts" not in attributes


def test_unknown_source_field_is_fatal(builder, article_type, entry_factory):
    entry = entry_factory("e1", subtitle={"en-US": "nope"})
    with pytest.raises(ConfigurationMismatch) as exc_info:
        builder.build(entry, article_type)
    assert exc_info.value.field_key == "subtitle"
