import json

from content_migration.models.schema import FieldDefinition, FieldType, ItemTypeDefinition
from content_migration.services.schema_registry import SchemaRegistry


CATALOG = {
    "item_types": [
        {"api_key": "blog_post", "id": 1001},
        {"api_key": "item_model", "id": "1003", "fields": [
            {"api_key": "title", "field_type": "string", "localized": True},
        ]},
    ],
    "fields": {
        "blog_post": [
            {"api_key": "title", "field_type": "string", "localized": True},
            {"api_key": "cover", "field_type": "file"},
            {"api_key": "body", "field_type": "structured_text"},
        ],
    },
}


def test_resolve_normalizes_content_type_id(registry):
    item_type = registry.resolve("blogPost")
    assert item_type is not None
    assert item_type.id == "1001"


def test_resolve_unmapped_returns_none(registry):
    assert registry.resolve("landingPage") is None


def test_from_dict_attaches_fields_mapping():
    registry = SchemaRegistry.from_dict(CATALOG)

    post = registry.resolve("blogPost")
    assert post.id == "1001"
    assert [f.api_key for f in post.fields] == ["title", "cover", "body"]
    assert post.get_field("cover").field_type is FieldType.FILE
    assert post.get_field("body").field_type is FieldType.OTHER
    assert post.get_field("title").localized


def test_reserved_item_name_resolves():
    registry = SchemaRegistry.from_dict(CATALOG)
    assert registry.resolve("item").api_key == "item_model"


def test_unresolved_content_types(registry, entry_factory):
    entries = [
        entry_factory("1"),
        entry_factory("2", content_type="page"),
        entry_factory("3", content_type="page"),
        entry_factory("4", content_type="banner"),
    ]
    assert registry.unresolved_content_types(entries) == {"page": 2, "banner": 1}


def test_json_round_trip(tmp_path):
    registry = SchemaRegistry([
        ItemTypeDefinition("author", "7", [FieldDefinition("name", FieldType.STRING)]),
    ])
    path = tmp_path / "schema.json"
    registry.save_to_json(str(path))

    loaded = SchemaRegistry.from_json_file(str(path))
    assert loaded.list_item_types() == ["author"]
    assert loaded.get_item_type("author").fields[0].api_key == "name"
    assert json.loads(path.read_text())["item_types"][0]["id"] == "7"
