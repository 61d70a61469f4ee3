import json

import pytest

from content_migration.errors import MigrationError
from content_migration.export import load_export_file, parse_export


EXPORT = {
    "contentTypes": [{"sys": {"id": "blogPost"}, "name": "Blog Post"}],
    "entries": [
        {
            "sys": {
                "id": "entry-1",
                "type": "Entry",
                "publishedVersion": 4,
                "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": "blogPost"}},
            },
            "fields": {"title": {"en-US": "Hello", "it": "Ciao"}},
        },
        {
            "sys": {
                "id": "entry-2",
                "type": "Entry",
                "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": "author"}},
            },
            "fields": {},
        },
    ],
    "locales": [
        {"code": "it", "name": "Italian", "default": False},
        {"code": "en-US", "name": "English", "default": True},
    ],
}


def test_parse_entries():
    data = parse_export(EXPORT)

    assert [e.id for e in data.entries] == ["entry-1", "entry-2"]
    first, second = data.entries
    assert first.content_type_id == "blogPost"
    assert first.published_version == 4
    assert first.is_published
    assert first.fields == {"title": {"en-US": "Hello", "it": "Ciao"}}
    assert second.published_version is None
    assert not second.is_published


def test_default_locale_comes_from_export():
    data = parse_export(EXPORT)
    assert data.locales.locales == ["it", "en-US"]
    assert data.default_locale == "en-US"


def test_locales_can_be_overridden():
    data = parse_export(EXPORT, locales=["en-US"], default_locale="en-US")
    assert data.locales.locales == ["en-US"]


def test_first_locale_used_when_none_flagged():
    export = dict(EXPORT, locales=[{"code": "de"}, {"code": "fr"}])
    assert parse_export(export).default_locale == "de"


def test_missing_locales_rejected():
    with pytest.raises(MigrationError):
        parse_export(dict(EXPORT, locales=[]))


def test_malformed_entry_rejected():
    export = dict(EXPORT, entries=[{"sys": {"id": "x"}, "fields": {}}])
    with pytest.raises(MigrationError, match="Invalid export file"):
        parse_export(export)


def test_load_export_file(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(EXPORT), encoding="utf-8")

    data = load_export_file(str(path))
    assert len(data.entries) == 2
