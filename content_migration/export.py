"""Reading source platform export files."""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MigrationError
from .models.record import SourceData, SourceEntry
from .models.schema import LocaleSet

logger = logging.getLogger(__name__)


class ExportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LinkSys(ExportModel):
    id: str
    type: str = "Link"


class Link(ExportModel):
    sys: LinkSys


class EntrySys(ExportModel):
    id: str
    content_type: Link = Field(alias="contentType")
    published_version: Optional[int] = Field(default=None, alias="publishedVersion")


class ExportEntry(ExportModel):
    sys: EntrySys
    fields: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def to_source_entry(self) -> SourceEntry:
        return SourceEntry(
            id=self.sys.id,
            content_type_id=self.sys.content_type.sys.id,
            fields=self.fields,
            published_version=self.sys.published_version,
        )


class ExportLocale(ExportModel):
    code: str
    name: str = ""
    default: bool = False


class ExportFile(ExportModel):
    entries: List[ExportEntry] = Field(default_factory=list)
    locales: List[ExportLocale] = Field(default_factory=list)

    def locale_set(self) -> LocaleSet:
        """Locales of the export, with the one flagged default as fallback."""
        if not self.locales:
            raise MigrationError("Export declares no locales")

        codes = [locale.code for locale in self.locales]
        defaults = [locale.code for locale in self.locales if locale.default]
        if not defaults:
            logger.warning(f"No default locale flagged in export, using {codes[0]}")
        return LocaleSet(locales=codes, default_locale=defaults[0] if defaults else codes[0])


def parse_export(
    data: Dict[str, Any],
    locales: Optional[List[str]] = None,
    default_locale: Optional[str] = None
) -> SourceData:
    """
    Parse an export document into source data.

    Args:
        data: Decoded export JSON
        locales: Locales to migrate, taken from the export when unset
        default_locale: Fallback locale, taken from the export when unset

    Returns:
        SourceData with every entry of the export
    """
    try:
        export = ExportFile.model_validate(data)
    except ValidationError as e:
        raise MigrationError(f"Invalid export file: {e}") from e

    if locales:
        locale_set = LocaleSet(locales=list(locales), default_locale=default_locale or locales[0])
    else:
        locale_set = export.locale_set()
        if default_locale:
            locale_set = LocaleSet(locales=locale_set.locales, default_locale=default_locale)

    entries = [entry.to_source_entry() for entry in export.entries]
    logger.info(
        f"Read {len(entries)} entries in {len(locale_set)} locales "
        f"(default {locale_set.default_locale})"
    )
    return SourceData(entries=entries, locales=locale_set)


def load_export_file(file_path: str, **kwargs) -> SourceData:
    """Load and parse an export JSON file."""
    with open(file_path, 'r', encoding="utf-8") as f:
        data = json.load(f)
    return parse_export(data, **kwargs)
