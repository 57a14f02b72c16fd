"""Content tree model: elements, metadata records and projections."""

from shiori.content.metadata import (
    ArticleMetadata,
    ChapterMetadata,
    DirectoryMetadata,
    ElementMetadata,
    LocaleMetadata,
    build_article_metadata,
    build_chapter_metadata,
    build_directory_metadata,
    build_locale_metadata,
    build_metadata,
)
from shiori.content.projection import (
    ancestors_projection,
    bare,
    full_projection,
    locale_list_projection,
    locale_projection,
    shallow_projection,
    sort_entries,
)
from shiori.content.tree import ContentElement, ContentTree, sort_elements

__all__ = [
    "ArticleMetadata",
    "ChapterMetadata",
    "ContentElement",
    "ContentTree",
    "DirectoryMetadata",
    "ElementMetadata",
    "LocaleMetadata",
    "ancestors_projection",
    "bare",
    "build_article_metadata",
    "build_chapter_metadata",
    "build_directory_metadata",
    "build_locale_metadata",
    "build_metadata",
    "full_projection",
    "locale_list_projection",
    "locale_projection",
    "shallow_projection",
    "sort_elements",
    "sort_entries",
]
