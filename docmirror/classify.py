"""Content-category filter for traversed files.

The mime type decides when the provider reports one; otherwise the
filename extension is looked up in a small fixed table.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Union


class Category(Enum):
    """Content categories a caller can filter on."""
    ANY = "any"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    TEXT = "text"
    APPLICATION = "application"

    @classmethod
    def parse(cls, value: Union[str, 'Category']) -> 'Category':
        """Accept a Category or its lower-case name.

        Raises:
            ValueError: For unknown category names
        """
        if isinstance(value, cls):
            return value
        return cls(value.lower())


_EXTENSION_CATEGORIES: Dict[str, FrozenSet[Category]] = {}

for _extensions, _categories in (
    (("mp3", "m4a", "m4b", "wav", "flac", "aac", "ogg"), {Category.AUDIO}),
    (("mp4", "avi", "mkv", "mov", "wmv"), {Category.VIDEO}),
    (("jpg", "jpeg", "png", "gif", "bmp", "webp"), {Category.IMAGE}),
    (("txt", "pdf", "doc", "docx"), {Category.TEXT, Category.APPLICATION}),
):
    for _ext in _extensions:
        _EXTENSION_CATEGORIES[_ext] = frozenset(_categories)


def extension_of(filename: str) -> str:
    """Lower-cased text after the last dot, or '' when there is none."""
    base = filename.rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1].lower()


def categories_for_extension(filename: str) -> FrozenSet[Category]:
    """Categories the extension table assigns to ``filename``."""
    return _EXTENSION_CATEGORIES.get(extension_of(filename), frozenset())


def matches(category: Union[str, Category],
            mime: Optional[str],
            filename: str) -> bool:
    """Check whether a file belongs to a content category.

    Args:
        category: Category to test, or its name
        mime: Mime type reported by the provider, if any
        filename: Filename used when no mime type is available

    Returns:
        True if the file is of interest for ``category``
    """
    category = Category.parse(category)
    if category is Category.ANY:
        return True
    if mime is not None:
        return mime.startswith(f"{category.value}/")
    return category in categories_for_extension(filename)


def classify(category: Union[str, Category],
             mime: Optional[str],
             filename: str) -> bool:
    """Classify one enumerated file without a traversal row.

    Same rules as :func:`matches`.
    """
    return matches(category, mime, filename)
