"""Text helpers on top of BeautifulSoup nodes."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

from bs4 import Comment, NavigableString, Tag


def slugify(value: Any) -> str:
    """Case-fold, strip diacritics and punctuation, join words with hyphens.

    >>> slugify("Zur Angebotsauswahl")
    'zur-angebotsauswahl'
    >>> slugify("Frankfurt(Main)Hbf")
    'frankfurt-main-hbf'
    """
    text = str(value or "").replace("ß", "ss").replace("ẞ", "SS")
    normalized = unicodedata.normalize("NFKD", text)
    without_diacritics = "".join(char for char in normalized if not unicodedata.combining(char))
    return re.sub(r"[^a-z0-9]+", "-", without_diacritics.lower()).strip("-")


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def select_text(node: Tag, selector: str) -> str:
    """Concatenated, trimmed text of every element matching ``selector``."""
    return "".join(element.get_text() for element in node.select(selector)).strip()


def own_text(node: Tag) -> str:
    """Text of ``node`` itself, without the text of nested elements."""
    return "".join(
        str(child)
        for child in node.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    )
