"""Query-string handling for the links embedded in a connection block."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from bs4 import Tag

from .config import NEXT_STEP_LINK_LABELS
from .text import slugify

logger = logging.getLogger(__name__)

# key/value pairs inside the HWAI parameter are separated by "!"
HWAI_SEPARATOR = "!"


def show_details(show: bool) -> str:
    """HWAI value asking the booking interface to expand (or collapse) connection details."""
    status = "details" if show else "none"
    return f"HwaiDetailStatus={status}{HWAI_SEPARATOR}"


def query_params(href: str) -> dict[str, list[str]]:
    """Query parameters of ``href``; a malformed URL has none."""
    try:
        return parse_qs(urlsplit(href).query)
    except ValueError as exc:
        logger.debug("Ignoring malformed link %r: %s", href, exc)
        return {}


def hwai_params(href: str) -> dict[str, str]:
    query = query_params(href)
    raw = (query.get("HWAI") or [""])[0]
    return dict(parse_qsl(raw, separator=HWAI_SEPARATOR))


def station_id_from_info_link(href: str) -> str | None:
    return hwai_params(href).get("HwaiBhfinfoStatus") or None


def station_id_from_print_link(href: str) -> str | None:
    query = query_params(href)
    return (query.get("currentBhfInfoId") or [""])[0] or None


def next_step_link(block: Tag, base_url: str | None = None) -> str | None:
    """Link that continues the booking with this connection, with details switched on."""
    href = None
    for link in block.select("a[href]"):
        if slugify(link.get_text().strip()) in NEXT_STEP_LINK_LABELS:
            href = str(link["href"]).strip()
            break
    if not href:
        return None
    try:
        if base_url:
            href = urljoin(base_url, href)
        parts = urlsplit(href)
    except ValueError as exc:
        logger.debug("Ignoring malformed continuation link %r: %s", href, exc)
        return None
    query = parse_qs(parts.query, keep_blank_values=True)
    query["HWAI"] = [show_details(True)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True, safe="!$")))
