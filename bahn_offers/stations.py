"""Attach station ids to the legs of a journey.

The detail table only names stations. Their ids show up elsewhere in the
connection block: in the "station info" links of the detail slider and in the
print-view link, which carries the id of the currently opened station. Both are
joined to the legs by slugified station name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import Tag

from .links import station_id_from_info_link, station_id_from_print_link
from .models import Leg
from .text import select_text, slugify

logger = logging.getLogger(__name__)

INFO_LINK_SELECTOR = '.moreDetail [id^="stInfoLinkC"]'
ACTIVE_STATION_SELECTOR = ".moreDetail .activeslider"
PRINT_LINK_SELECTOR = ".moreDetailContainer .printview"


def tag_station(legs: Iterable[Leg], name: str, station_id: str) -> int:
    """Set ``station_id`` on every origin/destination named ``name``; returns the match count."""
    # Brittle: matching by name is no better than searching all DB stations by name.
    normalized = slugify(name)
    if not normalized:
        return 0
    matches = 0
    for leg in legs:
        for station in (leg.origin, leg.destination):
            if station is not None and slugify(station.name) == normalized:
                station.id = station_id
                matches += 1
    return matches


def station_evidence(block: Tag) -> list[tuple[str, str]]:
    """(name, id) pairs found in the info links and the print-view link."""
    evidence: list[tuple[str, str]] = []
    for link in block.select(INFO_LINK_SELECTOR):
        href = link.get("href")
        if not href:
            continue
        station_id = station_id_from_info_link(str(href))
        if not station_id:
            continue
        evidence.append((link.get_text().strip(), station_id))

    print_link = block.select_one(PRINT_LINK_SELECTOR)
    href = print_link.get("href") if print_link is not None else None
    if href:
        station_id = station_id_from_print_link(str(href))
        if station_id:
            evidence.append((select_text(block, ACTIVE_STATION_SELECTOR), station_id))
    return evidence


def tag_stations(block: Tag, legs: list[Leg]) -> None:
    for name, station_id in station_evidence(block):
        if not tag_station(legs, name, station_id):
            logger.debug("No leg station matches %r (id %s)", name, station_id)
