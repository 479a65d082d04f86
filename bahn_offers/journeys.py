"""Parse a booking result page into offers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup, Tag

from .legs import build_legs
from .links import next_step_link
from .models import Journey, Offer
from .prices import parse_price
from .stations import tag_stations
from .text import select_text

logger = logging.getLogger(__name__)

RESULTS_SELECTOR = "#resultsOverview"
CONNECTION_SELECTOR = ".scheduledCon, .liveCon"
DETAIL_ROWS_SELECTOR = ".details .result tr"
DISCOUNT_SELECTOR = ".farePep .fareOutput"
PRICE_SELECTOR = ".fareStd .fareOutput"

ReferenceJourney = Journey | Mapping[str, Any] | None


class MalformedPageError(ValueError):
    """The document is not a result page."""


def journey_id(is_return: bool, position: int) -> str:
    return f"{'returning' if is_return else 'outbound'}-{position}"


def assemble_journey(
    block: Tag,
    position: int,
    outbound: ReferenceJourney = None,
    returning: ReferenceJourney = None,
    is_return: bool = False,
) -> Journey | None:
    """Build the journey of one connection block; ``None`` when it carries no price."""
    legs = build_legs(block.select(DETAIL_ROWS_SELECTOR), outbound, returning, is_return)
    tag_stations(block, legs)

    discount = parse_price(select_text(block, DISCOUNT_SELECTOR))
    price = parse_price(select_text(block, PRICE_SELECTOR))
    if discount.amount is None and price.amount is None:
        return None

    return Journey(
        id=journey_id(is_return, position),
        legs=legs,
        price=price,
        discount=discount,
    )


def parse_offers(
    html: str | BeautifulSoup,
    outbound: ReferenceJourney = None,
    returning: ReferenceJourney = None,
    is_return: bool = False,
    base_url: str | None = None,
) -> list[Offer]:
    """Return the bookable offers of a result page in page order.

    ``outbound``/``returning`` are the journeys the page was requested for;
    the first departure of the one matching ``is_return`` anchors all clock
    times on the page. Connections without a continuation link or without
    any price are left out.
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    results = soup.select_one(RESULTS_SELECTOR)
    if results is None:
        raise MalformedPageError(f"No {RESULTS_SELECTOR} container in document")

    offers: list[Offer] = []
    for position, block in enumerate(results.select(CONNECTION_SELECTOR)):
        next_step = next_step_link(block, base_url)
        if not next_step:
            logger.debug("Dropping connection %s: no continuation link", position)
            continue

        journey = assemble_journey(block, position, outbound, returning, is_return)
        if journey is None:
            logger.debug("Dropping connection %s: no price", position)
            continue
        offers.append(Offer(journey=journey, next_step=next_step))

    logger.debug("Parsed %s offers", len(offers))
    return offers
