"""Extract journeys and fares from Deutsche Bahn booking result pages."""

from .journeys import MalformedPageError, assemble_journey, parse_offers
from .models import OPERATOR, Journey, Leg, Line, Offer, Operator, Price, Station
from .prices import parse_price
from .timing import parse_when, resolve_time

__all__ = [
    "OPERATOR",
    "Journey",
    "Leg",
    "Line",
    "MalformedPageError",
    "Offer",
    "Operator",
    "Price",
    "Station",
    "assemble_journey",
    "parse_offers",
    "parse_price",
    "parse_when",
    "resolve_time",
]
