"""Journey records extracted from a result page."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def to_iso(value: dt.datetime | None) -> str | None:
    """Render an aware datetime as UTC ISO-8601 with milliseconds and ``Z``."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    utc = value.astimezone(dt.timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Operator:
    id: str
    name: str

    def as_dict(self) -> dict[str, Any]:
        return {"type": "operator", "id": self.id, "name": self.name}


OPERATOR = Operator(id="db", name="Deutsche Bahn")


@dataclass
class Station:
    name: str
    id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"type": "station", "id": self.id, "name": self.name}


@dataclass(frozen=True)
class Line:
    id: str
    name: str

    def as_dict(self) -> dict[str, Any]:
        return {"type": "line", "id": self.id, "name": self.name}


@dataclass(frozen=True)
class Price:
    amount: Decimal | None = None
    currency: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "amount": float(self.amount) if self.amount is not None else None,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class Leg:
    operator: Operator = OPERATOR
    public: bool = True
    origin: Station | None = None
    destination: Station | None = None
    departure_platform: str | None = None
    arrival_platform: str | None = None
    departure: dt.datetime | None = None
    departure_delay: int | None = None
    arrival: dt.datetime | None = None
    arrival_delay: int | None = None
    lines: list[Line] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "public": self.public,
            "operator": self.operator.as_dict(),
            "origin": self.origin.as_dict() if self.origin else None,
            "destination": self.destination.as_dict() if self.destination else None,
            "departurePlatform": self.departure_platform,
            "arrivalPlatform": self.arrival_platform,
            "departure": to_iso(self.departure),
            "departureDelay": self.departure_delay,
            "arrival": to_iso(self.arrival),
            "arrivalDelay": self.arrival_delay,
            "lines": [line.as_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class Journey:
    id: str
    legs: list[Leg] = field(default_factory=list)
    price: Price = field(default_factory=Price)
    discount: Price = field(default_factory=Price)

    @property
    def first_leg(self) -> Leg | None:
        return self.legs[0] if self.legs else None

    @property
    def last_leg(self) -> Leg | None:
        return self.legs[-1] if self.legs else None

    @property
    def origin(self) -> Station | None:
        return self.first_leg.origin if self.first_leg else None

    @property
    def departure(self) -> dt.datetime | None:
        return self.first_leg.departure if self.first_leg else None

    @property
    def departure_delay(self) -> int | None:
        return self.first_leg.departure_delay if self.first_leg else None

    @property
    def destination(self) -> Station | None:
        return self.last_leg.destination if self.last_leg else None

    @property
    def arrival(self) -> dt.datetime | None:
        return self.last_leg.arrival if self.last_leg else None

    @property
    def arrival_delay(self) -> int | None:
        return self.last_leg.arrival_delay if self.last_leg else None

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": "journey",
            "id": self.id,
            "legs": [leg.as_dict() for leg in self.legs],
            "price": self.price.as_dict(),
            "discount": self.discount.as_dict(),
            "origin": self.origin.as_dict() if self.origin else None,
            "destination": self.destination.as_dict() if self.destination else None,
            "departure": to_iso(self.departure),
            "departureDelay": self.departure_delay,
            "arrival": to_iso(self.arrival),
            "arrivalDelay": self.arrival_delay,
        }


@dataclass(frozen=True)
class Offer:
    journey: Journey
    next_step: str
