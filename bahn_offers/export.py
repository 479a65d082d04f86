from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from .models import Offer, to_iso

FRAME_COLUMNS = [
    "id",
    "origin",
    "origin_id",
    "destination",
    "destination_id",
    "departure",
    "departure_delay",
    "arrival",
    "arrival_delay",
    "legs",
    "lines",
    "price",
    "price_currency",
    "discount",
    "discount_currency",
    "next_step",
]


def offer_to_dict(offer: Offer) -> dict[str, Any]:
    return {"journey": offer.journey.as_dict(), "nextStep": offer.next_step}


def offer_to_row(offer: Offer) -> dict[str, Any]:
    journey = offer.journey
    origin = journey.origin
    destination = journey.destination
    return {
        "id": journey.id,
        "origin": origin.name if origin else None,
        "origin_id": origin.id if origin else None,
        "destination": destination.name if destination else None,
        "destination_id": destination.id if destination else None,
        "departure": to_iso(journey.departure),
        "departure_delay": journey.departure_delay,
        "arrival": to_iso(journey.arrival),
        "arrival_delay": journey.arrival_delay,
        "legs": len(journey.legs),
        "lines": " / ".join(line.name for leg in journey.legs for line in leg.lines),
        "price": float(journey.price.amount) if journey.price.amount is not None else None,
        "price_currency": journey.price.currency,
        "discount": float(journey.discount.amount) if journey.discount.amount is not None else None,
        "discount_currency": journey.discount.currency,
        "next_step": offer.next_step,
    }


def offers_to_frame(offers: Iterable[Offer]) -> pd.DataFrame:
    """One row per journey, for comparing offers side by side."""
    rows = [offer_to_row(offer) for offer in offers]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
