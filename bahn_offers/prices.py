from __future__ import annotations

import re
from decimal import Decimal

from .config import DEFAULT_CURRENCY
from .models import Price

# integer part, optional cents (after a comma, a space or nothing), optional currency code
PRICE_RE = re.compile(r"(\d+)(?:[,\s]?(\d+))?\s*([A-Z]{3})?")


def parse_price(text: str | None) -> Price:
    """Parse a fare label such as ``"19,90 EUR"``; unparseable input gives an empty price."""
    if not text:
        return Price(None, None)
    match = PRICE_RE.search(text.strip())
    if not match:
        return Price(None, None)

    amount = Decimal(int(match.group(1)))
    if match.group(2):
        amount += Decimal(int(match.group(2))) * Decimal("0.01")
    return Price(amount=amount, currency=match.group(3) or DEFAULT_CURRENCY)
