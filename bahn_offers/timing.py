"""Turn bare ``HH:MM`` strings into absolute instants and delays."""

from __future__ import annotations

import datetime as dt
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from zoneinfo import ZoneInfo

from bs4 import Tag

from .config import TIMEZONE_NAME
from .models import Journey
from .text import own_text, select_text

logger = logging.getLogger(__name__)

TIMEZONE = ZoneInfo(TIMEZONE_NAME)
TIME_RE = re.compile(r"(\d{2}):(\d{2})")
DELAY_SELECTOR = ".delay, .delayOnTime"


@dataclass(frozen=True)
class When:
    when: dt.datetime | None
    delay: int | None


def parse_instant(value: Any) -> dt.datetime | None:
    """Accept a datetime or an ISO-8601 string; anything else gives ``None``."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = dt.datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable instant %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def resolve_time(reference: dt.datetime | None, text: str | None, tz: dt.tzinfo = TIMEZONE) -> dt.datetime | None:
    """Place the first ``HH:MM`` in ``text`` on the local day of ``reference``.

    The clock time is read in ``tz`` on the same calendar date as
    ``reference``. When that lands before ``reference`` the time belongs to
    the following day. The result is an aware UTC datetime, or ``None`` when
    ``text`` holds no usable time or there is no reference.
    """
    if reference is None or not text:
        return None
    match = TIME_RE.search(text)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=dt.timezone.utc)
    base = reference.astimezone(tz)
    local = base.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    # minute precision, the text carries no seconds
    floor = reference.replace(second=0, microsecond=0)
    if local.astimezone(dt.timezone.utc) < floor.astimezone(dt.timezone.utc):
        # wall-clock arithmetic, so a DST switch keeps the local HH:MM
        local = local + dt.timedelta(days=1)
    return local.astimezone(dt.timezone.utc)


def planned_when(when: dt.datetime | None, delay: int | None = None) -> dt.datetime | None:
    """Undo a known delay to get back the scheduled instant."""
    if when is None or not delay:
        return when
    return when - dt.timedelta(seconds=delay)


def reference_departure(journey: Journey | Mapping[str, Any] | None) -> dt.datetime | None:
    """Scheduled departure of the first leg of a reference journey.

    Reference journeys come either as :class:`Journey` objects or as mappings
    in the camelCase wire shape (``{"legs": [{"departure": ..., "departureDelay": ...}]}``).
    """
    if journey is None:
        return None
    if isinstance(journey, Journey):
        leg = journey.first_leg
        if leg is None:
            return None
        return planned_when(leg.departure, leg.departure_delay)

    legs = journey.get("legs") or []
    if not legs or not isinstance(legs[0], Mapping):
        return None
    first = legs[0]
    delay = first.get("departureDelay")
    return planned_when(
        parse_instant(first.get("departure")),
        int(delay) if isinstance(delay, (int, float)) and math.isfinite(delay) else None,
    )


def parse_when(reference: dt.datetime | None, fragment: Tag | None) -> When:
    """Read the planned time and the optional real-time badge of a ``.time`` cell."""
    if fragment is None:
        return When(None, None)
    planned = resolve_time(reference, own_text(fragment))
    actual = resolve_time(reference, select_text(fragment, DELAY_SELECTOR))

    delay = None
    if actual is not None and planned is not None:
        delay = round((actual - planned).total_seconds())
    return When(actual if actual is not None else planned, delay)
