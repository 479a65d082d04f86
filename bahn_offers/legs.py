"""Fold the rows of a connection's detail table into legs.

Rows carry their role in the ``class`` attribute:

* ``first`` starts a leg; the row also carries the leg's index as a bare number
  (``class="first 2"``), departure station, platform, time and products.
* ``last`` ends the current leg with arrival station, platform and time.
* ``intermediate`` rows are walks or transfers and are ignored.

The fold state is either "between legs" (``index is None``) or "inside leg
``index``". Leg slots may be announced out of order or with gaps; they are
compacted in index order once all rows are consumed.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from functools import partial, reduce
from typing import Any

from bs4 import Tag

from .models import Journey, Leg, Line, Station
from .text import collapse_whitespace, select_text, slugify
from .timing import parse_when, reference_departure

logger = logging.getLogger(__name__)

LEG_INDEX_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class LegFoldState:
    index: int | None = None
    slots: Mapping[int, Leg] = field(default_factory=dict)


def row_classes(row: Tag) -> list[str]:
    value = row.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def leg_index(classes: list[str]) -> int | None:
    tokens = [token for token in classes if LEG_INDEX_RE.fullmatch(token)]
    if len(tokens) != 1:
        return None
    return int(tokens[0])


def parse_lines(row: Tag) -> list[Line]:
    lines: list[Line] = []
    for link in row.select(".products a"):
        name = collapse_whitespace(link.get_text())
        line_id = slugify(name)
        if not name or not line_id:
            continue
        lines.append(Line(id=line_id, name=name))
    return lines


def fold_row(state: LegFoldState, row: Tag, reference: dt.datetime | None = None) -> LegFoldState:
    """Apply one table row to the fold state and return the new state."""
    classes = row_classes(row)
    if "intermediate" in classes:
        return state

    is_first = "first" in classes
    is_last = "last" in classes
    if not is_first and not is_last:
        return state

    if is_first:
        index = leg_index(classes)
        if index is None:
            logger.debug("Skipping leg start row without a single leg index: %s", classes)
            return state
        leg = Leg()
    else:
        index = state.index
        if index is None or index not in state.slots:
            logger.debug("Skipping leg end row outside of a leg: %s", classes)
            return state
        leg = state.slots[index]

    station = Station(name=select_text(row, ".station"))
    platform = select_text(row, ".platform") or None
    # TODO: handle a reference that lies after the time in this row
    timing = parse_when(reference, row.select_one(".time"))

    if is_first:
        leg = replace(
            leg,
            origin=station,
            departure_platform=platform,
            departure=timing.when,
            departure_delay=timing.delay,
            lines=parse_lines(row),
        )
    else:
        leg = replace(
            leg,
            destination=station,
            arrival_platform=platform,
            arrival=timing.when,
            arrival_delay=timing.delay,
        )
    return LegFoldState(index=index, slots={**state.slots, index: leg})


def compact_legs(slots: Mapping[int, Leg | None]) -> list[Leg]:
    return [slots[index] for index in sorted(slots) if slots[index] is not None]


def build_legs(
    rows: Iterable[Tag],
    outbound: Journey | Mapping[str, Any] | None = None,
    returning: Journey | Mapping[str, Any] | None = None,
    is_return: bool = False,
) -> list[Leg]:
    """Build the legs of one connection, anchoring times at the reference journey's departure."""
    reference = reference_departure(returning if is_return else outbound)
    state = reduce(partial(fold_row, reference=reference), rows, LegFoldState())
    return compact_legs(state.slots)
