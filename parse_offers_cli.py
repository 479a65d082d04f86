#!/usr/bin/env python3
"""Extract journeys and fares from Deutsche Bahn result pages into JSON/CSV."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import requests
import tqdm
from dotenv import load_dotenv

from bahn_offers.config import load_settings
from bahn_offers.export import offer_to_dict, offers_to_frame, write_json
from bahn_offers.journeys import MalformedPageError, parse_offers
from bahn_offers.models import Offer
from bahn_offers.timing import parse_instant

logger = logging.getLogger("parse_offers")


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_html(session: requests.Session, url: str, timeout: float) -> str:
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def read_source(source: str, session: requests.Session, timeout: float) -> str:
    if is_url(source):
        return fetch_html(session, source, timeout)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Missing input file: {path}")
    return path.read_text(encoding="utf-8")


def iso_instant(value: str) -> str:
    if parse_instant(value) is None:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}")
    return value


def reference_journey(departure: str | None, delay: int | None) -> dict[str, Any] | None:
    """Minimal journey carrying only the first departure used to anchor clock times."""
    if not departure:
        return None
    return {"legs": [{"departure": departure, "departureDelay": delay}]}


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse Deutsche Bahn booking result pages (files or URLs) into offers."
    )
    parser.add_argument("sources", nargs="+", help="Saved HTML files or http(s) URLs.")
    parser.add_argument("--return", dest="is_return", action="store_true", help="Pages list return connections.")
    parser.add_argument("--outbound-departure", type=iso_instant, help="ISO departure of the outbound journey.")
    parser.add_argument("--outbound-delay", type=int, help="Known outbound departure delay in seconds.")
    parser.add_argument("--returning-departure", type=iso_instant, help="ISO departure of the return journey.")
    parser.add_argument("--returning-delay", type=int, help="Known return departure delay in seconds.")
    parser.add_argument("--base-url", help="Base URL for relative continuation links (env: BAHN_OFFERS_BASE_URL).")
    parser.add_argument("--json-out", help="Write offers as JSON to this path.")
    parser.add_argument("--csv-out", help="Write a one-row-per-journey CSV summary to this path.")
    parser.add_argument("--stdout-json", action="store_true", help="Print offers as JSON to stdout.")
    return parser


def collect_offers(
    sources: list[str],
    outbound: dict[str, Any] | None,
    returning: dict[str, Any] | None,
    is_return: bool,
    base_url: str | None,
    timeout: float,
) -> list[Offer]:
    offers: list[Offer] = []
    with requests.Session() as session:
        for source in tqdm.tqdm(sources, desc="pages", disable=len(sources) < 2):
            html = read_source(source, session, timeout)
            page_offers = parse_offers(html, outbound, returning, is_return, base_url)
            logger.info("%s: %s offers", source, len(page_offers))
            offers.extend(page_offers)
    return offers


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings()
    args = make_parser().parse_args(argv)
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    outbound = reference_journey(args.outbound_departure, args.outbound_delay)
    returning = reference_journey(args.returning_departure, args.returning_delay)
    if outbound is None and returning is None:
        logger.warning("No reference departure given; all times will be empty")

    try:
        offers = collect_offers(
            args.sources,
            outbound,
            returning,
            args.is_return,
            args.base_url or settings.base_url,
            settings.http_timeout,
        )
    except (FileNotFoundError, requests.RequestException, MalformedPageError) as exc:
        logger.error("%s", exc)
        return 1

    payload = [offer_to_dict(offer) for offer in offers]
    if args.json_out:
        write_json(Path(args.json_out), payload)
        print(f"Wrote JSON: {args.json_out}")

    if args.csv_out:
        csv_path = Path(args.csv_out)
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        offers_to_frame(offers).to_csv(csv_path, index=False)
        print(f"Wrote CSV: {args.csv_out}")

    if args.stdout_json or not (args.json_out or args.csv_out):
        print(json.dumps(payload, ensure_ascii=False, indent=2))

    logger.info("Completed: %s offers", len(offers))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
