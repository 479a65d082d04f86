import datetime as dt
import json
import unittest

from bs4 import BeautifulSoup

from bahn_offers import timing
from bahn_offers.models import Journey, Leg


UTC = dt.timezone.utc


def utc(*args: int) -> dt.datetime:
    return dt.datetime(*args, tzinfo=UTC)


def time_cell(markup: str):
    return BeautifulSoup(markup, "html.parser").select_one(".time")


class ResolveTimeTests(unittest.TestCase):
    def test_same_local_day(self):
        self.assertEqual(
            timing.resolve_time(utc(2020, 4, 8, 17, 16), "ab 20:53 "),
            utc(2020, 4, 8, 18, 53),
        )

    def test_later_on_same_local_day_with_trailing_newline(self):
        self.assertEqual(
            timing.resolve_time(utc(2020, 4, 8, 19, 16), "an 23:53 \n"),
            utc(2020, 4, 8, 21, 53),
        )

    def test_rolls_over_to_next_local_day(self):
        self.assertEqual(
            timing.resolve_time(utc(2020, 4, 8, 19, 16), "00:12"),
            utc(2020, 4, 8, 22, 12),
        )

    def test_equal_to_reference_does_not_roll_over(self):
        self.assertEqual(
            timing.resolve_time(utc(2020, 4, 8, 17, 16), "19:16"),
            utc(2020, 4, 8, 17, 16),
        )

    def test_reference_seconds_do_not_roll_over(self):
        reference = dt.datetime(2020, 4, 8, 17, 16, 30, 250000, tzinfo=UTC)
        self.assertEqual(timing.resolve_time(reference, "ab 19:16"), utc(2020, 4, 8, 17, 16))
        self.assertEqual(timing.resolve_time(reference, "19:15"), utc(2020, 4, 9, 17, 15))

    def test_winter_offset(self):
        # CET is UTC+1
        self.assertEqual(
            timing.resolve_time(utc(2020, 1, 15, 8, 0), "10:30"),
            utc(2020, 1, 15, 9, 30),
        )

    def test_rollover_across_dst_switch_keeps_local_clock_time(self):
        # 2020-03-29 02:00 CET -> 03:00 CEST
        self.assertEqual(
            timing.resolve_time(utc(2020, 3, 28, 21, 0), "06:00"),
            utc(2020, 3, 29, 4, 0),
        )

    def test_result_is_aware_utc(self):
        resolved = timing.resolve_time(utc(2020, 4, 8, 17, 16), "20:53")
        self.assertEqual(resolved.utcoffset(), dt.timedelta(0))

    def test_naive_reference_is_read_as_utc(self):
        self.assertEqual(
            timing.resolve_time(dt.datetime(2020, 4, 8, 17, 16), "20:53"),
            utc(2020, 4, 8, 18, 53),
        )

    def test_missing_or_malformed_input(self):
        reference = utc(2020, 4, 8, 17, 16)
        self.assertIsNone(timing.resolve_time(reference, ""))
        self.assertIsNone(timing.resolve_time(reference, None))
        self.assertIsNone(timing.resolve_time(reference, "Fußweg"))
        self.assertIsNone(timing.resolve_time(reference, "9:15"))
        self.assertIsNone(timing.resolve_time(reference, "25:61"))
        self.assertIsNone(timing.resolve_time(None, "20:53"))


class ReferenceDepartureTests(unittest.TestCase):
    def test_planned_when_subtracts_delay(self):
        self.assertEqual(timing.planned_when(utc(2020, 4, 8, 17, 21), 300), utc(2020, 4, 8, 17, 16))
        self.assertEqual(timing.planned_when(utc(2020, 4, 8, 17, 21), None), utc(2020, 4, 8, 17, 21))
        self.assertIsNone(timing.planned_when(None, 300))

    def test_from_journey_object(self):
        journey = Journey(id="outbound-0", legs=[Leg(departure=utc(2020, 4, 8, 17, 21), departure_delay=300)])
        self.assertEqual(timing.reference_departure(journey), utc(2020, 4, 8, 17, 16))

    def test_from_mapping(self):
        journey = {"legs": [{"departure": "2020-04-08T19:21:00+02:00", "departureDelay": 300}]}
        self.assertEqual(timing.reference_departure(journey), utc(2020, 4, 8, 17, 16))

        journey = {"legs": [{"departure": "2020-04-08T17:16:00.000Z"}]}
        self.assertEqual(timing.reference_departure(journey), utc(2020, 4, 8, 17, 16))

    def test_non_finite_delay_is_ignored(self):
        for delay in (float("nan"), float("inf"), float("-inf")):
            journey = {"legs": [{"departure": "2020-04-08T17:16:00Z", "departureDelay": delay}]}
            self.assertEqual(timing.reference_departure(journey), utc(2020, 4, 8, 17, 16))

        parsed = json.loads('{"legs": [{"departure": "2020-04-08T17:16:00Z", "departureDelay": NaN}]}')
        self.assertEqual(timing.reference_departure(parsed), utc(2020, 4, 8, 17, 16))

    def test_missing_reference(self):
        self.assertIsNone(timing.reference_departure(None))
        self.assertIsNone(timing.reference_departure({}))
        self.assertIsNone(timing.reference_departure({"legs": []}))
        self.assertIsNone(timing.reference_departure(Journey(id="outbound-0")))
        self.assertIsNone(timing.reference_departure({"legs": [{"departure": "soon"}]}))


class ParseWhenTests(unittest.TestCase):
    reference = utc(2020, 4, 8, 17, 16)

    def test_delayed(self):
        cell = time_cell('<td class="time">ab 19:16 <span class="delay">19:21</span></td>')
        result = timing.parse_when(self.reference, cell)
        self.assertEqual(result.when, utc(2020, 4, 8, 17, 21))
        self.assertEqual(result.delay, 300)

    def test_on_time_badge(self):
        cell = time_cell('<td class="time">an 20:28<span class="delayOnTime">20:28</span></td>')
        result = timing.parse_when(self.reference, cell)
        self.assertEqual(result.when, utc(2020, 4, 8, 18, 28))
        self.assertEqual(result.delay, 0)

    def test_early(self):
        cell = time_cell('<td class="time">an 20:28<span class="delay">20:26</span></td>')
        self.assertEqual(timing.parse_when(self.reference, cell).delay, -120)

    def test_delay_past_midnight(self):
        cell = time_cell('<td class="time">an 23:58<span class="delay">00:03</span></td>')
        result = timing.parse_when(self.reference, cell)
        self.assertEqual(result.when, utc(2020, 4, 8, 22, 3))
        self.assertEqual(result.delay, 300)

    def test_planned_only(self):
        cell = time_cell('<td class="time">an 20:28</td>')
        result = timing.parse_when(self.reference, cell)
        self.assertEqual(result.when, utc(2020, 4, 8, 18, 28))
        self.assertIsNone(result.delay)

    def test_badge_only(self):
        cell = time_cell('<td class="time"><span class="delay">20:30</span></td>')
        result = timing.parse_when(self.reference, cell)
        self.assertEqual(result.when, utc(2020, 4, 8, 18, 30))
        self.assertIsNone(result.delay)

    def test_timeless(self):
        self.assertEqual(timing.parse_when(self.reference, time_cell('<td class="time"></td>')), timing.When(None, None))
        self.assertEqual(timing.parse_when(self.reference, None), timing.When(None, None))


if __name__ == "__main__":
    unittest.main()
