from __future__ import annotations

from datetime import datetime, timezone

import pytest

from actions_indicators.core.exceptions import ParseError
from actions_indicators.services.cron_projector import next_occurrence, parse_cron

# 2024-01-03 is a Wednesday.
NOW = datetime(2024, 1, 3, 12, 0)


def test_next_monday_morning():
    assert next_occurrence("30 5 * * 1", NOW) == datetime(2024, 1, 8, 5, 30)


def test_result_is_strictly_after_a_matching_now():
    midnight = datetime(2024, 1, 1, 0, 0)
    assert next_occurrence("0 0 * * *", midnight) == datetime(2024, 1, 2, 0, 0)


def test_step_over_wildcard():
    assert next_occurrence("*/15 * * * *", datetime(2024, 1, 3, 10, 7, 30)) == datetime(2024, 1, 3, 10, 15)


def test_range_with_step_on_weekdays():
    saturday = datetime(2024, 1, 6, 8, 0)
    assert next_occurrence("0 9-17/4 * * 1-5", saturday) == datetime(2024, 1, 8, 9, 0)
    assert next_occurrence("0 9-17/4 * * 1-5", datetime(2024, 1, 8, 9, 0)) == datetime(2024, 1, 8, 13, 0)


def test_list_of_days():
    assert next_occurrence("0 0 1,15 * *", datetime(2024, 1, 2)) == datetime(2024, 1, 15)


def test_month_names():
    assert next_occurrence("0 12 1 jan,jul *", datetime(2024, 2, 1)) == datetime(2024, 7, 1, 12, 0)


def test_timezone_is_preserved_not_converted():
    now = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
    assert next_occurrence("30 5 * * 1", now) == datetime(2024, 1, 8, 5, 30, tzinfo=timezone.utc)


def test_projection_is_deterministic():
    first = next_occurrence("17 */3 * * *", NOW)
    second = next_occurrence("17 */3 * * *", NOW)
    assert first == second
    assert first > NOW


@pytest.mark.parametrize(
    "expression",
    [
        "",
        "not a cron",
        "every tuesday",
        "61 * * * *",
        "* * * *",
        "0 0 * * * *",
        "@daily",
    ],
)
def test_invalid_expressions_have_no_next_occurrence(expression):
    assert next_occurrence(expression, NOW) is None


def test_impossible_date_has_no_next_occurrence():
    assert next_occurrence("0 0 30 2 *", NOW) is None


def test_parse_cron_normalizes_whitespace():
    assert parse_cron("  0   0 * *  * ") == "0 0 * * *"


def test_parse_cron_raises_parse_error():
    with pytest.raises(ParseError):
        parse_cron("0 0 * *")


def test_either_day_field_may_match():
    # 2024-01-05 is a Friday; the 13th comes later.
    assert next_occurrence("0 0 13 * 5", NOW) == datetime(2024, 1, 5)
    # The 4th (a Thursday) comes before the next Friday.
    assert next_occurrence("0 0 4 * 5", NOW) == datetime(2024, 1, 4)


def test_impossible_day_of_month_still_matches_on_weekday():
    # Feb 30 never exists, but Mondays in February do.
    assert next_occurrence("0 0 30 2 1", datetime(2024, 3, 1)) == datetime(2025, 2, 3)


def test_impossible_day_of_month_with_valid_weekday_range():
    assert next_occurrence("0 0 31 4 sat,sun", datetime(2024, 1, 3)) == datetime(2024, 4, 6)
