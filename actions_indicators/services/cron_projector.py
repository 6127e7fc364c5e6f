from __future__ import annotations

import logging
from datetime import datetime

from croniter import CroniterError, croniter

from actions_indicators.core.exceptions import ParseError

logger = logging.getLogger(__name__)

CRON_FIELD_COUNT = 5
DAY_OF_MONTH = 2
DAY_OF_WEEK = 4
UNRESTRICTED = ("*", "?")


def parse_cron(expression: str) -> str:
    """Normalize a five-field cron expression or raise ParseError."""
    fields = expression.split()
    if len(fields) != CRON_FIELD_COUNT:
        raise ParseError(f"Expected {CRON_FIELD_COUNT} cron fields, got {len(fields)}: {expression!r}")
    normalized = " ".join(fields)
    if not croniter.is_valid(normalized):
        raise ParseError(f"Invalid cron expression: {expression!r}")
    return normalized


def _project(normalized: str, now: datetime) -> datetime:
    itr = croniter(normalized, now)
    nxt = itr.get_next(datetime)
    while nxt <= now:
        nxt = itr.get_next(datetime)
    return nxt


def _project_day_fields_separately(normalized: str, now: datetime) -> datetime | None:
    """
    Both day fields restricted means "either matches". croniter gives up when the
    day-of-month side can never match (e.g. Feb 30), so each side is projected alone.
    """
    fields = normalized.split()
    if fields[DAY_OF_MONTH] in UNRESTRICTED or fields[DAY_OF_WEEK] in UNRESTRICTED:
        return None

    candidates = []
    for wildcard in (DAY_OF_MONTH, DAY_OF_WEEK):
        variant = list(fields)
        variant[wildcard] = "*"
        try:
            candidates.append(_project(" ".join(variant), now))
        except (CroniterError, ValueError, KeyError):
            continue
    return min(candidates) if candidates else None


def _compute_next(expression: str, now: datetime) -> datetime:
    normalized = parse_cron(expression)
    try:
        return _project(normalized, now)
    except (CroniterError, ValueError, KeyError) as exc:
        nxt = _project_day_fields_separately(normalized, now)
        if nxt is not None:
            return nxt
        # Impossible day/month combinations surface here as a bad date.
        raise ParseError(f"Cron expression never matches: {expression!r}") from exc


def next_occurrence(expression: str, now: datetime) -> datetime | None:
    """Earliest time strictly after ``now`` matching ``expression``, or None."""
    try:
        return _compute_next(expression, now)
    except ParseError as exc:
        logger.debug("No next occurrence: %s", exc)
        return None
