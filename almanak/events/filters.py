"""
Filtering events.

Filters don't modify anything. Each one takes the full list of events plus the results
gathered so far, and returns a new result list with any newly matching events added to
the end. An event is never added twice, so running the same filter again is a no-op and
running several filters gives the union of their matches.
"""

import logging
from datetime import date
from typing import Callable, Iterable, Sequence

from almanak.enums import DateComparison, RenderMode
from almanak.events.event import Event
from almanak.events.util import parse_user_date
from almanak.exceptions import DateFormatError

logger = logging.getLogger(__name__)


def _accumulate(results: Sequence[Event], matches: Iterable[Event]) -> list[Event]:
    new_results = list(results)
    for event in matches:
        if event not in new_results:
            new_results.append(event)
    return new_results


def filter_by_date(
    original: Iterable[Event],
    results: Sequence[Event],
    date_str: str,
    comparison: DateComparison,
    today: Callable[[], date] = date.today,
) -> list[Event]:
    """
    Add events to the results based on how their date compares to the given one.

    `date_str` is only looked at for BEFORE, AFTER and EXACT, where it's required and
    has to be YYYY-MM-DD. TODAY compares against today's date and ALL matches every
    event.
    """
    if comparison == DateComparison.ALL:
        return _accumulate(results, original)

    if comparison == DateComparison.TODAY:
        reference = today()
    elif not date_str:
        raise DateFormatError(
            f"A date is required to filter {comparison.value} a date, use format "
            "YYYY-MM-DD"
        )
    else:
        reference = parse_user_date(date_str)

    if comparison == DateComparison.BEFORE:
        matches = [e for e in original if e.date < reference]
    elif comparison == DateComparison.AFTER:
        matches = [e for e in original if e.date > reference]
    else:
        matches = [e for e in original if e.date == reference]

    logger.debug(f"{len(matches)} events {comparison.value} {reference}")
    return _accumulate(results, matches)


def filter_by_string(
    original: Iterable[Event],
    results: Sequence[Event],
    text: str,
    excluded: bool = False,
    is_category: bool = False,
) -> list[Event]:
    """
    Add events to the results whose category or description starts with the given
    text, ignoring case.

    For categories, the text can hold several comma separated terms and an event
    matches if any of them starts its primary or secondary category. `excluded` flips
    that around to pick events which don't match. Descriptions are matched against the
    whole text, and `excluded` has no effect on them.

    Empty text matches everything.
    """
    lower_text = text.lower()

    if is_category:
        terms = [t.strip() for t in lower_text.split(",")]

        def is_match(event: Event) -> bool:
            primary = event.primary_category.lower()
            secondary = event.secondary_category.lower()
            matched = any(
                primary.startswith(t) or secondary.startswith(t) for t in terms
            )
            return matched != excluded

    else:

        def is_match(event: Event) -> bool:
            return event.description.lower().startswith(lower_text)

    return _accumulate(results, (e for e in original if is_match(e)))


def sort_events(events: Iterable[Event]) -> list[Event]:
    """
    Oldest to newest
    """
    return sorted(events)


def render_events(
    events: Iterable[Event], mode: RenderMode = RenderMode.DISPLAY
) -> list[str]:
    return [event.render(mode) for event in sort_events(events)]
