"""
Querying, adding and deleting events - what the CLI calls into.

A query is a list of criteria. By default the results of every criterion are added
together (an event matching any of them is returned). Pass match_all=True to only get
events which match every criterion instead.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Union

from almanak.enums import DateComparison, RenderMode
from almanak.events import file as events_file
from almanak.events.event import Event
from almanak.events.filters import filter_by_date, filter_by_string, render_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateCriterion:
    comparison: DateComparison
    date_str: str = ""

    def apply(
        self,
        events: Sequence[Event],
        results: Sequence[Event],
        today: Callable[[], date] = date.today,
    ) -> list[Event]:
        return filter_by_date(events, results, self.date_str, self.comparison, today)


@dataclass(frozen=True)
class CategoryCriterion:
    text: str
    exclude: bool = False

    def apply(
        self,
        events: Sequence[Event],
        results: Sequence[Event],
        today: Callable[[], date] = date.today,
    ) -> list[Event]:
        return filter_by_string(
            events, results, self.text, excluded=self.exclude, is_category=True
        )


@dataclass(frozen=True)
class DescriptionCriterion:
    text: str

    def apply(
        self,
        events: Sequence[Event],
        results: Sequence[Event],
        today: Callable[[], date] = date.today,
    ) -> list[Event]:
        return filter_by_string(events, results, self.text)


Criterion = Union[DateCriterion, CategoryCriterion, DescriptionCriterion]


def apply(
    events: Sequence[Event],
    results: Sequence[Event],
    criterion: Criterion,
    today: Callable[[], date] = date.today,
) -> list[Event]:
    """
    Apply a single criterion, returning the results with its matches added
    """
    return criterion.apply(events, results, today)


def query(
    events: Sequence[Event],
    criteria: Iterable[Criterion],
    match_all: bool = False,
    today: Callable[[], date] = date.today,
) -> list[Event]:
    """
    Find the events matching the criteria. No criteria means no events, not all of
    them - ask for DateCriterion(DateComparison.ALL) for that.
    """
    criteria = list(criteria)
    if not criteria:
        return []

    if not match_all:
        results: list[Event] = []
        for criterion in criteria:
            results = apply(events, results, criterion, today)
        return results

    # Intersection: keep the events every criterion matches on its own
    matched = [apply(events, [], criterion, today) for criterion in criteria]
    results = []
    for event in events:
        if event not in results and all(event in m for m in matched):
            results.append(event)
    return results


def add(
    file_path: Path,
    date_str: Optional[str],
    description: str,
    category: Optional[str] = None,
    today: Callable[[], date] = date.today,
) -> Event:
    """
    Add a new event to the events file. No date means today.
    """
    event = Event.from_input(date_str, description, category, today)
    with events_file.locked(file_path):
        events_file.append(file_path, event)
    logger.info(f"Added {event}")
    return event


def delete(file_path: Path, to_delete: Iterable[Event]) -> int:
    """
    Delete events from the events file.

    The file is loaded again while holding the lock, so events added since the caller
    loaded it aren't lost.

    Returns:
        How many events were deleted
    """
    to_delete = list(to_delete)
    with events_file.locked(file_path):
        original = events_file.load(file_path)
        retained = events_file.rewrite_retaining(file_path, original, to_delete)

    deleted = len(original) - len(retained)
    logger.info(f"Deleted {deleted} events from {file_path}")
    return deleted


def dry_run_preview(to_delete: Iterable[Event]) -> list[str]:
    """
    What delete() would remove, as lines to show the user
    """
    return render_events(to_delete, RenderMode.DISPLAY)
