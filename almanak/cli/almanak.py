"""
Keep a log of dated events in a CSV file, and list, add or delete them.

Filters given to list and delete add up: an event is picked if it matches any of them,
unless --match-all is given.
"""

import sys
from argparse import ArgumentParser, Namespace
from typing import Optional, Sequence

from colorama import Fore, Style, just_fix_windows_console

from almanak.cli.common import add_common_args, setup_logging
from almanak.constants import INPUT_CATEGORY_DELIMITER
from almanak.enums import DateComparison, RenderMode
from almanak.events import file as events_file
from almanak.events.event import Event
from almanak.events.filters import sort_events
from almanak.query import (
    CategoryCriterion,
    Criterion,
    DateCriterion,
    DescriptionCriterion,
    add,
    delete,
    dry_run_preview,
    query,
)
from almanak.version import VERSION

FILTER_NAMES = (
    "all",
    "description",
    "category",
    "date",
    "after-date",
    "before-date",
    "today",
)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.v)
    just_fix_windows_console()

    try:
        if args.action == "list":
            list_events(args)
        elif args.action == "add":
            add_event(args)
        elif args.action == "delete":
            delete_events(args)
    except Exception as e:
        if not args.v:
            print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}", file=sys.stderr)
            sys.exit(1)
        else:
            raise


def parse_args(argv: Optional[Sequence[str]] = None) -> Namespace:
    parser = ArgumentParser(description=__doc__)
    add_common_args(parser)
    parser.add_argument("--version", action="version", version=VERSION)
    subparsers = parser.add_subparsers(dest="action", required=True)

    list_parser = subparsers.add_parser(
        "list", help="List events, or all of them if no filters are given"
    )
    add_filter_args(list_parser)

    add_parser = subparsers.add_parser("add", help="Add an event")
    add_parser.add_argument("--description", required=True, help="What happened")
    add_parser.add_argument(
        "--date",
        metavar="YYYY-MM-DD",
        help="Date of the event, default: today",
    )
    add_parser.add_argument(
        "--category",
        metavar="PRIMARY[,SECONDARY]",
        help="Category and optional subcategory of the event",
    )

    delete_parser = subparsers.add_parser(
        "delete", help="Delete the events picked by the filters"
    )
    add_filter_args(delete_parser)
    delete_parser.add_argument("--all", action="store_true", help="Delete every event")
    delete_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the events which would be deleted without deleting them",
    )

    args = parser.parse_args(argv)
    if args.action != "add":
        if args.exclude and args.category is None:
            parser.error("--exclude requires --category")
        # An empty value would match every event
        if args.description == "":
            parser.error("--description can't be empty")
        if args.category is not None and not all(
            term.strip() for term in args.category.split(INPUT_CATEGORY_DELIMITER)
        ):
            parser.error("--category can't have empty categories")
    return args


def add_filter_args(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--today", action="store_true", help="Pick events on today's date"
    )
    parser.add_argument(
        "--before-date", metavar="YYYY-MM-DD", help="Pick events before this date"
    )
    parser.add_argument(
        "--after-date", metavar="YYYY-MM-DD", help="Pick events after this date"
    )
    parser.add_argument(
        "--date", metavar="YYYY-MM-DD", help="Pick events on this date"
    )
    parser.add_argument(
        "--category",
        metavar="CATEGORY[,CATEGORY...]",
        help=(
            "Pick events whose primary or secondary category starts with any of "
            "these"
        ),
    )
    parser.add_argument(
        "--exclude",
        action="store_true",
        help="Pick events which don't match --category instead",
    )
    parser.add_argument(
        "--description", help="Pick events whose description starts with this"
    )
    parser.add_argument(
        "--match-all",
        action="store_true",
        help="Only pick events matching every filter, instead of any of them",
    )


def build_criteria(args: Namespace) -> list[Criterion]:
    """
    Turn the filter flags into query criteria
    """
    criteria: list[Criterion] = []
    if args.today:
        criteria.append(DateCriterion(DateComparison.TODAY))
    if args.before_date is not None:
        criteria.append(DateCriterion(DateComparison.BEFORE, args.before_date))
    if args.after_date is not None:
        criteria.append(DateCriterion(DateComparison.AFTER, args.after_date))
    if args.date is not None:
        criteria.append(DateCriterion(DateComparison.EXACT, args.date))
    if args.category is not None:
        criteria.append(CategoryCriterion(args.category, exclude=args.exclude))
    if args.description is not None:
        criteria.append(DescriptionCriterion(args.description))
    return criteria


def list_events(args: Namespace) -> None:
    events = events_file.load(args.file)

    criteria = build_criteria(args)
    if not criteria:
        criteria = [DateCriterion(DateComparison.ALL)]

    results = query(events, criteria, match_all=args.match_all)
    for event in sort_events(results):
        print(format_event(event))


def add_event(args: Namespace) -> None:
    event = add(args.file, args.date, args.description, args.category)
    print(f"Added {format_event(event)}")


def delete_events(args: Namespace) -> None:
    if args.all:
        criteria: list[Criterion] = [DateCriterion(DateComparison.ALL)]
    else:
        criteria = build_criteria(args)
    if not criteria:
        raise ValueError(
            "Add filters to pick the events to delete. Available filters: "
            + ", ".join(f"--{name}" for name in FILTER_NAMES)
        )

    events = events_file.load(args.file)
    to_delete = query(events, criteria, match_all=args.match_all)

    if args.dry_run:
        print("Following events are filtered for deleting:")
        for line in dry_run_preview(to_delete):
            print(line)
        return

    deleted = delete(args.file, to_delete)
    print(f"Deleted {deleted} events")


def format_event(event: Event) -> str:
    """
    Display line for an event, with the date highlighted when writing to a terminal
    """
    line = event.render(RenderMode.DISPLAY)
    if not sys.stdout.isatty():
        return line

    date_str, rest = line.split(":", 1)
    return f"{Fore.CYAN}{date_str}{Style.RESET_ALL}:{rest}"


if __name__ == "__main__":
    main()
