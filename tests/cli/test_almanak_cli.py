from datetime import date
from pathlib import Path

import pytest

from almanak.cli.almanak import build_criteria, main, parse_args
from almanak.enums import DateComparison
from almanak.events.event import Event
from almanak.events.file import load
from almanak.query import CategoryCriterion, DateCriterion, DescriptionCriterion

CONTENTS = (
    "date,description,category\n"
    "2022-04-15,event2,study/homework\n"
    "2022-04-01,event1,work\n"
    "2022-05-01,standup,work/meeting\n"
)


@pytest.fixture
def events_path(tmp_path: Path) -> Path:
    path = Path(tmp_path, "events.csv")
    path.write_text(CONTENTS)
    return path


def run(events_path: Path, *args: str) -> None:
    main(["-f", str(events_path), *args])


def test_build_criteria() -> None:
    args = parse_args(
        [
            "list",
            "--today",
            "--before-date",
            "2022-01-01",
            "--category",
            "work",
            "--exclude",
            "--description",
            "stand",
        ]
    )
    assert build_criteria(args) == [
        DateCriterion(DateComparison.TODAY),
        DateCriterion(DateComparison.BEFORE, "2022-01-01"),
        CategoryCriterion("work", exclude=True),
        DescriptionCriterion("stand"),
    ]


def test_exclude_requires_category() -> None:
    with pytest.raises(SystemExit):
        parse_args(["list", "--exclude"])


def test_list_all(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    run(events_path, "list")
    assert capsys.readouterr().out.splitlines() == [
        "2022-04-01: event1, work",
        "2022-04-15: event2, study/homework",
        "2022-05-01: standup, work/meeting",
    ]


def test_list_filters(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    run(events_path, "list", "--category", "work", "--date", "2022-04-15")
    assert capsys.readouterr().out.splitlines() == [
        "2022-04-01: event1, work",
        "2022-04-15: event2, study/homework",
        "2022-05-01: standup, work/meeting",
    ]

    run(
        events_path,
        "list",
        "--category",
        "work",
        "--after-date",
        "2022-04-10",
        "--match-all",
    )
    assert capsys.readouterr().out.splitlines() == [
        "2022-05-01: standup, work/meeting",
    ]


def test_list_bad_date(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as e:
        run(events_path, "list", "--before-date", "2022-4-01")
    assert e.value.code == 1
    assert "YYYY-MM-DD" in capsys.readouterr().err


def test_list_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as e:
        run(Path(tmp_path, "nope.csv"), "list")
    assert e.value.code == 1
    assert "nope.csv" in capsys.readouterr().err


def test_verbose_reraises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        main(["-v", "-f", str(Path(tmp_path, "nope.csv")), "list"])


def test_add(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    run(
        events_path,
        "add",
        "--description",
        "Dentist",
        "--date",
        "2023-03-04",
        "--category",
        "Health",
    )
    assert "2023-03-04: Dentist, health" in capsys.readouterr().out
    assert load(events_path)[-1] == Event(date(2023, 3, 4), "Dentist", "health")


def test_add_bad_category(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as e:
        run(events_path, "add", "--description", "x", "--category", "a,b,c")
    assert e.value.code == 1
    assert events_path.read_text() == CONTENTS


def test_add_requires_description(events_path: Path) -> None:
    with pytest.raises(SystemExit):
        run(events_path, "add", "--date", "2023-03-04")


def test_delete_requires_filters(
    events_path: Path, capsys: pytest.CaptureFixture
) -> None:
    with pytest.raises(SystemExit) as e:
        run(events_path, "delete")
    assert e.value.code == 1
    assert "--before-date" in capsys.readouterr().err
    assert events_path.read_text() == CONTENTS


def test_delete_dry_run(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    run(events_path, "delete", "--category", "work", "--dry-run")
    assert capsys.readouterr().out.splitlines() == [
        "Following events are filtered for deleting:",
        "2022-04-01: event1, work",
        "2022-05-01: standup, work/meeting",
    ]
    assert events_path.read_text() == CONTENTS


def test_delete(events_path: Path, capsys: pytest.CaptureFixture) -> None:
    run(events_path, "delete", "--description", "event")
    assert "Deleted 2 events" in capsys.readouterr().out
    assert events_path.read_text() == (
        "date,description,category\n2022-05-01,standup,work/meeting\n"
    )


def test_delete_all(events_path: Path) -> None:
    run(events_path, "delete", "--all")
    assert load(events_path) == []
    assert events_path.read_text() == "date,description,category\n"


@pytest.mark.parametrize(
    "args",
    [
        ("--description", ""),
        ("--category", ""),
        ("--category", "work,"),
        ("--category", " , study"),
        ("--category", "", "--exclude"),
    ],
)
def test_delete_empty_filter(events_path: Path, args: tuple[str, ...]) -> None:
    """
    An empty filter would pick every event, so it's refused instead of deleting them
    """
    with pytest.raises(SystemExit) as e:
        run(events_path, "delete", *args)
    assert e.value.code == 2
    assert events_path.read_text() == CONTENTS


def test_list_empty_filter() -> None:
    with pytest.raises(SystemExit):
        parse_args(["list", "--description", ""])
