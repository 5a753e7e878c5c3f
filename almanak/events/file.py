"""
Reading and writing the events file.

The file is a CSV with a header row, one event per row:

    date,description,category
    2024-01-01,New year,holiday
    2024-01-02,Standup,work/meeting

It's the only place events live. Every run loads the whole thing, and deleting events
means writing the whole file back out without them.
"""

import csv
import errno
import logging
import os
import tempfile
from collections import Counter
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, TextIO

from almanak.constants import CSV_FIELDS
from almanak.events.event import Event

try:
    import fcntl
except ImportError:  # Windows
    fcntl = None  # type: ignore

logger = logging.getLogger(__name__)


def load(file_path: Path) -> list[Event]:
    """
    Load all events from the file. Rows which can't be parsed are skipped with a
    warning, but a file we can't open at all is an error.
    """
    with file_path.open(newline="", encoding="utf-8") as f:
        events = [event for _, event in _read_rows(f) if event is not None]

    logger.debug(f"Loaded {len(events)} events")
    return events


def _read_rows(
    f: TextIO, warn: bool = True
) -> Iterator[tuple[list[str], Optional[Event]]]:
    """
    Read each row after the header, along with its parsed event. The event is None for
    rows which can't be parsed.
    """
    reader = csv.reader(f)

    header = next(reader, None)
    if header is None:
        logger.debug("Events file is empty")
        return
    if warn and tuple(header) != CSV_FIELDS:
        logger.warning(
            f"Unexpected header {header}, expected {list(CSV_FIELDS)}. Skipping it "
            "anyway"
        )

    for row in reader:
        if not row:
            continue

        try:
            event: Optional[Event] = Event.from_row(row)
        except ValueError as e:
            if warn:
                logger.warning(f"Skipping line {reader.line_num}: {e}")
            event = None
        yield row, event


def append(file_path: Path, event: Event) -> None:
    """
    Append a single event to the end of the file. The file has to exist already, this
    won't create it.
    """
    fd = os.open(file_path, os.O_WRONLY | os.O_APPEND)
    with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(event.to_row())
        f.flush()
        os.fsync(f.fileno())

    logger.debug(f"Appended {event} to {file_path}")


def rewrite_retaining(
    file_path: Path, original: Iterable[Event], to_delete: Iterable[Event]
) -> list[Event]:
    """
    Rewrite the file with every event from `original` except the ones equal to an
    event in `to_delete`. Order of the remaining events is kept.

    Rows already in the file which load() skipped as unparseable are written back
    unchanged in their place, so deleting events never loses them.

    The new contents go to a temporary file next to the original, which then gets
    renamed over it, so the file is never left half-written.

    Returns:
        The events which were kept
    """
    to_delete = list(to_delete)
    retained = [e for e in original if e not in to_delete]

    rows: list[list[str]] = []
    pending = Counter(retained)
    if file_path.exists():
        with file_path.open(newline="", encoding="utf-8") as f:
            for row, event in _read_rows(f, warn=False):
                if event is None:
                    rows.append(row)
                elif pending[event] > 0:
                    pending[event] -= 1
                    rows.append(event.to_row())

    # Retained events which weren't in the file go at the end
    for event in retained:
        if pending[event] > 0:
            pending[event] -= 1
            rows.append(event.to_row())

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{file_path.name}.", suffix=".tmp", dir=file_path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            _write_file_obj(f, rows)
            f.flush()
            os.fsync(f.fileno())

        if file_path.exists():
            os.chmod(tmp_path, file_path.stat().st_mode)
        os.replace(tmp_path, file_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Rewrote {file_path} keeping {len(retained)} events")
    return retained


def _write_file_obj(f: TextIO, rows: Iterable[Sequence[str]]) -> None:
    writer = csv.writer(f, lineterminator="\n")
    writer.writerow(CSV_FIELDS)
    writer.writerows(rows)


@contextmanager
def locked(file_path: Path) -> Iterator[None]:
    """
    Hold an exclusive advisory lock for the events file while doing a
    read-modify-write. The lock is taken on a separate <name>.lock file, since
    rewrite_retaining() replaces the events file itself.

    The events file has to exist, so a missing one doesn't leave a lock file behind.
    """
    if not file_path.exists():
        raise FileNotFoundError(
            errno.ENOENT, os.strerror(errno.ENOENT), str(file_path)
        )
    if fcntl is None:
        yield
        return

    lock_path = file_path.with_name(file_path.name + ".lock")
    with lock_path.open("a") as lock_file:
        logger.debug(f"Locking {lock_path}")
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
