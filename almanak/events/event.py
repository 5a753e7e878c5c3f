import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from almanak.constants import (
    DATE_FORMAT,
    INPUT_CATEGORY_DELIMITER,
    STORED_CATEGORY_DELIMITER,
)
from almanak.enums import RenderMode
from almanak.events.util import parse_date, parse_user_date, split_category
from almanak.exceptions import CategoryArityError

logger = logging.getLogger(__name__)


# Field order matters: events sort by date first, then by the rest
@dataclass(frozen=True, order=True)
class Event:
    date: date
    description: str = ""
    primary_category: str = ""
    secondary_category: str = ""

    def __str__(self) -> str:
        return self.render(RenderMode.DISPLAY)

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "Event":
        """
        Parse from the fields of a row in the events file: date, description, category
        """
        if len(row) != 3:
            raise ValueError(f"Expected 3 fields, got {len(row)}")

        date_str, description, category = row
        primary, secondary = split_category(category, STORED_CATEGORY_DELIMITER)
        return cls(
            date=parse_date(date_str),
            description=description,
            primary_category=primary,
            secondary_category=secondary,
        )

    @classmethod
    def from_input(
        cls,
        date_str: Optional[str],
        description: str,
        category: Optional[str] = None,
        today: Callable[[], date] = date.today,
    ) -> "Event":
        """
        Build an event from what the user typed in. No date means today, and the
        category is given as "primary[,secondary]".
        """
        event_date = parse_user_date(date_str) if date_str else today()

        primary, secondary = ("", "")
        if category:
            primary, secondary = split_category(
                category.lower(), INPUT_CATEGORY_DELIMITER
            )
            # The stored delimiter inside a part would read back as a third part
            if STORED_CATEGORY_DELIMITER in primary + secondary:
                raise CategoryArityError(
                    f"Category '{category}' can't contain "
                    f"'{STORED_CATEGORY_DELIMITER}', separate the parts with "
                    f"'{INPUT_CATEGORY_DELIMITER}'"
                )

        return cls(event_date, description, primary, secondary)

    def to_row(self) -> list[str]:
        return [
            self.date.strftime(DATE_FORMAT),
            self.description,
            self.render_category(RenderMode.PERSIST),
        ]

    def render_category(self, mode: RenderMode) -> str:
        if not self.primary_category and not self.secondary_category:
            return "" if mode == RenderMode.PERSIST else "/"
        elif not self.secondary_category:
            return self.primary_category
        return f"{self.primary_category}/{self.secondary_category}"

    def render(self, mode: RenderMode) -> str:
        """
        Render as a single line of text, either as stored in the events file or as
        shown to a human
        """
        date_str = self.date.strftime(DATE_FORMAT)
        category = self.render_category(mode)
        if mode == RenderMode.PERSIST:
            return f"{date_str},{self.description},{category}"
        return f"{date_str}: {self.description}, {category}"
