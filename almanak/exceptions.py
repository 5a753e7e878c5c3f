"""
Errors raised while turning text into events
"""


class FormatError(ValueError):
    """
    A date string that can't be used, either because of its layout or because it
    isn't a real calendar date
    """


class DateFormatError(FormatError):
    """
    Date text doesn't look like YYYY-MM-DD (zero-padded)
    """


class DateParseError(FormatError):
    """
    Date text is well-formed but isn't a valid date, e.g. 2023-04-31
    """


class CategoryArityError(ValueError):
    """
    Category text split into more than a primary and a secondary part
    """
