"""Month designator resolution shared by every read operation."""

from typing import Union

from sales_dashboard.core.exceptions import InvalidMonth, MissingMonth

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_MONTH_LOOKUP: dict[str, int] = {}
for _number, _name in enumerate(MONTH_NAMES, start=1):
    _MONTH_LOOKUP[_name] = _number
    _MONTH_LOOKUP[_name[:3]] = _number


def resolve_month(month: Union[int, str, None]) -> int:
    """Resolve a month designator to its number (1-12).

    Accepts an integer, a numeric string, or an English month name or
    three-letter abbreviation in any case.

    Raises:
        MissingMonth: If ``month`` is None or blank
        InvalidMonth: If ``month`` matches no month
    """
    if month is None:
        raise MissingMonth()

    if isinstance(month, bool):
        raise InvalidMonth(details={"month": month})

    if isinstance(month, int):
        if 1 <= month <= 12:
            return month
        raise InvalidMonth(details={"month": month})

    value = str(month).strip()
    if not value:
        raise MissingMonth()

    if value.isdigit():
        number = int(value)
        if 1 <= number <= 12:
            return number
        raise InvalidMonth(details={"month": value})

    number = _MONTH_LOOKUP.get(value.lower())
    if number is None:
        raise InvalidMonth(details={"month": value})
    return number
