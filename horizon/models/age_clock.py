"""
Age clock for projections.

Converts a date of birth into a fractional age. Deciding what to do when the
date of birth is unknown is left to the caller; `resolve_age` implements the
usual fallback policy.
"""

from datetime import date, datetime
from typing import Optional, Union

from .errors import InvalidDateOfBirthError

DEFAULT_FALLBACK_AGE = 35.0

DateLike = Union[date, str]


def parse_date(value: DateLike) -> date:
    """Parse an ISO date string or pass a date through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as e:
            raise InvalidDateOfBirthError(f"Invalid date of birth: {value!r}") from e
    raise InvalidDateOfBirthError(f"Invalid date of birth: {value!r}")


def _birthday_in_year(birth: date, year: int) -> date:
    """Birthday in a given year; Feb 29 falls back to Feb 28 in common years."""
    try:
        return birth.replace(year=year)
    except ValueError:
        return date(year, 2, 28)


def age_at_date(date_of_birth: DateLike, on: Optional[DateLike] = None) -> float:
    """
    Compute the fractional age on a given date.

    Args:
        date_of_birth: Date of birth (date or ISO string)
        on: Reference date (defaults to today)

    Returns:
        Age in years, including the elapsed fraction of the current year of life

    Raises:
        InvalidDateOfBirthError: If either date cannot be parsed
    """
    birth = parse_date(date_of_birth)
    today = parse_date(on) if on is not None else date.today()

    years = today.year - birth.year
    last_birthday = _birthday_in_year(birth, today.year)
    if today < last_birthday:
        years -= 1
        last_birthday = _birthday_in_year(birth, today.year - 1)
    next_birthday = _birthday_in_year(birth, last_birthday.year + 1)

    year_length = (next_birthday - last_birthday).days
    elapsed = (today - last_birthday).days
    return years + elapsed / year_length


def resolve_age(
    date_of_birth: Optional[DateLike],
    fallback_age: Optional[float] = DEFAULT_FALLBACK_AGE,
    on: Optional[DateLike] = None,
) -> Optional[float]:
    """Current age from the date of birth, or the fallback when it is missing."""
    if date_of_birth is None:
        return fallback_age
    return age_at_date(date_of_birth, on)
