###########EXTERNAL IMPORTS############

from datetime import datetime, timezone

#######################################

#############LOCAL IMPORTS#############

#######################################


def get_current_utc_datetime() -> datetime:
    """
    Returns the current UTC datetime.

    Returns:
        datetime: Current time in UTC timezone.
    """

    return datetime.now(tz=timezone.utc)


def to_iso(date: datetime) -> str:
    """
    Converts datetime to ISO format string, defaulting to UTC if no timezone.

    Args:
        date: Datetime to format.

    Returns:
        str: ISO format string.
    """

    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)

    return date.isoformat()
