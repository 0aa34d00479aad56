###########EXTERNAL IMPORTS############

from typing import Union

#######################################

#############LOCAL IMPORTS#############

#######################################

BYTES_PER_GB = 1024**3
BYTES_PER_MB = 1024**2
SECONDS_PER_HOUR = 3600


def format_bytes_as_gb(value: Union[int, float]) -> str:
    """
    Converts a byte count to gigabytes with two decimals.

    Args:
        value: Non-negative number of bytes.

    Returns:
        str: Formatted size, e.g. "1.50 GB".
    """

    return f"{value / BYTES_PER_GB:.2f} GB"


def format_percent(ratio: Union[int, float]) -> str:
    """
    Formats a 0..100 ratio as a percentage string with two decimals.

    Args:
        ratio: Percentage value.

    Returns:
        str: Formatted percentage, e.g. "50.00%".
    """

    return f"{ratio:.2f}%"


def format_megabytes(value: Union[int, float]) -> str:
    """Converts a byte count to megabytes with two decimals (no unit suffix)."""

    return f"{value / BYTES_PER_MB:.2f}"


def format_hours(seconds: Union[int, float]) -> str:
    """Converts a duration in seconds to hours with two decimals."""

    return f"{seconds / SECONDS_PER_HOUR:.2f} horas"


def format_temperature(celsius: Union[int, float]) -> str:
    """Formats a temperature in degrees Celsius, dropping trailing zeros."""

    return f"{round(celsius, 2):g} °C"
