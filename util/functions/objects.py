###########EXTERNAL IMPORTS############

from typing import Optional, List
import os

#######################################

#############LOCAL IMPORTS#############

#######################################


def get_env_variable(key: str, default: str) -> str:
    """
    Returns the value of the environment variable for the given key, or the default if it is unset or blank.
    """

    value = os.getenv(key)
    if value is None or not value.strip():
        return default

    return value.strip()


def split_csv(string: Optional[str]) -> List[str]:
    """
    Splits a comma separated string into its non-empty, stripped items.

    Args:
        string: Comma separated values, or None.

    Returns:
        List[str]: Items in their original order.
    """

    if string is None:
        return []
    return [item.strip() for item in string.split(",") if item.strip()]
