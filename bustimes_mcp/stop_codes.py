import re
from typing import Optional
from urllib.parse import urlencode

from .config import BUSTIMES_BASE_URL

# 4 digits + 3 uppercase letters + 5 digits + optional letter, e.g. 0100BRP90023
ATCO_FULL_PATTERN = re.compile(r'[0-9]{4}[A-Z]{3}[0-9]{5}[A-Z]?')
# NaPTAN-style numeric code, e.g. 010000037
ATCO_NUMERIC_PATTERN = re.compile(r'[0-9]{9}')


def validate_atco_code(code: str) -> bool:
    """Returns True if `code` is either of the two accepted ATCO formats."""
    if not isinstance(code, str):
        return False
    return bool(ATCO_FULL_PATTERN.fullmatch(code) or ATCO_NUMERIC_PATTERN.fullmatch(code))


def build_metadata_url(stop_code: str, base_url: str = BUSTIMES_BASE_URL) -> str:
    return f"{base_url}/api/stops/{stop_code}/"


def build_departures_url(
    stop_code: str,
    date: Optional[str] = None,
    time: Optional[str] = None,
    base_url: str = BUSTIMES_BASE_URL
) -> str:
    """
    Builds the departures page URL for a stop.

    The date/time query is only added when both values are supplied,
    a lone date or time is ignored.
    """
    url = f"{base_url}/stops/{stop_code}/departures"

    if date and time:
        url += "?" + urlencode({"date": date, "time": time})

    return url
