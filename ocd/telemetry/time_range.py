"""Parsing of relative time windows such as `7d` or `12h`."""

import re

from ocd.core.errors import InvalidTimeRange

_TIME_RANGE = re.compile(r"^(\d+)([hdwM])$")

_UNIT_SECONDS = {
    "h": 3600,
    "d": 86400,
    "w": 604800,
    "M": 2592000,  # 30 days
}


def parse_time_range(time_range: str) -> int:
    """
    Convert a time window expression to seconds.

    Raises:
        InvalidTimeRange: If the expression is not `<integer><h|d|w|M>`
    """
    match = _TIME_RANGE.match(time_range)
    if not match:
        raise InvalidTimeRange(f"Invalid time range format: {time_range!r} (expected e.g. 12h, 7d, 2w, 1M)")
    return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
