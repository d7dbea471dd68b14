"""Duration strings such as ``"90s"`` or ``"1h30m"``, and TTL header encoding."""

import re
from typing import Dict, List, Optional

from lattice_objects.exceptions import LocalInputError

TIME_TO_LIVE_HEADER = "Time-To-Live"

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS: Dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_MAX_NANOSECONDS = 2**63 - 1

_TERM = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")


def parse_duration(value: str) -> int:
    """Parse a duration string into a signed count of nanoseconds.

    A duration is an optional sign followed by one or more decimal numbers,
    each with a unit suffix: ``"300ms"``, ``"-1.5h"``, ``"2h45m"``. Valid
    units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.

    Args:
        value: Duration string

    Returns:
        Duration in nanoseconds

    Raises:
        LocalInputError: If the string is not a valid duration
    """
    original = value
    negative = False
    if value[:1] in ("-", "+"):
        negative = value[0] == "-"
        value = value[1:]

    if value == "0":
        return 0
    if not value:
        raise LocalInputError(f"invalid duration {original!r}")

    total = 0
    pos = 0
    while pos < len(value):
        match = _TERM.match(value, pos)
        if match is None:
            raise LocalInputError(f"invalid duration {original!r}")
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise LocalInputError(f"invalid duration {original!r}")
        scale = _UNITS.get(unit)
        if scale is None:
            raise LocalInputError(f"unknown unit {unit!r} in duration {original!r}")

        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        pos = match.end()

    # the negative range reaches one further than the positive
    if total > _MAX_NANOSECONDS + (1 if negative else 0):
        raise LocalInputError(f"invalid duration {original!r}")
    return -total if negative else total


def ttl_headers(time_to_live: Optional[str]) -> Dict[str, List[str]]:
    """Headers carrying an upload's time-to-live.

    An empty or absent duration, or one that parses to zero, means the object
    never expires and no header is sent.
    """
    if not time_to_live:
        return {}
    nanoseconds = parse_duration(time_to_live)
    if nanoseconds == 0:
        return {}
    return {TIME_TO_LIVE_HEADER: [str(nanoseconds)]}
