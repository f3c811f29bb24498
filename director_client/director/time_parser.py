"""
Parsing of timestamps sent by the director.

Older directors render times the Ruby way (``2024-01-02 03:04:05 +0000``),
newer ones use RFC 3339.
"""
import re
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple

from director_client.core.exceptions import ParseError

# strptime patterns, tried after RFC 3339
RUBY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"
RUBY_UTC_TIME_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

DEFAULT_FORMATS: Tuple[str, ...] = (RUBY_TIME_FORMAT, RUBY_UTC_TIME_FORMAT)

_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def _parse_rfc3339(raw: str) -> datetime:
    match = _RFC3339.match(raw)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {raw!r}")

    # fromisoformat on 3.10 only takes 3 or 6 fraction digits and no 'Z'
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(f"{match['date']}T{match['time']}.{fraction}{offset}")


class TimeParser:
    """
    Parse director timestamps into timezone-aware datetimes.

    Usage:
        parser = TimeParser()
        parser.parse("2024-01-02T03:04:05Z")

        # Accept an extra director format
        TimeParser(extra_formats=["%d/%m/%Y %H:%M"])
    """

    def __init__(self, extra_formats: Optional[Iterable[str]] = None):
        self.formats: Tuple[str, ...] = DEFAULT_FORMATS + tuple(extra_formats or ())
        self._parsers: Tuple[Callable[[str], datetime], ...] = (_parse_rfc3339,) + tuple(
            self._strptime(fmt) for fmt in self.formats
        )

    @staticmethod
    def _strptime(fmt: str) -> Callable[[str], datetime]:
        return lambda raw: datetime.strptime(raw, fmt)

    def parse(self, raw: str) -> datetime:
        """
        Parse ``raw`` using the first matching format.

        Naive results are assumed to be UTC.

        Raises:
            ParseError: If no format matches
        """
        value = (raw or "").strip()
        if value:
            for parser in self._parsers:
                try:
                    parsed = parser(value)
                except ValueError:
                    continue
                if parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=timezone.utc)
                return parsed

        raise ParseError(raw, ("RFC 3339",) + self.formats)
