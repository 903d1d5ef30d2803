"""Leaf classification for JSON strings and numbers.

Recognizers are tried in a fixed order and the first match wins:
UUID, e-mail, URL/hostname, then date and date-time formats. Anything
else becomes an ``UnknownString`` that records the sample verbatim.
"""

import re
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Callable, List, Optional
from urllib.parse import urlparse

from jsondrivel.schema import (
    UUID,
    DateTimeISO8601,
    DateTimeRFC2822,
    Email,
    Float,
    Hostname,
    Integer,
    IsoDate,
    NumberType,
    StringType,
    UnknownString,
    Url,
)

# Patterns are compiled once at import and shared read-only
_UUID_PATTERN = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')
_EMAIL_PATTERN = re.compile(
    r'^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$')
_HOSTNAME_PATTERN = re.compile(r'^([A-Za-z0-9\-]+\.)+[A-Za-z]{2,}$')
_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_DATETIME_PATTERN = re.compile(
    r'^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$')
_RFC2822_PATTERN = re.compile(
    r'^([A-Za-z]{3},\s*)?\d{1,2}\s+[A-Za-z]{3}\s+\d{2,4}\s+\d{2}:\d{2}(:\d{2})?\s+([+-]\d{4}|[A-Za-z]{1,5})$')


def _uuid(s: str) -> Optional[StringType]:
    if len(s) == 36 and _UUID_PATTERN.match(s):
        return UUID()
    return None


def _email(s: str) -> Optional[StringType]:
    if '@' in s and _EMAIL_PATTERN.match(s):
        return Email()
    return None


def _url_or_hostname(s: str) -> Optional[StringType]:
    if '.' not in s:
        return None
    try:
        parsed = urlparse(s)
        if parsed.scheme and parsed.netloc:
            return Url()
    except ValueError:
        # urlparse rejects malformed IPv6 netlocs
        pass
    if _HOSTNAME_PATTERN.match(s):
        return Hostname()
    return None


def _is_iso_date(s: str) -> bool:
    if not _DATE_PATTERN.match(s):
        return False
    try:
        date.fromisoformat(s)
    except ValueError:
        return False
    return True


def _is_iso_datetime(s: str) -> bool:
    if not _DATETIME_PATTERN.match(s):
        return False
    normalized = s[:-1] + '+00:00' if s[-1] in 'Zz' else s
    try:
        datetime.fromisoformat(normalized)
    except ValueError:
        return False
    return True


def _is_rfc2822(s: str) -> bool:
    if not _RFC2822_PATTERN.match(s):
        return False
    try:
        parsed = parsedate_to_datetime(s)
    except (TypeError, ValueError, IndexError, OverflowError):
        return False
    # A "-0000" or unknown zone name parses without an offset
    return parsed.tzinfo is not None


def _dates(s: str) -> Optional[StringType]:
    if s[:1].isdigit():
        if _is_iso_date(s):
            return IsoDate()
        if _is_iso_datetime(s):
            return DateTimeISO8601()
    if _is_rfc2822(s):
        return DateTimeRFC2822()
    return None


_RECOGNIZERS: List[Callable[[str], Optional[StringType]]] = [_uuid, _email, _url_or_hostname, _dates]


def classify_string(s: str) -> StringType:
    """Classifies a string value into its most specific string type.

    Args:
        s: The string to classify

    Returns:
        The first recognized type, or an UnknownString holding the sample
    """
    for recognizer in _RECOGNIZERS:
        string_type = recognizer(s)
        if string_type is not None:
            return string_type
    return UnknownString(
        strings_seen=(s,),
        chars_seen=tuple(s),
        min_length=len(s),
        max_length=len(s),
    )


def classify_number(n: int | float) -> NumberType:
    """Maps an integral JSON number to Integer and anything else to Float."""
    if isinstance(n, int):
        return Integer(min=n, max=n)
    return Float(min=n, max=n)
