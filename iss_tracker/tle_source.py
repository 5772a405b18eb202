"""
TLE Source Module

Fetches the current ISS orbital element set and parses it from either of the
two shapes TLE endpoints serve:

1. Structured JSON carrying ``line1``/``line2`` and an optional name under
   ``header`` or ``name``
2. Raw multi-line text in which a ``1 ``-prefixed line is immediately followed
   by a ``2 ``-prefixed line, optionally preceded by a name line

Each shape is an independent parse attempt. Attempts are tried in order and
the first that succeeds wins.
"""

import json
from typing import Callable, Optional, Sequence

import requests
from pydantic import ValidationError

from config import config
from iss_tracker.errors import FormatFailure, NetworkFailure
from iss_tracker.models import TleData
from logging_config import get_logger

logger = get_logger(__name__)

TleParser = Callable[[str], Optional[TleData]]

# Alternate keys for the satellite name in structured responses, in priority order
NAME_FIELDS = ('header', 'name')


def parse_structured(text: str) -> Optional[TleData]:
    """Parse a JSON object carrying line1/line2. Returns None if the text is not one."""
    try:
        data = json.loads(text)
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    name = next((data[key] for key in NAME_FIELDS if data.get(key) is not None), None)

    try:
        return TleData(name=name, line1=data.get('line1'), line2=data.get('line2'))
    except ValidationError:
        return None


def parse_raw_text(text: str) -> Optional[TleData]:
    """
    Parse plain TLE text.

    The first ``1 ``-prefixed line followed directly by a ``2 ``-prefixed line
    is taken. The line before it is the name unless it is a ``0 ``-prefixed
    catalog line.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    for idx, line in enumerate(lines[:-1]):
        if line.startswith('1 ') and lines[idx + 1].startswith('2 '):
            name = None
            if idx > 0 and not lines[idx - 1].startswith('0 '):
                name = lines[idx - 1]
            return TleData(name=name, line1=line, line2=lines[idx + 1])

    return None


def first_success(parsers: Sequence[TleParser], text: str) -> Optional[TleData]:
    """Run parsers in order and return the first result that is not None."""
    for parser in parsers:
        tle = parser(text)
        if tle is not None:
            return tle
        logger.debug("tle_parse_attempt_failed", parser=parser.__name__)
    return None


TLE_PARSERS = (parse_structured, parse_raw_text)


def parse_tle(text: str) -> TleData:
    """
    Parse TLE text in any accepted shape.

    Raises:
        FormatFailure: If no shape matches
    """
    tle = first_success(TLE_PARSERS, text)
    if tle is None:
        raise FormatFailure("Unexpected TLE format.")
    return tle


def fetch_iss_tle(url: Optional[str] = None, timeout: Optional[float] = None) -> TleData:
    """
    Fetch and parse the current ISS TLE.

    Raises:
        NetworkFailure: On transport errors or a non-success HTTP status
        FormatFailure: If the body is not a TLE in any accepted shape
    """
    url = url or config.TLE_URL
    timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("tle_fetch_failed", url=url, error=str(e))
        raise NetworkFailure(str(e)) from e

    tle = parse_tle(response.text)
    logger.info("tle_fetched", name=tle.name)
    return tle
