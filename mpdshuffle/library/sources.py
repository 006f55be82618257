# mpdshuffle/library/sources.py
"""
Open the --file argument as a binary stream of newline-delimited URIs.

  "-"                 -> standard input
  http(s)://...       -> fetched with requests (curated lists hosted somewhere)
  anything else       -> a local file

The caller owns the returned stream and closes it.
"""

import io
import logging
import sys
from typing import BinaryIO

import requests

from mpdshuffle.library.loaders import LoaderError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 15


def open_source(location: str) -> BinaryIO:
    if location == "-":
        return sys.stdin.buffer
    if location.startswith(("http://", "https://")):
        return _fetch(location)
    try:
        return open(location, "rb")
    except OSError as exc:
        raise LoaderError(f"cannot open song list {location!r}: {exc}") from exc


def _fetch(url: str) -> BinaryIO:
    logger.info("fetching song list from %s", url)
    try:
        r = requests.get(url, timeout=HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise LoaderError(f"cannot fetch song list {url!r}: {exc}") from exc
    return io.BytesIO(r.content)
