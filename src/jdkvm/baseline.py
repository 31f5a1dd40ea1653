"""Expand a bare JDK major version into the latest full version.

Oracle publishes a plaintext "security baseline" listing with one
``MAJOR.MINOR.PATCH`` line per supported release train. It is served from a
different host than the archive downloads, so it gets its own short-lived
client.
"""

from __future__ import annotations

import logging
import re

import httpx

from jdkvm import config
from jdkvm.errors import BaselineLookupError
from jdkvm.http import friendly_transport_error, new_client

logger = logging.getLogger(__name__)


def baseline_pattern(major: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<ver>{re.escape(major)}\.\d+\.\d+)$", re.MULTILINE)


def match_latest(body: str, major: str) -> str:
    match = baseline_pattern(major).search(body.replace("\r\n", "\n"))
    if match is None:
        return ""
    return match.group("ver")


def resolve_latest(major: str, url: str | None = None, timeout: float | None = None) -> str:
    """Return the full version for ``major``, or ``""`` when the baseline has none."""
    target = url or config.baseline_url()
    logger.debug("resolving latest version for %s from %s", major, target)
    try:
        with new_client(timeout or config.http_timeout()) as client:
            response = client.get(target)
            response.raise_for_status()
            body = response.text
    except httpx.HTTPError as exc:
        raise friendly_transport_error(exc, "the Oracle baseline version list", BaselineLookupError) from exc

    full_version = match_latest(body, major)
    if full_version:
        logger.debug("full version for %s: %s", major, full_version)
    else:
        logger.warning("Failed to extract java version %s from baseline url %s", major, target)
    return full_version
