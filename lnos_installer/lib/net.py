from __future__ import annotations

import logging

import requests

from .command import CommandRunner

logger = logging.getLogger(__name__)

GEOIP_TIMEZONE_URL = "http://ip-api.com/line?fields=timezone"
DEFAULT_TIMEZONE = "America/Chicago"


def is_online(runner: CommandRunner, host: str = "google.com") -> bool:
    """Best-effort online check."""

    r = runner.run(["ping", "-c", "1", "-W", "2", host], check=False, query=True)
    return r.ok


def guess_timezone(url: str = GEOIP_TIMEZONE_URL, *, timeout: float = 5.0) -> str:
    """Best-effort timezone guess from the public IP address."""

    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.debug("Timezone lookup failed (%s); using %s", e, DEFAULT_TIMEZONE)
        return DEFAULT_TIMEZONE

    tz = resp.text.strip()
    return tz or DEFAULT_TIMEZONE
