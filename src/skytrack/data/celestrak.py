"""Celestrak catalog client.

Fetches group element files over HTTP and falls back to a small built-in
catalog when the network is unavailable. Fetching happens before a tick,
never inside one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

import requests

from skytrack.core.registry import Registry
from skytrack.core.tle import TLE, parse_tle
from skytrack.utils.constants import (
    CELESTRAK_BASE_URL,
    CELESTRAK_TIMEOUT_S,
    DEFAULT_GROUPS,
    MIN_CATALOG_SIZE,
)

logger = logging.getLogger(__name__)

FALLBACK_TLES: dict[str, str] = {
    "stations": """\
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
CSS (TIANHE)
1 48274U 21035A   24045.50261574  .00021540  00000-0  25163-3 0  9993
2 48274  41.4681 279.1498 0005372 149.8847 345.3740 15.62096269157018
""",
    "weather": """\
NOAA 18
1 28654U 05018A   24045.52083333  .00000149  00000-0  10834-3 0  9994
2 28654  98.9710 100.7890 0014048 313.6230  46.3750 14.12905012970123
""",
    "science": """\
HST
1 20580U 90037B   24045.55478014  .00001456  00000-0  73052-4 0  9994
2 20580  28.4701  41.0696 0002622 348.3544 140.2428 15.09435694872912
""",
    "geo": """\
SES-1
1 36516U 10012A   24045.39583333  .00000112  00000-0  00000+0 0  9991
2 36516   0.0254 268.0254 0000567 142.5432 240.3076  1.00271953 50780
""",
}
"""Known-good element sets used when a fetch fails."""

EXTRA_FALLBACK_GROUPS: tuple[str, ...] = ("science", "weather")
"""Groups added when too few objects were loaded."""


@dataclass
class CelestrakClient:
    """Client for Celestrak's public element files. No account needed.

    Attributes:
        base_url: Root URL of the element files.
        timeout: Per-request timeout in seconds.
    """

    base_url: str = CELESTRAK_BASE_URL
    timeout: float = CELESTRAK_TIMEOUT_S
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def group_url(self, group: str) -> str:
        return f"{self.base_url}/{group}.txt"

    def fetch_group(self, group: str) -> list[TLE]:
        """Fetch and parse one Celestrak group.

        Malformed sets within the file are skipped.

        Raises:
            requests.RequestException: If the request fails or times out.
        """
        response = self._session.get(self.group_url(group), timeout=self.timeout)
        response.raise_for_status()

        if not response.text.strip():
            return []

        tles = parse_tle(response.text)
        logger.debug("Fetched %d TLEs for group %s", len(tles), group)
        return tles

    def load_catalog(self, groups: Iterable[str] = DEFAULT_GROUPS) -> list[TLE]:
        """Fetch several groups, substituting built-in sets for failed ones.

        Objects repeated across groups are kept once, first occurrence wins.
        """
        loaded: list[TLE] = []
        for group in groups:
            try:
                loaded.extend(self.fetch_group(group))
            except requests.RequestException as exc:
                logger.warning("Failed to fetch %s from Celestrak: %s", group, exc)
                loaded.extend(fallback_catalog([group]))

        if len(loaded) < MIN_CATALOG_SIZE:
            loaded.extend(fallback_catalog(EXTRA_FALLBACK_GROUPS))

        return _dedupe(loaded)


def fallback_catalog(groups: Iterable[str] | None = None) -> list[TLE]:
    """Built-in element sets for the given groups (all groups if None)."""
    names = list(FALLBACK_TLES) if groups is None else list(groups)
    tles: list[TLE] = []
    for name in names:
        text = FALLBACK_TLES.get(name)
        if text:
            tles.extend(parse_tle(text, strict=True))
    return tles


def _dedupe(tles: list[TLE]) -> list[TLE]:
    seen: set[int] = set()
    unique: list[TLE] = []
    for tle in tles:
        if tle.norad_id not in seen:
            seen.add(tle.norad_id)
            unique.append(tle)
    return unique


def populate(registry: Registry, tles: Iterable[TLE]) -> int:
    """Add element sets to a registry, skipping identities already tracked.

    Returns:
        Number of objects added.
    """
    added = 0
    for tle in tles:
        if tle.label in registry:
            logger.debug("Skipping duplicate %s", tle.label)
            continue
        registry.add_tle(tle)
        added += 1
    logger.info("Registered %d objects (%d total)", added, len(registry))
    return added
