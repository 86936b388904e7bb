"""Two-line element sets: parsing and load-time validation.

An element set that fails here never reaches the tracking registry.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sgp4.api import Satrec, WGS72

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TLE:
    """A validated Two-Line Element set.

    Attributes:
        name: Object name from line 0, empty if the set had none.
        line1: Raw TLE line 1.
        line2: Raw TLE line 2.
        norad_id: NORAD catalog number.
        epoch: Element epoch as a UTC datetime.
        inclination_deg: Orbital inclination in degrees.
        mean_motion_rev_per_day: Mean motion in revolutions per day.
        satrec: Initialized sgp4 record used for propagation.
    """

    name: str
    line1: str
    line2: str
    norad_id: int
    epoch: datetime
    inclination_deg: float
    mean_motion_rev_per_day: float
    satrec: Satrec = field(repr=False, compare=False)

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str = "") -> TLE:
        """Parse and initialize an element set.

        Args:
            line1: TLE line 1.
            line2: TLE line 2.
            name: Optional object name (line 0).

        Returns:
            A TLE ready for propagation.

        Raises:
            ValueError: If a line is malformed or sgp4 rejects the elements.
        """
        line1 = line1.strip()
        line2 = line2.strip()

        if not line1.startswith("1 ") or len(line1) < 64:
            logger.error("Invalid TLE line 1: %r", line1)
            raise ValueError(f"Invalid TLE line 1: {line1!r}")
        if not line2.startswith("2 ") or len(line2) < 64:
            logger.error("Invalid TLE line 2: %r", line2)
            raise ValueError(f"Invalid TLE line 2: {line2!r}")

        try:
            sat = Satrec.twoline2rv(line1, line2, WGS72)
        except (ValueError, IndexError) as exc:
            logger.error("sgp4 could not read elements for %r: %s", name or line1[2:7], exc)
            raise ValueError(f"Unreadable TLE for {name or line1[2:7]!r}: {exc}") from exc

        if sat.error != 0:
            logger.error("sgp4 initialization error %d for %r", sat.error, name or line1[2:7])
            raise ValueError(f"SGP4 error {sat.error} initializing {name or line1[2:7]!r}")

        year = int(line1[18:20])
        year = year + 2000 if year < 57 else year + 1900
        day_of_year = float(line1[20:32])
        epoch = datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=day_of_year - 1)

        return cls(
            name=name.strip(),
            line1=line1,
            line2=line2,
            norad_id=sat.satnum,
            epoch=epoch,
            inclination_deg=math.degrees(sat.inclo),
            mean_motion_rev_per_day=sat.no_kozai * 1440 / (2 * math.pi),
            satrec=sat,
        )

    @property
    def label(self) -> str:
        """Name to show for this object, falling back to the catalog number."""
        return self.name or f"NORAD {self.norad_id}"

    def __str__(self) -> str:
        header = f"{self.name}\n" if self.name else ""
        return f"{header}{self.line1}\n{self.line2}"


def parse_tle(text: str, *, strict: bool = False) -> list[TLE]:
    """Parse element sets from text in 2-line or 3-line format.

    Args:
        text: Raw catalog text.
        strict: Raise on the first malformed set instead of skipping it.

    Returns:
        Parsed TLEs in the order they appear.

    Raises:
        ValueError: In strict mode, if any set fails to parse.
    """
    lines = [l.rstrip() for l in text.strip().splitlines() if l.strip()]
    tles: list[TLE] = []
    i = 0

    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            name, line1, line2 = "", lines[i], lines[i + 1]
            i += 2
        elif (
            not lines[i].startswith(("1 ", "2 "))
            and i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            name, line1, line2 = lines[i], lines[i + 1], lines[i + 2]
            i += 3
        else:
            i += 1
            continue

        try:
            tles.append(TLE.from_lines(line1, line2, name=name))
        except ValueError:
            if strict:
                raise
            logger.warning("Skipping malformed element set %r", name or line1[:20])

    logger.debug("Parsed %d TLEs from text", len(tles))
    return tles
