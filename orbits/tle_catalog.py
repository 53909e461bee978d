"""
Two-line element sources: parsing 3-line TLE text, naming/typing objects,
and fetching from an ordered list of HTTP sources.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Iterable, Optional

import requests

from core.types import ObjectType, OrbitalElementSet

logger = logging.getLogger(__name__)


class DataSource(Enum):
    MIRROR = "mirror"
    FALLBACK = "fallback"
    ERROR = "error"


# first match wins
_TYPE_RULES = (
    (("ISS", "ZARYA", "CSS", "TIANGONG"), ObjectType.SPACE_STATION),
    (("STARLINK", "ONEWEB", "IRIDIUM"), ObjectType.COMMUNICATION),
    (("HST", "TELESCOPE"), ObjectType.SPACE_TELESCOPE),
    (("GPS", "GLONASS", "GALILEO", "BEIDOU"), ObjectType.NAVIGATION),
    (("GOES", "METEOSAT", "HIMAWARI"), ObjectType.WEATHER),
    (("R/B", "ROCKET"), ObjectType.ROCKET_BODY),
    (("DEB",), ObjectType.DEBRIS),
)


def classify_object(name: str) -> str:
    upper = name.upper()
    for needles, kind in _TYPE_RULES:
        if any(n in upper for n in needles):
            return kind
    return ObjectType.SATELLITE


def parse_cospar(line1: str) -> Optional[str]:
    """International designator from columns 10-17, e.g. "1998-067-A"."""
    field = line1[9:17].strip()
    if len(field) < 5 or not field[:2].isdigit():
        return None
    yy = int(field[:2])
    year = 2000 + yy if yy < 57 else 1900 + yy
    launch = field[2:5]
    piece = field[5:]
    return f"{year}-{launch}-{piece}" if piece else f"{year}-{launch}"


def looks_like_tle(text: str) -> bool:
    stripped = text.strip()
    return bool(stripped) and not stripped.lower().startswith(("<!doctype", "<html"))


def parse_tle_text(text: str) -> list[OrbitalElementSet]:
    """
    Parse name/line1/line2 triplets. Malformed triplets are skipped and the
    first occurrence of each catalog number wins.
    """
    lines = [ln.rstrip() for ln in text.splitlines() if ln.strip()]
    out: list[OrbitalElementSet] = []
    seen: set[str] = set()
    i = 0
    while i + 2 < len(lines):
        name, l1, l2 = lines[i].strip(), lines[i + 1].strip(), lines[i + 2].strip()
        if not (l1.startswith("1 ") and l2.startswith("2 ")):
            i += 1
            continue
        i += 3
        sat_id = l2[2:7].strip()
        if not sat_id or sat_id in seen:
            continue
        seen.add(sat_id)
        out.append(OrbitalElementSet(
            id=sat_id,
            name=name,
            type=classify_object(name),
            line1=l1,
            line2=l2,
            cospar=parse_cospar(l1),
        ))
    return out


def fetch_element_sets(
    sources: Iterable[str],
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
) -> tuple[list[OrbitalElementSet], DataSource]:
    """
    Try each source in order. The first one yielding at least one element
    set wins; it is tagged MIRROR if it was the first source, else FALLBACK.
    """
    http = session or requests.Session()
    for idx, url in enumerate(sources):
        try:
            resp = http.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("TLE source %s unavailable: %s", url, e)
            continue
        if not looks_like_tle(resp.text):
            logger.warning("TLE source %s returned no element data", url)
            continue
        sets = parse_tle_text(resp.text)
        if not sets:
            logger.warning("TLE source %s had no parseable element sets", url)
            continue
        logger.info("Loaded %d element sets from %s", len(sets), url)
        return sets, DataSource.MIRROR if idx == 0 else DataSource.FALLBACK
    return [], DataSource.ERROR
