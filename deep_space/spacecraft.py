
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from core.coords import equatorial_to_horizontal, stable_hash_angle
from core.types import Horizontal, ObserverLocation

logger = logging.getLogger(__name__)


class SpacecraftDataError(RuntimeError):
    pass


@dataclass(slots=True, frozen=True)
class SpacecraftTarget:
    id: str
    name: str
    distance_km: float
    velocity_km_s: float
    mission_type: str = ""
    ra: Optional[float] = None
    dec: Optional[float] = None
    status: str = ""
    date: str = ""
    dsn_power_dbm: Optional[float] = None

    @property
    def has_sky_position(self) -> bool:
        return self.ra is not None and self.dec is not None


def _target_from_json(item: dict[str, Any]) -> SpacecraftTarget:
    dsn = item.get("dsnSignal") or {}
    return SpacecraftTarget(
        id=str(item["id"]),
        name=str(item["name"]),
        distance_km=float(item["distanceKm"]),
        velocity_km_s=float(item.get("velocityKmS", 0.0)),
        mission_type=item.get("missionType", ""),
        ra=item.get("ra"),
        dec=item.get("dec"),
        status=item.get("status", ""),
        date=item.get("date", ""),
        dsn_power_dbm=dsn.get("power"),
    )


def load_spacecraft(path: str | Path) -> list[SpacecraftTarget]:
    """Read the cached spacecraft list (camelCase JSON array)."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SpacecraftDataError(f"spacecraft data not found: {p}") from e
    except json.JSONDecodeError as e:
        raise SpacecraftDataError(f"spacecraft data is not valid JSON: {e}") from e

    if not isinstance(data, list) or not data:
        raise SpacecraftDataError("invalid spacecraft data format")

    targets = []
    for item in data:
        try:
            targets.append(_target_from_json(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping spacecraft record %r: %s", item, e)
    if not targets:
        raise SpacecraftDataError("no usable spacecraft records")
    return targets


def bearing_deg(target: SpacecraftTarget) -> float:
    """Dial angle for the target: its RA, or a stable placeholder from its id."""
    if target.ra is not None:
        return target.ra % 360.0
    return stable_hash_angle(target.id)


def horizon_position(
    target: SpacecraftTarget,
    observer: ObserverLocation,
    instant: datetime,
) -> Optional[Horizontal]:
    if not target.has_sky_position:
        return None
    return equatorial_to_horizontal(target.ra, target.dec, observer.latitude, observer.longitude, instant)
