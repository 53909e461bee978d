
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple, Optional


class ObjectType:
    SPACE_STATION = "Space Station"
    COMMUNICATION = "Communication"
    SPACE_TELESCOPE = "Space Telescope"
    NAVIGATION = "Navigation"
    WEATHER = "Weather"
    ROCKET_BODY = "Rocket Body"
    DEBRIS = "Debris"
    SATELLITE = "Satellite"


class Horizontal(NamedTuple):
    azimuth: float
    elevation: float


@dataclass(slots=True, frozen=True)
class ObserverLocation:
    latitude: float
    longitude: float
    name: str = ""

    @property
    def is_placeholder(self) -> bool:
        # (0, 0) is what an unresolved location looks like
        return self.latitude == 0.0 and self.longitude == 0.0


@dataclass(slots=True, frozen=True)
class OrbitalElementSet:
    id: str
    name: str
    type: str
    line1: str
    line2: str
    cospar: Optional[str] = None


@dataclass(slots=True, frozen=True)
class HorizonPosition:
    azimuth: float
    elevation: float
    range_km: float
    height_km: float
    lat: float
    lng: float
    velocity_km_s: float
    time: Optional[datetime] = None

    @property
    def above_horizon(self) -> bool:
        return self.elevation > 0.0


@dataclass(slots=True, frozen=True)
class VisualObject:
    id: str
    name: str
    type: str
    position: HorizonPosition

    @property
    def is_primary(self) -> bool:
        if self.type == ObjectType.SPACE_STATION:
            return True
        upper = self.name.upper()
        return "ISS" in upper or "STATION" in upper


@dataclass(slots=True, frozen=True)
class OrbitalParameters:
    perigee_km: float
    apogee_km: float
    inclination_deg: float


@dataclass(slots=True, frozen=True)
class CelestialCatalogEntry:
    ra: float
    dec: float
    mag: float
    name: str = ""


@dataclass(slots=True, frozen=True)
class ConstellationLine:
    name: str
    points: tuple[tuple[float, float], ...]
