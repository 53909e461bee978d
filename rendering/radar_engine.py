"""
Frame-driven radar/sky engine.

One persistent frame loop per view. Inputs arrive through a LatestSnapshot
and are read at the top of every frame, so changing the object list, the
selection or the view mode never restarts the loop. Pointer handlers only
record the pointer position; hover is resolved inside the frame.

Per frame:
  1. advance the sweep by the real frame delta
  2. project objects, fire sweep pulses
  3. sample trails on a coarse cadence
  4. resolve hover, build the RadarFrame and hand it to the renderer
"""
from __future__ import annotations
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Sequence

from core.config import RadarSettings
from core.frame_scheduler import FrameScheduler
from core.projection import ViewMode, project
from core.snapshot import LatestSnapshot
from core.types import HorizonPosition, ObserverLocation, VisualObject

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


class PointerKind(Enum):
    MOUSE = "mouse"
    TOUCH = "touch"


class RadarStatus(Enum):
    ACQUIRING = "ACQUIRING LOCATION"
    NO_SIGNAL = "NO SIGNAL"
    TRACKING = "TRACKING"


@dataclass(slots=True, frozen=True)
class RadarInputs:
    objects: tuple[VisualObject, ...] = ()
    selected_id: Optional[str] = None
    orbit_path: tuple[HorizonPosition, ...] = ()
    observer: Optional[ObserverLocation] = None
    mode: ViewMode = ViewMode.RADAR
    on_select: Optional[Callable[[Optional[str]], None]] = None


@dataclass(slots=True, frozen=True)
class Geometry:
    width: int
    height: int
    cx: float
    cy: float
    radius: float


def disk_geometry(width: int, height: int, margin: float) -> Optional[Geometry]:
    """Plotting circle centred in the viewport, leaving room for rim labels."""
    cx, cy = width / 2.0, height / 2.0
    radius = min(cx, cy) - margin
    if radius < 1.0:
        return None
    return Geometry(width, height, cx, cy, radius)


@dataclass(slots=True)
class Blip:
    obj: VisualObject
    x: float
    y: float
    angle: float          # screen angle, radians in [0, 2pi)
    pulse: float = 0.0    # 1.0 right after the sweep passes, decays to 0
    hovered: bool = False
    selected: bool = False


@dataclass(slots=True)
class RadarFrame:
    now_ms: float
    mode: ViewMode
    status: RadarStatus
    sweep_angle: float
    geometry: Optional[Geometry] = None
    blips: list[Blip] = field(default_factory=list)
    trails: Dict[str, list[tuple[float, float]]] = field(default_factory=dict)
    path_segments: list[list[tuple[float, float]]] = field(default_factory=list)
    sky: object = None
    hover_id: Optional[str] = None


def angular_distance(a: float, b: float) -> float:
    """Smallest unsigned difference between two angles in radians."""
    d = abs(a - b) % TWO_PI
    return min(d, TWO_PI - d)


class SweepPulseTracker:
    """
    One pulse per object per sweep pass.

    A pulse is recorded when the sweep comes within the tolerance of the
    object's angle and none is active; it decays linearly to zero over the
    pulse duration and is then forgotten.
    """

    def __init__(self, tolerance_deg: float = 1.5, duration_ms: float = 1000.0):
        self.tolerance = math.radians(tolerance_deg)
        self.duration_ms = duration_ms
        self._started: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._started)

    def __contains__(self, obj_id: str) -> bool:
        return obj_id in self._started

    def observe(self, obj_id: str, object_angle: float, sweep_angle: float, now_ms: float) -> float:
        if obj_id not in self._started and angular_distance(object_angle, sweep_angle) < self.tolerance:
            self._started[obj_id] = now_ms
        return self.intensity(obj_id, now_ms)

    def intensity(self, obj_id: str, now_ms: float) -> float:
        start = self._started.get(obj_id)
        if start is None:
            return 0.0
        return max(0.0, 1.0 - (now_ms - start) / self.duration_ms)

    def expire(self, now_ms: float) -> None:
        dead = [k for k, t in self._started.items() if now_ms - t >= self.duration_ms]
        for k in dead:
            del self._started[k]


class TrailTracker:
    """Bounded per-object position history in screen coordinates."""

    def __init__(self, capacity: int = 16, min_move_px: float = 1.0, interval_ms: float = 1000.0):
        self.capacity = capacity
        self.min_move_px = min_move_px
        self.interval_ms = interval_ms
        self._history: Dict[str, deque] = {}
        self._last_sample_ms: Optional[float] = None

    def __len__(self) -> int:
        return len(self._history)

    def history(self, obj_id: str) -> list[tuple[float, float]]:
        return list(self._history.get(obj_id, ()))

    def snapshot(self) -> Dict[str, list[tuple[float, float]]]:
        return {k: list(v) for k, v in self._history.items()}

    def clear(self) -> None:
        self._history.clear()
        self._last_sample_ms = None

    def prune(self, live_ids: Iterable[str]) -> None:
        live = set(live_ids)
        for k in [k for k in self._history if k not in live]:
            del self._history[k]

    def sample(self, now_ms: float, positions: Dict[str, tuple[float, float]]) -> bool:
        """Append positions if the sampling interval has elapsed. True if sampled."""
        if self._last_sample_ms is not None and now_ms - self._last_sample_ms < self.interval_ms:
            return False
        self._last_sample_ms = now_ms
        for obj_id, (x, y) in positions.items():
            hist = self._history.get(obj_id)
            if hist is None:
                hist = self._history[obj_id] = deque(maxlen=self.capacity)
            if hist:
                lx, ly = hist[-1]
                if math.hypot(x - lx, y - ly) <= self.min_move_px:
                    continue
            hist.append((x, y))
        return True


def nearest_hit(blips: Sequence[Blip], x: float, y: float, tolerance: float) -> Optional[Blip]:
    best = None
    best_dist = tolerance
    for b in blips:
        d = math.hypot(b.x - x, b.y - y)
        if d < best_dist:
            best, best_dist = b, d
    return best


def path_segments(
    path: Iterable[HorizonPosition],
    geometry: Geometry,
    mode: ViewMode,
) -> list[list[tuple[float, float]]]:
    """Screen polylines of an orbit path; a new segment starts after each horizon crossing."""
    segments: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for p in path:
        if p.elevation > 0 and math.isfinite(p.azimuth):
            current.append(project(p.azimuth, p.elevation, geometry.cx, geometry.cy, geometry.radius, mode))
        elif current:
            segments.append(current)
            current = []
    if current:
        segments.append(current)
    return [s for s in segments if len(s) > 1]


class RadarEngine:
    """
    Owns the per-view frame loop.

    `target` returns the surface to draw on (or anything with get_size());
    it is asked again every frame so viewport resizes are picked up before
    drawing. `renderer` may be None for headless use.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        target: Callable[[], object],
        renderer=None,
        settings: Optional[RadarSettings] = None,
        background=None,
        utc_clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.settings = settings or RadarSettings()
        self.scheduler = scheduler
        self.target = target
        self.renderer = renderer
        self.background = background
        self.utc_clock = utc_clock

        self.inputs: LatestSnapshot[RadarInputs] = LatestSnapshot(RadarInputs())
        self.sweep_angle = 0.0
        self.pulses = SweepPulseTracker(self.settings.sweep_tolerance_deg, self.settings.pulse_duration_ms)
        self.trails = TrailTracker(
            self.settings.trail_capacity, self.settings.trail_min_move_px, self.settings.trail_interval_ms
        )
        self.hover_id: Optional[str] = None
        self.last_frame: Optional[RadarFrame] = None
        self.frame_count = 0

        self._pointer: Optional[tuple[float, float, PointerKind]] = None
        self._running = False
        self._handle: Optional[int] = None
        self._last_ms: Optional[float] = None
        self._layout_key = None

    # --- lifecycle -------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._last_ms = None
        self._handle = self.scheduler.request(self._frame)
        logger.debug("Radar loop started")

    def stop(self) -> None:
        self._running = False
        self.scheduler.cancel(self._handle)
        self._handle = None
        logger.debug("Radar loop stopped after %d frames", self.frame_count)

    # --- pointer input ---------------------------------------------------

    def hit_tolerance(self, kind: PointerKind) -> float:
        return self.settings.touch_hit_px if kind is PointerKind.TOUCH else self.settings.mouse_hit_px

    def pointer_move(self, x: float, y: float, kind: PointerKind = PointerKind.MOUSE) -> None:
        self._pointer = (x, y, kind)

    def pointer_leave(self) -> None:
        self._pointer = None

    def click(self) -> None:
        """Select the hovered object, or clear the selection when nothing is hovered."""
        self._select(self.hover_id)

    def touch_start(self, x: float, y: float) -> bool:
        """
        Record the touch and select what is under it. Always returns True:
        the event is consumed so the host does not scroll.
        """
        self._pointer = (x, y, PointerKind.TOUCH)
        blips = self.last_frame.blips if self.last_frame else []
        hit = nearest_hit(blips, x, y, self.settings.touch_hit_px)
        self.hover_id = hit.obj.id if hit else None
        self._select(self.hover_id)
        return True

    def _select(self, obj_id: Optional[str]) -> None:
        callback = self.inputs.get().on_select
        if callback is not None:
            callback(obj_id)

    # --- frame -----------------------------------------------------------

    def _frame(self, now_ms: float) -> None:
        self._handle = None
        if not self._running:
            return
        try:
            frame = self.advance(now_ms)
            self._draw(frame)
        except Exception:
            logger.exception("Radar frame failed")
        if self._running:
            self._handle = self.scheduler.request(self._frame)

    def advance(self, now_ms: float) -> RadarFrame:
        """Run one frame of state updates and return what should be drawn."""
        inputs = self.inputs.get()
        s = self.settings

        dt = 0.0 if self._last_ms is None else max(0.0, now_ms - self._last_ms) / 1000.0
        self._last_ms = now_ms
        self.sweep_angle = (self.sweep_angle + s.sweep_rate_rad_s * dt) % TWO_PI
        self.frame_count += 1

        status = self._status(inputs)
        frame = RadarFrame(now_ms=now_ms, mode=inputs.mode, status=status, sweep_angle=self.sweep_angle)

        surface = self.target()
        if surface is None:
            self.last_frame = frame
            return frame
        w, h = surface.get_size()
        geometry = disk_geometry(w, h, s.label_margin_px)
        frame.geometry = geometry
        if geometry is None:
            self.last_frame = frame
            return frame

        layout_key = (geometry, inputs.mode)
        if layout_key != self._layout_key:
            self.trails.clear()
            self._layout_key = layout_key

        self.pulses.expire(now_ms)
        frame.blips = self._project(inputs, geometry, now_ms)

        live = {b.obj.id: (b.x, b.y) for b in frame.blips}
        self.trails.prune(live)
        self.trails.sample(now_ms, live)
        frame.trails = self.trails.snapshot()

        self.hover_id = None
        if self._pointer is not None:
            px, py, kind = self._pointer
            hit = nearest_hit(frame.blips, px, py, self.hit_tolerance(kind))
            if hit is not None:
                hit.hovered = True
                self.hover_id = hit.obj.id
        frame.hover_id = self.hover_id

        frame.path_segments = path_segments(inputs.orbit_path, geometry, inputs.mode)

        if self.background is not None and inputs.observer is not None:
            frame.sky = self.background.projected(
                inputs.observer, self.utc_clock(), now_ms, geometry, inputs.mode
            )

        self.last_frame = frame
        return frame

    def _status(self, inputs: RadarInputs) -> RadarStatus:
        if inputs.observer is None:
            return RadarStatus.ACQUIRING
        if not inputs.objects:
            return RadarStatus.NO_SIGNAL
        return RadarStatus.TRACKING

    def _project(self, inputs: RadarInputs, geometry: Geometry, now_ms: float) -> list[Blip]:
        blips = []
        for obj in inputs.objects:
            try:
                pos = obj.position
                if not (math.isfinite(pos.azimuth) and math.isfinite(pos.elevation)):
                    continue
                if pos.elevation < 0:
                    continue
                x, y = project(pos.azimuth, pos.elevation, geometry.cx, geometry.cy, geometry.radius, inputs.mode)
                angle = math.radians(inputs.mode.screen_angle_deg(pos.azimuth)) % TWO_PI
                pulse = self.pulses.observe(obj.id, angle, self.sweep_angle, now_ms)
                blips.append(Blip(obj, x, y, angle, pulse, selected=obj.id == inputs.selected_id))
            except Exception:
                logger.warning("Skipping object %r this frame", getattr(obj, "id", obj), exc_info=True)
        return blips

    def _draw(self, frame: RadarFrame) -> None:
        if self.renderer is None or frame.geometry is None:
            return
        surface = self.target()
        if surface is None:
            return
        try:
            self.renderer.draw(surface, frame)
        except Exception:
            logger.exception("Radar renderer failed")
