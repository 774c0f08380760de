"""
models.py — Walkscore route input / score output types
=======================================================
Route, Maneuver and Segment mirror the pedestrian route JSON returned by
the routing provider (one entry of its ``result[]`` array).

Provider tags are closed str-valued enums. Members compare equal to their
raw tag strings. Maneuvers keep the raw strings the provider sent, so a
tag the enums do not know yet survives into the breakdown and takes the
documented default when it is looked up.
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum


class SurfaceStyle(str, Enum):
    PARK_PATH      = "park_path"
    LIVING_ZONE    = "living_zone"
    UNDERGROUNDWAY = "undergroundway"
    ARCHWAY        = "archway"
    NORMAL         = "normal"
    CROSSWALK      = "crosswalk"
    STAIRWAY       = "stairway"


class CrossingAttribute(str, Enum):
    ON_TRAFFIC_LIGHT = "on_traffic_light"
    ONTO_CROSSWALK   = "onto_crosswalk"
    EMPTY            = "empty"      # crossing without any marking
    NONE             = "none"


class TurnDirection(str, Enum):
    STRAIGHT      = "straight"
    LEFT          = "left"
    RIGHT         = "right"
    SHARPLY_LEFT  = "sharply_left"
    SHARPLY_RIGHT = "sharply_right"
    KEEP_LEFT     = "keep_left"
    KEEP_RIGHT    = "keep_right"


class ManeuverType(str, Enum):
    BEGIN         = "pedestrian_begin"
    END           = "pedestrian_end"
    ROAD_CROSSING = "pedestrian_road_crossing"
    CROSSROAD     = "pedestrian_crossroad"


# ── Coercion helpers ──────────────────────────────────────────────────────────

def _non_negative(value) -> float:
    """Finite float >= 0; anything else (text, NaN, inf, negative) becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(f) or f < 0:
        return 0.0
    return f


def _optional_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _optional_tag(value) -> str | None:
    if value is None:
        return None
    return str(value)


# ── Input ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Segment:
    style: str = SurfaceStyle.NORMAL.value
    length: float = 0.0   # metres

    @classmethod
    def from_dict(cls, data) -> "Segment":
        if not isinstance(data, dict):
            return cls()
        style = data.get("style") or SurfaceStyle.NORMAL.value
        return cls(style=str(style), length=_non_negative(data.get("length")))


@dataclass(frozen=True)
class Maneuver:
    type: str
    attribute: str = CrossingAttribute.NONE.value
    turn_angle: float | None = None       # signed degrees
    turn_direction: str | None = None
    segments: tuple[Segment, ...] = ()

    @property
    def styles(self) -> set[str]:
        return {s.style for s in self.segments}

    @classmethod
    def from_dict(cls, data) -> "Maneuver":
        if not isinstance(data, dict):
            raise TypeError(f"maneuver must be a mapping, got {type(data).__name__}")

        # The provider spells it "outcoming_path"; accept both.
        path = data.get("outgoing_path")
        if path is None:
            path = data.get("outcoming_path")
        geometry = path.get("geometry") if isinstance(path, dict) else None
        if not isinstance(geometry, list):
            geometry = []

        return cls(
            type=str(data.get("type") or ""),
            attribute=str(data.get("attribute") or CrossingAttribute.NONE.value),
            turn_angle=_optional_number(data.get("turn_angle")),
            turn_direction=_optional_tag(data.get("turn_direction")),
            segments=tuple(Segment.from_dict(g) for g in geometry),
        )


@dataclass(frozen=True)
class Route:
    maneuvers: tuple[Maneuver, ...] = ()
    total_distance: float | None = None   # metres, as reported by the provider
    total_duration: float = 0.0           # seconds

    @classmethod
    def from_dict(cls, data) -> "Route":
        """
        Build a Route from the provider JSON shape.
        Raises TypeError if the route or one of its maneuvers is not a
        mapping; that is a caller bug, not a scoring condition.
        """
        if not isinstance(data, dict):
            raise TypeError(f"route must be a mapping, got {type(data).__name__}")
        maneuvers = data.get("maneuvers")
        if maneuvers is None:
            maneuvers = []
        if not isinstance(maneuvers, (list, tuple)):
            raise TypeError("route.maneuvers must be a list")

        total_distance = data.get("total_distance")
        return cls(
            maneuvers=tuple(Maneuver.from_dict(m) for m in maneuvers),
            total_distance=None if total_distance is None else _non_negative(total_distance),
            total_duration=_non_negative(data.get("total_duration")),
        )


# ── Output ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Breakdown:
    total_distance_m: int
    total_duration_min: int
    road_crossings: int
    crossing_detail: list[dict]
    zones: dict[str, dict]
    turns: dict[str, int]
    turn_count: int
    sharp_turns: int
    avg_turn_angle: float
    weighted_sum: int
    total_meters: int


@dataclass(frozen=True)
class ScoreResult:
    score: float
    path_quality: float
    crossing_safety: float
    turn_simplicity: float
    rating: str
    breakdown: Breakdown = field(repr=False)

    def to_dict(self) -> dict:
        return asdict(self)
