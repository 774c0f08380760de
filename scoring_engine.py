"""
scoring_engine.py — Walkscore Pedestrian Route Scoring Engine
==============================================================
Scores the walking comfort of one pedestrian route on a 0–10 scale and
returns a breakdown detailed enough to rebuild the number by hand.

SCORING WEIGHTS:
  55% — Path quality     (mileage-weighted surface comfort)
  30% — Crossing safety  (traffic light > marked crosswalk > unmarked,
                          damped by exp(-0.05 × n) for n road crossings)
  15% — Turn simplicity  (1 − average |turn angle| / 180)

  SCORE = round_half_up((PQ × 0.55 + CS × 0.30 + TS × 0.15) × 10, 1)

RATING bands (same thresholds the route card uses):
  ≥ 8.0 excellent · ≥ 6.5 good · ≥ 5.0 moderate · below → uncomfortable

TAGS assigned by score_routes() when ranking alternatives:
  best · fastest · shortest · safest (crossings) · straightest
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP

from models import (
    CrossingAttribute,
    ManeuverType,
    Maneuver,
    Route,
    ScoreResult,
    Breakdown,
    SurfaceStyle,
    TurnDirection,
)

log = logging.getLogger(__name__)

# Comfort weight per geometry[].style
STYLE_WEIGHTS = {
    SurfaceStyle.PARK_PATH:      1.0,
    SurfaceStyle.LIVING_ZONE:    0.9,
    SurfaceStyle.UNDERGROUNDWAY: 0.85,
    SurfaceStyle.ARCHWAY:        0.7,
    SurfaceStyle.NORMAL:         0.5,
    SurfaceStyle.CROSSWALK:      0.3,
    SurfaceStyle.STAIRWAY:       0.1,
}
DEFAULT_STYLE_WEIGHT = 0.5

STYLE_LABELS = {
    SurfaceStyle.PARK_PATH:      "Park / boulevard",
    SurfaceStyle.LIVING_ZONE:    "Living zone",
    SurfaceStyle.UNDERGROUNDWAY: "Underground passage",
    SurfaceStyle.ARCHWAY:        "Archway / passage",
    SurfaceStyle.NORMAL:         "Sidewalk",
    SurfaceStyle.CROSSWALK:      "Pedestrian crossing",
    SurfaceStyle.STAIRWAY:       "Stairway",
}

# Safety of one at-grade crossing by maneuver attribute
CROSSING_SAFETY = {
    CrossingAttribute.ON_TRAFFIC_LIGHT: 1.0,
    CrossingAttribute.ONTO_CROSSWALK:   0.6,
    CrossingAttribute.EMPTY:            0.2,
}
DEFAULT_CROSSING_SAFETY = 0.2

CROSSING_LABELS = {
    CrossingAttribute.ON_TRAFFIC_LIGHT: "Traffic light",
    CrossingAttribute.ONTO_CROSSWALK:   "Marked crosswalk",
    CrossingAttribute.EMPTY:            "Unmarked",
    CrossingAttribute.NONE:             "Undetermined",
}

TURN_LABELS = {
    TurnDirection.STRAIGHT:      "Straight",
    TurnDirection.LEFT:          "Left",
    TurnDirection.RIGHT:         "Right",
    TurnDirection.SHARPLY_LEFT:  "Sharply left",
    TurnDirection.SHARPLY_RIGHT: "Sharply right",
    TurnDirection.KEEP_LEFT:     "Keep left",
    TurnDirection.KEEP_RIGHT:    "Keep right",
}

# A crossroad with one of these attributes is also a road crossing
MARKED_CROSSROAD_ATTRIBUTES = (
    CrossingAttribute.ONTO_CROSSWALK,
    CrossingAttribute.ON_TRAFFIC_LIGHT,
)

# exp(-0.05 × n): 1 crossing → 0.95, 6 → 0.74, 10 → 0.61, 14 → 0.50
CROSSING_PENALTY_RATE = 0.05

SHARP_TURN_DEG = 120.0

W_PATH  = 0.55
W_CROSS = 0.30
W_TURNS = 0.15

RATING_BANDS = (
    (8.0, "excellent"),
    (6.5, "good"),
    (5.0, "moderate"),
)
RATING_FLOOR = "uncomfortable"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clamp(val, lo, hi):
    return max(lo, min(hi, val))


def _round_half_up(value: float, places: int = 0) -> float:
    """
    Round halves away from zero: 7.25 -> 7.3, 0.5 -> 1.
    Pre-rounded to 9 digits so float noise (7.2499999999999) still counts
    as a half.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(round(value, 9))).quantize(quantum, rounding=ROUND_HALF_UP))


def _round_int(value: float) -> int:
    return int(_round_half_up(value))


def _lookup(table: dict, enum_cls, tag: str, default):
    """Table value for a raw provider tag; unknown tags get `default`."""
    try:
        return table.get(enum_cls(tag), default)
    except ValueError:
        return default


def _is_road_crossing(m: Maneuver) -> bool:
    """
    Every pedestrian_road_crossing counts. A pedestrian_crossroad counts
    only when it carries a crosswalk / traffic-light attribute and does not
    go underground; an underground passage is not an at-grade conflict.
    """
    if m.type == ManeuverType.ROAD_CROSSING:
        return True
    if m.type == ManeuverType.CROSSROAD and m.attribute in MARKED_CROSSROAD_ATTRIBUTES:
        return SurfaceStyle.UNDERGROUNDWAY.value not in m.styles
    return False


def turn_label(direction: str) -> str:
    """Display label for a turn_direction tag; unknown tags are shown as-is."""
    return _lookup(TURN_LABELS, TurnDirection, direction, direction)


def _rating(score_value: float) -> str:
    for threshold, label in RATING_BANDS:
        if score_value >= threshold:
            return label
    return RATING_FLOOR


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------

def _path_quality(style_meters: dict[str, float]) -> tuple[float, float, float]:
    """Returns (path_quality, weighted_sum, total_meters)."""
    total = sum(style_meters.values())
    weighted = sum(
        meters * _lookup(STYLE_WEIGHTS, SurfaceStyle, style, DEFAULT_STYLE_WEIGHT)
        for style, meters in style_meters.items()
    )
    # Degenerate route with no mileage: neutral
    quality = weighted / total if total > 0 else 0.5
    return _clamp(quality, 0.0, 1.0), weighted, total


def _crossing_safety(crossings: list[str]) -> float:
    n = len(crossings)
    if n == 0:
        return 1.0
    avg_safety = sum(
        _lookup(CROSSING_SAFETY, CrossingAttribute, attr, DEFAULT_CROSSING_SAFETY)
        for attr in crossings
    ) / n
    return _clamp(avg_safety * math.exp(-CROSSING_PENALTY_RATE * n), 0.0, 1.0)


def _turn_simplicity(turn_angles: list[float]) -> float:
    if not turn_angles:
        return 1.0
    avg_angle = sum(turn_angles) / len(turn_angles)
    return _clamp(1.0 - avg_angle / 180.0, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Breakdown
# ---------------------------------------------------------------------------

def _zones(style_meters: dict[str, float], total: float) -> dict[str, dict]:
    zones = {}
    for style, meters in sorted(style_meters.items(), key=lambda kv: kv[1], reverse=True):
        weight = _lookup(STYLE_WEIGHTS, SurfaceStyle, style, DEFAULT_STYLE_WEIGHT)
        zones[style] = {
            "label":        _lookup(STYLE_LABELS, SurfaceStyle, style, style),
            "meters":       _round_int(meters),
            "percent":      _round_int(meters / total * 100) if total > 0 else 0,
            "weight":       weight,
            "contribution": _round_int(meters * weight),
        }
    return zones


def _crossing_detail(crossings: list[str]) -> list[dict]:
    counts: dict[str, int] = {}
    for attr in crossings:
        counts[attr] = counts.get(attr, 0) + 1
    return [
        {
            "attribute": attr,
            "label":     _lookup(CROSSING_LABELS, CrossingAttribute, attr, attr),
            "count":     cnt,
            "safety":    _lookup(CROSSING_SAFETY, CrossingAttribute, attr, DEFAULT_CROSSING_SAFETY),
        }
        for attr, cnt in counts.items()
    ]


# ---------------------------------------------------------------------------
# Main scoring entry point
# ---------------------------------------------------------------------------

def score(route) -> ScoreResult:
    """
    Score one pedestrian route.

    Input:  a Route, or the provider's route dict
            {maneuvers[], total_distance(m), total_duration(s)}.
    Output: ScoreResult with score (0–10), the three sub-scores (0–1),
            rating and breakdown.
    Never raises for missing/unknown optional fields; a non-mapping route
    raises TypeError from Route.from_dict.
    """
    if not isinstance(route, Route):
        route = Route.from_dict(route)

    style_meters: dict[str, float] = {}
    turn_angles: list[float] = []
    turn_dirs: dict[str, int] = {}
    crossings: list[str] = []

    for m in route.maneuvers:
        if _is_road_crossing(m):
            crossings.append(m.attribute)

        if m.type == ManeuverType.CROSSROAD and m.turn_angle is not None:
            turn_angles.append(abs(m.turn_angle))

        if m.turn_direction is not None:
            turn_dirs[m.turn_direction] = turn_dirs.get(m.turn_direction, 0) + 1

        for seg in m.segments:
            style_meters[seg.style] = style_meters.get(seg.style, 0.0) + seg.length

    path_quality, weighted_sum, total_meters = _path_quality(style_meters)
    crossing_safety = _crossing_safety(crossings)
    turn_simplicity = _turn_simplicity(turn_angles)

    raw = (
        W_PATH  * path_quality +
        W_CROSS * crossing_safety +
        W_TURNS * turn_simplicity
    )
    total_score = _clamp(_round_half_up(raw * 10, 1), 0.0, 10.0)

    avg_angle = _round_half_up(sum(turn_angles) / len(turn_angles), 1) if turn_angles else 0.0
    distance = route.total_distance if route.total_distance is not None else total_meters

    breakdown = Breakdown(
        total_distance_m=int(distance),   # truncated, as the provider reports it
        total_duration_min=_round_int(route.total_duration / 60),
        road_crossings=len(crossings),
        crossing_detail=_crossing_detail(crossings),
        zones=_zones(style_meters, total_meters),
        turns=dict(sorted(turn_dirs.items(), key=lambda kv: kv[1], reverse=True)),
        turn_count=len(turn_angles),
        sharp_turns=sum(1 for a in turn_angles if a >= SHARP_TURN_DEG),
        avg_turn_angle=avg_angle,
        weighted_sum=_round_int(weighted_sum),
        total_meters=_round_int(total_meters),
    )

    log.debug(
        "scored route: maneuvers=%d crossings=%d pq=%.3f cs=%.3f ts=%.3f score=%.1f",
        len(route.maneuvers), len(crossings),
        path_quality, crossing_safety, turn_simplicity, total_score,
    )

    return ScoreResult(
        score=total_score,
        path_quality=_round_half_up(path_quality, 3),
        crossing_safety=_round_half_up(crossing_safety, 3),
        turn_simplicity=_round_half_up(turn_simplicity, 3),
        rating=_rating(total_score),
        breakdown=breakdown,
    )


def score_routes(routes: list) -> list[dict]:
    """
    Score and rank alternative routes (best first).

    Input:  list of Route or provider route dicts, e.g. a routing
            response's result[].
    Output: one dict per route: index (input position), the score
            fields, recommended, tags — sorted by score descending.
            Ties keep input order.
    """
    if not routes:
        return []

    scored = []
    for i, r in enumerate(routes):
        route = r if isinstance(r, Route) else Route.from_dict(r)
        result = score(route)
        scored.append({
            "index":        i,
            **result.to_dict(),
            "recommended":  False,
            "tags":         [],
            "_duration":    route.total_duration,
        })

    # Sort best → worst
    scored.sort(key=lambda x: x["score"], reverse=True)
    scored[0]["recommended"] = True

    min_dur   = min(x["_duration"] for x in scored)
    min_dist  = min(x["breakdown"]["total_distance_m"] for x in scored)
    max_cross = max(x["crossing_safety"] for x in scored)
    max_turns = max(x["turn_simplicity"] for x in scored)

    for r in scored:
        tags = []
        if r["recommended"]:
            tags.append("best")
        if r["_duration"] == min_dur:
            tags.append("fastest")
        if r["breakdown"]["total_distance_m"] == min_dist:
            tags.append("shortest")
        if r["crossing_safety"] == max_cross:
            tags.append("safest")
        if r["turn_simplicity"] == max_turns:
            tags.append("straightest")
        r["tags"] = tags
        del r["_duration"]   # remove internal field before sending to client

    return scored
