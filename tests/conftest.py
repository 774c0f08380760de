"""Shared fixtures: a pedestrian route in the routing provider's JSON shape."""

import copy

import pytest


# Hand-checked numbers:
#   metres  normal 420 · park_path 380 · living_zone 250 · undergroundway 60
#           crosswalk 35 · stairway 10  → 1155 m, weighted 877.5 → PQ 0.760
#   crossings on_traffic_light + empty (the crossroad with undergroundway is
#           not counted) → avg 0.6 × exp(-0.1) → CS 0.543
#   angles  85, 40, 130 → avg 85 → TS 0.528, one sharp turn
#   score   (0.7597×0.55 + 0.5429×0.30 + 0.5278×0.15) × 10 = 6.599 → 6.6
SAMPLE_ROUTE = {
    "total_distance": 1160,
    "total_duration": 900,
    "maneuvers": [
        {
            "type": "pedestrian_begin",
            "outcoming_path": {"geometry": [
                {"style": "normal", "length": 120},
                {"style": "park_path", "length": 380},
            ]},
        },
        {
            "type": "pedestrian_crossroad",
            "turn_angle": 85,
            "turn_direction": "right",
            "outcoming_path": {"geometry": [{"style": "normal", "length": 200}]},
        },
        {
            "type": "pedestrian_road_crossing",
            "attribute": "on_traffic_light",
            "outcoming_path": {"geometry": [{"style": "crosswalk", "length": 20}]},
        },
        {
            "type": "pedestrian_crossroad",
            "attribute": "onto_crosswalk",
            "turn_angle": -40,
            "turn_direction": "keep_left",
            "outcoming_path": {"geometry": [
                {"style": "undergroundway", "length": 60},
                {"style": "normal", "length": 100},
            ]},
        },
        {
            "type": "pedestrian_road_crossing",
            "attribute": "empty",
            "outcoming_path": {"geometry": [{"style": "crosswalk", "length": 15}]},
        },
        {
            "type": "pedestrian_crossroad",
            "turn_angle": -130,
            "turn_direction": "sharply_left",
            "outcoming_path": {"geometry": [
                {"style": "living_zone", "length": 250},
                {"style": "stairway", "length": 10},
            ]},
        },
        {"type": "pedestrian_end"},
    ],
}

PARK_ROUTE = {
    "total_distance": 1000,
    "total_duration": 900,
    "maneuvers": [
        {
            "type": "pedestrian_begin",
            "outcoming_path": {"geometry": [{"style": "park_path", "length": 1000}]},
        },
        {"type": "pedestrian_end"},
    ],
}

STAIRS_ROUTE = {
    "total_distance": 800,
    "total_duration": 600,
    "maneuvers": [
        {
            "type": "pedestrian_begin",
            "outcoming_path": {"geometry": [{"style": "stairway", "length": 800}]},
        },
        {"type": "pedestrian_road_crossing", "attribute": "empty"},
        {"type": "pedestrian_road_crossing", "attribute": "empty"},
        {"type": "pedestrian_end"},
    ],
}


@pytest.fixture
def sample_route():
    return copy.deepcopy(SAMPLE_ROUTE)


@pytest.fixture
def routing_response():
    """Two alternatives as returned in a routing response's result[]."""
    return {"result": [copy.deepcopy(STAIRS_ROUTE), copy.deepcopy(PARK_ROUTE)]}
