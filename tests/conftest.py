from typing import Any

import pytest


def point_feature(name: str | None, lon: float, lat: float) -> dict[str, Any]:
    properties = {"name": name} if name is not None else {}
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


@pytest.fixture()
def square_ring() -> list[list[float]]:
    """Closed outer ring with exactly four positions."""
    return [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 0.0]]


@pytest.fixture()
def mixed_feature_collection(square_ring: list[list[float]]) -> dict[str, Any]:
    """Two Point features followed by one Polygon feature."""
    return {
        "type": "FeatureCollection",
        "features": [
            point_feature("Kailua", -155.6696280495238, 19.347076690429716),
            point_feature("Lanai", -156.88909163043272, 21.253909984035786),
            {
                "type": "Feature",
                "properties": {"name": "Square"},
                "geometry": {"type": "Polygon", "coordinates": [square_ring]},
            },
        ],
    }


@pytest.fixture()
def hawaii_line_string() -> dict[str, Any]:
    return {
        "type": "Feature",
        "properties": {},
        "geometry": {
            "type": "LineString",
            "coordinates": [
                [-155.06244948820577, 19.709586535142037],
                [-156.4833403856122, 20.888261526592686],
                [-157.8855316531354, 21.329531202461226, 12.5],
            ],
        },
    }
