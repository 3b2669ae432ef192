from dataclasses import dataclass

UNNAMED = "Unnamed"


@dataclass(frozen=True)
class Position:
    """A GeoJSON position. Altitude defaults to 0 when absent."""

    lon: float
    lat: float
    alt: float = 0.0


@dataclass(frozen=True)
class Point:
    position: Position


@dataclass(frozen=True)
class LineString:
    positions: tuple[Position, ...]


@dataclass(frozen=True)
class Polygon:
    """Polygon rings; the first ring is the outer boundary, the rest are holes."""

    rings: tuple[tuple[Position, ...], ...]

    @property
    def outer_ring(self) -> tuple[Position, ...]:
        return self.rings[0]


@dataclass(frozen=True)
class UnknownGeometry:
    """Any geometry type that has no KML rendering (or a null geometry)."""

    type: str


Geometry = Point | LineString | Polygon | UnknownGeometry


@dataclass(frozen=True)
class Feature:
    name: str
    geometry: Geometry


@dataclass(frozen=True)
class FeatureCollection:
    features: tuple[Feature, ...]


@dataclass(frozen=True)
class UnknownDocument:
    """Top-level document whose type is not convertible."""

    type: str


GeoDocument = Feature | FeatureCollection | Point | LineString | Polygon | UnknownDocument


@dataclass(frozen=True)
class ConversionSuccess:
    output: str


@dataclass(frozen=True)
class ConversionFailure:
    message: str


ConversionResult = ConversionSuccess | ConversionFailure
