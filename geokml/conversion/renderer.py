from xml.sax.saxutils import escape

from geokml.conversion.models import (
    UNNAMED,
    Feature,
    FeatureCollection,
    GeoDocument,
    Geometry,
    LineString,
    Point,
    Polygon,
    Position,
    UnknownDocument,
    UnknownGeometry,
)
from geokml.logging.logger import Log

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(text: str) -> str:
    """Escape the five XML predefined characters."""
    return escape(text, _XML_ENTITIES)


def format_position(position: Position) -> str:
    return f"{position.lon!r},{position.lat!r},{position.alt!r}"


def format_positions(positions: tuple[Position, ...]) -> str:
    return " ".join(format_position(p) for p in positions)


def render_kml(document: GeoDocument) -> str:
    """Render a parsed document as a KML string."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<kml xmlns="{KML_NAMESPACE}">',
        "  <Document>",
    ]
    for feature in _placemark_features(document):
        lines.extend(_render_placemark(feature.name, feature.geometry))
    lines.append("  </Document>")
    lines.append("</kml>")
    return "\n".join(lines)


def _placemark_features(document: GeoDocument) -> tuple[Feature, ...]:
    if isinstance(document, FeatureCollection):
        return document.features
    if isinstance(document, Feature):
        return (document,)
    if isinstance(document, UnknownDocument):
        Log.warning(f"Unknown GeoJSON type: {document.type}")
        return ()
    return (Feature(name=UNNAMED, geometry=document),)


def _render_placemark(name: str, geometry: Geometry) -> list[str]:
    if isinstance(geometry, UnknownGeometry):
        Log.warning(f"Unsupported geometry type: {geometry.type}")
        return []
    return [
        "    <Placemark>",
        f"      <name>{escape_xml(name)}</name>",
        *_render_geometry(geometry),
        "    </Placemark>",
    ]


def _render_geometry(geometry: Point | LineString | Polygon) -> list[str]:
    if isinstance(geometry, Point):
        return [
            "      <Point>",
            f"        <coordinates>{format_position(geometry.position)}</coordinates>",
            "      </Point>",
        ]
    if isinstance(geometry, LineString):
        return [
            "      <LineString>",
            "        <coordinates>",
            f"          {format_positions(geometry.positions)}",
            "        </coordinates>",
            "      </LineString>",
        ]
    # Inner rings (holes) are not rendered.
    return [
        "      <Polygon>",
        "        <outerBoundaryIs>",
        "          <LinearRing>",
        "            <coordinates>",
        f"              {format_positions(geometry.outer_ring)}",
        "            </coordinates>",
        "          </LinearRing>",
        "        </outerBoundaryIs>",
        "      </Polygon>",
    ]
