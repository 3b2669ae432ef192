class ConversionError(Exception):
    """Raised when a GeoJSON document cannot be parsed into a convertible shape."""
