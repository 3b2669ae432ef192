from geokml.conversion.base import BaseConverter
from geokml.conversion.converter import KmlConverter
from geokml.conversion.models import ConversionFailure, ConversionResult, ConversionSuccess

__all__ = [
    "BaseConverter",
    "ConversionFailure",
    "ConversionResult",
    "ConversionSuccess",
    "KmlConverter",
]
