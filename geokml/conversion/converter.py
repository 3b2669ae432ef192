from geokml.conversion.base import BaseConverter
from geokml.conversion.exceptions import ConversionError
from geokml.conversion.models import ConversionFailure, ConversionResult, ConversionSuccess
from geokml.conversion.parser import parse_document
from geokml.conversion.renderer import render_kml
from geokml.logging.logger import Log


class KmlConverter(BaseConverter):
    """Converts GeoJSON documents to KML."""

    def convert(self, document_text: str) -> ConversionResult:
        try:
            document = parse_document(document_text)
        except ConversionError as exc:
            Log.warning(f"GeoJSON rejected: {exc}")
            return ConversionFailure(message=str(exc))

        output = render_kml(document)
        Log.debug(f"Rendered {len(output)} chars of KML")
        return ConversionSuccess(output=output)
