from abc import ABC, abstractmethod

from geokml.conversion.models import ConversionResult


class BaseConverter(ABC):
    """Contract for document converters used by the job worker."""

    @abstractmethod
    def convert(self, document_text: str) -> ConversionResult:
        """Convert a stored input document.

        Args:
            document_text: Raw input document as submitted.

        Returns:
            ConversionSuccess with the output document, or ConversionFailure
            with a human-readable message. Implementations must not raise
            for malformed input.
        """
