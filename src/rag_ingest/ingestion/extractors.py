"""Text extractors — one implementation per supported upload format.

Adding a format only requires subclassing :class:`TextExtractor` and
registering an instance; call sites go through :class:`ExtractorRegistry`
and never branch on the extension themselves.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from rag_ingest.config import Settings
from rag_ingest.errors import ExtractionError, ValidationError
from rag_ingest.ingestion.validation import get_file_extension

logger = logging.getLogger(__name__)

PDF_DISABLED_MESSAGE = "PDF support is temporarily unavailable. Please upload TXT or MD files instead."


class TextExtractor(ABC):
    """Turns the raw bytes of an upload into document text.

    Parameters
    ----------
    enabled:
        Disabled extractors stay registered but are not advertised as
        accepted upload types.
    """

    extensions: tuple[str, ...] = ()

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Return the text content of *data*."""
        ...


class PlainTextExtractor(TextExtractor):
    """UTF-8 text and Markdown files.

    Invalid byte sequences are replaced with U+FFFD rather than rejected.
    """

    extensions = ("txt", "md")

    def extract(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")


class PdfExtractor(TextExtractor):
    """PDF files, via :mod:`pypdf`.  Disabled unless ``enable_pdf`` is set."""

    extensions = ("pdf",)

    def __init__(self, *, enabled: bool = False) -> None:
        super().__init__(enabled=enabled)

    def extract(self, data: bytes) -> str:
        if not self.enabled:
            raise ExtractionError(PDF_DISABLED_MESSAGE)
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in reader.pages]
        except PdfReadError as exc:
            logger.warning("PDF extraction failed", exc_info=True)
            raise ExtractionError(f"Failed to extract text from file: {exc}") from exc
        return "\n\n".join(pages)


class ExtractorRegistry:
    """Maps lower-cased file extensions to :class:`TextExtractor` instances."""

    def __init__(self) -> None:
        self._extractors: dict[str, TextExtractor] = {}

    def register(self, extractor: TextExtractor) -> None:
        """Register *extractor* for each of its extensions (last one wins)."""
        for ext in extractor.extensions:
            self._extractors[ext.lower()] = extractor

    def get(self, extension: str) -> TextExtractor | None:
        return self._extractors.get(extension.lower())

    def allowed_extensions(self) -> list[str]:
        """Sorted extensions whose extractor is enabled."""
        return sorted(ext for ext, ex in self._extractors.items() if ex.enabled)

    def extract(self, filename: str, data: bytes) -> str:
        """Extract text from *data* using the extractor for *filename*'s extension.

        Raises
        ------
        ValidationError
            No extractor is registered for the extension.
        ExtractionError
            The extractor is disabled or could not read the file.
        """
        extension = get_file_extension(filename)
        extractor = self.get(extension)
        if extractor is None:
            raise ValidationError(f"No extractor registered for '.{extension}' files")
        return extractor.extract(data)


def default_registry(settings: Settings) -> ExtractorRegistry:
    """Registry with the plain-text extractor and the (flagged) PDF extractor."""
    registry = ExtractorRegistry()
    registry.register(PlainTextExtractor())
    registry.register(PdfExtractor(enabled=settings.enable_pdf))
    return registry
