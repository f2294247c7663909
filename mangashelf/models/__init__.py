from .library_entry import LibraryEntry
from .extraction import ExtractionRequest, ExtractionResult, ExtractionStatus

__all__ = ["LibraryEntry", "ExtractionRequest", "ExtractionResult", "ExtractionStatus"]
