"""Abstract base class for document source readers.

A source reader turns one file of a given format into a single
:class:`~semsearch.models.corpus.RawUnit`.  Readers are registered with the
:class:`~semsearch.services.ingestion.source_loader.SourceLoader` by file
extension, so new formats plug in without touching the loader.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from semsearch.models.corpus import RawUnit


# Concrete implementations (semsearch/providers/source/):
#   PDFSourceReader  -- .pdf via PyMuPDF
#   TextSourceReader -- .txt / .md
#   HTMLSourceReader -- .html / .htm via BeautifulSoup
class ISourceReader(ABC):
    """Contract for format-specific file decoders."""

    #: Lowercased file extensions (with leading dot) this reader handles.
    extensions: tuple[str, ...] = ()

    @abstractmethod
    def read(self, path: Path) -> RawUnit:
        """Read *path* and return its full text as a RawUnit.

        Raises
        ------
        semsearch.utils.errors.SourceReadError
            If the file cannot be opened or decoded, or holds no text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this reader, e.g. ``"pdf"``."""
