"""Source reader for PDF documents.

Reads PDF files using PyMuPDF (fitz) and extracts text page-by-page.  The
whole document becomes a single :class:`~semsearch.models.corpus.RawUnit`;
pages are joined with blank lines and the page count is kept in ``extra``.
Both text-based PDFs and scanned PDFs with an embedded OCR text layer work.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from semsearch.interfaces.source_reader import ISourceReader
from semsearch.models.corpus import RawUnit
from semsearch.utils.errors import SourceReadError

logger = structlog.get_logger(logger_name=__name__)


class PDFSourceReader(ISourceReader):
    """Reads ``.pdf`` files into one RawUnit per document."""

    extensions = (".pdf",)

    def read(self, path: Path) -> RawUnit:
        pages, metadata = self._extract_pages(path)
        if not pages:
            raise SourceReadError(
                message=f"no extractable text in {path}",
                provider_name=self.get_provider_name(),
                path=str(path),
            )

        text = "\n\n".join(page_text for _, page_text in pages)
        extra: dict[str, object] = {
            "source": str(path),
            "source_type": "pdf",
            "title": metadata.get("title") or path.stem,
            "page_count": metadata["page_count"],
            "content_hash": hashlib.sha256(text.encode("utf-8")).hexdigest(),
        }
        if metadata.get("author"):
            extra["author"] = metadata["author"]

        logger.info(
            "pdf_read",
            path=str(path),
            pages=metadata["page_count"],
            text_pages=len(pages),
            chars=len(text),
        )
        return RawUnit(text=text, source_id=str(path), extra=extra)

    def get_provider_name(self) -> str:
        return "pdf"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _extract_pages(self, path: Path) -> tuple[list[tuple[int, str]], dict]:
        """Extract text from each page of the PDF.

        Returns
        -------
        tuple[list[tuple[int, str]], dict]
            ``(page_number, page_text)`` tuples (1-based, pages without
            text skipped) and a metadata dict with ``page_count``,
            ``title`` and ``author``.
        """
        try:
            doc = fitz.open(str(path))
        except Exception as exc:
            raise SourceReadError(
                message=f"cannot open PDF {path}: {exc}",
                provider_name=self.get_provider_name(),
                path=str(path),
            ) from exc

        pages: list[tuple[int, str]] = []
        try:
            doc_meta = doc.metadata or {}
            metadata = {
                "page_count": len(doc),
                "title": (doc_meta.get("title") or "").strip(),
                "author": (doc_meta.get("author") or "").strip(),
            }
            for page_num in range(len(doc)):
                page = doc[page_num]
                page_text = page.get_text("text").strip()
                if page_text:
                    pages.append((page_num + 1, page_text))
        finally:
            doc.close()

        if not pages:
            logger.warning("pdf_no_text_extracted", path=str(path))

        return pages, metadata
