"""Source readers, one per supported input format.

- **PDFSourceReader**  -- ``.pdf`` via PyMuPDF page extraction
- **TextSourceReader** -- ``.txt`` / ``.md`` read verbatim
- **HTMLSourceReader** -- ``.html`` / ``.htm`` (and fetched web pages) via
  BeautifulSoup, keeping only the selected content elements
- **WebPageFetcher** -- downloads ``corpus_urls`` with httpx for the HTML reader
"""

from semsearch.providers.source.html_reader import HTMLSourceReader
from semsearch.providers.source.pdf_reader import PDFSourceReader
from semsearch.providers.source.text_reader import TextSourceReader
from semsearch.providers.source.web_fetcher import WebPageFetcher

__all__ = [
    "HTMLSourceReader",
    "PDFSourceReader",
    "TextSourceReader",
    "WebPageFetcher",
]
