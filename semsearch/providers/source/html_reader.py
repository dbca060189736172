"""Source reader for HTML pages.

Extracts the text of the elements matched by a CSS selector (``p`` by
default, so navigation, scripts and boilerplate are left out) using
BeautifulSoup.  The same parsing is used for local ``.html`` files and for
web pages fetched during an indexing pass.
"""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

import structlog
from bs4 import BeautifulSoup

from semsearch.interfaces.source_reader import ISourceReader
from semsearch.models.corpus import RawUnit
from semsearch.utils.errors import SourceReadError

logger = structlog.get_logger(logger_name=__name__)

_WHITESPACE = re.compile(r"\s+")


class HTMLSourceReader(ISourceReader):
    """Reads ``.html`` / ``.htm`` files, keeping only selected elements.

    Parameters
    ----------
    selector:
        CSS selector for the content elements.  Each match becomes one
        paragraph of the extracted text.
    """

    extensions = (".html", ".htm")

    def __init__(self, selector: str = "p") -> None:
        self._selector = selector

    def read(self, path: Path) -> RawUnit:
        try:
            with open(path, encoding="utf-8", errors="replace") as fh:
                markup = fh.read()
        except OSError as exc:
            raise SourceReadError(
                message=f"cannot read {path}: {exc}",
                provider_name=self.get_provider_name(),
                path=str(path),
            ) from exc
        return self.parse(markup, source_id=str(path), default_title=path.stem)

    def parse(self, markup: str, source_id: str, default_title: str = "") -> RawUnit:
        """Extract selected text from *markup*.

        Raises
        ------
        SourceReadError
            If no selected element contains text.
        """
        soup = BeautifulSoup(markup, "html.parser")
        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""

        paragraphs = []
        for element in soup.select(self._selector):
            paragraph = _WHITESPACE.sub(" ", element.get_text(" ")).strip()
            if paragraph:
                paragraphs.append(paragraph)

        if not paragraphs:
            raise SourceReadError(
                message=f"no text matched selector {self._selector!r} in {source_id}",
                provider_name=self.get_provider_name(),
                path=source_id,
            )

        text = "\n\n".join(paragraphs)
        logger.debug(
            "html_parsed",
            source_id=source_id,
            paragraphs=len(paragraphs),
            chars=len(text),
        )
        return RawUnit(
            text=text,
            source_id=source_id,
            extra={
                "source": source_id,
                "source_type": "html",
                "title": title or default_title or source_id,
                "content_hash": hashlib.sha256(text.encode("utf-8")).hexdigest(),
            },
        )

    def get_provider_name(self) -> str:
        return "html"
