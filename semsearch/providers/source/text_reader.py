"""Source reader for plain-text and Markdown files."""

from __future__ import annotations

import hashlib
from pathlib import Path

import structlog

from semsearch.interfaces.source_reader import ISourceReader
from semsearch.models.corpus import RawUnit
from semsearch.utils.errors import SourceReadError

logger = structlog.get_logger(logger_name=__name__)


class TextSourceReader(ISourceReader):
    """Reads UTF-8 ``.txt`` and ``.md`` files verbatim."""

    extensions = (".txt", ".md")

    def read(self, path: Path) -> RawUnit:
        try:
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(
                message=f"cannot read {path}: {exc}",
                provider_name=self.get_provider_name(),
                path=str(path),
            ) from exc

        if not text.strip():
            raise SourceReadError(
                message=f"{path} is empty",
                provider_name=self.get_provider_name(),
                path=str(path),
            )

        logger.debug("text_read", path=str(path), chars=len(text))
        return RawUnit(
            text=text,
            source_id=str(path),
            extra={
                "source": str(path),
                "source_type": "markdown" if path.suffix.lower() == ".md" else "text",
                "title": path.stem,
                "content_hash": hashlib.sha256(text.encode("utf-8")).hexdigest(),
            },
        )

    def get_provider_name(self) -> str:
        return "text"
