"""Document source loading: directory discovery and reader dispatch.

:class:`SourceLoader` maps file extensions to registered
:class:`~semsearch.interfaces.source_reader.ISourceReader` backends and turns
a list of paths into a lazy stream of :class:`RawUnit` objects.

Failure policy is skip-and-continue: a file with no registered reader
(``UnsupportedFormatError``) or one its reader cannot decode
(``SourceReadError``) is logged, reported to the optional ``on_skip``
callback, and the rest of the batch is still read.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import structlog

from semsearch.interfaces.source_reader import ISourceReader
from semsearch.models.corpus import RawUnit, SkippedSource
from semsearch.utils.errors import SourceReadError, UnsupportedFormatError

logger = structlog.get_logger(logger_name=__name__)

SkipCallback = Callable[[SkippedSource], None]


class SourceLoader:
    """Reads corpus files through format-specific readers.

    Parameters
    ----------
    readers:
        Reader backends.  When two readers claim the same extension the
        later one wins.
    extensions:
        Extensions considered by :meth:`discover`.  Defaults to every
        extension a registered reader supports.
    """

    def __init__(
        self,
        readers: Iterable[ISourceReader],
        extensions: Iterable[str] | None = None,
    ) -> None:
        self._readers: dict[str, ISourceReader] = {}
        for reader in readers:
            for ext in reader.extensions:
                self._readers[ext.lower()] = reader

        if extensions is None:
            self._extensions = tuple(self._readers)
        else:
            self._extensions = tuple(e.lower() for e in extensions)

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def discover(self, directory: str | Path) -> list[Path]:
        """List the recognised files directly inside *directory*, sorted by name.

        A missing directory or one with no matching files yields an empty list.
        """
        root = Path(directory)
        if not root.is_dir():
            logger.warning("corpus_dir_missing", directory=str(root))
            return []

        paths = sorted(
            p for p in root.iterdir()
            if p.is_file() and p.suffix.lower() in self._extensions
        )
        logger.info(
            "corpus_discovered",
            directory=str(root),
            files=len(paths),
            extensions=list(self._extensions),
        )
        return paths

    def iter_units(
        self,
        paths: Iterable[str | Path],
        on_skip: SkipCallback | None = None,
    ) -> Iterator[RawUnit]:
        """Yield one RawUnit per readable file in *paths*, in order."""
        for raw_path in paths:
            path = Path(raw_path)
            try:
                yield self.read(path)
            except (UnsupportedFormatError, SourceReadError) as exc:
                logger.warning(
                    "source_skipped",
                    path=str(path),
                    error_type=type(exc).__name__,
                    reason=exc.message,
                )
                if on_skip is not None:
                    on_skip(SkippedSource(path=str(path), reason=exc.message))

    def read(self, path: Path) -> RawUnit:
        """Read a single file with the reader registered for its extension.

        Raises
        ------
        UnsupportedFormatError
            If no reader handles the file's extension.
        SourceReadError
            If the reader fails to decode the file.
        """
        reader = self._readers.get(path.suffix.lower())
        if reader is None:
            raise UnsupportedFormatError(
                message=f"no reader for {path.suffix or 'extensionless'} file {path}",
                path=str(path),
            )
        return reader.read(path)
