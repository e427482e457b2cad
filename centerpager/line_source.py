"""Seekable source of raw lines from the input file."""

import io
import logging
from typing import BinaryIO, Iterator

from .constants import PagerConstants
from .errors import PagerIOError

logger = logging.getLogger(__name__)


class LineSource:
    """Reads lines from a seekable byte stream, rewindable to a fixed start.

    The start offset is the stream position when the source is created and
    stands for "the top of the file". Iterating ``lines()`` advances the
    shared stream cursor, so callers must ``rewind()`` before every pass
    that needs to resolve "line N from the top".
    """

    def __init__(self, stream: BinaryIO, encoding: str = PagerConstants.FILE_ENCODING):
        """Wrap a stream that is already open for binary reading.

        Args:
            stream: Seekable binary stream; the source takes ownership of it
            encoding: Encoding used to decode each line
        """
        self._stream = stream
        self.encoding = encoding
        try:
            self.start_offset = stream.tell()
        except OSError as e:
            raise PagerIOError("cannot read stream position", e) from e

    @classmethod
    def open(cls, path: str, encoding: str = PagerConstants.FILE_ENCODING) -> 'LineSource':
        """Open a file read-only and wrap it in a LineSource.

        Raises:
            PagerIOError: If the file cannot be opened
        """
        try:
            stream = open(path, 'rb')
        except OSError as e:
            raise PagerIOError(f"cannot open {path}", e) from e
        logger.debug("opened %s", path)
        return cls(stream, encoding=encoding)

    def rewind(self) -> None:
        """Seek back to the start offset captured at construction."""
        try:
            self._stream.seek(self.start_offset, io.SEEK_SET)
        except OSError as e:
            raise PagerIOError("seek failed", e) from e

    def lines(self) -> Iterator[str]:
        """Yield decoded lines from the current position until end of stream.

        Each line keeps its terminator. A zero-byte read ends the sequence.

        Raises:
            PagerIOError: If a read fails or a line is not valid text
        """
        line_number = 0
        while True:
            try:
                raw = self._stream.readline()
            except OSError as e:
                raise PagerIOError("read failed", e) from e
            if not raw:
                return
            line_number += 1
            try:
                text = raw.decode(self.encoding)
            except UnicodeDecodeError as e:
                raise PagerIOError(
                    f"line {line_number} after current position is not valid {self.encoding}"
                ) from e
            yield text

    def close(self) -> None:
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def __enter__(self) -> 'LineSource':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
