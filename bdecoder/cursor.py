import logging
from itertools import islice
from typing import BinaryIO, Iterable, Iterator

from . import config
from .errors import SourceReadError, UnexpectedEndOfInput

logger = logging.getLogger(__name__)

_EMPTY = object()


class ByteCursor:
    """One byte of lookahead over a sequence of byte reads.

    Any OSError raised while pulling from the source is reported as a
    SourceReadError. A source that ran out of bytes peeks as None.
    """

    def __init__(self, source: Iterable[int]):
        self._source: Iterator[int] = iter(source)
        self._lookahead = _EMPTY
        self.position = 0

    @classmethod
    def from_stream(cls, stream: BinaryIO, chunk_size: int | None = None) -> "ByteCursor":
        return cls(_iter_stream(stream, chunk_size or config.CHUNK_SIZE))

    def peek(self) -> int | None:
        if self._lookahead is _EMPTY:
            self._lookahead = self._pull()
        return self._lookahead

    def advance(self) -> int:
        byte = self.peek()
        if byte is None:
            raise UnexpectedEndOfInput("Unexpected end of input", self.position)

        self._lookahead = _EMPTY
        self.position += 1
        return byte

    def read(self, n: int) -> bytes:
        """Consume up to n bytes. Fewer are returned if the input runs out."""
        data = bytearray()
        if n <= 0:
            return bytes(data)

        if self._lookahead is not _EMPTY:
            if self._lookahead is None:
                return bytes(data)
            data.append(self._lookahead)
            self._lookahead = _EMPTY

        try:
            for byte in islice(self._source, n - len(data)):
                data.append(byte)
        except OSError as err:
            raise SourceReadError(
                f"Error while reading input: {err}", self.position + len(data)
            ) from err
        finally:
            self.position += len(data)

        return bytes(data)

    def _pull(self) -> int | None:
        try:
            return next(self._source)
        except StopIteration:
            return None
        except OSError as err:
            raise SourceReadError(f"Error while reading input: {err}", self.position) from err


def _iter_stream(stream: BinaryIO, chunk_size: int) -> Iterator[int]:
    while chunk := stream.read(chunk_size):
        logger.debug(f"Read {len(chunk)} bytes from {stream!r}")
        yield from chunk
