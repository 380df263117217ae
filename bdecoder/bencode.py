import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterable, Iterator

from . import config
from .cursor import ByteCursor
from .errors import (
    IntegerOverflow,
    IntegerTooLarge,
    InvalidDigit,
    InvalidLeadByte,
    InvalidLengthPrefix,
    NestingTooDeep,
    UnexpectedEndOfInput,
    UnterminatedDictionary,
    UnterminatedInteger,
    UnterminatedLengthPrefix,
    UnterminatedList,
    UnterminatedString,
)

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)

# Enough digits for any 64-bit magnitude; the real bound is checked in digits_to_int
MAX_INT_DIGITS = 19

DIGITS = b"0123456789"
ZERO = ord("0")
COLON = ord(":")
MINUS = ord("-")
INT = ord("i")
LIST = ord("l")
DICT = ord("d")
END = ord("e")


class EndOfStream:
    """Returned by Decoder.decode() when the input holds no further value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM = EndOfStream()

Value = int | bytes | list | dict
Source = bytes | bytearray | memoryview | BinaryIO | Iterable[int] | ByteCursor


def digits_to_int(digits: bytes, negative: bool = False, position: int | None = None) -> int:
    """Accumulate ASCII digits into a signed 64-bit integer.

    Every multiply and add (subtract when negative) is range checked, so
    out of range values raise IntegerOverflow instead of growing past 64 bits.
    An empty sequence is 0. position is reported on the error.
    """
    value = 0
    for digit in digits:
        value *= 10
        if not INT64_MIN <= value <= INT64_MAX:
            raise IntegerOverflow("Integer field is larger than 64 bits", position)

        if negative:
            value -= digit - ZERO
        else:
            value += digit - ZERO
        if not INT64_MIN <= value <= INT64_MAX:
            raise IntegerOverflow("Integer field is larger than 64 bits", position)

    return value


class Decoder:
    """Recursive descent bencode decoder reading from a ByteCursor.

    Call decode() repeatedly to read concatenated top-level values; it
    returns END_OF_STREAM once the input is exhausted.
    """

    def __init__(self, source: Source, max_depth: int | None = config.MAX_DEPTH):
        self.cursor = _as_cursor(source)
        self.max_depth = max_depth
        self.depth = 0

    def __iter__(self) -> Iterator[Value]:
        while not self.is_at_end():
            yield self.decode()

    def decode(self) -> Value | EndOfStream:
        start = self.cursor.position
        try:
            value = self.parse_value()
        except RecursionError as err:
            raise NestingTooDeep(
                "Values nested too deeply to decode", self.cursor.position
            ) from err
        if value is not END_OF_STREAM:
            logger.debug(
                f"Decoded {type(value).__name__} from bytes {start}-{self.cursor.position}"
            )
        return value

    def parse_value(self) -> Value | EndOfStream:
        c = self.peek()
        match c:
            case None:
                return END_OF_STREAM

            case _ if c in DIGITS:
                return self.read_string()

            case 0x64:  # d
                return self.read_dict()

            case 0x69:  # i
                return self.read_integer()

            case 0x6C:  # l
                return self.read_list()

            case _:
                raise InvalidLeadByte(c, self.cursor.position)

    def read_string(self) -> bytes:
        # A leading zero in the length ("03:abc") is accepted
        digits = bytearray()
        while (c := self.advance(UnterminatedLengthPrefix, "string length")) != COLON:
            if c not in DIGITS:
                raise InvalidLengthPrefix(c, self.cursor.position - 1)
            digits.append(c)

        length = digits_to_int(bytes(digits), position=self.cursor.position - 1)
        string = self.cursor.read(length)
        if len(string) != length:
            raise UnterminatedString(
                f"File ended while reading string, got {len(string)} of {length} bytes",
                self.cursor.position,
            )

        return string

    def read_integer(self) -> int:
        self.expect(INT)

        negative = False
        c = self.advance(UnterminatedInteger, "integer")
        if c == MINUS:
            negative = True
            c = self.advance(UnterminatedInteger, "integer")

        # Leading zeros, "i-e" and "i-0e" are all accepted; the last two are 0
        digits = bytearray()
        while c != END:
            if c not in DIGITS:
                raise InvalidDigit(c, self.cursor.position - 1)
            if len(digits) >= MAX_INT_DIGITS:
                raise IntegerTooLarge(
                    f"Integer has more than {MAX_INT_DIGITS} digits", self.cursor.position - 1
                )
            digits.append(c)
            c = self.advance(UnterminatedInteger, "integer")

        return digits_to_int(bytes(digits), negative, self.cursor.position - 1)

    def read_list(self) -> list:
        self.expect(LIST)

        lst = []
        with self.nested():
            if self.peek() == END:
                self.advance()
                return lst

            while True:
                value = self.parse_value()
                if value is END_OF_STREAM:
                    raise UnterminatedList("File ended while reading list", self.cursor.position)
                lst.append(value)

                c = self.peek()
                if c is None:
                    raise UnterminatedList("File ended while reading list", self.cursor.position)
                if c == END:
                    self.advance()
                    return lst

    def read_dict(self) -> dict:
        self.expect(DICT)

        # Keys are not required to be sorted; a repeated key overwrites the earlier value
        dct = {}
        with self.nested():
            while True:
                c = self.peek()
                if c is None:
                    raise UnterminatedDictionary(
                        "File ended while reading dictionary", self.cursor.position
                    )
                if c == END:
                    self.advance()
                    return dct

                key = self.read_string()
                value = self.parse_value()
                if value is END_OF_STREAM:
                    raise UnterminatedDictionary(
                        "File ended while reading dictionary", self.cursor.position
                    )
                dct[key] = value

    @contextmanager
    def nested(self):
        self.depth += 1
        try:
            if self.max_depth is not None and self.depth > self.max_depth:
                raise NestingTooDeep(
                    f"Values nested deeper than {self.max_depth} levels", self.cursor.position
                )
            yield
        finally:
            self.depth -= 1

    def peek(self) -> int | None:
        return self.cursor.peek()

    def advance(
        self, error: type[UnexpectedEndOfInput] = UnexpectedEndOfInput, what: str = "value"
    ) -> int:
        if self.peek() is None:
            raise error(f"File ended while reading {what}", self.cursor.position)
        return self.cursor.advance()

    def expect(self, byte: int) -> int:
        c = self.advance()
        if c != byte:
            raise InvalidLeadByte(c, self.cursor.position - 1)
        return c

    def is_at_end(self) -> bool:
        return self.peek() is None


def decode(source: Source) -> Value | EndOfStream:
    """Decode the first top-level value of source."""
    return Decoder(source).decode()


def decode_all(source: Source) -> list[Value]:
    """Decode every concatenated top-level value of source."""
    return list(Decoder(source))


def _as_cursor(source: Source) -> ByteCursor:
    if isinstance(source, ByteCursor):
        return source
    if isinstance(source, str):
        raise TypeError("bencode must be decoded from bytes, not str")
    if isinstance(source, (bytes, bytearray, memoryview)):
        return ByteCursor(bytes(source))
    if hasattr(source, "read"):
        return ByteCursor.from_stream(source)
    return ByteCursor(source)
