class BencodeError(ValueError):
    """Base class of every error raised while decoding bencode."""

    def __init__(self, message: str, position: int | None = None):
        if position is not None:
            message = f"{message} (at byte {position})"
        super().__init__(message)
        self.position = position


class SourceReadError(BencodeError):
    """The underlying byte source failed. The OSError is the __cause__."""


class InvalidLeadByte(BencodeError):
    def __init__(self, byte: int, position: int | None = None):
        super().__init__(f"Unexpected byte {byte:#04x} at start of value", position)
        self.byte = byte


class InvalidLengthPrefix(BencodeError):
    def __init__(self, byte: int, position: int | None = None):
        super().__init__(
            f"Expected a digit (0x30 - 0x39) or ':' in string length, got {byte:#04x}",
            position,
        )
        self.byte = byte


class InvalidDigit(BencodeError):
    def __init__(self, byte: int, position: int | None = None):
        super().__init__(
            f"Expected a digit (0x30 - 0x39) or 'e' in integer, got {byte:#04x}",
            position,
        )
        self.byte = byte


class UnexpectedEndOfInput(BencodeError):
    """Input ended in the middle of a value."""


class UnterminatedLengthPrefix(UnexpectedEndOfInput):
    pass


class UnterminatedString(UnexpectedEndOfInput):
    pass


class UnterminatedInteger(UnexpectedEndOfInput):
    pass


class UnterminatedList(UnexpectedEndOfInput):
    pass


class UnterminatedDictionary(UnexpectedEndOfInput):
    pass


class IntegerRangeError(BencodeError):
    """Integer does not fit in a signed 64-bit value."""


class IntegerTooLarge(IntegerRangeError):
    pass


class IntegerOverflow(IntegerRangeError):
    pass


class NestingTooDeep(BencodeError):
    pass
