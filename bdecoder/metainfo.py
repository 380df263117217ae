import logging

from .bencode import Decoder, Value

logger = logging.getLogger(__name__)

SHA1_SIZE = 20


class MetainfoError(ValueError):
    pass


class Metainfo:
    """Read-only view of the well known fields of a decoded .torrent dictionary."""

    def __init__(self, metainfo: dict):
        self.metainfo = metainfo

    def __str__(self):
        str = f"Tracker URL: {self.announce}\n"
        str += f"Name: {self.name}\n"
        str += f"Length: {self.length if self.length is not None else 'multi-file'}\n"
        str += f"Piece Length: {self.piece_length}\n"
        str += "\n".join([x.hex() for x in self.piece_hashes])
        return str

    @property
    def info(self) -> dict:
        return _field(self.metainfo, b"info", dict)

    @property
    def announce(self) -> str:
        return _field(self.metainfo, b"announce", bytes).decode(errors="replace")

    @property
    def name(self) -> str:
        return _field(self.info, b"name", bytes).decode(errors="replace")

    @property
    def piece_length(self) -> int:
        return _field(self.info, b"piece length", int)

    @property
    def pieces(self) -> bytes:
        return _field(self.info, b"pieces", bytes)

    @property
    def piece_hashes(self) -> list[bytes]:
        all = self.pieces
        return [all[i : i + SHA1_SIZE] for i in range(0, len(all), SHA1_SIZE)]

    @property
    def length(self) -> int | None:
        """Total length for single-file torrents, None when the info has 'files'."""
        if b"length" not in self.info:
            return None
        return _field(self.info, b"length", int)

    def validate(self) -> "Metainfo":
        for field in ("announce", "name", "piece_length", "pieces", "length"):
            getattr(self, field)
        return self

    @classmethod
    def from_value(cls, value: Value) -> "Metainfo":
        if not isinstance(value, dict):
            raise MetainfoError(f"Metainfo must be a dictionary, got {type(value).__name__}")
        return cls(value).validate()

    @classmethod
    def from_file(cls, file: str) -> list["Metainfo"]:
        with open(file, mode="rb") as f:
            values = list(Decoder(f))
        logger.debug(f"Decoded {len(values)} value(s) from {file}")
        return [cls.from_value(v) for v in values]


def _field(d: dict, key: bytes, kind: type):
    try:
        value = d[key]
    except KeyError:
        raise MetainfoError(f"Missing {key.decode()} element") from None

    if not isinstance(value, kind):
        raise MetainfoError(f"{key.decode()} must be of type {kind.__name__}")
    return value
