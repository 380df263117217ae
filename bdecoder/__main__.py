import logging
import sys
from pprint import pformat

import fire

from . import config
from .bencode import Decoder, Value
from .errors import BencodeError
from .metainfo import Metainfo, MetainfoError

logger = logging.getLogger(__name__)


def for_display(value: Value):
    """Byte strings become text when they are printable UTF-8, hex otherwise."""
    match value:
        case bytes():
            try:
                text = value.decode()
            except UnicodeDecodeError:
                return value.hex()
            return text if text.isprintable() else value.hex()

        case list():
            return [for_display(v) for v in value]

        case dict():
            return {for_display(k): for_display(v) for k, v in value.items()}

        case _:
            return value


def show(file: str, raw: bool = False) -> None:
    """Decode every value in FILE and print it as torrent metainfo (or as is with --raw)."""
    try:
        with open(file, "rb") as f:
            for value in Decoder(f):
                if raw:
                    print(pformat(for_display(value)))
                else:
                    print(Metainfo.from_value(value))
    except (BencodeError, MetainfoError) as err:
        logger.debug("Decoding failed", exc_info=True)
        print(f"Error while decoding {file}\n{err}", file=sys.stderr)
        raise SystemExit(1)
    except OSError as err:
        print(f"Error while opening {file}\n{err}", file=sys.stderr)
        raise SystemExit(1)


def main():
    logging.basicConfig(format=config.LOG_FORMAT, level=config.LOG_LEVEL)
    fire.Fire(show)


if __name__ == "__main__":
    main()
