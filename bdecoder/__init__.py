from .bencode import END_OF_STREAM, Decoder, EndOfStream, decode, decode_all, digits_to_int
from .cursor import ByteCursor
from .errors import *  # noqa: F401,F403
from .metainfo import Metainfo, MetainfoError
