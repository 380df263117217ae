"""
Runtime settings for bdecoder.
Loaded from the environment, with a .env file taken into account.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Maximum number of nested lists/dictionaries; 0 disables the check
MAX_DEPTH = int(os.getenv("BDECODER_MAX_DEPTH", "256")) or None

# Bytes requested per read when decoding from a binary stream
CHUNK_SIZE = int(os.getenv("BDECODER_CHUNK_SIZE", "8192"))

LOG_LEVEL = os.getenv("BDECODER_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = os.getenv("BDECODER_LOG_FORMAT", "%(levelname)s:%(name)s:%(message)s")
