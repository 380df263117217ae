import hashlib
import tempfile
from pathlib import Path

import pytest

pytest.importorskip("libtorrent")

from bdecoder.bencode import END_OF_STREAM, Decoder  # noqa: E402
from bdecoder.cursor import ByteCursor  # noqa: E402
from bdecoder.metainfo import Metainfo  # noqa: E402

from .utils import create_payload, create_payload_dir, create_torrent_file  # noqa: E402


class TestRealTorrents:
    """Integration tests using torrent files created by libtorrent."""

    @pytest.fixture
    def workspace(self):
        """Create a temporary workspace."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield tmpdir

    def test_single_file_torrent(self, workspace):
        payload_file = create_payload(workspace, size=1024)
        torrent_file = create_torrent_file(
            Path(payload_file).name, "http://localhost:8080/announce", workspace
        )

        [mi] = Metainfo.from_file(torrent_file)
        assert mi.announce == "http://localhost:8080/announce"
        assert mi.name == "payload.dat"
        assert mi.length == 1024
        assert mi.piece_length > 0
        assert mi.piece_hashes == [hashlib.sha1(b"A" * 1024).digest()]

    def test_multi_file_torrent(self, workspace):
        payload_dir = create_payload_dir(workspace, {"a.bin": 100, "b.bin": 200})
        torrent_file = create_torrent_file(
            Path(payload_dir).name, "http://example.com/announce", workspace
        )

        [mi] = Metainfo.from_file(torrent_file)
        assert mi.length is None
        assert mi.name == "payload"
        # libtorrent may insert pad files between the real ones
        files = [f for f in mi.info[b"files"] if b"p" not in f.get(b"attr", b"")]
        assert sorted(f[b"length"] for f in files) == [100, 200]

    def test_decode_raw_with_small_chunks(self, workspace):
        """Test decoding a real file through a one byte read buffer."""
        payload_file = create_payload(workspace, size=2048)
        torrent_file = create_torrent_file(
            Path(payload_file).name, "http://example.com/announce", workspace
        )

        with open(torrent_file, "rb") as f:
            expected = Decoder(f.read()).decode()

        with open(torrent_file, "rb", buffering=0) as f:
            decoder = Decoder(ByteCursor.from_stream(f, chunk_size=1))
            assert decoder.decode() == expected
            assert decoder.decode() is END_OF_STREAM

        assert expected[b"created by"] == b"test-setup"
        assert isinstance(expected[b"creation date"], int)
