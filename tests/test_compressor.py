"""Tests for the zip compressor."""

from __future__ import annotations

import io
import zipfile

from codesaver.archive.compressor import Compressor, ZipCompressor


class TestZipCompressor:
    """Tests for ZipCompressor."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ZipCompressor(), Compressor)

    def test_available(self) -> None:
        assert ZipCompressor().available() is True

    def test_compress_entries(self) -> None:
        data = ZipCompressor().compress([("a/b.txt", b"hello"), ("c.txt", b"world")])

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ["a/b.txt", "c.txt"]
            assert archive.read("a/b.txt") == b"hello"

    def test_progress_per_entry(self) -> None:
        seen = []
        ZipCompressor().compress(
            [("1.txt", b"1"), ("2.txt", b"2")], level=1, progress=seen.append
        )
        assert seen == [50.0, 100.0]

    def test_higher_level_not_larger(self) -> None:
        payload = [("big.txt", ("lorem ipsum dolor " * 2000).encode())]
        fast = ZipCompressor().compress(payload, level=1)
        best = ZipCompressor().compress(payload, level=9)
        assert len(best) <= len(fast)
