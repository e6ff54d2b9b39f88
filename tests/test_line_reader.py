"""Tests for line_reader.py: decoding, markup rewriting and line indexing."""
from __future__ import annotations

import io

import pytest

from copyright_scanner.line_reader import (
    BUFFER_SIZE,
    SUBSTITUTIONS,
    IndexedLineReader,
    LineReaderIOError,
)

I18N_STRING = "2Îñţļ3国際化4𣳾𠹭𣌿8👩🏽"
HIGH_BYTES_DECODED = (
    "?????™?*" + "?" * 12 + "ö" + "?" * 4 + "™" + "?" * 6
    + " " + "?" * 6 + " ?©??? ®" + "?" * 7 + " *" + "?" * 8
    + "".join(chr(c) for c in range(0xC0, 0x100))
)


class ChunkedSource:
    """Byte source that never returns more than ``chunk`` bytes per read."""

    def __init__(self, data: bytes, chunk: int) -> None:
        self._buf = io.BytesIO(data)
        self._chunk = chunk
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        return self._buf.read(min(size, self._chunk))

    def close(self) -> None:
        self.closed = True


class FailingSource:
    def __init__(self, first: bytes) -> None:
        self._first = first
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        if self._first:
            data, self._first = self._first, b""
            return data
        raise OSError("disk on fire")

    def close(self) -> None:
        self.closed = True


def reader_for(data: bytes, chunk: int = BUFFER_SIZE) -> IndexedLineReader:
    return IndexedLineReader("test", ChunkedSource(data, chunk), len(data))


class TestDecoding:
    def test_ascii(self) -> None:
        with reader_for(b"hello\nworld\n") as reader:
            assert reader.read() == "hello\nworld\n"
            assert reader.read() == ""

    def test_i18n_round_trip(self) -> None:
        with reader_for(I18N_STRING.encode("utf-8")) as reader:
            assert reader.read() == I18N_STRING
            assert reader.binary_count == 0
            assert reader.first_binary == -1

    @pytest.mark.parametrize("chunk", [1, 2, 3, 5])
    def test_multibyte_split_across_reads(self, chunk: int) -> None:
        with reader_for(I18N_STRING.encode("utf-8"), chunk) as reader:
            assert reader.read() == I18N_STRING

    def test_high_bytes_substituted(self) -> None:
        with reader_for(bytes(range(0x80, 0x100))) as reader:
            text = reader.read()
        assert text == HIGH_BYTES_DECODED
        assert len(text) == 128

    def test_copyright_byte(self) -> None:
        with reader_for(b"\xa9 2019 Example") as reader:
            assert reader.read() == "© 2019 Example"
            assert reader.binary_count == 1
            assert reader.first_binary == 0

    def test_first_binary_offset(self) -> None:
        with reader_for(b"abc\ndef\x99") as reader:
            assert reader.read() == "abc\ndef™"
            assert reader.first_binary == 7

    def test_nul_preserved(self) -> None:
        with reader_for(b"a\x00b") as reader:
            assert reader.read() == "a\x00b"
            assert reader.binary_count == 0

    def test_substitution_table_complete(self) -> None:
        assert set(SUBSTITUTIONS) == set(range(0x80, 0x100))
        assert all(len(s) == 1 for s in SUBSTITUTIONS.values())


class TestMarkup:
    @pytest.mark.parametrize("source", [
        "\n&quot;I think therefore I am.&quot;\n",
        "\n&#34;I think therefore I am.&#34;\n",
        "\n<var>I think therefore I am.</var>\n",
    ])
    def test_quotes_rewritten(self, source: str) -> None:
        with reader_for(source.encode("utf-8")) as reader:
            assert reader.read() == '\n"I think therefore I am."\n'

    @pytest.mark.parametrize("chunk", [1, 2, 3, 4, 7])
    def test_rewrite_across_reads(self, chunk: int) -> None:
        data = b"x&quot;y</var>z&#34;"
        with reader_for(data, chunk) as reader:
            assert reader.read() == 'x"y"z"'

    def test_partial_markup_at_end_kept(self) -> None:
        with reader_for(b"a &quo") as reader:
            assert reader.read() == "a &quo"

    def test_unrelated_ampersand_kept(self) -> None:
        with reader_for(b"AT&T <b>") as reader:
            assert reader.read() == "AT&T <b>"


class TestReadSizes:
    def test_read_exact_counts(self) -> None:
        with reader_for(b"0123456789", chunk=3) as reader:
            assert reader.read(4) == "0123"
            assert reader.chars_read == 4
            assert reader.read(4) == "4567"
            assert reader.read(4) == "89"
            assert reader.read(4) == ""

    def test_read_delimited(self) -> None:
        out: list[str] = []
        with reader_for(b"line1\x00line") as reader:
            assert reader.read_delimited("\x00", out) == 6
            assert reader.read_delimited("\x00", out) == 4
            assert reader.read_delimited("\x00", out) is None
        assert out == ["line1", "line"]


class TestLineIndex:
    def test_offsets_and_lookup(self) -> None:
        with reader_for(b"a\nbb\nccc") as reader:
            reader.read()
            assert reader.line_offsets == [0, 2, 5]
            assert reader.lines_read == 2
            assert [reader.line_number(i) for i in range(9)] == [
                1, 1, 2, 2, 2, 3, 3, 3, 3,
            ]

    def test_index_across_small_reads(self) -> None:
        with reader_for(b"one\ntwo\nthree\n", chunk=2) as reader:
            while reader.read(3):
                pass
            assert reader.line_offsets == [0, 4, 8, 14]
            assert reader.line_number(9) == 3

    def test_line_number_monotonic(self) -> None:
        with reader_for(b"x\n" * 50) as reader:
            reader.read()
            numbers = [reader.line_number(i) for i in range(100)]
        assert numbers == sorted(numbers)
        assert numbers[-1] == 50


class TestBinaryAndErrors:
    def test_binary_blob_stops_early(self) -> None:
        data = b"\xff" * (BUFFER_SIZE * 3) + b"hello"
        with reader_for(data) as reader:
            text = reader.read()
        assert len(text) == BUFFER_SIZE
        assert "hello" not in text
        assert reader.binary_count == BUFFER_SIZE

    def test_text_with_few_bad_bytes_reads_through(self) -> None:
        data = b"line\n" * 1000 + b"\xa9 end"
        with reader_for(data) as reader:
            assert reader.read().endswith("© end")

    def test_io_error_carries_position(self) -> None:
        source = FailingSource(b"ab\ncd")
        reader = IndexedLineReader("broken.txt", source)
        with pytest.raises(LineReaderIOError) as excinfo:
            reader.read()
        assert isinstance(excinfo.value, OSError)
        assert isinstance(excinfo.value.__cause__, OSError)
        assert "broken.txt" in str(excinfo.value)
        reader.close()
        assert source.closed

    def test_context_manager_closes_source(self) -> None:
        source = ChunkedSource(b"data", 10)
        with IndexedLineReader("x", source):
            pass
        assert source.closed
