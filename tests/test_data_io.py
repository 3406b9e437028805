"""
Tests for data-file readers and writers.

Run with: pytest tests/test_data_io.py -v
"""

import numpy as np
import pytest

from mfembed.data import (
    make_entries,
    read_binary,
    write_binary,
    read_text,
    write_text,
    read_entries,
    generate_low_rank_entries
)


def assert_same_entries(a, b):
    assert len(a) == len(b)
    np.testing.assert_array_equal(a['row'], b['row'])
    np.testing.assert_array_equal(a['col'], b['col'])
    np.testing.assert_array_equal(a['value'], b['value'])


class TestBinaryFormat:
    """Test the packed 12-byte record format."""

    def test_roundtrip(self, tmp_path):
        """Written records read back byte-exact."""
        entries, _ = generate_low_rank_entries(15, 10, random_state=3)
        path = tmp_path / "data.bin"

        write_binary(path, entries)
        loaded = read_binary(path)

        assert path.stat().st_size == 12 * len(entries)
        assert_same_entries(loaded, entries)
        assert loaded.tobytes() == entries.tobytes()

    def test_record_bytes(self, tmp_path):
        """A single record is little-endian int32, int32, float32."""
        path = tmp_path / "one.bin"
        write_binary(path, [(1, 2, 0.5)])

        raw = path.read_bytes()
        assert raw == (
            (1).to_bytes(4, 'little')
            + (2).to_bytes(4, 'little')
            + np.float32(0.5).astype('<f4').tobytes()
        )

    def test_bad_size_rejected(self, tmp_path):
        path = tmp_path / "bad.bin"
        path.write_bytes(b"\x00" * 13)

        with pytest.raises(ValueError, match="not a multiple"):
            read_binary(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")
        assert len(read_binary(path)) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_binary(tmp_path / "nope.bin")


class TestTextFormat:
    """Test whitespace-separated triplets."""

    def test_read_basic(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("0 0 5.0\n0 1 3\n1 0\t4.5\n")

        entries = read_text(path)

        np.testing.assert_array_equal(entries['row'], [0, 0, 1])
        np.testing.assert_array_equal(entries['col'], [0, 1, 0])
        np.testing.assert_array_equal(entries['value'], np.float32([5.0, 3.0, 4.5]))

    def test_triplets_may_span_lines(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("0 1\n2.0 3\n4 5.5")

        entries = read_text(path)

        assert len(entries) == 2
        assert entries[1]['row'] == 3
        assert entries[1]['value'] == np.float32(5.5)

    def test_malformed_token_stops_reading(self, tmp_path):
        """Everything before the first bad token is kept, nothing after."""
        path = tmp_path / "data.txt"
        path.write_text("0 0 5.0\n0 1 3.0\n1 x 4.0\n1 1 2.0\n")

        entries = read_text(path)

        assert len(entries) == 2
        np.testing.assert_array_equal(entries['value'], np.float32([5.0, 3.0]))

    def test_non_finite_value_stops_reading(self, tmp_path):
        """nan and inf are malformed values, not data."""
        path = tmp_path / "data.txt"
        path.write_text("0 0 1.0\n1 1 nan\n2 2 inf\n")

        entries = read_text(path)

        assert len(entries) == 1
        np.testing.assert_array_equal(entries['value'], np.float32([1.0]))

    @pytest.mark.parametrize("bad_line", ["1 1 -inf", "1 1 Infinity", "1 1 1e40", "1 1 1_0", "1_0 1 2.0"])
    def test_unparseable_number_forms_stop_reading(self, tmp_path, bad_line):
        path = tmp_path / "data.txt"
        path.write_text(f"0 0 1.0\n{bad_line}\n2 2 3.0\n")
        assert len(read_text(path)) == 1

    def test_fractional_id_stops_reading(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("0 0 1.0\n1.5 0 2.0\n")
        assert len(read_text(path)) == 1

    def test_incomplete_trailing_triplet_dropped(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("0 0 1.5\n1 1")
        assert len(read_text(path)) == 1

    def test_roundtrip(self, tmp_path):
        """float32 values survive the text format exactly."""
        entries = make_entries([(0, 1, 0.1), (2, 3, -7.25), (4, 0, 1e-3)])
        path = tmp_path / "data.txt"

        write_text(path, entries)

        assert_same_entries(read_text(path), entries)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "nope.txt")


class TestReadEntries:
    """Test format dispatch."""

    def test_dispatch(self, tmp_path):
        entries = make_entries([(0, 0, 1.0), (1, 2, 3.0)])
        write_binary(tmp_path / "d.bin", entries)
        write_text(tmp_path / "d.txt", entries)

        assert_same_entries(read_entries(tmp_path / "d.bin", binary=True), entries)
        assert_same_entries(read_entries(tmp_path / "d.txt"), entries)

    def test_verbose_reports_count(self, tmp_path, capsys):
        write_text(tmp_path / "d.txt", [(0, 0, 1.0)])

        read_entries(tmp_path / "d.txt", verbose=True)

        assert "1 items. OK." in capsys.readouterr().err
