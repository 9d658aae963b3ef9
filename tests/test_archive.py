"""Tests for loading POD archives and extracting entries."""

import os
import struct
import threading

import pytest

from podexplorer.errors import InvalidDataException, NotFoundException, OutOfRangeException
from podexplorer.pod import PodArchive, PodEntry


class TestArchiveLoad:
    """Header parsing and all-or-nothing entry validation."""

    def test_end_to_end_single_entry(self, make_archive):
        payload = bytes(i % 251 for i in range(4096))
        path = make_archive([("ART", "X.RAW", "", payload)])

        archive = PodArchive.load(path)

        assert archive.list_names() == ["X.RAW"]
        assert archive.extract("ART", "X.RAW") == payload

    def test_header_fields(self, make_archive):
        path = make_archive([("", "A.TXT", "", b"a"), ("ART", "B.RAW", "P.ACT", b"bb")], description="Demo")

        archive = PodArchive.load(path)

        assert archive.description == "Demo"
        assert archive.file_count == 2
        assert len(archive) == 2
        assert archive.archive_size == os.path.getsize(path)
        assert archive.entries[1] == PodEntry("ART", "B.RAW", "P.ACT", 2, 4 + 80 + 2 * 40 + 1)

    def test_entries_keep_file_order(self, make_archive):
        path = make_archive([("", "Z.TXT", "", b"z"), ("", "A.TXT", "", b"a")])

        assert [entry.name for entry in PodArchive.load(path)] == ["Z.TXT", "A.TXT"]

    def test_empty_archive(self, make_archive):
        archive = PodArchive.load(make_archive([]))

        assert archive.file_count == 0
        assert archive.list_names() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundException):
            PodArchive.load(str(tmp_path / "MISSING.POD"))

    def test_rejects_entry_past_end_of_file(self, make_raw_archive):
        start = 4 + 80 + 40
        path = make_raw_archive([PodEntry("", "A.TXT", "", 11, start)], b"x" * 10)

        with pytest.raises(InvalidDataException):
            PodArchive.load(path)

    def test_rejects_entry_inside_header(self, make_raw_archive):
        start = 4 + 80 + 2 * 40
        entries = [PodEntry("", "A.TXT", "", 4, start), PodEntry("", "B.TXT", "", 4, start - 1)]
        path = make_raw_archive(entries, b"x" * 8)

        with pytest.raises(InvalidDataException):
            PodArchive.load(path)

    def test_one_bad_entry_rejects_whole_archive(self, make_raw_archive):
        start = 4 + 80 + 2 * 40
        entries = [PodEntry("", "GOOD.TXT", "", 4, start), PodEntry("", "BAD.TXT", "", 400, start + 4)]
        path = make_raw_archive(entries, b"x" * 8)

        with pytest.raises(InvalidDataException):
            PodArchive.load(path)

    def test_rejects_truncated_entry_table(self, tmp_path):
        path = tmp_path / "SHORT.POD"
        path.write_bytes(struct.pack("<i", 3) + b"\x00" * 80 + b"\x00" * 40)

        with pytest.raises(InvalidDataException):
            PodArchive.load(str(path))

    def test_rejects_truncated_description(self, tmp_path):
        path = tmp_path / "SHORT.POD"
        path.write_bytes(struct.pack("<i", 0) + b"desc")

        with pytest.raises(InvalidDataException):
            PodArchive.load(str(path))


class TestArchiveNames:
    """Listing and lookup by name."""

    def test_list_names_sorted_case_insensitive(self, make_archive):
        path = make_archive([("", "b.txt", "", b"1"), ("", "A.TXT", "", b"2"), ("", "a.txt", "", b"3")])

        assert PodArchive.load(path).list_names() == ["A.TXT", "a.txt", "b.txt"]

    def test_contains(self, make_archive):
        archive = PodArchive.load(make_archive([("ART", "X.RAW", "", b"1")]))

        assert archive.contains("x.raw")
        assert not archive.contains("Y.RAW")

    def test_find_entry(self, make_archive):
        archive = PodArchive.load(make_archive([("ART", "X.RAW", "", b"1")]))

        assert archive.find_entry("art", "X.raw").name == "X.RAW"
        assert archive.find_entry("", "X.RAW") is None


class TestArchiveExtract:
    """Random access to entry data."""

    def test_extract_is_case_insensitive(self, make_archive):
        archive = PodArchive.load(make_archive([("ART", "X.RAW", "", b"hello")]))

        assert archive.extract("art", "x.raw") == b"hello"

    def test_extract_missing_entry(self, make_archive):
        archive = PodArchive.load(make_archive([("ART", "X.RAW", "", b"hello")]))

        with pytest.raises(NotFoundException):
            archive.extract("ART", "Y.RAW")

        with pytest.raises(NotFoundException):
            archive.extract("OTHER", "X.RAW")

    def test_extract_after_archive_truncated(self, make_archive):
        path = make_archive([("", "A.TXT", "", b"a" * 10), ("", "B.TXT", "", b"b" * 10)])
        archive = PodArchive.load(path)

        with open(path, "r+b") as file_h:
            file_h.truncate(os.path.getsize(path) - 5)

        with pytest.raises(InvalidDataException):
            archive.extract("", "B.TXT")

        assert archive.extract("", "A.TXT") == b"a" * 10

    def test_extract_after_archive_removed(self, make_archive):
        path = make_archive([("", "A.TXT", "", b"a")])
        archive = PodArchive.load(path)
        os.remove(path)

        with pytest.raises(NotFoundException):
            archive.extract("", "A.TXT")

    def test_open_yields_bounded_view(self, make_archive):
        archive = PodArchive.load(make_archive([("", "A.TXT", "", b"0123456789"), ("", "B.TXT", "", b"zz")]))

        with archive.open("", "A.TXT") as file_h:
            assert file_h.read(4) == b"0123"
            file_h.seek(-2, os.SEEK_END)
            assert file_h.read() == b"89"
            assert file_h.read() == b""

    def test_dump_raw_file(self, make_archive, tmp_path):
        archive = PodArchive.load(make_archive([("ART", "X.RAW", "", b"data")]))
        out_path = tmp_path / "out.raw"

        archive.dump_raw_file(str(out_path), "ART", "X.RAW")

        assert out_path.read_bytes() == b"data"

    def test_concurrent_extraction(self, make_archive):
        files = [("", f"F{i}.BIN", "", bytes([i]) * 1000) for i in range(8)]
        archive = PodArchive.load(make_archive(files))
        results = {}

        def worker(i):
            results[i] = archive.extract("", f"F{i}.BIN")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(results[i] == bytes([i]) * 1000 for i in range(8))


class TestArchiveTypedFiles:
    """Typed getters built on top of extraction."""

    def test_get_images_and_palettes(self, make_archive, grey_palette_bytes):
        path = make_archive(
            [
                ("ART", "PAL.ACT", "", grey_palette_bytes),
                ("ART", "SMALL.RAW", "PAL.ACT", bytes(4096)),
                ("ART", "BIG.RAW", "PAL.ACT", bytes(65536)),
                ("", "NOTART.RAW", "", bytes(4096)),
            ]
        )
        archive = PodArchive.load(path)

        assert [image.name for image in archive.get_all_images()] == ["SMALL.RAW", "BIG.RAW"]

        images = archive.get_images("big.raw", "missing.raw", "notart.raw")
        assert [(image.width, image.height, image.palette_name) for image in images] == [(256, 256, "PAL.ACT")]

        palettes = archive.get_palettes("PAL.ACT", "SMALL.RAW")
        assert len(palettes) == 1
        assert palettes[0].colours[255] == 0xFFFFFF

    def test_get_images_rejects_odd_sizes(self, make_archive):
        archive = PodArchive.load(make_archive([("ART", "ODD.RAW", "", bytes(100))]))

        with pytest.raises(OutOfRangeException):
            archive.get_all_images()

    def test_get_end_screen(self, make_archive):
        data = b"A\x1f" * 2000
        archive = PodArchive.load(make_archive([("STARTUP", "END.BIN", "", data), ("", "END2.BIN", "", data)]))

        end_screen = archive.get_end_screen("end.bin")

        assert end_screen is not None
        assert end_screen.cells[0].character == "A"
        assert archive.get_end_screen("END2.BIN") is None

    def test_get_text_file(self, make_archive):
        archive = PodArchive.load(make_archive([("", "README.TXT", "", b"hello world")]))

        assert archive.get_text_file("", "readme.txt").text == "hello world"
        assert archive.get_text_file("", "nothing.txt") is None

    def test_open_video(self, make_archive, tvi_stream):
        stream = tvi_stream([bytes(600)])
        archive = PodArchive.load(make_archive([("", "INTRO.TVI", "", stream)]))

        reader = archive.open_video("", "intro.tvi")
        frames = list(reader)

        assert len(frames) == 1
        assert frames[0][0].frame_number == 0
        assert frames[0][1] is None
