"""
Test Configuration
==================

Pytest fixtures building synthetic POD archives and TVI streams.
"""

import struct

import pytest

from podexplorer.pod.entry import PodEntry, ENTRY_LENGTH


HEADER_LENGTH = 4 + 80


def pack_archive(description: str, entries: list, payload: bytes) -> bytes:
    header = struct.pack("<i", len(entries)) + description.encode("ascii").ljust(80, b"\x00")
    table = b"".join(entry.to_bytes() for entry in entries)
    return header + table + payload


@pytest.fixture
def make_archive(tmp_path):
    """Write an archive holding the given (directory, name, extra, data) files, return its path."""

    def _make(files, description="Test Archive", file_name="TEST.POD"):
        offset = HEADER_LENGTH + len(files) * ENTRY_LENGTH
        entries = []
        payload = b""

        for directory, name, extra, data in files:
            entries.append(PodEntry(directory, name, extra, len(data), offset))
            payload += data
            offset += len(data)

        path = tmp_path / file_name
        path.write_bytes(pack_archive(description, entries, payload))
        return str(path)

    return _make


@pytest.fixture
def make_raw_archive(tmp_path):
    """Write an archive with an explicit entry table, offsets are not checked."""

    def _make(entries, payload, description="Raw Archive"):
        path = tmp_path / "RAW.POD"
        path.write_bytes(pack_archive(description, entries, payload))
        return str(path)

    return _make


@pytest.fixture
def grey_palette_bytes():
    """768 bytes where colour i is (i, i, i)."""
    return bytes(value for i in range(256) for value in (i, i, i))


@pytest.fixture
def tvi_stream():
    """Pack chunks into a TVI stream: frame count, index table, length-prefixed chunks."""

    def _make(chunks, frame_count=None):
        if frame_count is None:
            frame_count = sum(1 for chunk in chunks if not chunk or chunk[0] != 0x03)

        data = struct.pack("<i", frame_count) + b"\x00" * (4 * frame_count)
        for chunk in chunks:
            data += struct.pack("<i", len(chunk)) + chunk
        return data

    return _make
