import os
import struct
import logging

from typing import BinaryIO, Iterator, Optional
from contextlib import contextmanager

from .entry import PodEntry, ENTRY_LENGTH
from .files import Image, Palette, EndScreen, TextFile, FileKind, kind_of
from ..errors import InvalidDataException, NotFoundException
from ..tvi.reader import TviReader
from ..utils.file import SubFile


logger = logging.getLogger(__name__)

DESCRIPTION_LENGTH = 80


def read_exactly(file_h: BinaryIO, size: int, what: str) -> bytes:
    data = file_h.read(size)

    if len(data) != size:
        raise InvalidDataException(f"truncated {what}: wanted {size} bytes, got {len(data)}")

    return data


class PodArchive:
    """A POD archive on disk.

    The header and entry table are parsed once by `load`. Entry data is read on
    demand; every read opens its own handle on the archive file and closes it
    afterwards, so extraction from several threads at once is safe.
    """

    def __init__(self, file_path: str, description: str, entries: list[PodEntry], archive_size: int):
        self.file_path = file_path
        self.description = description
        self.archive_size = archive_size

        self._entries: tuple[PodEntry, ...] = tuple(entries)

    @classmethod
    def load(cls, file_path: str) -> "PodArchive":
        if not file_path or not os.path.isfile(file_path):
            raise NotFoundException(f"archive file not found: {file_path}")

        archive_size = os.stat(file_path).st_size

        with open(file_path, "rb") as file_h:
            (file_count,) = struct.unpack("<i", read_exactly(file_h, 4, "archive header"))

            if file_count < 0:
                raise InvalidDataException(f"negative file count {file_count} in archive header")

            description = read_exactly(file_h, DESCRIPTION_LENGTH, "archive description")
            description = description.decode("ascii", errors="replace").rstrip("\x00")

            entries = [PodEntry.from_bytes(read_exactly(file_h, ENTRY_LENGTH, "entry table")) for _ in range(file_count)]

        if not cls.validate_entries(entries, file_count, archive_size):
            raise InvalidDataException("invalid file offset or size in archive")

        logger.debug("loaded %s: %d entries, %d bytes, %r", file_path, file_count, archive_size, description)

        return cls(file_path, description, entries, archive_size)

    @staticmethod
    def validate_entries(entries: list[PodEntry], file_count: int, archive_size: int) -> bool:
        min_offset = 4 + DESCRIPTION_LENGTH + file_count * ENTRY_LENGTH

        return all(e.size >= 0 and e.offset >= min_offset and e.offset + e.size <= archive_size for e in entries)

    def is_valid_entry(self, entry: PodEntry) -> bool:
        return entry.offset >= 0 and entry.size >= 0 and entry.offset + entry.size <= self.archive_size

    @property
    def entries(self) -> tuple[PodEntry, ...]:
        return self._entries

    @property
    def file_count(self) -> int:
        return len(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[PodEntry]:
        return iter(self._entries)

    def list_names(self) -> list[str]:
        return sorted((entry.name for entry in self._entries), key=lambda name: (name.lower(), name))

    def contains(self, file_name: str) -> bool:
        file_name = file_name.lower()
        return any(entry.name.lower() == file_name for entry in self._entries)

    def find_entry(self, directory: str, file_name: str) -> Optional[PodEntry]:
        return next((entry for entry in self._entries if entry.matches(directory, file_name)), None)

    def get_entry(self, directory: str, file_name: str) -> PodEntry:
        entry = self.find_entry(directory, file_name)

        if entry is None:
            raise NotFoundException(f"entry not found: {directory}\\{file_name}")

        return entry

    @contextmanager
    def open(self, directory: str, file_name: str) -> Iterator[SubFile]:
        entry = self.get_entry(directory, file_name)

        with self.open_entry(entry) as file_h:
            yield file_h

    @contextmanager
    def open_entry(self, entry: PodEntry) -> Iterator[SubFile]:
        # checked again here, the file may have changed since load
        if not self.is_valid_entry(entry):
            raise InvalidDataException(f"entry {entry} lies outside the archive")

        try:
            file_h = open(self.file_path, "rb")  # pylint: disable=consider-using-with
        except FileNotFoundError:
            raise NotFoundException(f"archive file not found: {self.file_path}")  # pylint: disable=raise-missing-from

        with file_h:
            current_size = file_h.seek(0, os.SEEK_END)

            if entry.offset + entry.size > current_size:
                raise InvalidDataException(f"entry {entry} lies outside the archive ({current_size} bytes on disk)")

            yield SubFile(file_h, entry.offset, entry.size)  # pylint: disable=abstract-class-instantiated

    def read_entry(self, entry: PodEntry) -> bytes:
        with self.open_entry(entry) as file_h:
            data = file_h.read_all()

        logger.debug("extracted %s: %d bytes at 0x%08X", entry, entry.size, entry.offset)

        return data

    def extract(self, directory: str, file_name: str) -> bytes:
        return self.read_entry(self.get_entry(directory, file_name))

    def dump_raw_file(self, out_path: str, directory: str, file_name: str):
        data = self.extract(directory, file_name)

        with open(out_path, "wb") as out_h:
            out_h.write(data)

    def _entries_of_kind(self, kind: FileKind, file_names: tuple[str, ...]) -> Iterator[PodEntry]:
        of_kind = [entry for entry in self._entries if kind_of(entry.directory, entry.name) is kind]

        for file_name in file_names:
            file_name = file_name.lower()
            entry = next((entry for entry in of_kind if entry.name.lower() == file_name), None)

            if entry is not None:
                yield entry

    def get_all_images(self) -> list[Image]:
        return [
            Image.from_bytes(entry.name, entry.extra, self.read_entry(entry))
            for entry in self._entries
            if kind_of(entry.directory, entry.name) is FileKind.IMAGE
        ]

    def get_images(self, *file_names: str) -> list[Image]:
        return [
            Image.from_bytes(entry.name, entry.extra, self.read_entry(entry))
            for entry in self._entries_of_kind(FileKind.IMAGE, file_names)
        ]

    def get_palettes(self, *file_names: str) -> list[Palette]:
        return [
            Palette.from_bytes(entry.name, self.read_entry(entry))
            for entry in self._entries_of_kind(FileKind.PALETTE, file_names)
        ]

    def get_palette(self, directory: str, file_name: str) -> Palette:
        return Palette.from_bytes(file_name, self.extract(directory, file_name))

    def get_end_screen(self, file_name: str) -> Optional[EndScreen]:
        entry = next(self._entries_of_kind(FileKind.END_SCREEN, (file_name,)), None)

        if entry is None:
            return None

        return EndScreen.from_bytes(entry.name, self.read_entry(entry))

    def get_text_file(self, directory: str, file_name: str) -> Optional[TextFile]:
        entry = self.find_entry(directory, file_name)

        if entry is None:
            return None

        return TextFile(entry.name, self.read_entry(entry), entry.directory)

    def open_video(self, directory: str, file_name: str) -> TviReader:
        entry = self.get_entry(directory, file_name)
        return TviReader(self.read_entry(entry), entry.path)

    def __repr__(self):
        return f"{self.__class__.__name__}[{os.path.basename(self.file_path)}, {len(self._entries)} entries]"
