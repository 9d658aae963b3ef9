import struct

from dataclasses import dataclass

from ..errors import InvalidDataException


NAME_FIELD_LENGTH = 32
ENTRY_LENGTH = NAME_FIELD_LENGTH + 4 + 4

DIRECTORY_DELIMITER = "\\"
NUL = "\x00"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class PodEntry:
    """One 40-byte record of the archive table.

    The 32-byte name field packs `[directory\\]name[\\0extra]`, NUL padded,
    followed by the little-endian size and absolute offset of the data.
    """

    directory: str
    name: str
    extra: str = ""
    size: int = 0
    offset: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return self.directory.lower(), self.name.lower()

    @property
    def path(self) -> str:
        return f"{self.directory}{DIRECTORY_DELIMITER}{self.name}" if self.directory else self.name

    @property
    def extension(self) -> str:
        return self.name.rsplit(".", 1)[1].upper() if "." in self.name else ""

    def matches(self, directory: str, name: str) -> bool:
        return self.key == (directory.lower(), name.lower())

    def name_field(self) -> bytes:
        if any(NUL in part for part in (self.directory, self.name, self.extra)):
            raise InvalidDataException(f"entry name contains a NUL byte: {self.path!r}")

        # without a directory the first delimiter anywhere in the field would be read as one
        if DIRECTORY_DELIMITER in self.directory + self.name or (
            not self.directory and DIRECTORY_DELIMITER in self.extra
        ):
            raise InvalidDataException(f"entry name contains a stray directory delimiter: {self.path!r}")

        packed = ""

        if self.directory:
            packed += self.directory + DIRECTORY_DELIMITER

        packed += self.name

        if self.extra:
            packed += NUL + self.extra

        try:
            name_bin = packed.encode("ascii")
        except UnicodeEncodeError:
            raise InvalidDataException(f"entry name is not ascii: {packed!r}")  # pylint: disable=raise-missing-from

        if len(name_bin) > NAME_FIELD_LENGTH:
            raise InvalidDataException(f"name field exceeds {NAME_FIELD_LENGTH} bytes: {packed!r}")

        return name_bin.ljust(NAME_FIELD_LENGTH, b"\x00")

    def to_bytes(self) -> bytes:
        for field_name, value in (("size", self.size), ("offset", self.offset)):
            if not INT32_MIN <= value <= INT32_MAX:
                raise InvalidDataException(f"entry {field_name} {value} does not fit in 32 bits: {self.path!r}")

        return self.name_field() + struct.pack("<ii", self.size, self.offset)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PodEntry":
        if len(data) != ENTRY_LENGTH:
            raise InvalidDataException(f"entry record must be {ENTRY_LENGTH} bytes, got {len(data)}")

        name = data[:NAME_FIELD_LENGTH].decode("ascii", errors="replace").rstrip(NUL)

        directory = ""
        if DIRECTORY_DELIMITER in name:
            directory, name = name.split(DIRECTORY_DELIMITER, 1)

        extra = ""
        if NUL in name:
            name, extra = name.split(NUL, 1)

        size, offset = struct.unpack("<ii", data[NAME_FIELD_LENGTH:ENTRY_LENGTH])

        return cls(directory, name, extra, size, offset)

    def __str__(self):
        return self.path
