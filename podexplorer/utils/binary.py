import struct

from typing import Union

from ..errors import InvalidDataException


class ByteReader:
    """Forward-only little-endian cursor over an in-memory buffer.

    Every read is strict: asking for more bytes than are left raises
    InvalidDataException instead of returning a short result.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], position: int = 0):
        self.data = memoryview(data)
        self.position = position

    def __len__(self):
        return len(self.data)

    def remaining(self) -> int:
        return len(self.data) - self.position

    def at_end(self) -> bool:
        return self.position >= len(self.data)

    def read_byte(self) -> int:
        if self.position >= len(self.data):
            raise InvalidDataException(f"unexpected end of data at offset {self.position}")

        value = self.data[self.position]
        self.position += 1
        return value

    def read_bytes(self, size: int) -> bytes:
        if size < 0:
            raise InvalidDataException(f"negative read size {size} at offset {self.position}")

        if size > self.remaining():
            raise InvalidDataException(
                f"unexpected end of data at offset {self.position}: wanted {size}, {self.remaining()} left"
            )

        chunk = self.data[self.position : self.position + size].tobytes()
        self.position += size
        return chunk

    def read_int32(self) -> int:
        return struct.unpack("<i", self.read_bytes(4))[0]

    def skip(self, size: int):
        if size < 0 or size > self.remaining():
            raise InvalidDataException(f"cannot skip {size} bytes at offset {self.position}")

        self.position += size
