import os
import io
import errno

from typing import BinaryIO

from ..errors import InvalidDataException


class SubFile(io.BufferedIOBase, BinaryIO):  # pylint: disable=abstract-method
    """Read-only window of `size` bytes starting at `offset` inside an open file."""

    def __init__(self, file_h: BinaryIO, offset: int, size: int):
        self.file_h: BinaryIO = file_h
        self.offset: int = offset
        self.size: int = size
        self.position: int = 0

    def readable(self):
        return True

    def seekable(self):
        return True

    def tell(self):
        return self.position

    def seek(self, position: int, whence=os.SEEK_SET):
        if whence == os.SEEK_SET:
            next_position = min(self.size, position)
        elif whence == os.SEEK_CUR:
            next_position = min(self.size, self.position + position)
        elif whence == os.SEEK_END:
            next_position = min(self.size, self.size + position)
        else:
            raise OSError(errno.ENXIO, os.strerror(errno.ENXIO))

        if next_position < 0:
            raise OSError(errno.EINVAL, os.strerror(errno.EINVAL))

        self.position = next_position

        return self.position

    def read(self, size=-1):
        if size is None or (isinstance(size, int) and size < 0):
            size = self.size - self.position
        elif isinstance(size, int):
            size = min(size, self.size - self.position)
        else:
            raise TypeError(f"argument should be integer or None, not '{type(size)}'")

        self.file_h.seek(self.offset + self.position)
        data = self.file_h.read(size)

        # the window was validated against the archive, so a short read means the file shrank
        if len(data) != size:
            raise InvalidDataException(
                f"truncated read at offset {self.offset + self.position}: wanted {size}, got {len(data)}"
            )

        self.position += size

        return data

    def read_all(self) -> bytes:
        self.seek(0, os.SEEK_SET)
        return self.read()
