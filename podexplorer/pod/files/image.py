import numpy as np

from typing import ClassVar
from dataclasses import dataclass, field

from .kind import FileKind
from .palette import Palette
from ...errors import OutOfRangeException


# byte length -> (width, height)
dimension_map = {4096: (64, 64), 65536: (256, 256)}


@dataclass(frozen=True)
class Image:
    """Raw 8-bit palette-index bitmap from the ART directory.

    The dimensions are not stored in the file; they are implied by the byte
    length. The entry's extra string names the palette the image is drawn with.
    """

    kind: ClassVar[FileKind] = FileKind.IMAGE
    directory: ClassVar[str] = "ART"
    extension: ClassVar[str] = "RAW"

    name: str
    palette_name: str
    width: int
    height: int
    pixels: np.ndarray = field(repr=False, compare=False)

    @classmethod
    def from_bytes(cls, name: str, palette_name: str, data: bytes) -> "Image":
        if not data:
            raise OutOfRangeException("image data cannot be empty")

        if len(data) not in dimension_map:
            raise OutOfRangeException(f"unsupported image byte length {len(data)}")

        width, height = dimension_map[len(data)]

        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width).copy()
        pixels.flags.writeable = False

        return cls(name, palette_name, width, height, pixels)

    def as_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def pixel_at(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRangeException(
                f"pixel coordinates ({x}, {y}) are out of bounds for image size {self.width}x{self.height}"
            )

        return int(self.pixels[y, x])

    def to_rgba(self, palette: Palette) -> bytes:
        return palette.to_rgba(self.pixels).tobytes()

    def __str__(self):
        return ",".join(str(p) for p in self.pixels.ravel())
