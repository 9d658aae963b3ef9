import numpy as np

from typing import ClassVar
from dataclasses import dataclass, field

from .kind import FileKind
from ...errors import InvalidDataException


PALETTE_SIZE = 256
PALETTE_BYTE_SIZE = PALETTE_SIZE * 3


@dataclass(frozen=True)
class Palette:
    kind: ClassVar[FileKind] = FileKind.PALETTE
    directory: ClassVar[str] = "ART"
    extension: ClassVar[str] = "ACT"

    name: str
    colours: tuple[int, ...]  # 0xRRGGBB
    rgb: np.ndarray = field(repr=False, compare=False)

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "Palette":
        if data is None or len(data) != PALETTE_BYTE_SIZE:
            raise InvalidDataException(f"palette must be exactly {PALETTE_BYTE_SIZE} bytes, got {len(data or b'')}")

        rgb = np.frombuffer(bytes(data), dtype=np.uint8).reshape(PALETTE_SIZE, 3).copy()
        rgb.flags.writeable = False

        colours = tuple((int(r) << 16) | (int(g) << 8) | int(b) for r, g, b in rgb)

        return cls(name, colours, rgb)

    def as_bytes(self) -> bytes:
        return self.rgb.tobytes()

    def colour_at(self, index: int) -> tuple[int, int, int]:
        colour = self.colours[index]
        return (colour >> 16) & 0xFF, (colour >> 8) & 0xFF, colour & 0xFF

    def to_rgba(self, indices: np.ndarray) -> np.ndarray:
        """Map an array of palette indices to an array of RGBA pixels (alpha 0xFF), one more axis of length 4."""
        indices = np.asarray(indices, dtype=np.uint8)

        rgba = np.empty(indices.shape + (4,), dtype=np.uint8)
        rgba[..., :3] = np.take(self.rgb, indices, axis=0)
        rgba[..., 3] = 0xFF

        return rgba

    def __str__(self):
        return ",".join(f"({r},{g},{b})" for r, g, b in map(self.colour_at, range(PALETTE_SIZE)))
