import logging
import numpy as np

from typing import TYPE_CHECKING, Union
from dataclasses import dataclass, field

from ..errors import OutOfRangeException
from ..utils.binary import ByteReader

if TYPE_CHECKING:
    from ..pod.files.palette import Palette


logger = logging.getLogger(__name__)

WIDTH = 320
HEIGHT = 120

BLOCK_SIDE = 8

EMPTY_BLOCK = 0x00
RLE_BLOCK = 0x02
COMPRESSED_BLOCK = 0x04

RLE_RUN = 0xFF

COLOUR_TABLE_LENGTH = 8
COMPRESSED_BLOCK_SIZE = 32

EMPTY_FRAME_NUMBER = -1


@dataclass(frozen=True)
class VideoFrame:
    frame_number: int
    pixels: np.ndarray = field(repr=False, compare=False)  # (HEIGHT, WIDTH) palette indices, read-only

    @classmethod
    def empty(cls) -> "VideoFrame":
        pixels = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
        pixels.flags.writeable = False
        return cls(EMPTY_FRAME_NUMBER, pixels)

    @property
    def width(self) -> int:
        return WIDTH

    @property
    def height(self) -> int:
        return HEIGHT

    def pixel_at(self, x: int, y: int) -> int:
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise OutOfRangeException(
                f"pixel coordinates ({x}, {y}) are out of bounds for frame size {WIDTH}x{HEIGHT}"
            )

        return int(self.pixels[y, x])

    def get_pixel_bytes(self, palette: "Palette") -> bytes:
        """RGBA bytes of the frame, row-major, alpha always 0xFF."""
        return palette.to_rgba(self.pixels).tobytes()

    def get_rgb_bytes(self, palette: "Palette") -> bytes:
        return np.take(palette.rgb, self.pixels, axis=0).tobytes()


def parse_rle_block(frame_data: np.ndarray, reader: ByteReader, x: int, y: int):
    """Fill one 8x8 block from a run-length coded byte stream.

    A byte of 0xFF is followed by (count, colour): the colour is written to the
    current pixel and repeated for the next count - 1 pixels without reading
    further input. Any other byte is a literal colour index. A run that would
    cross the end of the block is cut there.
    """
    block = np.empty(BLOCK_SIDE * BLOCK_SIDE, dtype=np.uint8)

    colour = 0
    remaining = 0

    for i in range(BLOCK_SIDE * BLOCK_SIDE):
        if remaining > 0:
            remaining -= 1
        else:
            sub_type = reader.read_byte()

            if sub_type == RLE_RUN:
                # count is an unsigned byte, a count of 0 wraps to 255 repeats
                remaining = (reader.read_byte() - 1) & 0xFF
                colour = reader.read_byte()
            else:
                colour = sub_type

        block[i] = colour

    frame_data[y : y + BLOCK_SIDE, x : x + BLOCK_SIDE] = block.reshape(BLOCK_SIDE, BLOCK_SIDE)


def parse_compressed_block(frame_data: np.ndarray, compressed_block: bytes, x: int, y: int):
    """Fill one 8x8 block from a 32-byte colour table + bit plane block.

    Bytes 0-7 are the local colour table. Each of the 8 rows is then three
    bytes (lowest, middle, highest bit plane), most significant bit for the
    leftmost pixel, forming a 3-bit index into the table.
    """
    block = np.frombuffer(compressed_block, dtype=np.uint8)

    colour_table = block[:COLOUR_TABLE_LENGTH]
    planes = np.unpackbits(block[COLOUR_TABLE_LENGTH:].reshape(BLOCK_SIDE, 3, 1), axis=2)

    indices = planes[:, 0, :] | (planes[:, 1, :] << 1) | (planes[:, 2, :] << 2)

    frame_data[y : y + BLOCK_SIDE, x : x + BLOCK_SIDE] = colour_table[indices]


def copy_block(source: np.ndarray, destination: np.ndarray, x: int, y: int):
    destination[y : y + BLOCK_SIDE, x : x + BLOCK_SIDE] = source[y : y + BLOCK_SIDE, x : x + BLOCK_SIDE]


def parse_video_frame(
    frame_number: int, data: Union[bytes, bytearray, memoryview], previous_frame: "VideoFrame | None" = None
) -> VideoFrame:
    """Decode one 320x120 frame from its block stream.

    Blocks are visited in raster order, each introduced by a marker byte.
    `previous_frame` is only read, never modified; without one, copy blocks
    come from a black frame. Unknown markers leave their block black. Running
    out of data raises InvalidDataException for the whole frame.
    """
    if previous_frame is None:
        previous_frame = VideoFrame.empty()

    frame_data = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
    reader = ByteReader(data)

    unknown_markers = 0

    for y in range(0, HEIGHT, BLOCK_SIDE):
        for x in range(0, WIDTH, BLOCK_SIDE):
            block_type = reader.read_byte()

            if block_type == EMPTY_BLOCK:
                copy_block(previous_frame.pixels, frame_data, x, y)
            elif block_type == RLE_BLOCK:
                parse_rle_block(frame_data, reader, x, y)
            elif block_type == COMPRESSED_BLOCK:
                parse_compressed_block(frame_data, reader.read_bytes(COMPRESSED_BLOCK_SIZE), x, y)
            else:
                unknown_markers += 1

    if unknown_markers:
        logger.warning("frame %d: skipped %d blocks with unknown markers", frame_number, unknown_markers)

    frame_data.flags.writeable = False

    return VideoFrame(frame_number, frame_data)
