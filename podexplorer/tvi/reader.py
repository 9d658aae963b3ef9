import logging

from typing import Iterator, Optional, Union

from .audio import AudioFrame, is_audio_chunk, parse_audio_frame
from .video import VideoFrame, parse_video_frame
from ..errors import InvalidDataException, NotFoundException
from ..utils.binary import ByteReader


logger = logging.getLogger(__name__)


class TviReader:
    """Decode session over the bytes of one TVI stream.

    The stream starts with a frame count and as many unused 32-bit values,
    then a sequence of length-prefixed chunks. An audio chunk (marker 0x03) is
    always followed by the video chunk of the same frame. The session keeps the
    last decoded frame as reference for the next one, so a reader must not be
    shared between threads; open one reader per consumer instead.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], name: str = "<memory>"):
        self.name = name
        self.reader = ByteReader(data)

        try:
            self.frame_count = self.reader.read_int32()
            if self.frame_count < 0:
                raise InvalidDataException(f"negative frame count {self.frame_count}")
            self.reader.skip(4 * self.frame_count)
        except InvalidDataException as exc:
            raise InvalidDataException(f"{name}: invalid tvi header: {exc}")  # pylint: disable=raise-missing-from

        self.current_frame: Optional[VideoFrame] = None
        self.current_frame_number = 0

        logger.debug("opened tvi stream %s: %d frames, %d bytes", name, self.frame_count, len(self.reader))

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview], name: str = "<memory>") -> "TviReader":
        return cls(data, name)

    @classmethod
    def from_file(cls, file_path: str) -> "TviReader":
        try:
            with open(file_path, "rb") as file_h:
                data = file_h.read()
        except FileNotFoundError:
            raise NotFoundException(f"tvi file not found: {file_path}")  # pylint: disable=raise-missing-from

        return cls(data, file_path)

    def has_next_frame(self) -> bool:
        return not self.reader.at_end()

    def read_chunk(self) -> bytes:
        chunk_length = self.reader.read_int32()
        return self.reader.read_bytes(chunk_length)

    def next_frame(self) -> tuple[VideoFrame, Optional[AudioFrame]]:
        if not self.has_next_frame():
            return VideoFrame.empty(), None

        audio_frame = None

        chunk = self.read_chunk()

        if is_audio_chunk(chunk):
            audio_frame = parse_audio_frame(self.current_frame_number, chunk)
            chunk = self.read_chunk()

        video_frame = parse_video_frame(self.current_frame_number, chunk, self.current_frame)

        self.current_frame_number += 1
        self.current_frame = video_frame

        return video_frame, audio_frame

    def __iter__(self) -> Iterator[tuple[VideoFrame, Optional[AudioFrame]]]:
        while self.has_next_frame():
            yield self.next_frame()

        logger.debug("tvi stream %s: decoded %d frames", self.name, self.current_frame_number)

    def __len__(self):
        return self.frame_count

    def __repr__(self):
        return f"{self.__class__.__name__}[{self.name}, frame={self.current_frame_number}/{self.frame_count}]"
