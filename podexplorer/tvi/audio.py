from dataclasses import dataclass, field

from ..errors import InvalidDataException


AUDIO_BLOCK = 0x03

SAMPLE_RATE_HZ = 11025
SAMPLE_WIDTH = 1
CHANNELS = 1


@dataclass(frozen=True)
class AudioFrame:
    """Unsigned 8-bit mono PCM played alongside the video frame of the same number."""

    frame_number: int
    duration_ms: int
    pcm: bytes = field(repr=False)


def is_audio_chunk(chunk: bytes) -> bool:
    return len(chunk) > 0 and chunk[0] == AUDIO_BLOCK


def parse_audio_frame(frame_number: int, chunk: bytes) -> AudioFrame:
    if not chunk:
        raise InvalidDataException(f"frame {frame_number}: empty audio chunk")

    pcm = bytes(chunk[1:])  # drop the chunk marker

    return AudioFrame(frame_number, len(pcm) * 1000 // SAMPLE_RATE_HZ, pcm)
