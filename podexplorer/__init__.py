from .errors import PodException, NotFoundException, InvalidDataException, OutOfRangeException
from .pod import PodArchive, PodEntry, FileKind, Image, Palette, EndScreen, TextFile, parse_file
from .tvi import TviReader, VideoFrame, AudioFrame, parse_video_frame, parse_audio_frame
