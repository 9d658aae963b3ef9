from typing import Union

from .kind import FileKind, kind_of
from .text import TextFile
from .image import Image
from .palette import Palette
from .endscreen import EndScreen
from ..entry import PodEntry
from ...errors import InvalidDataException


PodFile = Union[Image, Palette, EndScreen, TextFile]


def parse_file(entry: PodEntry, data: bytes) -> PodFile:
    kind = kind_of(entry.directory, entry.name)

    if kind is FileKind.IMAGE:
        return Image.from_bytes(entry.name, entry.extra, data)
    if kind is FileKind.PALETTE:
        return Palette.from_bytes(entry.name, data)
    if kind is FileKind.END_SCREEN:
        return EndScreen.from_bytes(entry.name, data)
    if kind is FileKind.VIDEO:
        raise InvalidDataException(f"{entry} is a video stream, open it with open_video")

    return TextFile(entry.name, data, entry.directory)
