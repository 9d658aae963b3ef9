from enum import Enum


class FileKind(Enum):
    IMAGE = "image"
    MODEL = "model"
    MUSIC = "music"
    PALETTE = "palette"
    SOUND_EFFECT = "sound_effect"
    TEXT = "text"
    END_SCREEN = "end_screen"
    VIDEO = "video"
    UNKNOWN = "unknown"


# (directory, extension) -> kind, directory "" matches any directory
kind_map = {
    ("ART", "RAW"): FileKind.IMAGE,
    ("ART", "ACT"): FileKind.PALETTE,
    ("STARTUP", "BIN"): FileKind.END_SCREEN,
    ("", "TVI"): FileKind.VIDEO,
    ("", "TXT"): FileKind.TEXT,
}


def kind_of(directory: str, name: str) -> FileKind:
    extension = name.rsplit(".", 1)[1].upper() if "." in name else ""
    directory = directory.upper()

    return kind_map.get((directory, extension), kind_map.get(("", extension), FileKind.UNKNOWN))
