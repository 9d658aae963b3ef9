import sys
from abc import ABC
from dataclasses import dataclass


@dataclass
class AbstractProgressError(ABC):
    error_msg: str
    explanation: str
    suggestion: str

    def __post_init__(self):
        raise RuntimeError("Cannot instantiate ProgressError")

    @classmethod
    def print(cls, file=sys.stdout, detail: "str | None" = None):
        file.flush()
        file.write("\n")
        file.write("  " + cls.error_msg.replace("Error", "\x1b[1;31mError\x1b[0m") + ".\n")
        file.write("  " + f"\x1b[4m{cls.explanation}\x1b[0m" + ".\n")
        if detail:
            file.write("  " + f"({detail})" + "\n")
        file.write("  " + cls.suggestion + ".\n")
        file.write("\n")
        file.flush()


@dataclass
class ProgressErrorArchiveLoad(AbstractProgressError):
    error_msg = "Error while loading POD archive"
    explanation = "The archive cannot be read or its entry table is corrupted"
    suggestion = "Please check that the path points to a valid POD file"


@dataclass
class ProgressErrorEntryNotFound(AbstractProgressError):
    error_msg = "Error while looking up archive entry"
    explanation = "No entry with the given directory and name exists in the archive"
    suggestion = "Use the list command to see the available entries"


@dataclass
class ProgressErrorExtract(AbstractProgressError):
    error_msg = "Error while extracting archive entry"
    explanation = "The entry data lies outside the archive or cannot be written to disk"
    suggestion = "Check the archive integrity and the destination folder and try again"


@dataclass
class ProgressErrorVideoDecode(AbstractProgressError):
    error_msg = "Error while decoding TVI video"
    explanation = "The video stream is truncated or the palette is invalid"
    suggestion = "Check that the entry is a TVI video and the palette is a 768 byte ACT file"
