from typing import ClassVar
from dataclasses import dataclass

from .kind import FileKind


@dataclass(frozen=True)
class TextFile:
    kind: ClassVar[FileKind] = FileKind.TEXT
    extension: ClassVar[str] = "TXT"

    name: str
    data: bytes
    directory: str = ""

    @property
    def text(self) -> str:
        return self.data.decode("ascii", errors="replace")

    def as_bytes(self) -> bytes:
        return self.data
