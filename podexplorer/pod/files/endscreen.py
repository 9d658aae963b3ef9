import sys

from typing import ClassVar, NamedTuple
from dataclasses import dataclass

from .kind import FileKind
from ...errors import InvalidDataException


END_SCREEN_BYTE_LENGTH = 4000
END_SCREEN_COLUMNS = 80

# code page 437 draws glyphs where latin-1 has control codes
cp437_low = "\x00☺☻♥♦♣♠•◘○◙♂♀♪♫☼►◄↕‼¶§▬↨↑↓→←∟↔▲▼"
cp437_table = cp437_low + bytes(range(0x20, 0x7F)).decode("ascii") + "⌂" + bytes(range(0x80, 0x100)).decode("cp437")
cp437_codes = {character: code for code, character in enumerate(cp437_table)}

# text mode colour index -> ansi colour offset
ansi_colours = (0, 4, 2, 6, 1, 5, 3, 7)


class Cell(NamedTuple):
    character: str
    foreground: int
    background: int


def ansi_code(colour: int, background: bool) -> int:
    base = 40 if background else 30
    if colour & 0x08:
        base += 60
    return base + ansi_colours[colour & 0x07]


@dataclass(frozen=True)
class EndScreen:
    """Text mode screen shown on exit: 80x25 cells of (character, attribute)."""

    kind: ClassVar[FileKind] = FileKind.END_SCREEN
    directory: ClassVar[str] = "STARTUP"
    extension: ClassVar[str] = "BIN"

    name: str
    cells: tuple[Cell, ...]

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "EndScreen":
        if len(data) != END_SCREEN_BYTE_LENGTH:
            raise InvalidDataException(f"end screen must be {END_SCREEN_BYTE_LENGTH} bytes, got {len(data)}")

        cells = tuple(
            Cell(cp437_table[data[i]], data[i + 1] & 0x0F, (data[i + 1] >> 4) & 0x0F)
            for i in range(0, END_SCREEN_BYTE_LENGTH, 2)
        )

        return cls(name, cells)

    def as_bytes(self) -> bytes:
        out = bytearray()
        for cell in self.cells:
            out.append(cp437_codes[cell.character])
            out.append((cell.background << 4) | cell.foreground)
        return bytes(out)

    def lines(self) -> list[str]:
        text = "".join(cell.character for cell in self.cells)
        return [text[i : i + END_SCREEN_COLUMNS] for i in range(0, len(text), END_SCREEN_COLUMNS)]

    def print_screen(self, file=None):
        if file is None:
            file = sys.stdout

        for row in range(0, len(self.cells), END_SCREEN_COLUMNS):
            for cell in self.cells[row : row + END_SCREEN_COLUMNS]:
                fg, bg = ansi_code(cell.foreground, False), ansi_code(cell.background, True)
                character = " " if cell.character == "\x00" else cell.character
                file.write(f"\x1b[{fg};{bg}m{character}")
            file.write("\x1b[0m\n")
        file.flush()
