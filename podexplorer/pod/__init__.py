from .entry import PodEntry, ENTRY_LENGTH
from .files import FileKind, Image, Palette, EndScreen, TextFile, PodFile, parse_file
from .archive import PodArchive
