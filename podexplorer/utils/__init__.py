from .file import SubFile
from .binary import ByteReader
