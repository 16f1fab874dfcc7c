"""
ktx2_py
=======
Stateless reader/writer for the KTX2 GPU texture container: header,
Data Format Descriptor, level index, alignment and level payload slicing.

Main entry points:
    - decode      : ktx2_py.reader.decode   (bytes -> TextureDescriptor)
    - encode      : ktx2_py.writer.encode   (width, height, bpt, payload -> bytes)
    - image       : ktx2_py.image           (Pillow / NumPy helpers)
    - constants   : ktx2_py.constants
    - errors      : ktx2_py.errors
"""

from .alignment import align_up
from .reader import decode, TextureDescriptor, Level, SupercompressedLevel
from .writer import encode, assemble
from .header import ContainerHeader, encode_header, decode_header
from .dfd import DataFormatDescriptor, build_minimal_dfd, parse_dfd
from .level_index import LevelIndexEntry, encode_level_index, decode_level_index
from .constants import (
    KTX2_IDENTIFIER,
    VkFormat,
    SupercompressionScheme,
)
from .errors import (
    FormatError,
    BadMagic,
    Truncated,
    OffsetOutOfRange,
    SizeMismatch,
    CorruptIndex,
    UnsupportedScheme,
    BadHeader,
    BadDescriptor,
    InvalidAlignment,
)

# What the package publicly exposes
__all__ = [
    "decode",
    "encode",
    "assemble",
    "align_up",
    "TextureDescriptor",
    "Level",
    "SupercompressedLevel",
    "ContainerHeader",
    "encode_header",
    "decode_header",
    "DataFormatDescriptor",
    "build_minimal_dfd",
    "parse_dfd",
    "LevelIndexEntry",
    "encode_level_index",
    "decode_level_index",
    "KTX2_IDENTIFIER",
    "VkFormat",
    "SupercompressionScheme",
    "FormatError",
    "BadMagic",
    "Truncated",
    "OffsetOutOfRange",
    "SizeMismatch",
    "CorruptIndex",
    "UnsupportedScheme",
    "BadHeader",
    "BadDescriptor",
    "InvalidAlignment",
]
