# ktx2_py/level_index.py

import struct
from collections import namedtuple

from .alignment import align_up
from .constants import (
    LEVEL_INDEX_ENTRY_SIZE,
    LEVEL_INDEX_ALIGNMENT,
    LEVEL_DATA_ALIGNMENT,
    SupercompressionScheme,
)
from .errors import CorruptIndex, OffsetOutOfRange, SizeMismatch, Truncated

_ENTRY_STRUCT = struct.Struct("<QQQ")

LevelIndexEntry = namedtuple(
    "LevelIndexEntry",
    ["byte_offset", "byte_length", "uncompressed_byte_length"],
)


# ---------------------------------------------------------------------------
# Offset helpers shared by the reader and the writer
# ---------------------------------------------------------------------------
def index_entry_count(level_count: int) -> int:
    # levelCount 0 means "one stored level, build the rest at load time"
    return max(1, level_count)


def level_index_offset(dfd_offset: int, dfd_length: int) -> int:
    return align_up(dfd_offset + dfd_length, LEVEL_INDEX_ALIGNMENT)


def level_data_offset(dfd_offset: int, dfd_length: int, level_count: int) -> int:
    """First byte where level payloads may start (8-aligned end of the index)."""
    index_end = (level_index_offset(dfd_offset, dfd_length)
                 + LEVEL_INDEX_ENTRY_SIZE * index_entry_count(level_count))
    return align_up(index_end, LEVEL_DATA_ALIGNMENT)


def level_dimensions(width: int, height: int, depth: int, level: int):
    """(width, height, depth) of mip 'level'; each axis clamps at 1."""
    return (
        max(1, width >> level),
        max(1, height >> level),
        max(1, depth >> level),
    )


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------
def encode_level_index(entries) -> bytes:
    """24 bytes per entry, level 0 first."""
    out = bytearray()
    for entry in entries:
        try:
            out += _ENTRY_STRUCT.pack(*entry)
        except struct.error as e:
            raise ValueError(f"level index entry {tuple(entry)} does not fit in u64: {e}")
    return bytes(out)


def decode_level_index(data, dfd_offset: int, dfd_length: int, level_count: int,
                       supercompression_scheme=SupercompressionScheme.NONE,
                       expected_sizes=None):
    """
    Decode the level index that follows the DFD.

    The index is located from the DFD's declared extent, never from a fixed
    offset. Each record is validated on its own, in this order:
      - CorruptIndex     : empty payload while the level declares data
      - SizeMismatch     : (scheme 0 only) uncompressedByteLength differs from
                           expected_sizes[level], or byteLength differs from
                           uncompressedByteLength
      - OffsetOutOfRange : payload runs past the end of the buffer
      - CorruptIndex     : payload overlaps the header, DFD or level index

    'expected_sizes', when given, holds the uncompressed byte size each level
    must have at its mip scale.
    """
    buffer_len = len(data)
    count = index_entry_count(level_count)
    uncompressed = supercompression_scheme == SupercompressionScheme.NONE

    index_offset = level_index_offset(dfd_offset, dfd_length)
    index_end = index_offset + LEVEL_INDEX_ENTRY_SIZE * count

    if index_end > buffer_len:
        raise Truncated(
            f"buffer too short for {count} level index entries",
            field="levelIndex", expected=f">= {index_end} bytes", actual=buffer_len,
        )

    first_data_offset = align_up(index_end, LEVEL_DATA_ALIGNMENT)

    entries = []
    for level in range(count):
        entry = LevelIndexEntry._make(
            _ENTRY_STRUCT.unpack_from(data, index_offset + level * LEVEL_INDEX_ENTRY_SIZE)
        )

        if entry.byte_length == 0 and entry.uncompressed_byte_length > 0:
            raise CorruptIndex(
                f"level {level} has an empty payload but declares uncompressed data",
                field=f"levels[{level}].byteLength",
                expected=f"> 0 (uncompressedByteLength={entry.uncompressed_byte_length})",
                actual=0,
            )

        if uncompressed and expected_sizes is not None:
            expected = expected_sizes[level]
            if entry.uncompressed_byte_length != expected:
                raise SizeMismatch(
                    f"level {level} size disagrees with its dimensions",
                    field=f"levels[{level}].uncompressedByteLength",
                    expected=expected,
                    actual=entry.uncompressed_byte_length,
                )

        if uncompressed and entry.byte_length != entry.uncompressed_byte_length:
            raise SizeMismatch(
                f"uncompressed level {level} reports different stored and uncompressed sizes",
                field=f"levels[{level}].byteLength",
                expected=entry.uncompressed_byte_length,
                actual=entry.byte_length,
            )

        if entry.byte_offset + entry.byte_length > buffer_len:
            raise OffsetOutOfRange(
                f"level {level} payload runs past the end of the buffer",
                field=f"levels[{level}].byteOffset+byteLength",
                expected=f"<= {buffer_len}",
                actual=entry.byte_offset + entry.byte_length,
            )

        if entry.byte_offset < first_data_offset:
            raise CorruptIndex(
                f"level {level} payload overlaps the header, DFD or level index",
                field=f"levels[{level}].byteOffset",
                expected=f">= {first_data_offset}",
                actual=entry.byte_offset,
            )

        entries.append(entry)

    return entries
