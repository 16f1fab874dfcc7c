# ktx2_py/writer.py
#
# Reference writer. encode() only produces single-level, single-face,
# non-array, uncompressed textures; assemble() is the general layout routine
# it is built on, and is also what test fixtures use to build mip chains and
# supercompressed containers.

import dataclasses
from typing import Union

from .alignment import align_up, padding_for
from .constants import (
    FIXED_HEADER_SIZE,
    LEVEL_INDEX_ALIGNMENT,
    LEVEL_DATA_ALIGNMENT,
    VkFormat,
    SupercompressionScheme,
)
from .dfd import KNOWN_LAYOUTS, build_dfd_for_format, build_minimal_dfd
from .errors import SizeMismatch
from .header import ContainerHeader, encode_header, encode_identifier
from .level_index import (
    LevelIndexEntry,
    encode_level_index,
    level_data_offset,
    level_index_offset,
)

U32_MAX = 0xFFFFFFFF

BytesLike = Union[bytes, bytearray, memoryview]


def assemble(header: ContainerHeader,
             dfd: bytes,
             level_payloads,
             uncompressed_lengths=None,
             key_value_data: bytes = b"") -> bytes:
    """
    Lay out a complete container.

    Order: identifier + header, DFD (at offset 92), pad to 4, level index,
    optional key/value data (4-aligned), pad to 8, level payloads in level
    order with each payload start 8-aligned.

    The header's dfd/kvd offsets, lengths and levelCount are filled in here;
    every other field is written as given. 'uncompressed_lengths' defaults to
    each payload's own length (i.e. no supercompression).
    """
    payloads = [bytes(p) for p in level_payloads]
    if not payloads:
        raise ValueError("assemble() needs at least one level payload")

    if uncompressed_lengths is None:
        uncompressed_lengths = [len(p) for p in payloads]
    if len(uncompressed_lengths) != len(payloads):
        raise ValueError(
            f"got {len(uncompressed_lengths)} uncompressed lengths for {len(payloads)} levels"
        )

    dfd_offset = FIXED_HEADER_SIZE
    dfd_length = len(dfd)
    level_count = len(payloads)

    index_offset = level_index_offset(dfd_offset, dfd_length)
    data_offset = level_data_offset(dfd_offset, dfd_length, level_count)

    kvd_offset = 0
    if key_value_data:
        kvd_offset = align_up(data_offset, LEVEL_INDEX_ALIGNMENT)
        data_offset = align_up(kvd_offset + len(key_value_data), LEVEL_DATA_ALIGNMENT)

    # Compute each level's byteOffset
    entries = []
    offset = data_offset
    for payload, uncompressed_length in zip(payloads, uncompressed_lengths):
        offset = align_up(offset, LEVEL_DATA_ALIGNMENT)
        entries.append(LevelIndexEntry(offset, len(payload), uncompressed_length))
        offset += len(payload)

    header = dataclasses.replace(
        header,
        level_count=level_count,
        dfd_byte_offset=dfd_offset,
        dfd_byte_length=dfd_length,
        kvd_byte_offset=kvd_offset,
        kvd_byte_length=len(key_value_data),
    )

    buffer = bytearray()
    buffer += encode_identifier()
    buffer += encode_header(header)
    buffer += dfd

    buffer += bytes(padding_for(len(buffer), LEVEL_INDEX_ALIGNMENT))
    if len(buffer) != index_offset:
        raise RuntimeError("Internal error: level index misplaced")
    buffer += encode_level_index(entries)

    if key_value_data:
        buffer += bytes(kvd_offset - len(buffer))
        buffer += key_value_data

    for entry, payload in zip(entries, payloads):
        buffer += bytes(entry.byte_offset - len(buffer))
        buffer += payload

    return bytes(buffer)


def encode(width: int,
           height: int,
           bytes_per_texel: int,
           level0_payload: BytesLike,
           vk_format: int = VkFormat.UNDEFINED) -> bytes:
    """
    Serialize one uncompressed level into a KTX2 container.

    Parameters:
        width, height    : texel dimensions (1 .. 2^32-1)
        bytes_per_texel  : 1 .. 255 (4 for RGBA8)
        level0_payload   : exactly width * height * bytes_per_texel bytes
        vk_format        : header format tag; UNDEFINED writes a raw container

    Raises:
        SizeMismatch : payload size disagrees with the dimensions
        ValueError   : dimensions / texel size out of range, or vk_format
                       has a known texel size different from bytes_per_texel
    """
    if not 1 <= width <= U32_MAX:
        raise ValueError(f"width {width} out of range (1-{U32_MAX})")
    if not 1 <= height <= U32_MAX:
        raise ValueError(f"height {height} out of range (1-{U32_MAX})")
    if not 1 <= bytes_per_texel <= 255:
        raise ValueError(f"bytes_per_texel {bytes_per_texel} out of range (1-255)")

    payload = bytes(level0_payload)

    expected_size = width * height * bytes_per_texel
    if len(payload) != expected_size:
        raise SizeMismatch(
            f"level 0 payload does not match {width}x{height}x{bytes_per_texel}",
            field="level0_payload", expected=expected_size, actual=len(payload),
        )

    if vk_format != VkFormat.UNDEFINED and vk_format in KNOWN_LAYOUTS:
        format_bpt = KNOWN_LAYOUTS[vk_format][0]
        if format_bpt != bytes_per_texel:
            raise ValueError(
                f"vkFormat {vk_format} has {format_bpt} bytes per texel, not {bytes_per_texel}"
            )
        dfd = build_dfd_for_format(vk_format)
    else:
        dfd = build_minimal_dfd(bytes_per_texel)

    header = ContainerHeader(
        vk_format=vk_format,
        type_size=1,
        pixel_width=width,
        pixel_height=height,
        pixel_depth=0,
        layer_count=1,
        face_count=1,
        level_count=1,
        supercompression_scheme=SupercompressionScheme.NONE,
    )

    return assemble(header, dfd, [payload])
