# ktx2_py/header.py
#
# Fixed-layout transcoder for the 12-byte identifier + 80-byte header.
# No semantic validation happens here; the reader decides whether the
# decoded values make sense.

import struct
from dataclasses import dataclass

from .constants import (
    KTX2_IDENTIFIER,
    IDENTIFIER_SIZE,
    HEADER_SIZE,
    FIXED_HEADER_SIZE,
)
from .errors import BadMagic, Truncated

# ---------------------------------------------------------------------------
# Header layout (all little-endian u32), offsets relative to file start:
#   12  vkFormat
#   16  typeSize
#   20  pixelWidth
#   24  pixelHeight
#   28  pixelDepth
#   32  layerCount
#   36  faceCount
#   40  levelCount
#   44  supercompressionScheme
#   48  dfdByteOffset
#   52  dfdByteLength
#   56  reserved[6]
#   80  kvdByteOffset
#   84  kvdByteLength
#   88  reserved
# ---------------------------------------------------------------------------
_HEADER_STRUCT = struct.Struct("<9I2I6I2II")

NUM_RESERVED = 7


@dataclass(frozen=True)
class ContainerHeader:
    vk_format: int = 0
    type_size: int = 1
    pixel_width: int = 0
    pixel_height: int = 0
    pixel_depth: int = 0
    layer_count: int = 0
    face_count: int = 1
    level_count: int = 1
    supercompression_scheme: int = 0
    dfd_byte_offset: int = 0
    dfd_byte_length: int = 0
    kvd_byte_offset: int = 0
    kvd_byte_length: int = 0
    reserved: tuple = (0,) * NUM_RESERVED
    identifier: bytes = KTX2_IDENTIFIER


def encode_identifier() -> bytes:
    return KTX2_IDENTIFIER


def encode_header(header: ContainerHeader) -> bytes:
    """
    Pack the 80 header bytes that follow the identifier.

    The identifier itself is written separately (see encode_identifier) and
    must immediately precede the returned bytes.
    """
    if len(header.reserved) != NUM_RESERVED:
        raise ValueError(
            f"header.reserved must contain {NUM_RESERVED} values, got {len(header.reserved)}"
        )

    dfd_reserved = header.reserved[:6]
    tail_reserved = header.reserved[6]

    try:
        raw = _HEADER_STRUCT.pack(
            header.vk_format,
            header.type_size,
            header.pixel_width,
            header.pixel_height,
            header.pixel_depth,
            header.layer_count,
            header.face_count,
            header.level_count,
            header.supercompression_scheme,
            header.dfd_byte_offset,
            header.dfd_byte_length,
            *dfd_reserved,
            header.kvd_byte_offset,
            header.kvd_byte_length,
            tail_reserved,
        )
    except struct.error as e:
        raise ValueError(f"header field does not fit in a u32: {e}")

    if len(raw) != HEADER_SIZE:
        raise RuntimeError(f"Internal error: header must be {HEADER_SIZE} bytes")

    return raw


def decode_header(data) -> ContainerHeader:
    """
    Parse identifier + header from the start of 'data'.

    Raises:
        Truncated : fewer than 92 bytes available
        BadMagic  : identifier mismatch
    """
    view = memoryview(data)

    if len(view) < FIXED_HEADER_SIZE:
        raise Truncated(
            "buffer too short for KTX2 identifier and header",
            field="header", expected=f">= {FIXED_HEADER_SIZE} bytes", actual=len(view),
        )

    identifier = bytes(view[:IDENTIFIER_SIZE])
    if identifier != KTX2_IDENTIFIER:
        raise BadMagic(
            "not a KTX2 file",
            field="identifier", expected=KTX2_IDENTIFIER.hex(" "), actual=identifier.hex(" "),
        )

    fields = _HEADER_STRUCT.unpack_from(view, IDENTIFIER_SIZE)

    return ContainerHeader(
        vk_format=fields[0],
        type_size=fields[1],
        pixel_width=fields[2],
        pixel_height=fields[3],
        pixel_depth=fields[4],
        layer_count=fields[5],
        face_count=fields[6],
        level_count=fields[7],
        supercompression_scheme=fields[8],
        dfd_byte_offset=fields[9],
        dfd_byte_length=fields[10],
        reserved=tuple(fields[11:17]) + (fields[19],),
        kvd_byte_offset=fields[17],
        kvd_byte_length=fields[18],
        identifier=identifier,
    )
