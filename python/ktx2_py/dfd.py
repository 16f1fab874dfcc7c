# ktx2_py/dfd.py
#
# Minimal Data Format Descriptor (DFD) support: a single basic-format block
# describing a single-plane, non-block-compressed texel layout.

import struct
from dataclasses import dataclass

from .constants import (
    FIXED_HEADER_SIZE,
    MIN_DFD_BLOCK_SIZE,
    VkFormat,
    KhrDfVendor,
    KhrDfDescriptorType,
    KhrDfVersion,
    KhrDfTransfer,
    KhrDfPrimaries,
    KhrDfFlags,
)
from .errors import BadDescriptor, OffsetOutOfRange, Truncated

# ---------------------------------------------------------------------------
# Basic descriptor block layout (28 bytes, little-endian):
#    0  vendorId              u32
#    4  descriptorType        u32
#    8  versionNumber         u32
#   12  descriptorBlockSize   u32
#   16  transferFunction      u8
#   17  colorPrimaries        u8
#   18  flags                 u16
#   20  texelBlockDimension   u8[4]
#   24  bytesPlane            u8[4]
# ---------------------------------------------------------------------------
_DFD_STRUCT = struct.Struct("<4IBBH4s4s")


# Known single-plane layouts: vkFormat -> (bytes per texel, transfer function)
KNOWN_LAYOUTS = {
    VkFormat.UNDEFINED:            (4,  KhrDfTransfer.SRGB),
    VkFormat.R8_UNORM:             (1,  KhrDfTransfer.LINEAR),
    VkFormat.R8_SRGB:              (1,  KhrDfTransfer.SRGB),
    VkFormat.R8G8_UNORM:           (2,  KhrDfTransfer.LINEAR),
    VkFormat.R8G8_SRGB:            (2,  KhrDfTransfer.SRGB),
    VkFormat.R8G8B8_UNORM:         (3,  KhrDfTransfer.LINEAR),
    VkFormat.R8G8B8_SRGB:          (3,  KhrDfTransfer.SRGB),
    VkFormat.R8G8B8A8_UNORM:       (4,  KhrDfTransfer.LINEAR),
    VkFormat.R8G8B8A8_SRGB:        (4,  KhrDfTransfer.SRGB),
    VkFormat.B8G8R8A8_UNORM:       (4,  KhrDfTransfer.LINEAR),
    VkFormat.B8G8R8A8_SRGB:        (4,  KhrDfTransfer.SRGB),
    VkFormat.R16G16B16A16_SFLOAT:  (8,  KhrDfTransfer.LINEAR),
    VkFormat.R32G32B32A32_SFLOAT:  (16, KhrDfTransfer.LINEAR),
}


@dataclass(frozen=True)
class DataFormatDescriptor:
    vendor_id: int
    descriptor_type: int
    version: int
    descriptor_block_size: int
    transfer_function: int
    color_primaries: int
    flags: int
    texel_block_dimensions: tuple
    bytes_planes: tuple

    @property
    def bytes_per_texel(self) -> int:
        return self.bytes_planes[0]

    @property
    def is_srgb(self) -> bool:
        return self.transfer_function == KhrDfTransfer.SRGB


def build_minimal_dfd(bytes_per_texel: int,
                      transfer_function=KhrDfTransfer.SRGB,
                      color_primaries=KhrDfPrimaries.BT709) -> bytes:
    """
    Build a single 28-byte basic-format descriptor block.

    Texel block dimensions are fixed to 1x1x1x1 and only bytesPlane[0] is
    populated, i.e. one plane, no block compression.
    """
    if not 1 <= bytes_per_texel <= 255:
        raise ValueError(f"bytes_per_texel {bytes_per_texel} out of range (1-255)")

    raw = _DFD_STRUCT.pack(
        KhrDfVendor.KHRONOS,
        KhrDfDescriptorType.BASIC_FORMAT,
        KhrDfVersion.V1_3,
        MIN_DFD_BLOCK_SIZE,
        transfer_function,
        color_primaries,
        KhrDfFlags.ALPHA_STRAIGHT,
        bytes([1, 1, 1, 1]),
        bytes([bytes_per_texel, 0, 0, 0]),
    )

    if len(raw) != MIN_DFD_BLOCK_SIZE:
        raise RuntimeError(f"Internal error: DFD block must be {MIN_DFD_BLOCK_SIZE} bytes")

    return raw


def build_dfd_for_format(vk_format: int) -> bytes:
    """Build the minimal DFD for one of the KNOWN_LAYOUTS formats."""
    layout = KNOWN_LAYOUTS.get(vk_format)
    if layout is None:
        raise ValueError(f"No known DFD layout for vkFormat {vk_format}")

    bytes_per_texel, transfer = layout
    return build_minimal_dfd(bytes_per_texel, transfer_function=transfer)


def parse_dfd_offset_length(header):
    """The header's (dfdByteOffset, dfdByteLength) pair; authoritative for locating the level index."""
    return header.dfd_byte_offset, header.dfd_byte_length


def parse_dfd(data, header) -> DataFormatDescriptor:
    """
    Locate and decode the first basic descriptor block.

    Raises:
        OffsetOutOfRange : DFD starts inside the fixed header or past the buffer
        Truncated        : DFD shorter than a basic block, or runs past the buffer
        BadDescriptor    : declared block size inconsistent with dfdByteLength
    """
    offset, length = parse_dfd_offset_length(header)
    buffer_len = len(data)

    if offset < FIXED_HEADER_SIZE:
        raise OffsetOutOfRange(
            "DFD overlaps the fixed header",
            field="dfdByteOffset", expected=f">= {FIXED_HEADER_SIZE}", actual=offset,
        )
    if offset > buffer_len:
        raise OffsetOutOfRange(
            "DFD starts past the end of the buffer",
            field="dfdByteOffset", expected=f"<= {buffer_len}", actual=offset,
        )
    if length < MIN_DFD_BLOCK_SIZE:
        raise Truncated(
            "DFD shorter than a basic descriptor block",
            field="dfdByteLength", expected=f">= {MIN_DFD_BLOCK_SIZE}", actual=length,
        )
    if offset + length > buffer_len:
        raise Truncated(
            "DFD runs past the end of the buffer",
            field="dfdByteLength", expected=f"<= {buffer_len - offset}", actual=length,
        )

    fields = _DFD_STRUCT.unpack_from(data, offset)
    block_size = fields[3]

    if block_size < MIN_DFD_BLOCK_SIZE or block_size > length:
        raise BadDescriptor(
            "descriptor block size inconsistent with dfdByteLength",
            field="descriptorBlockSize",
            expected=f"{MIN_DFD_BLOCK_SIZE}..{length}",
            actual=block_size,
        )

    return DataFormatDescriptor(
        vendor_id=fields[0],
        descriptor_type=fields[1],
        version=fields[2],
        descriptor_block_size=block_size,
        transfer_function=fields[4],
        color_primaries=fields[5],
        flags=fields[6],
        texel_block_dimensions=tuple(fields[7]),
        bytes_planes=tuple(fields[8]),
    )
