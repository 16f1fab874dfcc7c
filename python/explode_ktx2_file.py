#!/usr/bin/env python3
"""
explode_ktx2_file.py
KTX2 CONTAINER EXPLODER: HEADER + DFD + LEVEL INDEX DUMP + PER-LEVEL PNG OUTPUT

Usage:
    python3 explode_ktx2_file.py input.ktx2
    python3 explode_ktx2_file.py input.ktx2 --info-only
"""

# Python Dependencies (beyond ktx2_py):
#     numpy
#     pillow
#
# Install Python deps:
#     pip install numpy pillow

import sys
import zlib

import numpy as np
from PIL import Image

from ktx2_py import decode, FormatError, SupercompressionScheme
from ktx2_py.level_index import level_index_offset, level_data_offset


def zlib_decompress(payload, uncompressed_byte_length):
    return zlib.decompress(payload)


DECOMPRESSORS = {
    SupercompressionScheme.ZLIB: zlib_decompress,
}


# ============================================================================
# File-writing helpers
# ============================================================================
def save_png(path, rgba8):
    img = Image.fromarray(rgba8)
    img.save(path)
    print(f"  PNG saved: {path}")


# ============================================================================
# Pretty header
# ============================================================================
def print_header(title):
    print("\n" + "=" * 90)
    print(title)
    print("=" * 90)


def hex_preview(data, limit=16):
    return " ".join(f"{b:02x}" for b in data[:limit])


# ============================================================================
# Top-level header dump
# ============================================================================
def dump_header(tex, file_size):
    print_header("KTX2 HEADER")

    h = tex.header
    scheme_name = SupercompressionScheme.NAMES.get(h.supercompression_scheme, "unknown")

    print("File size                :", file_size)
    print("vkFormat                 :", h.vk_format)
    print("typeSize                 :", h.type_size)
    print("Width                    :", h.pixel_width)
    print("Height (raw)             :", h.pixel_height)
    print("Height (effective)       :", tex.height)
    print("Depth                    :", h.pixel_depth)
    print("Layers (raw)             :", h.layer_count)
    print("Layers (effective)       :", tex.layer_count)
    print("Faces                    :", tex.face_count)
    print("Levels                   :", tex.level_count)
    print(f"Supercompression         : {h.supercompression_scheme} ({scheme_name})")
    print("dfdByteOffset            :", h.dfd_byte_offset)
    print("dfdByteLength            :", h.dfd_byte_length)
    print("kvdByteOffset            :", h.kvd_byte_offset)
    print("kvdByteLength            :", h.kvd_byte_length)


# ============================================================================
# DFD dump
# ============================================================================
def dump_dfd(tex):
    print_header("DATA FORMAT DESCRIPTOR")

    d = tex.dfd
    print("vendor_id                :", d.vendor_id)
    print("descriptor_type          :", d.descriptor_type)
    print("version                  :", d.version)
    print("descriptor_block_size    :", d.descriptor_block_size)
    print("transfer_function        :", d.transfer_function, "(sRGB)" if d.is_srgb else "")
    print("color_primaries          :", d.color_primaries)
    print("flags                    :", d.flags)
    print("texel_block_dimensions   :", d.texel_block_dimensions)
    print("bytes_planes             :", d.bytes_planes)


# ============================================================================
# Level index dump
# ============================================================================
def dump_level_index(tex):
    print_header("LEVEL INDEX")

    h = tex.header
    print("Index offset (align 4)   :", level_index_offset(h.dfd_byte_offset, h.dfd_byte_length))
    print("Data offset  (align 8)   :", level_data_offset(h.dfd_byte_offset, h.dfd_byte_length, h.level_count))

    for lvl in tex.levels:
        e = lvl.entry
        print(f"\nLevel={lvl.index}  ({lvl.width}x{lvl.height}x{lvl.depth})")
        print("  byteOffset             :", e.byte_offset)
        print("  byteLength             :", e.byte_length)
        print("  uncompressedByteLength :", e.uncompressed_byte_length)
        print("  supercompressed        :", lvl.is_supercompressed)
        print("  first bytes            :", hex_preview(lvl.payload))


# ============================================================================
# Decode each level to PNG
# ============================================================================
def explode_levels(tex):
    print_header("BEGIN EXPLODE LEVELS (PNG)")

    if tex.bytes_per_texel != 4 or tex.layer_count != 1 or tex.face_count != 1 or tex.depth > 1:
        print("Only single-layer, single-face 2D RGBA8 levels are written as PNG; skipping.")
        return

    for lvl in tex.levels:
        if lvl.is_supercompressed:
            print(f"\n- Level={lvl.index}: supercompressed (scheme {lvl.scheme}), no decompressor; skipping")
            continue

        rgba8 = np.frombuffer(lvl.pixels(), dtype=np.uint8).reshape((lvl.height, lvl.width, 4))
        save_png(f"png_L{lvl.index}.png", rgba8)

    print_header("EXPLODE COMPLETE")


def main():
    if len(sys.argv) < 2:
        print("Usage: python explode_ktx2_file.py input.ktx2 [--info-only]")
        return 1

    args = sys.argv[1:]
    info_only = "--info-only" in args

    # Determine input filename
    input_file = None
    for a in args:
        if not a.startswith("--"):
            input_file = a
            break

    if input_file is None:
        print("Error: No input file provided.")
        return 1

    with open(input_file, "rb") as f:
        ktx_bytes = f.read()

    try:
        tex = decode(ktx_bytes, decompressors=DECOMPRESSORS)
    except FormatError as e:
        print(f"Failed decoding {input_file}: {e}", file=sys.stderr)
        return 1

    dump_header(tex, len(ktx_bytes))
    dump_dfd(tex)
    dump_level_index(tex)

    if info_only:
        print_header("INFO-ONLY MODE  NO FILES WRITTEN")
        return 0

    explode_levels(tex)
    print("Success")
    return 0


if __name__ == "__main__":
    sys.exit(main())
