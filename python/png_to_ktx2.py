#!/usr/bin/env python3
"""
png_to_ktx2.py
Convert a PNG/JPEG image into an uncompressed RGBA8 KTX2 container.

Usage:
    python3 png_to_ktx2.py input.png output.ktx2
    python3 png_to_ktx2.py input.png output.ktx2 --linear
"""

# Python Dependencies (beyond ktx2_py):
#     numpy
#     imageio (v3+)
#
# Install Python deps:
#     pip install numpy imageio

import sys
from pathlib import Path

import numpy as np
import imageio.v3 as iio

from ktx2_py import decode, FormatError, VkFormat
from ktx2_py.image import save_ktx2_file


def load_rgba8(path):
    """Read an image file as an HxWx4 uint8 array (grayscale/RGB expanded)."""
    arr = iio.imread(path)

    if arr.dtype != np.uint8:
        raise ValueError(f"{path}: only 8-bit images are supported, got {arr.dtype}")

    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=2)
    elif arr.ndim == 3 and arr.shape[2] == 2:
        # luminance + alpha
        arr = np.concatenate([arr[:, :, :1].repeat(3, axis=2), arr[:, :, 1:]], axis=2)

    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"{path}: unsupported image shape {arr.shape}")

    return arr


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    linear = "--linear" in sys.argv[1:]

    if len(args) != 2:
        print("Usage: python png_to_ktx2.py <input.png> <output.ktx2> [--linear]")
        return 1

    input_path, output_path = args

    if not Path(input_path).exists():
        print(f"Error: input file does not exist: {input_path}", file=sys.stderr)
        return 1

    print(f"[INFO] Reading {input_path}")
    rgba = load_rgba8(input_path)
    print(f"[INFO] Image: {rgba.shape[1]}x{rgba.shape[0]}, {rgba.shape[2]} channels")

    vk_format = VkFormat.R8G8B8A8_UNORM if linear else VkFormat.R8G8B8A8_SRGB
    save_ktx2_file(output_path, rgba, vk_format=vk_format)

    # Verify by reading the file back through the codec
    try:
        tex = decode(Path(output_path).read_bytes())
    except FormatError as e:
        print(f"[FAIL] Verification failed: {e}", file=sys.stderr)
        return 1

    print(f"[OK] Verified: {tex.width}x{tex.height}, {tex.level_count} level(s), vkFormat {tex.vk_format}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
