# ktx2_py/image.py
#
# Edge helpers between the codec and image objects (Pillow / NumPy) or files.

from pathlib import Path

import numpy as np
from PIL import Image

from .constants import VkFormat
from .reader import decode
from .writer import encode

RGBA8_BYTES_PER_TEXEL = 4


# ------------------------------------------------------
# Image conversion
# ------------------------------------------------------
def convert_input_to_rgba_bytes(image):
    """
    Accept:
      - Pillow Image -> converted to RGBA
      - NumPy uint8 HxWx3 or HxWx4 array (RGB gets opaque alpha)
    Returns (bytes, width, height)
    """

    # Pillow image
    if isinstance(image, Image.Image):
        image = image.convert("RGBA")
        arr = np.array(image, dtype=np.uint8)
        h, w = arr.shape[:2]
        return arr.tobytes(), w, h

    # NumPy array
    elif isinstance(image, np.ndarray):
        if image.dtype != np.uint8:
            raise ValueError("NumPy image must be uint8 (RGBA8 containers only)")

        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ValueError("NumPy image must be HxWx3 or HxWx4 uint8")

        h, w, c = image.shape

        if c == 3:
            alpha = np.full((h, w, 1), 255, dtype=np.uint8)
            arr = np.concatenate([image, alpha], axis=2)
        else:
            arr = np.ascontiguousarray(image)

        return arr.tobytes(), w, h

    else:
        raise TypeError("encode_image() expects Pillow Image or NumPy array")


# ------------------------------------------------------
# Encode / decode
# ------------------------------------------------------
def encode_image(image, vk_format=VkFormat.R8G8B8A8_SRGB) -> bytes:
    """Encode a Pillow image or NumPy array as an uncompressed RGBA8 KTX2 container."""
    rgba_bytes, w, h = convert_input_to_rgba_bytes(image)
    return encode(w, h, RGBA8_BYTES_PER_TEXEL, rgba_bytes, vk_format=vk_format)


def decode_rgba(ktx2_bytes, level=0, decompressors=None):
    """
    Decode one level of an RGBA8 container.
    Returns HxWx4 uint8 NumPy array.
    """
    texture = decode(ktx2_bytes, decompressors=decompressors)

    if texture.bytes_per_texel != RGBA8_BYTES_PER_TEXEL:
        raise ValueError(
            f"decode_rgba() needs 4 bytes per texel, container has {texture.bytes_per_texel}"
        )
    if texture.layer_count != 1 or texture.face_count != 1 or texture.depth > 1:
        raise ValueError("decode_rgba() only handles single-layer, single-face 2D textures")

    lvl = texture.levels[level]
    raw = lvl.pixels()      # raises UnsupportedScheme for opaque payloads

    arr = np.frombuffer(raw, dtype=np.uint8)
    return arr.reshape((lvl.height, lvl.width, 4))


def to_pil_image(ktx2_bytes, level=0) -> Image.Image:
    return Image.fromarray(decode_rgba(ktx2_bytes, level))


# ------------------------------------------------------
# File helpers
# ------------------------------------------------------
def load_ktx2_file(path, decompressors=None):
    data = Path(path).read_bytes()
    return decode(data, decompressors=decompressors)


def save_ktx2_file(path, image, vk_format=VkFormat.R8G8B8A8_SRGB) -> int:
    """
    Encode 'image' and write it to 'path'.
    Returns the number of bytes written.
    """
    blob = encode_image(image, vk_format=vk_format)
    Path(path).write_bytes(blob)

    w, h = _image_size(image)
    print(f"[KTX2 Writer] Wrote: {path} ({w}x{h}, {len(blob)} bytes)")
    return len(blob)


def _image_size(image):
    if isinstance(image, Image.Image):
        return image.size
    return image.shape[1], image.shape[0]


__all__ = [
    "convert_input_to_rgba_bytes",
    "encode_image",
    "decode_rgba",
    "to_pil_image",
    "load_ktx2_file",
    "save_ktx2_file",
]
