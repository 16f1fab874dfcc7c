#!/usr/bin/env python3
import zlib

import numpy as np
import pytest
from PIL import Image

from ktx2_py import (
    ContainerHeader,
    SupercompressionScheme,
    UnsupportedScheme,
    VkFormat,
    assemble,
    build_minimal_dfd,
    decode,
    encode,
)
from ktx2_py.image import (
    convert_input_to_rgba_bytes,
    decode_rgba,
    encode_image,
    load_ktx2_file,
    save_ktx2_file,
    to_pil_image,
)


def make_rgba(width=5, height=3):
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)


# -------------------------------------------------------------------
# Input conversion
# -------------------------------------------------------------------
def test_numpy_rgba_round_trip():
    rgba = make_rgba()
    out = decode_rgba(encode_image(rgba))

    assert out.shape == (3, 5, 4)
    assert out.dtype == np.uint8
    assert np.array_equal(out, rgba)


def test_numpy_rgb_gets_opaque_alpha():
    rgb = make_rgba()[:, :, :3]
    raw, w, h = convert_input_to_rgba_bytes(rgb)

    assert (w, h) == (5, 3)
    arr = np.frombuffer(raw, dtype=np.uint8).reshape(h, w, 4)
    assert np.array_equal(arr[:, :, :3], rgb)
    assert (arr[:, :, 3] == 255).all()


def test_pillow_image_round_trip():
    img = Image.new("RGB", (4, 2), (10, 20, 30))
    out = decode_rgba(encode_image(img))

    assert out.shape == (2, 4, 4)
    assert tuple(out[1, 3]) == (10, 20, 30, 255)


def test_bad_array_dtype():
    with pytest.raises(ValueError):
        convert_input_to_rgba_bytes(np.zeros((2, 2, 4), dtype=np.float32))


def test_bad_array_shape():
    with pytest.raises(ValueError):
        convert_input_to_rgba_bytes(np.zeros((2, 2), dtype=np.uint8))


def test_bad_input_type():
    with pytest.raises(TypeError):
        convert_input_to_rgba_bytes([[0, 0, 0, 0]])


# -------------------------------------------------------------------
# Container checks
# -------------------------------------------------------------------
def test_default_format_is_srgb_rgba8():
    tex = decode(encode_image(make_rgba()))
    assert tex.vk_format == VkFormat.R8G8B8A8_SRGB
    assert tex.dfd.is_srgb


def test_decode_rgba_needs_four_bytes_per_texel():
    buf = encode(2, 2, 3, bytes(12))
    with pytest.raises(ValueError):
        decode_rgba(buf)


def test_decode_rgba_rejects_array_textures():
    header = ContainerHeader(pixel_width=2, pixel_height=2, layer_count=2, face_count=1)
    buf = assemble(header, build_minimal_dfd(4), [bytes(32)])
    with pytest.raises(ValueError):
        decode_rgba(buf)


def test_decode_rgba_supercompressed():
    raw = make_rgba(2, 2).tobytes()
    header = ContainerHeader(pixel_width=2, pixel_height=2, layer_count=1, face_count=1,
                             supercompression_scheme=SupercompressionScheme.ZLIB)
    buf = assemble(header, build_minimal_dfd(4), [zlib.compress(raw)], uncompressed_lengths=[len(raw)])

    with pytest.raises(UnsupportedScheme):
        decode_rgba(buf)

    out = decode_rgba(buf, decompressors={SupercompressionScheme.ZLIB: lambda p, n: zlib.decompress(p)})
    assert out.tobytes() == raw


def test_to_pil_image():
    rgba = make_rgba()
    img = to_pil_image(encode_image(rgba))

    assert img.mode == "RGBA"
    assert img.size == (5, 3)
    assert np.array_equal(np.array(img), rgba)


# -------------------------------------------------------------------
# Files
# -------------------------------------------------------------------
def test_save_and_load(tmp_path, capsys):
    rgba = make_rgba()
    path = tmp_path / "out.ktx2"

    n = save_ktx2_file(path, rgba)

    assert path.stat().st_size == n
    assert "[KTX2 Writer] Wrote:" in capsys.readouterr().out

    tex = load_ktx2_file(path)
    assert (tex.width, tex.height) == (5, 3)
    assert tex.payload() == rgba.tobytes()


def test_save_linear(tmp_path):
    path = tmp_path / "linear.ktx2"
    save_ktx2_file(path, make_rgba(), vk_format=VkFormat.R8G8B8A8_UNORM)

    tex = load_ktx2_file(path)
    assert tex.vk_format == VkFormat.R8G8B8A8_UNORM
    assert not tex.dfd.is_srgb
