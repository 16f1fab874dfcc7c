import struct

import pytest

from ktx2_py.constants import KTX2_IDENTIFIER, KhrDfTransfer, VkFormat
from ktx2_py.dfd import build_minimal_dfd
from ktx2_py.errors import SizeMismatch
from ktx2_py.header import ContainerHeader, decode_header
from ktx2_py.reader import decode
from ktx2_py.writer import assemble, encode


def u32(buf, ofs):
    return struct.unpack_from("<I", buf, ofs)[0]


# --------------------------------------------------------------
# Opaque white 2x2
# --------------------------------------------------------------
def test_encode_white_2x2_layout():
    payload = b"\xff" * 16
    buf = encode(2, 2, 4, payload)

    assert buf[:12] == KTX2_IDENTIFIER
    assert buf[-16:] == payload
    assert len(buf) == 160

    assert u32(buf, 20) == 2        # pixelWidth
    assert u32(buf, 24) == 2        # pixelHeight
    assert u32(buf, 48) == 92       # dfdByteOffset
    assert u32(buf, 52) == 28       # dfdByteLength

    byte_offset, byte_length, uncompressed = struct.unpack_from("<QQQ", buf, 120)
    assert byte_offset == 144
    assert byte_offset % 8 == 0
    assert byte_length == uncompressed == 16


def test_encode_fixed_fields():
    header = decode_header(encode(3, 5, 4, bytes(60)))

    assert header.vk_format == VkFormat.UNDEFINED
    assert header.type_size == 1
    assert header.pixel_depth == 0
    assert header.layer_count == 1
    assert header.face_count == 1
    assert header.level_count == 1
    assert header.supercompression_scheme == 0
    assert header.kvd_byte_offset == 0
    assert header.kvd_byte_length == 0


def test_encode_padding_is_zero():
    buf = encode(3, 1, 1, b"\x07\x07\x07")
    # index ends at 144, payload at 144: no padding needed; DFD ends at 120 exactly
    assert buf[120:144] == struct.pack("<QQQ", 144, 3, 3)
    assert buf[144:] == b"\x07\x07\x07"


def test_encode_size_mismatch():
    with pytest.raises(SizeMismatch) as exc:
        encode(2, 2, 4, b"\xff" * 15)
    assert exc.value.expected == 16
    assert exc.value.actual == 15


@pytest.mark.parametrize("width,height,bpt", [
    (0, 1, 4),
    (1, 0, 4),
    (2**32, 1, 4),
    (1, 1, 0),
    (1, 1, 256),
])
def test_encode_argument_ranges(width, height, bpt):
    with pytest.raises(ValueError):
        encode(width, height, bpt, b"")


def test_encode_with_vk_format():
    buf = encode(1, 1, 4, bytes(4), vk_format=VkFormat.R8G8B8A8_UNORM)
    tex = decode(buf)
    assert tex.vk_format == VkFormat.R8G8B8A8_UNORM
    assert tex.dfd.transfer_function == KhrDfTransfer.LINEAR


def test_encode_vk_format_texel_size_conflict():
    with pytest.raises(ValueError):
        encode(2, 2, 3, bytes(12), vk_format=VkFormat.R8G8B8A8_SRGB)


def test_encode_accepts_bytearray_and_memoryview():
    raw = bytearray(range(16))
    assert encode(2, 2, 4, raw) == encode(2, 2, 4, memoryview(raw)) == encode(2, 2, 4, bytes(raw))


# --------------------------------------------------------------
# General layout
# --------------------------------------------------------------
def rgba_header(width, height, **kw):
    return ContainerHeader(pixel_width=width, pixel_height=height,
                           layer_count=1, face_count=1, **kw)


def test_assemble_mip_chain_offsets():
    payloads = [bytes([1]) * 64, bytes([2]) * 16, bytes([3]) * 4]
    buf = assemble(rgba_header(4, 4), build_minimal_dfd(4), payloads)

    assert u32(buf, 40) == 3
    entries = [struct.unpack_from("<QQQ", buf, 120 + 24 * i) for i in range(3)]

    assert entries[0] == (192, 64, 64)
    assert entries[1] == (256, 16, 16)
    assert entries[2] == (272, 4, 4)
    for ofs, length, _ in entries:
        assert ofs % 8 == 0
        assert buf[ofs:ofs + length] in payloads


def test_assemble_key_value_data_placement():
    buf = assemble(rgba_header(2, 2), build_minimal_dfd(4), [bytes(16)], key_value_data=b"KTXorientation\x00rd\x00")
    header = decode_header(buf)

    assert header.kvd_byte_offset == 144
    assert header.kvd_byte_length == 18
    assert buf[144:162] == b"KTXorientation\x00rd\x00"
    byte_offset = struct.unpack_from("<Q", buf, 120)[0]
    assert byte_offset == 168


def test_assemble_needs_levels():
    with pytest.raises(ValueError):
        assemble(rgba_header(2, 2), build_minimal_dfd(4), [])


def test_assemble_length_list_must_match():
    with pytest.raises(ValueError):
        assemble(rgba_header(2, 2), build_minimal_dfd(4), [bytes(16)], uncompressed_lengths=[16, 4])
