# ktx2_py/reader.py
from dataclasses import dataclass

from .constants import FIXED_HEADER_SIZE, SupercompressionScheme
from .dfd import DataFormatDescriptor, parse_dfd
from .errors import (
    BadDescriptor,
    BadHeader,
    OffsetOutOfRange,
    SizeMismatch,
    UnsupportedScheme,
)
from .header import ContainerHeader, decode_header
from .level_index import (
    LevelIndexEntry,
    decode_level_index,
    index_entry_count,
    level_dimensions,
)


# ---------------------------------------------------------------------------
# Level variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Level:
    """An uncompressed (or already decompressed) mip level."""
    index: int
    width: int
    height: int
    depth: int
    entry: LevelIndexEntry
    payload: bytes

    is_supercompressed = False

    def pixels(self) -> bytes:
        return self.payload


@dataclass(frozen=True)
class SupercompressedLevel:
    """A level whose payload is still wrapped in a supercompression scheme the caller did not decode."""
    index: int
    width: int
    height: int
    depth: int
    entry: LevelIndexEntry
    payload: bytes
    scheme: int

    is_supercompressed = True

    def pixels(self) -> bytes:
        name = SupercompressionScheme.NAMES.get(self.scheme, "unknown")
        raise UnsupportedScheme(
            f"level {self.index} is supercompressed with {name}; pass a decompressor to decode()",
            field="supercompressionScheme", expected=SupercompressionScheme.NONE, actual=self.scheme,
        )


# ---------------------------------------------------------------------------
# Decode result
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TextureDescriptor:
    width: int
    height: int
    depth: int
    level_count: int
    layer_count: int
    face_count: int
    vk_format: int
    type_size: int
    supercompression_scheme: int
    header: ContainerHeader
    dfd: DataFormatDescriptor
    levels: tuple
    key_value_data: bytes = b""

    @property
    def format(self) -> int:
        return self.vk_format

    @property
    def bytes_per_texel(self) -> int:
        return self.dfd.bytes_per_texel

    @property
    def is_supercompressed(self) -> bool:
        return self.supercompression_scheme != SupercompressionScheme.NONE

    def payload(self, level=0) -> bytes:
        """
        Uncompressed bytes of one mip level.
        Raises UnsupportedScheme for levels that are still supercompressed.
        """
        return self.levels[level].pixels()


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def _max_levels(width, height, depth):
    return max(width, height, depth).bit_length()


def _level_size(width, height, depth, level, layers, faces, bytes_per_texel):
    w, h, d = level_dimensions(width, height, depth, level)
    return w * h * d * layers * faces * bytes_per_texel


def _read_key_value_data(data, header):
    if header.kvd_byte_length == 0:
        return b""

    start = header.kvd_byte_offset
    end = start + header.kvd_byte_length

    if start < FIXED_HEADER_SIZE:
        raise OffsetOutOfRange(
            "key/value data overlaps the fixed header",
            field="kvdByteOffset", expected=f">= {FIXED_HEADER_SIZE}", actual=start,
        )
    if end > len(data):
        raise OffsetOutOfRange(
            "key/value data runs past the end of the buffer",
            field="kvdByteOffset+kvdByteLength", expected=f"<= {len(data)}", actual=end,
        )

    return bytes(data[start:end])


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def decode(data, decompressors=None) -> TextureDescriptor:
    """
    Decode a KTX2 container held fully in memory.

    Parameters:
        data          : bytes-like object holding the complete file
        decompressors : optional {scheme: fn(payload, uncompressed_byte_length) -> bytes}
                        used to unwrap supercompressed levels. Levels whose
                        scheme has no entry are returned as SupercompressedLevel.

    Returns a fresh TextureDescriptor; raises a FormatError subclass for any
    malformed input. Exceptions raised by a caller-supplied decompressor
    propagate unchanged.
    """
    view = data if isinstance(data, (bytes, bytearray)) else memoryview(data).cast("B")

    header = decode_header(view)

    # ---- Header semantics ----
    if header.pixel_width == 0:
        raise BadHeader("texture width must be non-zero",
                        field="pixelWidth", expected="> 0", actual=0)

    width = header.pixel_width
    height = header.pixel_height or 1
    depth = header.pixel_depth or 1
    layers = header.layer_count or 1
    faces = header.face_count or 1
    scheme = header.supercompression_scheme

    level_count = index_entry_count(header.level_count)
    max_levels = _max_levels(width, height, depth)
    if level_count > max_levels:
        raise BadHeader(
            f"{width}x{height}x{depth} texture cannot have {level_count} mip levels",
            field="levelCount", expected=f"<= {max_levels}", actual=header.level_count,
        )

    # ---- DFD ----
    dfd = parse_dfd(view, header)
    bytes_per_texel = dfd.bytes_per_texel

    if scheme == SupercompressionScheme.NONE and bytes_per_texel == 0:
        raise BadDescriptor(
            "uncompressed texture declares zero bytes per texel",
            field="bytesPlane0", expected="> 0", actual=0,
        )

    expected_sizes = None
    if bytes_per_texel:
        expected_sizes = [
            _level_size(width, height, depth, level, layers, faces, bytes_per_texel)
            for level in range(level_count)
        ]

    # ---- Level index (located from the DFD extent) ----
    entries = decode_level_index(
        view,
        header.dfd_byte_offset,
        header.dfd_byte_length,
        header.level_count,
        supercompression_scheme=scheme,
        expected_sizes=expected_sizes,
    )

    key_value_data = _read_key_value_data(view, header)

    # ---- Level payloads ----
    decompressors = decompressors or {}
    levels = []
    for level, entry in enumerate(entries):
        w, h, d = level_dimensions(width, height, depth, level)
        payload = bytes(view[entry.byte_offset:entry.byte_offset + entry.byte_length])

        if scheme == SupercompressionScheme.NONE:
            if expected_sizes is not None and len(payload) != expected_sizes[level]:
                raise SizeMismatch(
                    f"level {level} payload does not match {w}x{h}x{d}",
                    field=f"levels[{level}].byteLength",
                    expected=expected_sizes[level], actual=len(payload),
                )
            levels.append(Level(level, w, h, d, entry, payload))
            continue

        decompress = decompressors.get(scheme)
        if decompress is None:
            levels.append(SupercompressedLevel(level, w, h, d, entry, payload, scheme))
            continue

        unpacked = bytes(decompress(payload, entry.uncompressed_byte_length))
        if len(unpacked) != entry.uncompressed_byte_length:
            raise SizeMismatch(
                f"level {level} decompressed to an unexpected size",
                field=f"levels[{level}].uncompressedByteLength",
                expected=entry.uncompressed_byte_length, actual=len(unpacked),
            )
        if expected_sizes is not None and len(unpacked) != expected_sizes[level]:
            raise SizeMismatch(
                f"level {level} decompressed payload does not match {w}x{h}x{d}",
                field=f"levels[{level}].uncompressedByteLength",
                expected=expected_sizes[level], actual=len(unpacked),
            )
        levels.append(Level(level, w, h, d, entry, unpacked))

    return TextureDescriptor(
        width=width,
        height=height,
        depth=header.pixel_depth,
        level_count=level_count,
        layer_count=layers,
        face_count=faces,
        vk_format=header.vk_format,
        type_size=header.type_size,
        supercompression_scheme=scheme,
        header=header,
        dfd=dfd,
        levels=tuple(levels),
        key_value_data=key_value_data,
    )
