# ktx2_py/constants.py

# ============================================================
# File identifier: «KTX 20»\r\n\x1A\n
# ============================================================
KTX2_IDENTIFIER = bytes([
    0xAB, 0x4B, 0x54, 0x58, 0x20, 0x32,
    0x30, 0xBB, 0x0D, 0x0A, 0x1A, 0x0A,
])

# ============================================================
# Fixed layout sizes (bytes)
# ============================================================
IDENTIFIER_SIZE = 12
HEADER_SIZE = 80                                  # fields after the identifier
FIXED_HEADER_SIZE = IDENTIFIER_SIZE + HEADER_SIZE # 92, DFD may start here

LEVEL_INDEX_ENTRY_SIZE = 24                       # 3 x u64

MIN_DFD_BLOCK_SIZE = 28

# Alignment boundaries
LEVEL_INDEX_ALIGNMENT = 4
LEVEL_DATA_ALIGNMENT = 8

# ============================================================
# VkFormat subset (values must match vulkan_core.h)
# ============================================================
class VkFormat:
    UNDEFINED            = 0

    R8_UNORM             = 9
    R8_SRGB              = 15
    R8G8_UNORM           = 16
    R8G8_SRGB            = 22
    R8G8B8_UNORM         = 23
    R8G8B8_SRGB          = 29
    R8G8B8A8_UNORM       = 37
    R8G8B8A8_SRGB        = 43
    B8G8R8A8_UNORM       = 44
    B8G8R8A8_SRGB        = 50

    R16G16B16A16_SFLOAT  = 97
    R32G32B32A32_SFLOAT  = 109

# Bytes per texel for the uncompressed formats above
VK_FORMAT_BYTES_PER_TEXEL = {
    VkFormat.R8_UNORM: 1,
    VkFormat.R8_SRGB: 1,
    VkFormat.R8G8_UNORM: 2,
    VkFormat.R8G8_SRGB: 2,
    VkFormat.R8G8B8_UNORM: 3,
    VkFormat.R8G8B8_SRGB: 3,
    VkFormat.R8G8B8A8_UNORM: 4,
    VkFormat.R8G8B8A8_SRGB: 4,
    VkFormat.B8G8R8A8_UNORM: 4,
    VkFormat.B8G8R8A8_SRGB: 4,
    VkFormat.R16G16B16A16_SFLOAT: 8,
    VkFormat.R32G32B32A32_SFLOAT: 16,
}

# ============================================================
# Supercompression schemes
# ============================================================
class SupercompressionScheme:
    NONE      = 0
    BASIS_LZ  = 1
    ZSTANDARD = 2
    ZLIB      = 3

    NAMES = {
        NONE: "None",
        BASIS_LZ: "BasisLZ",
        ZSTANDARD: "Zstandard",
        ZLIB: "ZLIB",
    }

# ============================================================
# Data Format Descriptor enums (khr_df.h)
# ============================================================
class KhrDfVendor:
    KHRONOS = 0

class KhrDfDescriptorType:
    BASIC_FORMAT = 0

class KhrDfVersion:
    V1_3 = 2

class KhrDfTransfer:
    UNSPECIFIED = 0
    LINEAR      = 1
    SRGB        = 2

class KhrDfPrimaries:
    UNSPECIFIED = 0
    BT709       = 1
    BT2020      = 2

class KhrDfFlags:
    ALPHA_STRAIGHT      = 0
    ALPHA_PREMULTIPLIED = 1
