"""DDP protocol constants and enums."""

from enum import IntEnum

# ----------------------------------------------------------------------------
# Network configuration
# ----------------------------------------------------------------------------

DEFAULT_PORT = 4048
HEADER_LENGTH = 10
MAX_PAYLOAD_LENGTH = 1440  # keeps header + payload under a 1500 byte path MTU
MAX_PACKET_SIZE = HEADER_LENGTH + MAX_PAYLOAD_LENGTH

# flags, sequence, data type, destination id, offset (u32), length (u16)
HEADER_FORMAT = ">BBBBIH"

# ----------------------------------------------------------------------------
# Version and flags (byte 0)
# ----------------------------------------------------------------------------

VERSION_1 = 0x40  # bits 7:6 = 01


class Flag(IntEnum):
    """Header flag bits, OR'd with the version tag."""

    PUSH = 0x01  # display buffered data now
    QUERY = 0x02
    REPLY = 0x04
    STORAGE = 0x08
    TIMECODE = 0x10


# ----------------------------------------------------------------------------
# Destination IDs (byte 3)
# ----------------------------------------------------------------------------


class DestinationID(IntEnum):
    """Destination identifiers."""

    DISPLAY = 1
    CONFIG = 250
    STATUS = 251


ID_DISPLAY = DestinationID.DISPLAY
ID_CONFIG = DestinationID.CONFIG
ID_STATUS = DestinationID.STATUS

# ----------------------------------------------------------------------------
# Data types (byte 2): TTTSSS
# ----------------------------------------------------------------------------


class TypeTag(IntEnum):
    """3-bit pixel type tag."""

    UNDEFINED = 0b000
    RGB = 0b001  # RGB and RGB + alpha
    HSL = 0b010
    HSV = 0b011
    RGBW = 0b100


class SizeTag(IntEnum):
    """3-bit channel size / precision tag."""

    DEFAULT = 0b000
    BITS_4 = 0b001
    BITS_5 = 0b010
    BITS_8 = 0b011
    BITS_16 = 0b100
    BITS_24 = 0b101
    BITS_32 = 0b110


def data_type(type_tag: int, size_tag: int) -> int:
    """Compose the data-type byte from a type tag and a size tag.

    Args:
        type_tag: 3-bit type tag (see ``TypeTag``)
        size_tag: 3-bit size tag (see ``SizeTag``)

    Returns:
        The data-type byte

    Raises:
        ValueError: If either tag does not fit in three bits
    """
    if not 0 <= type_tag <= 0b111:
        raise ValueError(f"Type tag out of range: {type_tag}")
    if not 0 <= size_tag <= 0b111:
        raise ValueError(f"Size tag out of range: {size_tag}")
    return (type_tag << 3) | size_tag


TYPE_RGB_8BIT = data_type(TypeTag.RGB, SizeTag.BITS_8)  # 0x0B
TYPE_RGBA_8BIT = data_type(TypeTag.RGB, SizeTag.BITS_16)  # 0x0C, 8-bit RGB + alpha

# Bytes per pixel for the predefined data types
BYTES_PER_PIXEL_RGB = 3
BYTES_PER_PIXEL_RGBA = 4
