"""DDP packet encoding.

All functions write into caller-owned buffers (``bytearray``, writable
``memoryview`` or numpy arrays). They never allocate a packet or grow the
caller's buffer, so one buffer of ``MAX_PACKET_SIZE`` bytes can be reused for
every packet of every frame.

``encode_header`` and ``encode_pixel`` do no bounds checking of their own;
call ``validate_buffer`` first.
"""

import struct
from collections.abc import Iterator
from typing import NamedTuple

from .constants import HEADER_FORMAT, HEADER_LENGTH, MAX_PAYLOAD_LENGTH, VERSION_1, Flag
from .errors import BufferValidationError

_HEADER = struct.Struct(HEADER_FORMAT)

# ----------------------------------------------------------------------------
# Header and pixel encoding
# ----------------------------------------------------------------------------


def encode_header(
    buffer,
    frame_offset: int,
    payload_length: int,
    push: bool,
    data_type: int,
    destination_id: int,
    *,
    flags: int = 0,
) -> None:
    """Write the 10-byte DDP header at the start of ``buffer``.

    Args:
        buffer: Target buffer (at least HEADER_LENGTH bytes)
        frame_offset: Byte offset of this payload within the frame
        payload_length: Number of payload bytes following the header
        push: Set the PUSH flag (last packet of a frame)
        data_type: Data-type byte (e.g. TYPE_RGB_8BIT)
        destination_id: Destination ID (e.g. ID_DISPLAY)
        flags: Extra flag bits to OR into byte 0
    """
    flags_byte = VERSION_1 | flags
    if push:
        flags_byte |= Flag.PUSH

    # Sequence number is unused
    _HEADER.pack_into(buffer, 0, flags_byte, 0, data_type, destination_id, frame_offset, payload_length)


def encode_pixel(buffer, position: int, color: int, bytes_per_pixel: int = 3) -> None:
    """Write one packed pixel into ``buffer`` at ``position``.

    The most significant byte of ``color`` is the first channel, so
    ``0xRRGGBB`` with three bytes per pixel writes R, G, B.
    """
    mask = (1 << (8 * bytes_per_pixel)) - 1
    # memoryview slice assignment refuses to resize the target
    memoryview(buffer)[position : position + bytes_per_pixel] = (color & mask).to_bytes(bytes_per_pixel, "big")


def encode_rgb_pixel(buffer, position: int, rgb: int) -> None:
    """Write a 24-bit ``0xRRGGBB`` pixel."""
    encode_pixel(buffer, position, rgb, 3)


# ----------------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------------


def validate_buffer(buffer, payload_length: int) -> None:
    """Check that ``buffer`` can hold a header plus ``payload_length`` bytes.

    Args:
        buffer: Packet buffer to validate
        payload_length: Payload length the buffer must accommodate

    Raises:
        BufferValidationError: If the buffer is missing or too small, or the
            payload length is negative or above MAX_PAYLOAD_LENGTH
    """
    if buffer is None:
        raise BufferValidationError("Buffer cannot be None")
    if payload_length < 0:
        raise BufferValidationError(f"Payload length cannot be negative: {payload_length}")
    if payload_length > MAX_PAYLOAD_LENGTH:
        raise BufferValidationError(f"Payload too large: max {MAX_PAYLOAD_LENGTH} bytes, got {payload_length}")

    try:
        capacity = memoryview(buffer).nbytes
    except TypeError as exc:
        raise BufferValidationError(f"Buffer does not support the buffer protocol: {type(buffer).__name__}") from exc

    needed = HEADER_LENGTH + payload_length
    if capacity < needed:
        raise BufferValidationError(f"Buffer too small: need {needed} bytes, got {capacity}")


# ----------------------------------------------------------------------------
# Fragmentation
# ----------------------------------------------------------------------------


class Fragment(NamedTuple):
    """One packet's slice of a frame."""

    offset: int
    length: int
    last: bool


def iter_fragments(total_bytes: int, max_payload: int = MAX_PAYLOAD_LENGTH) -> Iterator[Fragment]:
    """Split ``total_bytes`` of frame data into packet-sized fragments.

    Fragments are contiguous and in order; only the final one has ``last``
    set. An empty frame yields no fragments.
    """
    position = 0
    while position < total_bytes:
        length = min(total_bytes - position, max_payload)
        yield Fragment(position, length, position + length >= total_bytes)
        position += length
