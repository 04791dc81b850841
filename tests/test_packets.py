"""Tests for DDP packet encoding."""

import struct

import pytest

from ddp import (
    HEADER_LENGTH,
    ID_CONFIG,
    ID_DISPLAY,
    ID_STATUS,
    MAX_PACKET_SIZE,
    MAX_PAYLOAD_LENGTH,
    TYPE_RGB_8BIT,
    TYPE_RGBA_8BIT,
    BufferValidationError,
    Flag,
    Fragment,
    encode_header,
    encode_pixel,
    encode_rgb_pixel,
    iter_fragments,
    validate_buffer,
)
from tests.helpers import decode_header


def test_encode_header_basic_packet() -> None:
    """A single pushed RGB packet has the expected bytes."""
    buffer = bytearray(MAX_PACKET_SIZE)

    encode_header(buffer, 0, 480, True, TYPE_RGB_8BIT, ID_DISPLAY)

    assert buffer[0] == 0x41  # version | push
    assert buffer[1] == 0
    assert buffer[2] == 0x0B
    assert buffer[3] == 0x01
    assert int.from_bytes(buffer[4:8], "big") == 0
    assert int.from_bytes(buffer[8:10], "big") == 480


def test_encode_header_without_push_flag() -> None:
    buffer = bytearray(MAX_PACKET_SIZE)
    encode_header(buffer, 0, 100, False, TYPE_RGB_8BIT, ID_DISPLAY)
    assert buffer[0] == 0x40


def test_encode_header_writes_offset_big_endian() -> None:
    buffer = bytearray(HEADER_LENGTH)
    encode_header(buffer, 0x01020304, 480, False, TYPE_RGB_8BIT, ID_DISPLAY)
    assert bytes(buffer[4:8]) == b"\x01\x02\x03\x04"
    assert bytes(buffer[8:10]) == b"\x01\xe0"


def test_encode_header_leaves_payload_untouched() -> None:
    buffer = bytearray(b"\xaa" * (HEADER_LENGTH + 4))
    encode_header(buffer, 0, 4, True, TYPE_RGB_8BIT, ID_DISPLAY)
    assert bytes(buffer[HEADER_LENGTH:]) == b"\xaa" * 4


@pytest.mark.parametrize(
    "offset, length, push, dtype, dest",
    [
        (0, 0, False, TYPE_RGB_8BIT, ID_DISPLAY),
        (1440, 480, False, TYPE_RGB_8BIT, ID_DISPLAY),
        (2**32 - 1, MAX_PAYLOAD_LENGTH, True, TYPE_RGBA_8BIT, ID_STATUS),
        (65536, 1, True, 0x3F, ID_CONFIG),
    ],
)
def test_encode_header_decodes_to_inputs(offset: int, length: int, push: bool, dtype: int, dest: int) -> None:
    """Decoding the written header reproduces every field."""
    buffer = bytearray(MAX_PACKET_SIZE)
    encode_header(buffer, offset, length, push, dtype, dest)

    flags, sequence, decoded_type, decoded_dest, decoded_offset, decoded_length = decode_header(buffer)
    assert flags >> 6 == 0b01
    assert bool(flags & Flag.PUSH) is push
    assert sequence == 0
    assert decoded_type == dtype
    assert decoded_dest == dest
    assert decoded_offset == offset
    assert decoded_length == length


def test_encode_header_extra_flags() -> None:
    buffer = bytearray(HEADER_LENGTH)
    encode_header(buffer, 0, 0, True, TYPE_RGB_8BIT, ID_DISPLAY, flags=Flag.STORAGE)
    assert buffer[0] == 0x40 | 0x08 | 0x01


def test_encode_header_never_grows_buffer() -> None:
    buffer = bytearray(4)
    with pytest.raises(struct.error):
        encode_header(buffer, 0, 0, True, TYPE_RGB_8BIT, ID_DISPLAY)
    assert len(buffer) == 4


def test_encode_rgb_pixel_byte_order() -> None:
    buffer = bytearray(3)
    encode_rgb_pixel(buffer, 0, 0xFF8040)
    assert list(buffer) == [255, 128, 64]


@pytest.mark.parametrize("color, expected", [(0x000000, [0, 0, 0]), (0xFFFFFF, [255, 255, 255])])
def test_encode_rgb_pixel_extremes(color: int, expected: list[int]) -> None:
    buffer = bytearray(3)
    encode_rgb_pixel(buffer, 0, color)
    assert list(buffer) == expected


def test_encode_pixel_at_position() -> None:
    buffer = bytearray(9)
    encode_rgb_pixel(buffer, 3, 0x112233)
    assert list(buffer) == [0, 0, 0, 0x11, 0x22, 0x33, 0, 0, 0]


def test_encode_pixel_four_channels() -> None:
    buffer = bytearray(4)
    encode_pixel(buffer, 0, 0x10203040, 4)
    assert list(buffer) == [0x10, 0x20, 0x30, 0x40]


def test_encode_pixel_never_grows_buffer() -> None:
    buffer = bytearray(4)
    with pytest.raises(ValueError):
        encode_rgb_pixel(buffer, 2, 0xFFFFFF)
    assert len(buffer) == 4


def test_validate_buffer_accepts_every_valid_length() -> None:
    """Every payload length up to the maximum fits a full-size buffer."""
    buffer = bytearray(MAX_PACKET_SIZE)
    for payload_length in range(MAX_PAYLOAD_LENGTH + 1):
        validate_buffer(buffer, payload_length)


def test_validate_buffer_accepts_exact_fit() -> None:
    validate_buffer(bytearray(HEADER_LENGTH + 60), 60)
    validate_buffer(bytearray(HEADER_LENGTH), 0)


def test_validate_buffer_rejects_oversized_payload() -> None:
    with pytest.raises(BufferValidationError, match="Payload too large: max 1440 bytes, got 1441"):
        validate_buffer(bytearray(MAX_PACKET_SIZE + 1), MAX_PAYLOAD_LENGTH + 1)


def test_validate_buffer_rejects_negative_length() -> None:
    with pytest.raises(BufferValidationError, match="negative"):
        validate_buffer(bytearray(MAX_PACKET_SIZE), -1)


def test_validate_buffer_rejects_missing_buffer() -> None:
    with pytest.raises(BufferValidationError, match="None"):
        validate_buffer(None, 0)


def test_validate_buffer_rejects_small_buffer() -> None:
    with pytest.raises(BufferValidationError, match="need 1450 bytes, got 100"):
        validate_buffer(bytearray(100), MAX_PAYLOAD_LENGTH)


def test_validation_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        validate_buffer(bytearray(5), 0)


def test_iter_fragments_splits_at_max_payload() -> None:
    assert list(iter_fragments(1500)) == [Fragment(0, 1440, False), Fragment(1440, 60, True)]


def test_iter_fragments_exact_boundary() -> None:
    assert list(iter_fragments(MAX_PAYLOAD_LENGTH)) == [Fragment(0, MAX_PAYLOAD_LENGTH, True)]


def test_iter_fragments_empty_frame() -> None:
    assert list(iter_fragments(0)) == []


def test_iter_fragments_cover_frame_in_order() -> None:
    total = 10_000
    fragments = list(iter_fragments(total))
    position = 0
    for fragment in fragments:
        assert fragment.offset == position
        assert 0 < fragment.length <= MAX_PAYLOAD_LENGTH
        position += fragment.length
    assert position == total
    assert [f.last for f in fragments] == [False] * (len(fragments) - 1) + [True]


def test_iter_fragments_custom_limit() -> None:
    assert [f.length for f in iter_fragments(10, max_payload=4)] == [4, 4, 2]


def test_validate_buffer_counts_bytes_not_rows() -> None:
    np = pytest.importorskip("numpy")
    validate_buffer(np.zeros((2, MAX_PACKET_SIZE // 2), dtype=np.uint8), MAX_PAYLOAD_LENGTH)
    validate_buffer(np.zeros(MAX_PACKET_SIZE // 4, dtype=np.uint32), MAX_PAYLOAD_LENGTH - 2)

    with pytest.raises(BufferValidationError, match="need 1450 bytes, got 1448"):
        validate_buffer(np.zeros(MAX_PACKET_SIZE // 4, dtype=np.uint32), MAX_PAYLOAD_LENGTH)


def test_validate_buffer_rejects_non_buffer() -> None:
    with pytest.raises(BufferValidationError, match="buffer protocol"):
        validate_buffer([0] * MAX_PACKET_SIZE, 0)
