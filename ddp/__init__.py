# Copyright 2025 Maida.AI
# SPDX-License-Identifier: Apache-2.0
r"""DDP (Distributed Display Protocol) - UDP pixel streaming for addressable LEDs.

This package packs pixel buffers into DDP packets and sends them to a single
device over UDP. It provides:
- Protocol constants (header layout, flags, destination IDs, data types)
- Allocation-free packet encoding into caller-owned buffers
- Automatic fragmentation of large frames into MTU-sized packets
- A Client bound to one destination, with RGB and RGBW frame helpers

Sending is fire-and-forget: there is no acknowledgment, retry or receive path.
"""

# Import public API from modules
from .client import Client, SynchronizedClient
from .constants import (
    BYTES_PER_PIXEL_RGB,
    BYTES_PER_PIXEL_RGBA,
    DEFAULT_PORT,
    HEADER_LENGTH,
    ID_CONFIG,
    ID_DISPLAY,
    ID_STATUS,
    MAX_PACKET_SIZE,
    MAX_PAYLOAD_LENGTH,
    TYPE_RGB_8BIT,
    TYPE_RGBA_8BIT,
    VERSION_1,
    DestinationID,
    Flag,
    SizeTag,
    TypeTag,
    data_type,
)
from .errors import (
    AddressResolutionError,
    BufferValidationError,
    DdpError,
    InsufficientSourceDataError,
    PacketBufferError,
    SendFailure,
    TransportAcquisitionError,
)
from .packets import (
    Fragment,
    encode_header,
    encode_pixel,
    encode_rgb_pixel,
    iter_fragments,
    validate_buffer,
)
from .target import Destination, Target, resolve

# Public API exports
__all__ = [
    # Core classes
    "Client",
    "SynchronizedClient",
    "Target",
    "Destination",
    "Fragment",
    # Constants and enums
    "DEFAULT_PORT",
    "HEADER_LENGTH",
    "MAX_PAYLOAD_LENGTH",
    "MAX_PACKET_SIZE",
    "VERSION_1",
    "Flag",
    "DestinationID",
    "TypeTag",
    "SizeTag",
    "ID_DISPLAY",
    "ID_CONFIG",
    "ID_STATUS",
    "TYPE_RGB_8BIT",
    "TYPE_RGBA_8BIT",
    "BYTES_PER_PIXEL_RGB",
    "BYTES_PER_PIXEL_RGBA",
    "data_type",
    # Packet utilities
    "encode_header",
    "encode_pixel",
    "encode_rgb_pixel",
    "validate_buffer",
    "iter_fragments",
    "resolve",
    # Errors
    "DdpError",
    "AddressResolutionError",
    "TransportAcquisitionError",
    "BufferValidationError",
    "InsufficientSourceDataError",
    "PacketBufferError",
    "SendFailure",
]
