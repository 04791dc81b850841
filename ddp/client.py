"""DDP client: sends pixel frames to one device over UDP."""

import logging
import socket
import threading

from pydantic import ValidationError

from .constants import (
    BYTES_PER_PIXEL_RGB,
    BYTES_PER_PIXEL_RGBA,
    DEFAULT_PORT,
    HEADER_LENGTH,
    ID_DISPLAY,
    MAX_PACKET_SIZE,
    MAX_PAYLOAD_LENGTH,
    TYPE_RGB_8BIT,
    TYPE_RGBA_8BIT,
)
from .errors import (
    AddressResolutionError,
    BufferValidationError,
    InsufficientSourceDataError,
    PacketBufferError,
    SendFailure,
    TransportAcquisitionError,
)
from .packets import encode_header, iter_fragments, validate_buffer
from .target import Destination, Target, resolve


def _byte_view(data) -> memoryview:
    """View any C-contiguous buffer as unsigned bytes."""
    return memoryview(data).cast("B")


class Client:
    """DDP client bound to a single destination.

    The caller owns both the pixel data and the packet buffer; the client
    only reads from the first and writes into the second, so both can be
    reused across frames without allocation.

    A client is meant to be used from one thread at a time. Use
    ``SynchronizedClient`` when an instance is shared between threads.
    """

    def __init__(self, host: str, port: int = DEFAULT_PORT, *, sock: socket.socket | None = None):
        """Initialize client.

        Args:
            host: Device hostname or IP address
            port: Device UDP port
            sock: Optional pre-created datagram socket; the client takes ownership

        Raises:
            AddressResolutionError: If the host is malformed or cannot be resolved
            TransportAcquisitionError: If the UDP socket cannot be created
            pydantic.ValidationError: If the port is out of range
        """
        try:
            target = Target(host=host, port=port)
        except ValidationError as exc:
            if any(error["loc"][:1] == ("host",) for error in exc.errors()):
                raise AddressResolutionError(f"Invalid hostname: {host!r}") from exc
            raise
        self._destination = resolve(target)
        self._address = self._destination.as_tuple()

        if sock is None:
            try:
                sock = socket.socket(self._destination.family, socket.SOCK_DGRAM)
            except OSError as exc:
                raise TransportAcquisitionError(f"Failed to create UDP socket: {exc}") from exc
        self._sock: socket.socket | None = sock

        logging.debug("DDP client opened for %s", self._destination)

    @classmethod
    def from_target(cls, target: Target, **kwargs) -> "Client":
        """Create a client from a ``Target`` configuration."""
        return cls(target.host, target.port, **kwargs)

    @staticmethod
    def new_packet_buffer() -> bytearray:
        """Allocate a packet buffer large enough for any DDP packet."""
        return bytearray(MAX_PACKET_SIZE)

    def _ensure_open(self) -> None:
        if self._sock is None:
            raise SendFailure(f"Failed to send DDP packet to {self._destination}: client is closed", self._destination)

    def send_raw(self, buffer, length: int) -> None:
        """Send the first ``length`` bytes of ``buffer`` as one datagram.

        Args:
            buffer: Packet buffer (header + payload already encoded)
            length: Number of bytes to send

        Raises:
            SendFailure: If the client is closed, the buffer is missing or
                shorter than length, or the send fails
        """
        self._ensure_open()

        if buffer is None:
            raise SendFailure(f"Failed to send DDP packet to {self._destination}: buffer is None", self._destination)
        try:
            view = _byte_view(buffer)
        except TypeError as exc:
            raise SendFailure(f"Failed to send DDP packet to {self._destination}: {exc}", self._destination) from exc
        if not 0 <= length <= len(view):
            raise SendFailure(
                f"Failed to send DDP packet to {self._destination}: "
                f"length {length} out of range (buffer holds {len(view)} bytes)",
                self._destination,
            )

        try:
            self._sock.sendto(view[:length], self._address)
        except OSError as exc:
            raise SendFailure(f"Failed to send DDP packet to {self._destination}: {exc}", self._destination) from exc

    def send_frame(self, pixel_data, pixel_count: int, bytes_per_pixel: int, data_type: int, packet_buffer) -> int:
        """Send a frame of pixel data, split into as many packets as needed.

        Every packet but the last carries MAX_PAYLOAD_LENGTH bytes; the last
        one has the PUSH flag set. A frame with no pixel bytes sends nothing.
        If a send fails, the remaining packets of the frame are not sent.

        Args:
            pixel_data: Pixel bytes (any C-contiguous buffer)
            pixel_count: Number of pixels to send
            bytes_per_pixel: Bytes per pixel (3 for RGB, 4 for RGBW)
            data_type: Data-type byte (e.g. TYPE_RGB_8BIT)
            packet_buffer: Reusable writable buffer of at least MAX_PACKET_SIZE bytes

        Returns:
            Number of packets sent

        Raises:
            PacketBufferError: If the packet buffer is missing, too small or read-only
            InsufficientSourceDataError: If pixel_data is shorter than the frame
            SendFailure: If the client is closed or a packet cannot be sent
        """
        self._ensure_open()

        try:
            validate_buffer(packet_buffer, MAX_PAYLOAD_LENGTH)
        except BufferValidationError as exc:
            raise PacketBufferError(f"Invalid buffer: {exc}") from exc

        try:
            packet = _byte_view(packet_buffer)
        except TypeError as exc:
            raise PacketBufferError(f"Invalid buffer: {exc}") from exc
        if packet.readonly:
            raise PacketBufferError("Invalid buffer: packet buffer is read-only")

        if pixel_count < 0:
            raise ValueError(f"Pixel count cannot be negative: {pixel_count}")
        if bytes_per_pixel < 1:
            raise ValueError(f"Bytes per pixel must be positive: {bytes_per_pixel}")

        source = _byte_view(pixel_data)
        total_bytes = pixel_count * bytes_per_pixel
        if len(source) < total_bytes:
            raise InsufficientSourceDataError(total_bytes, len(source))

        sent = 0
        for fragment in iter_fragments(total_bytes):
            encode_header(packet, fragment.offset, fragment.length, fragment.last, data_type, ID_DISPLAY)
            end = HEADER_LENGTH + fragment.length
            packet[HEADER_LENGTH:end] = source[fragment.offset : fragment.offset + fragment.length]
            self.send_raw(packet, end)
            sent += 1

        logging.debug("Sent %d-byte frame to %s in %d packets", total_bytes, self._destination, sent)
        return sent

    def send_rgb_frame(self, rgb_data, pixel_count: int, packet_buffer) -> int:
        """Send an 8-bit RGB frame (3 bytes per pixel)."""
        return self.send_frame(rgb_data, pixel_count, BYTES_PER_PIXEL_RGB, TYPE_RGB_8BIT, packet_buffer)

    def send_rgbw_frame(self, rgbw_data, pixel_count: int, packet_buffer) -> int:
        """Send an 8-bit RGBW frame (4 bytes per pixel)."""
        return self.send_frame(rgbw_data, pixel_count, BYTES_PER_PIXEL_RGBA, TYPE_RGBA_8BIT, packet_buffer)

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self._sock is not None:
            sock, self._sock = self._sock, None
            sock.close()
            logging.debug("DDP client for %s closed", self._destination)

    @property
    def closed(self) -> bool:
        """Whether the client has been closed."""
        return self._sock is None

    @property
    def destination(self) -> Destination:
        """Resolved destination."""
        return self._destination

    @property
    def target_address(self) -> str:
        """Resolved target IP address."""
        return self._destination.address

    @property
    def target_port(self) -> int:
        """Target UDP port."""
        return self._destination.port

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<{type(self).__name__} {self._destination} {state}>"


class SynchronizedClient(Client):
    """Client whose sends may be shared between threads.

    Each frame is sent while holding a per-instance lock, so packets of two
    frames never interleave.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._lock = threading.RLock()

    def send_raw(self, buffer, length: int) -> None:
        with self._lock:
            super().send_raw(buffer, length)

    def send_frame(self, pixel_data, pixel_count: int, bytes_per_pixel: int, data_type: int, packet_buffer) -> int:
        with self._lock:
            return super().send_frame(pixel_data, pixel_count, bytes_per_pixel, data_type, packet_buffer)

    def close(self) -> None:
        with self._lock:
            super().close()
