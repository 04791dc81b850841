"""DDP error types."""


class DdpError(Exception):
    """Base class for failures reported by the DDP sender."""


class AddressResolutionError(DdpError):
    """The target host could not be resolved to an address."""


class TransportAcquisitionError(DdpError):
    """The datagram socket could not be created."""


class InsufficientSourceDataError(DdpError):
    """The pixel buffer holds fewer bytes than the frame declares."""

    def __init__(self, needed: int, available: int):
        super().__init__(f"Pixel data buffer too small: need {needed} bytes, got {available}")
        self.needed = needed
        self.available = available


class PacketBufferError(DdpError):
    """The packet buffer handed to a frame send was rejected."""


class SendFailure(DdpError):
    """A datagram could not be sent to the destination."""

    def __init__(self, message: str, destination=None):
        super().__init__(message)
        self.destination = destination


class BufferValidationError(ValueError):
    """A packet buffer cannot hold the requested payload."""
