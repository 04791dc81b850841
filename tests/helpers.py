"""Test helpers: loopback receiver, fake socket and packet decoding."""

import socket
import struct

import pytest

from ddp import HEADER_LENGTH


class Receiver:
    """Loopback UDP socket that collects the packets a client sends."""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(2.0)

    @property
    def port(self) -> int:
        return self.sock.getsockname()[1]

    def packets(self, count: int) -> list[bytes]:
        return [self.sock.recv(65535) for _ in range(count)]

    def assert_idle(self, wait: float = 0.1) -> None:
        """Fail if any further packet arrives within ``wait`` seconds."""
        self.sock.settimeout(wait)
        try:
            with pytest.raises(socket.timeout):
                self.sock.recv(65535)
        finally:
            self.sock.settimeout(2.0)

    def close(self) -> None:
        self.sock.close()


class FakeSocket:
    """Datagram socket stand-in that records sends and can fail on demand."""

    def __init__(self, fail_on: int | None = None):
        self.fail_on = fail_on
        self.sent: list[tuple[bytes, tuple]] = []
        self.attempts = 0
        self.closed = False

    def sendto(self, data, address):
        self.attempts += 1
        if self.fail_on is not None and self.attempts >= self.fail_on:
            raise OSError(101, "Network is unreachable")
        self.sent.append((bytes(data), address))
        return len(data)

    def close(self):
        self.closed = True


def decode_header(packet: bytes) -> tuple[int, int, int, int, int, int]:
    """Split a packet header into (flags, sequence, type, destination, offset, length)."""
    return struct.unpack(">BBBBIH", packet[:HEADER_LENGTH])


def pattern(size: int) -> bytes:
    return bytes(i % 256 for i in range(size))
