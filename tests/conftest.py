"""Shared fixtures for DDP tests."""

import pytest

from ddp import Client
from tests.helpers import Receiver


@pytest.fixture
def receiver():
    rx = Receiver()
    yield rx
    rx.close()


@pytest.fixture
def client(receiver):
    c = Client("127.0.0.1", receiver.port)
    yield c
    c.close()


@pytest.fixture
def packet_buffer() -> bytearray:
    return Client.new_packet_buffer()
