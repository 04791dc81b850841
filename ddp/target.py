"""DDP destination configuration and resolution."""

import socket

from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_PORT
from .errors import AddressResolutionError


class Target(BaseModel):
    """Where to send DDP packets, as configured by the caller."""

    host: str = Field(..., min_length=1, description="Device hostname or IP address")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Device UDP port")


class Destination(BaseModel):
    """A resolved, immutable send address."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="Resolved IP address")
    port: int = Field(..., ge=1, le=65535, description="UDP port")
    family: int = Field(socket.AF_INET, description="Socket address family")

    def as_tuple(self) -> tuple[str, int]:
        """Address in the form ``socket.sendto`` expects."""
        return (self.address, self.port)

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"


def resolve(target: Target) -> Destination:
    """Resolve a target to a destination, preferring IPv4.

    Args:
        target: Host and port to resolve

    Returns:
        Resolved destination

    Raises:
        AddressResolutionError: If the host cannot be resolved
    """
    try:
        infos = socket.getaddrinfo(target.host, target.port, type=socket.SOCK_DGRAM)
    except (OSError, UnicodeError) as exc:
        raise AddressResolutionError(f"Invalid hostname: {target.host}") from exc

    infos = [info for info in infos if info[0] in (socket.AF_INET, socket.AF_INET6)]
    if not infos:
        raise AddressResolutionError(f"Invalid hostname: {target.host}")

    infos.sort(key=lambda info: info[0] != socket.AF_INET)
    family, _, _, _, sockaddr = infos[0]
    return Destination(address=sockaddr[0], port=target.port, family=family)
