"""Device clients."""
from .base import (
    DeviceClient,
    TransportOptions,
    BoardModel,
    BoardInfoResponse,
    InterfaceResponse,
)
from .ubus import UbusClient

__all__ = [
    "DeviceClient",
    "TransportOptions",
    "BoardModel",
    "BoardInfoResponse",
    "InterfaceResponse",
    "UbusClient",
]
