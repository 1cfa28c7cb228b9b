"""Device client capability shared by the provider and its data sources."""
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransportOptions:
    """Transport settings for a device client."""
    verify_tls: bool = True
    timeout: float = 30


@dataclass(frozen=True)
class BoardModel:
    """Board model identity."""
    id: str
    name: str


@dataclass(frozen=True)
class BoardInfoResponse:
    """Board information reported by the device."""
    model: BoardModel


@dataclass(frozen=True)
class InterfaceResponse:
    """Logical network interface configuration."""
    index: int
    name: str
    device: str = ""
    proto: str = ""
    username: str = ""
    password: str = ""


class DeviceClient(ABC):
    """Abstract handle to a remote device.

    Instances are created once during provider configuration and shared by
    every data source. They are not mutated after authentication, and
    implementations own their own thread/task safety.
    """

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> "DeviceClient":
        """Log in and return an authenticated client.

        Raises:
            AuthenticationError: If the device rejects the credentials
            DeviceClientError: On transport failure
        """
        pass

    @abstractmethod
    async def get_board_info(self) -> BoardInfoResponse:
        """Get board identity."""
        pass

    @abstractmethod
    async def get_interface_configuration(self, name: str) -> InterfaceResponse:
        """Get a network interface's configuration by name.

        Raises:
            NotFoundError: If no interface with that name exists
        """
        pass

    async def aclose(self) -> None:
        """Release transport resources."""
        return None
