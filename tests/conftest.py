"""Shared fixtures: a fake device client and a recording client factory."""
import pytest

from openwrt_provider.client.base import (
    BoardInfoResponse,
    BoardModel,
    DeviceClient,
    InterfaceResponse,
    TransportOptions,
)
from openwrt_provider.errors import AuthenticationError, NotFoundError


class FakeDeviceClient(DeviceClient):
    """In-memory device client that records every call."""

    def __init__(
        self,
        board: BoardInfoResponse | None = None,
        interfaces: dict[str, InterfaceResponse] | None = None,
        auth_error: Exception | None = None,
        board_error: Exception | None = None,
    ):
        self.board = board or BoardInfoResponse(model=BoardModel(id="x1", name="Router One"))
        self.interfaces = interfaces if interfaces is not None else {
            "lan": InterfaceResponse(
                index=0, name="lan", device="eth0", proto="static", username="", password=""
            ),
        }
        self.auth_error = auth_error
        self.board_error = board_error
        self.calls: list[tuple] = []
        self.closed = False

    async def authenticate(self, username: str, password: str) -> "FakeDeviceClient":
        self.calls.append(("authenticate", username))
        if self.auth_error:
            raise self.auth_error
        return self

    async def get_board_info(self) -> BoardInfoResponse:
        self.calls.append(("get_board_info",))
        if self.board_error:
            raise self.board_error
        return self.board

    async def get_interface_configuration(self, name: str) -> InterfaceResponse:
        self.calls.append(("get_interface_configuration", name))
        if name not in self.interfaces:
            raise NotFoundError(f"uci.get network.{name}: Not found")
        return self.interfaces[name]

    async def aclose(self) -> None:
        self.closed = True


class RecordingFactory:
    """Client factory that counts construction attempts."""

    def __init__(self, client: DeviceClient):
        self.client = client
        self.calls: list[tuple[str, TransportOptions]] = []

    def __call__(self, host: str, options: TransportOptions) -> DeviceClient:
        self.calls.append((host, options))
        return self.client


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep OPENWRT_* variables from the outer environment out of tests."""
    for name in (
        "OPENWRT_HOST",
        "OPENWRT_USERNAME",
        "OPENWRT_PASSWORD",
        "OPENWRT_INSECURE",
        "OPENWRT_TIMEOUT",
        "OPENWRT_PROVIDER_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_client():
    return FakeDeviceClient()


@pytest.fixture
def factory(fake_client):
    return RecordingFactory(fake_client)


@pytest.fixture
def valid_config():
    return {"host": "192.168.1.1", "username": "root", "password": "secret"}


@pytest.fixture
def auth_failure_client():
    return FakeDeviceClient(auth_error=AuthenticationError("Login rejected for user 'root'"))
