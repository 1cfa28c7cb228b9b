"""Tests for the ubus JSON-RPC client using a mocked transport."""
import json

import httpx
import pytest

from openwrt_provider.client.base import TransportOptions
from openwrt_provider.client.ubus import NULL_SESSION, UbusClient, base_url
from openwrt_provider.datasources import NetworkInterfaceDataSource
from openwrt_provider.diagnostics import ErrorKind
from openwrt_provider.errors import (
    AuthenticationError,
    DeviceClientError,
    DeviceTimeoutError,
    NotFoundError,
    ProtocolError,
)

SESSION = "c1ed6c7b025d0caca723a816fa61b668"


class FakeUbus:
    """Minimal rpcd emulation behind httpx.MockTransport."""

    def __init__(self):
        self.requests: list[dict] = []
        self.sections = {
            "lan": {
                ".anonymous": False, ".type": "interface", ".name": "lan", ".index": 0,
                "device": "br-lan", "proto": "static", "ipaddr": "192.168.1.1",
            },
            "wan": {
                ".anonymous": False, ".type": "interface", ".name": "wan", ".index": 1,
                "ifname": "eth1", "proto": "pppoe", "username": "isp", "password": "hunter2",
            },
            "br_lan": {".type": "device", ".name": "br_lan", ".index": 2, "name": "br-lan"},
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/ubus"
        body = json.loads(request.content)
        self.requests.append(body)
        session, obj, method, args = body["params"]

        if (obj, method) == ("session", "login"):
            if args == {"username": "root", "password": "secret"}:
                return self._ok(body, {"ubus_rpc_session": SESSION, "timeout": 300})
            return self._status(body, 6)

        if session != SESSION:
            return httpx.Response(200, json={
                "jsonrpc": "2.0", "id": body["id"],
                "error": {"code": -32002, "message": "Access denied"},
            })

        if (obj, method) == ("system", "board"):
            return self._ok(body, {
                "kernel": "5.15.137", "hostname": "OpenWrt",
                "model": "Router One", "board_name": "x1",
            })

        if (obj, method) == ("uci", "get"):
            section = self.sections.get(args.get("section"))
            if section is None:
                return self._status(body, 4)
            return self._ok(body, {"values": section})

        return self._status(body, 3)

    @staticmethod
    def _ok(body: dict, data: dict) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": [0, data]})

    @staticmethod
    def _status(body: dict, status: int) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": [status]})


@pytest.fixture
def ubus():
    return FakeUbus()


@pytest.fixture
def client(ubus):
    http = httpx.AsyncClient(transport=httpx.MockTransport(ubus.handler))
    return UbusClient("192.168.1.1", TransportOptions(timeout=5), http=http)


class TestBaseUrl:
    """Tests for host normalization."""

    def test_default_https(self):
        assert base_url("192.168.1.1") == "https://192.168.1.1"

    def test_keeps_scheme(self):
        assert base_url("http://router.lan:8080/") == "http://router.lan:8080"


class TestUbusClient:
    """Tests for UbusClient."""

    @pytest.mark.asyncio
    async def test_authenticate(self, client, ubus):
        """Login returns a new client bound to the session."""
        authed = await client.authenticate("root", "secret")

        assert authed is not client
        assert authed.is_authenticated
        assert not client.is_authenticated
        login = ubus.requests[0]
        assert login["method"] == "call"
        assert login["params"][0] == NULL_SESSION
        assert login["params"][1:3] == ["session", "login"]

    @pytest.mark.asyncio
    async def test_authenticate_rejected(self, client):
        """Wrong credentials raise AuthenticationError."""
        with pytest.raises(AuthenticationError) as exc_info:
            await client.authenticate("root", "wrong")
        assert "root" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_board_info(self, client):
        """system.board maps into BoardInfoResponse."""
        authed = await client.authenticate("root", "secret")
        board = await authed.get_board_info()
        assert board.model.id == "x1"
        assert board.model.name == "Router One"

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        """Calls without a session are denied."""
        with pytest.raises(AuthenticationError):
            await client.get_board_info()

    @pytest.mark.asyncio
    async def test_interface(self, client, ubus):
        """uci.get network.<name> maps into InterfaceResponse."""
        authed = await client.authenticate("root", "secret")
        iface = await authed.get_interface_configuration("lan")

        assert iface.index == 0
        assert iface.name == "lan"
        assert iface.device == "br-lan"
        assert iface.proto == "static"
        assert iface.username == ""
        assert ubus.requests[-1]["params"][3] == {"config": "network", "section": "lan"}

    @pytest.mark.asyncio
    async def test_interface_legacy_ifname(self, client):
        """Pre-21.02 'ifname' is used when 'device' is absent."""
        authed = await client.authenticate("root", "secret")
        iface = await authed.get_interface_configuration("wan")
        assert iface.device == "eth1"
        assert iface.password == "hunter2"

    @pytest.mark.asyncio
    async def test_interface_not_found(self, client):
        """A missing section raises NotFoundError."""
        authed = await client.authenticate("root", "secret")
        with pytest.raises(NotFoundError):
            await authed.get_interface_configuration("guest")

    @pytest.mark.asyncio
    async def test_non_interface_section(self, client):
        """A section of another type is not an interface."""
        authed = await client.authenticate("root", "secret")
        with pytest.raises(NotFoundError) as exc_info:
            await authed.get_interface_configuration("br_lan")
        assert "device" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_method(self, client):
        """Other ubus statuses raise DeviceClientError."""
        authed = await client.authenticate("root", "secret")
        with pytest.raises(DeviceClientError) as exc_info:
            await authed.call("luci", "getVersion")
        assert "Method not found" in str(exc_info.value)


class TestUbusTransportErrors:
    """Tests for malformed responses and HTTP failures."""

    def _client(self, handler) -> UbusClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return UbusClient("router.lan", http=http)

    @pytest.mark.asyncio
    async def test_http_error(self):
        """HTTP error statuses become DeviceClientError."""
        client = self._client(lambda request: httpx.Response(503))
        with pytest.raises(DeviceClientError) as exc_info:
            await client.call("system", "board")
        assert "HTTP 503" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Non-JSON bodies raise ProtocolError."""
        client = self._client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProtocolError):
            await client.call("system", "board")

    @pytest.mark.asyncio
    async def test_missing_result(self):
        """Responses without a result raise ProtocolError."""
        client = self._client(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1}))
        with pytest.raises(ProtocolError):
            await client.call("system", "board")

    @pytest.mark.asyncio
    async def test_ubus_timeout_status(self):
        """ubus status 7 raises DeviceTimeoutError."""
        client = self._client(
            lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": [7]})
        )
        with pytest.raises(DeviceTimeoutError):
            await client.call("system", "board")

    @pytest.mark.asyncio
    async def test_non_integer_status(self):
        """A status that is not an integer raises ProtocolError."""
        client = self._client(
            lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": [[1], {}]})
        )
        with pytest.raises(ProtocolError):
            await client.call("system", "board")

    @pytest.mark.asyncio
    async def test_non_integer_status_read(self):
        """A data source read reports a malformed status as a backend error."""
        http = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": [[1], {}]})
        ))
        data_source = NetworkInterfaceDataSource()
        data_source.configure(UbusClient("router.lan", session=SESSION, http=http))

        state, diags = await data_source.read({"name": "lan"})

        assert state.is_empty
        assert [d.kind for d in diags.errors()] == [ErrorKind.BACKEND_QUERY]
        assert "Invalid ubus status" in diags.errors()[0].detail

    @pytest.mark.asyncio
    async def test_invalid_address(self):
        """An unparseable host becomes DeviceClientError, not httpx.InvalidURL."""
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        client = UbusClient("router:notaport", http=http)
        with pytest.raises(DeviceClientError) as exc_info:
            await client.authenticate("root", "secret")
        assert "router:notaport" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_aclose(self):
        """aclose closes the shared HTTP client."""
        client = self._client(lambda request: httpx.Response(200))
        await client.aclose()
        assert client._http.is_closed
