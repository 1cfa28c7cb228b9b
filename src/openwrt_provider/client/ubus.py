"""OpenWrt ubus JSON-RPC client.

Talks to the ``/ubus`` endpoint served by uhttpd (``uhttpd-mod-ubus``):

- session.login returns a ``ubus_rpc_session`` token
- system.board returns board identity
- uci.get on the ``network`` config returns interface sections

Every call is a JSON-RPC 2.0 ``call`` whose params are
``[session, object, method, args]``. The result is ``[status]`` or
``[status, data]``, with status 0 meaning success.
"""
import itertools
import logging
from typing import Any, Optional

import httpx

from ..errors import (
    AuthenticationError,
    DeviceClientError,
    DeviceTimeoutError,
    NotFoundError,
    ProtocolError,
)
from ..utils.connection import with_retry
from .base import (
    BoardInfoResponse,
    BoardModel,
    DeviceClient,
    InterfaceResponse,
    TransportOptions,
)

logger = logging.getLogger(__name__)

NULL_SESSION = "00000000000000000000000000000000"

# ubus status codes (libubus UBUS_STATUS_*)
UBUS_STATUS = {
    0: "OK",
    1: "Invalid command",
    2: "Invalid argument",
    3: "Method not found",
    4: "Not found",
    5: "No response",
    6: "Permission denied",
    7: "Request timed out",
    8: "Operation not supported",
    9: "Unknown error",
    10: "Connection failed",
}
STATUS_OK = 0
STATUS_NOT_FOUND = 4
STATUS_PERMISSION_DENIED = 6
STATUS_TIMEOUT = 7

# JSON-RPC error returned by rpcd for an expired or invalid session
ACCESS_DENIED = -32002


def base_url(host: str) -> str:
    """Normalize a host into a base URL, defaulting to https."""
    host = host.strip().rstrip("/")
    if "://" not in host:
        host = f"https://{host}"
    return host


class UbusClient(DeviceClient):
    """ubus-over-HTTP device client.

    An unauthenticated client is built from the provider's host and transport
    options; ``authenticate`` returns a new client bound to the session token
    and sharing the same HTTP connection pool.
    """

    def __init__(
        self,
        host: str,
        options: Optional[TransportOptions] = None,
        *,
        session: str = NULL_SESSION,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.host = host
        self.options = options or TransportOptions()
        self._url = f"{base_url(host)}/ubus"
        self._session = session
        self._http = http or httpx.AsyncClient(
            verify=self.options.verify_tls,
            timeout=httpx.Timeout(self.options.timeout),
        )
        self._ids = itertools.count(1)

    @property
    def is_authenticated(self) -> bool:
        return self._session != NULL_SESSION

    @with_retry(max_attempts=3, min_wait=0.5, max_wait=5)
    async def _post(self, payload: dict) -> httpx.Response:
        resp = await self._http.post(self._url, json=payload)
        resp.raise_for_status()
        return resp

    async def call(self, obj: str, method: str, args: Optional[dict] = None) -> dict:
        """Invoke ``obj.method`` and return its data payload.

        Raises:
            NotFoundError: ubus status "Not found"
            AuthenticationError: permission denied or invalid session
            DeviceTimeoutError: HTTP or ubus timeout
            ProtocolError: malformed response
            DeviceClientError: any other failure
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "call",
            "params": [self._session, obj, method, args or {}],
        }
        target = f"{obj}.{method}"

        try:
            resp = await self._post(payload)
        except httpx.TimeoutException as e:
            raise DeviceTimeoutError(
                f"Timed out calling {target} on {self.host}", {"timeout": self.options.timeout}
            ) from e
        except httpx.HTTPStatusError as e:
            raise DeviceClientError(
                f"HTTP {e.response.status_code} calling {target} on {self.host}"
            ) from e
        except httpx.HTTPError as e:
            raise DeviceClientError(f"Transport error calling {target} on {self.host}: {e}") from e
        except httpx.InvalidURL as e:
            raise DeviceClientError(f"Invalid device address '{self.host}': {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise ProtocolError(f"Invalid JSON from {self.host} for {target}") from e

        return self._unwrap(target, data)

    def _unwrap(self, target: str, data: Any) -> dict:
        if not isinstance(data, dict):
            raise ProtocolError(f"Unexpected response for {target}: {data!r}")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            if code == ACCESS_DENIED:
                raise AuthenticationError(f"Access denied calling {target}: {message}")
            raise ProtocolError(f"JSON-RPC error {code} calling {target}: {message}")

        result = data.get("result")
        if not isinstance(result, list) or not result:
            raise ProtocolError(f"Missing result for {target}")

        status = result[0]
        if not isinstance(status, int) or isinstance(status, bool):
            raise ProtocolError(f"Invalid ubus status for {target}: {status!r}")
        if status == STATUS_OK:
            payload = result[1] if len(result) > 1 else {}
            if not isinstance(payload, dict):
                raise ProtocolError(f"Unexpected payload for {target}: {payload!r}")
            return payload

        reason = UBUS_STATUS.get(status, f"status {status}")
        if status == STATUS_NOT_FOUND:
            raise NotFoundError(f"{target}: {reason}")
        if status == STATUS_PERMISSION_DENIED:
            raise AuthenticationError(f"{target}: {reason}")
        if status == STATUS_TIMEOUT:
            raise DeviceTimeoutError(f"{target}: {reason}")
        raise DeviceClientError(f"{target} failed: {reason}", {"status": status})

    async def authenticate(self, username: str, password: str) -> "UbusClient":
        """Log in and return a client bound to the new session."""
        logger.info(f"Logging in to {self.host} as {username}")
        try:
            result = await self.call(
                "session", "login", {"username": username, "password": password}
            )
        except AuthenticationError as e:
            raise AuthenticationError(f"Login rejected for user '{username}': {e.message}") from e

        session = result.get("ubus_rpc_session")
        if not session:
            raise AuthenticationError(f"Login to {self.host} returned no session token")

        logger.info(f"Session established on {self.host} (timeout {result.get('timeout', '?')}s)")
        return UbusClient(self.host, self.options, session=session, http=self._http)

    async def get_board_info(self) -> BoardInfoResponse:
        data = await self.call("system", "board")
        model_name = data.get("model")
        model_id = data.get("board_name")
        if model_name is None and model_id is None:
            raise ProtocolError(f"system.board on {self.host} returned no model information")
        return BoardInfoResponse(model=BoardModel(id=model_id or "", name=model_name or ""))

    async def get_interface_configuration(self, name: str) -> InterfaceResponse:
        data = await self.call("uci", "get", {"config": "network", "section": name})
        values = data.get("values")
        if not isinstance(values, dict):
            raise ProtocolError(f"uci.get network.{name} returned no values")
        if values.get(".type", "interface") != "interface":
            raise NotFoundError(
                f"network.{name} is a '{values['.type']}' section, not an interface"
            )

        # OpenWrt before 21.02 used 'ifname' instead of 'device'
        device = values.get("device", values.get("ifname", ""))
        if isinstance(device, list):
            device = " ".join(device)

        try:
            index = int(values.get(".index", 0))
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"Invalid section index for network.{name}") from e

        return InterfaceResponse(
            index=index,
            name=values.get(".name", name),
            device=device,
            proto=values.get("proto", ""),
            username=values.get("username", ""),
            password=values.get("password", ""),
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"UbusClient({self.host!r}, {state})"
