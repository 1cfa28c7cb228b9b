"""Base lifecycle shared by every data source.

Each data source goes through:

    UNCONFIGURED --configure(client)--> CONFIGURED --read(config)--> READY

``metadata`` and ``schema`` are pure and can be called in any state. ``read``
is re-entrant and never raises: every failure is returned as a diagnostic,
and a failed read returns an empty State.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional

from ..client.base import DeviceClient
from ..diagnostics import Diagnostics, ErrorKind
from ..errors import DeviceClientError
from ..schema import ConfigDecoder, EntitySchema
from ..state import State
from ..utils.logging_config import timed

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """Lifecycle state of a data source instance."""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    READY = "ready"


class DataSource(ABC):
    """Abstract data source: metadata, schema, configure, read."""

    # Suffix appended to the provider type name, e.g. "board_info"
    TYPE_SUFFIX: ClassVar[str]
    # Human-readable noun used in error messages
    NOUN: ClassVar[str]
    SCHEMA: ClassVar[EntitySchema]
    # Dataclass with one Value field per schema attribute
    MODEL: ClassVar[type]
    # Attribute holding the query key, if the entity is keyed
    KEY_ATTRIBUTE: ClassVar[Optional[str]] = None

    def __init__(self):
        self._client: Optional[DeviceClient] = None
        self._decoder = ConfigDecoder()
        self.lifecycle = LifecycleState.UNCONFIGURED

    @property
    def type_name(self) -> str:
        return self.TYPE_SUFFIX

    @property
    def client(self) -> Optional[DeviceClient]:
        return self._client

    def metadata(self, provider_type_name: str) -> str:
        """Full type name, e.g. ``openwrt_board_info``."""
        return f"{provider_type_name}_{self.TYPE_SUFFIX}"

    @classmethod
    def schema(cls) -> EntitySchema:
        return cls.SCHEMA

    def configure(self, provider_data: Any) -> Diagnostics:
        """Attach the provider's shared client.

        ``None`` means the provider has not been configured (or failed to);
        that is not an error here, the provider already reported it.
        """
        diags = Diagnostics()
        if provider_data is None:
            return diags

        if not isinstance(provider_data, DeviceClient):
            diags.add_error(
                "Unexpected Data Source Configure Type",
                f"Expected {DeviceClient.__module__}.{DeviceClient.__name__}, got: "
                f"{type(provider_data).__module__}.{type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
                kind=ErrorKind.CAPABILITY_TYPE,
            )
            return diags

        self._client = provider_data
        self.lifecycle = LifecycleState.CONFIGURED
        return diags

    @timed("read")
    async def read(self, config: Optional[Mapping[str, Any]]) -> tuple[State, Diagnostics]:
        """Read the entity from the device.

        Returns:
            Tuple of (state, diagnostics). State is empty whenever
            diagnostics contain an error.
        """
        diags = Diagnostics()

        if self._client is None:
            diags.add_error(
                "Unconfigured Data Source",
                f"The {self.NOUN} data source has no device client. The provider "
                "was not configured, or its configuration failed.",
                kind=ErrorKind.CAPABILITY_TYPE,
            )
            return State(), diags

        request, decode_diags = self._decoder.decode(self.SCHEMA, config, self.MODEL)
        diags.append(decode_diags)
        if diags.has_error():
            return State(), diags

        diags.append(self.check_request(request))
        if diags.has_error():
            return State(), diags

        key = self.query_key(request)
        logger.debug(f"Reading {self.NOUN} {key} from device")
        try:
            result = await self.fetch(self._client, request)
        except DeviceClientError as e:
            diags.add_error(
                "Client Error",
                f"Unable to read {self.NOUN} {key}: {e}",
                attribute_path=self.KEY_ATTRIBUTE,
                kind=ErrorKind.BACKEND_QUERY,
            )
            return State(), diags

        state = State.from_model(result, self.SCHEMA)
        logger.debug(f"Read {self.NOUN} {key}: {state.redacted()}")
        self.lifecycle = LifecycleState.READY
        return state, diags

    def check_request(self, request: Any) -> Diagnostics:
        """Validate the decoded request before any device call."""
        return Diagnostics()

    @abstractmethod
    def query_key(self, request: Any) -> str:
        """Describe the entity being queried, for logs and errors."""
        pass

    @abstractmethod
    async def fetch(self, client: DeviceClient, request: Any) -> Any:
        """Query the device and return a fully populated model.

        Raises:
            DeviceClientError: If the device query fails
        """
        pass
