"""OpenWrt provider: configuration stage and data source registry.

The provider is configured once per plugin session. Configuration validates
the connection settings, logs in to the device and hands the authenticated
client to every data source.

Connection settings can come from the configuration itself or from the
environment:

    OPENWRT_HOST, OPENWRT_USERNAME, OPENWRT_PASSWORD,
    OPENWRT_INSECURE (1/true/yes), OPENWRT_TIMEOUT (seconds)
"""
import logging
import os
from typing import Any, Callable, Mapping, Optional

import httpx

from .client.base import DeviceClient, TransportOptions
from .client.ubus import UbusClient, base_url
from .datasources import DATA_SOURCES, DataSource
from .diagnostics import Diagnostics, ErrorKind
from .errors import DeviceClientError
from .schema import Attribute, ConfigDecoder, EntitySchema, BOOL, INT64, STRING
from .utils.logging_config import timed
from .values import Value

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

# Attributes that must be concrete before a client can be built
CONNECTION_ATTRIBUTES = {
    "host": ("Host", "OPENWRT_HOST"),
    "username": ("Username", "OPENWRT_USERNAME"),
    "password": ("Password", "OPENWRT_PASSWORD"),
}

ClientFactory = Callable[[str, TransportOptions], DeviceClient]


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


class OpenWrtProvider:
    """Provider for OpenWrt devices."""

    TYPE_NAME = "openwrt"
    SCHEMA = EntitySchema.of(
        "Interact with an OpenWrt device through its ubus JSON-RPC API.",
        [
            Attribute(
                "host",
                STRING,
                optional=True,
                description="Device address or URL. May also be provided via OPENWRT_HOST.",
            ),
            Attribute(
                "username",
                STRING,
                optional=True,
                description="Login user. May also be provided via OPENWRT_USERNAME.",
            ),
            Attribute(
                "password",
                STRING,
                optional=True,
                sensitive=True,
                description="Login password. May also be provided via OPENWRT_PASSWORD.",
            ),
            Attribute(
                "insecure",
                BOOL,
                optional=True,
                description="Skip TLS certificate verification. Reduces security; "
                "use only for devices with self-signed certificates.",
            ),
            Attribute(
                "timeout",
                INT64,
                optional=True,
                description="Request timeout in seconds. May also be provided via OPENWRT_TIMEOUT.",
            ),
        ],
    )

    def __init__(self, version: str = "dev", client_factory: ClientFactory = UbusClient):
        """
        Args:
            version: Provider version; "dev" for local builds, "test" in tests
            client_factory: Builds an unauthenticated client from host and options
        """
        self.version = version
        self._client_factory = client_factory
        self._decoder = ConfigDecoder()
        self.client: Optional[DeviceClient] = None

    def metadata(self) -> tuple[str, str]:
        """Return (type name, version)."""
        return self.TYPE_NAME, self.version

    @classmethod
    def schema(cls) -> EntitySchema:
        return cls.SCHEMA

    @timed("configure", label="provider")
    async def configure(
        self, raw_config: Optional[Mapping[str, Any]]
    ) -> tuple[Optional[DeviceClient], Diagnostics]:
        """Validate connection settings and log in.

        Returns:
            Tuple of (authenticated client or None, diagnostics)
        """
        diags = Diagnostics()
        await self.close()

        config, decode_diags = self._decoder.decode(self.SCHEMA, raw_config)
        diags.append(decode_diags)
        if diags.has_error():
            return None, diags

        self._check_unknown(config, diags)
        if diags.has_error():
            return None, diags

        host = self._resolve(config["host"], "OPENWRT_HOST")
        username = self._resolve(config["username"], "OPENWRT_USERNAME")
        password = self._resolve(config["password"], "OPENWRT_PASSWORD")
        insecure = self._resolve_insecure(config["insecure"], diags)
        timeout = self._resolve_timeout(config["timeout"], diags)

        self._check_missing({"host": host, "username": username, "password": password}, diags)
        if host.strip():
            self._check_host(host, diags)
        if diags.has_error():
            return None, diags

        options = TransportOptions(verify_tls=not insecure, timeout=timeout)
        if insecure:
            diags.add_warning(
                "Insecure TLS",
                f"TLS certificate verification is disabled for {host}. Connections "
                "are open to interception.",
                attribute_path="insecure",
            )

        logger.info(f"Creating OpenWrt client for {host} (user={username}, verify_tls={not insecure})")
        client = self._client_factory(host, options)
        try:
            authed = await client.authenticate(username, password)
        except DeviceClientError as e:
            await client.aclose()
            diags.add_error(
                "Unable to Create OpenWrt API Client",
                "An unexpected error occurred when creating the OpenWrt API client. "
                "If the error is not clear, please contact the provider developers.\n\n"
                f"OpenWrt Client Error: {e}",
                kind=ErrorKind.AUTHENTICATION,
            )
            return None, diags

        self.client = authed
        logger.info(f"Configured OpenWrt provider for {host}")
        return authed, diags

    def _check_unknown(self, config: dict[str, Value], diags: Diagnostics) -> None:
        for name, (label, env_var) in CONNECTION_ATTRIBUTES.items():
            if config[name].is_unknown:
                diags.add_error(
                    f"Unknown OpenWrt API {label}",
                    "The provider cannot create the OpenWrt API client as there is an "
                    f"unknown configuration value for the OpenWrt API {label.lower()}. "
                    "Either apply the source of the value first, set the value "
                    f"statically in the configuration, or use the {env_var} "
                    "environment variable.",
                    attribute_path=name,
                    kind=ErrorKind.UNRESOLVED_CONFIG,
                )

    def _check_missing(self, resolved: dict[str, str], diags: Diagnostics) -> None:
        for name, value in resolved.items():
            if value.strip():
                continue
            label, env_var = CONNECTION_ATTRIBUTES[name]
            diags.add_error(
                f"Missing OpenWrt API {label}",
                "The provider cannot create the OpenWrt API client as there is a "
                f"missing or empty value for the OpenWrt API {label.lower()}. "
                f"Set the {name} value in the configuration or use the {env_var} "
                "environment variable. If either is already set, ensure the value "
                "is not empty.",
                attribute_path=name,
                kind=ErrorKind.VALIDATION,
            )

    @staticmethod
    def _check_host(host: str, diags: Diagnostics) -> None:
        try:
            url = httpx.URL(f"{base_url(host)}/ubus")
        except httpx.InvalidURL as e:
            detail = str(e)
        else:
            if url.scheme in ("http", "https") and url.host:
                return
            detail = "Expected a hostname, an IP address or an http(s) URL."
        diags.add_attribute_error(
            "host",
            "Invalid OpenWrt API Host",
            f"The host '{host}' is not a valid device address. {detail}",
        )

    @staticmethod
    def _resolve(value: Value, env_var: str) -> str:
        if value.is_known:
            return value.value
        return os.environ.get(env_var, "")

    @staticmethod
    def _resolve_insecure(value: Value, diags: Diagnostics) -> bool:
        if value.is_known:
            return value.value
        if value.is_unknown:
            diags.add_warning(
                "Unknown TLS setting",
                "The insecure setting is not known yet; falling back to "
                "OPENWRT_INSECURE or certificate verification.",
                attribute_path="insecure",
            )
        return _env_flag("OPENWRT_INSECURE")

    @staticmethod
    def _resolve_timeout(value: Value, diags: Diagnostics) -> int:
        if value.is_known:
            timeout = value.value
        else:
            if value.is_unknown:
                diags.add_warning(
                    "Unknown Timeout",
                    "The timeout is not known yet; falling back to OPENWRT_TIMEOUT or "
                    f"{DEFAULT_TIMEOUT} seconds.",
                    attribute_path="timeout",
                )
            raw = os.environ.get("OPENWRT_TIMEOUT", "").strip()
            if not raw:
                return DEFAULT_TIMEOUT
            try:
                timeout = int(raw)
            except ValueError:
                diags.add_attribute_error(
                    "timeout",
                    "Invalid OpenWrt API Timeout",
                    f"OPENWRT_TIMEOUT must be a whole number of seconds, got '{raw}'.",
                )
                return DEFAULT_TIMEOUT

        if timeout <= 0:
            diags.add_attribute_error(
                "timeout",
                "Invalid OpenWrt API Timeout",
                f"Timeout must be a positive number of seconds, got {timeout}.",
            )
            return DEFAULT_TIMEOUT
        return timeout

    # === Data sources ===

    def data_sources(self) -> list[type[DataSource]]:
        """Data source constructors, in registration order."""
        return list(DATA_SOURCES)

    def _data_source_class(self, type_name: str) -> type[DataSource]:
        for cls in DATA_SOURCES:
            if cls().metadata(self.TYPE_NAME) == type_name:
                return cls
        raise KeyError(f"Unknown data source type: {type_name}")

    def describe(self, type_name: str) -> EntitySchema:
        """Schema for a full data source type name, e.g. ``openwrt_board_info``."""
        return self._data_source_class(type_name).schema()

    def new_data_source(self, type_name: str) -> tuple[DataSource, Diagnostics]:
        """Create a data source and hand it the provider's client."""
        data_source = self._data_source_class(type_name)()
        diags = data_source.configure(self.client)
        return data_source, diags

    async def close(self) -> None:
        """Close the shared client at the end of the session."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
