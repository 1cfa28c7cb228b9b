"""Network interface data source.

Reads a logical interface section (``network.<name>``) from UCI. The section
index doubles as the entity id.
"""
from dataclasses import dataclass

from ..client.base import DeviceClient
from ..diagnostics import Diagnostics, ErrorKind
from ..schema import Attribute, EntitySchema, INT64, STRING
from ..values import Value
from .base import DataSource


@dataclass(frozen=True)
class NetworkInterfaceModel:
    id: Value
    name: Value
    device: Value
    proto: Value
    username: Value
    password: Value


class NetworkInterfaceDataSource(DataSource):
    """A single UCI network interface, looked up by name."""

    TYPE_SUFFIX = "network_interface"
    NOUN = "network interface"
    KEY_ATTRIBUTE = "name"
    MODEL = NetworkInterfaceModel
    SCHEMA = EntitySchema.of(
        "Network Configuration data source",
        [
            Attribute("id", INT64, computed=True),
            Attribute("name", STRING, required=True, description="Interface Name"),
            Attribute("device", STRING, optional=True, description="Device Name"),
            Attribute("proto", STRING, optional=True, description="Network proto"),
            Attribute("username", STRING, optional=True, description="Interface Login Username"),
            Attribute(
                "password",
                STRING,
                optional=True,
                sensitive=True,
                description="Interface Login Password",
            ),
        ],
    )

    def check_request(self, request: NetworkInterfaceModel) -> Diagnostics:
        diags = Diagnostics()
        if request.name.is_unknown:
            diags.add_error(
                "Unresolved interface name",
                "The interface name is not known yet, so the interface cannot be "
                "read. Make sure the value it depends on is applied first.",
                attribute_path="name",
                kind=ErrorKind.UNRESOLVED_CONFIG,
            )
        elif not request.name.value.strip():
            diags.add_attribute_error("name", "Invalid interface name", "Interface name must not be empty.")
        return diags

    def query_key(self, request: NetworkInterfaceModel) -> str:
        return f"'{request.name.value}'"

    async def fetch(
        self, client: DeviceClient, request: NetworkInterfaceModel
    ) -> NetworkInterfaceModel:
        resp = await client.get_interface_configuration(request.name.value)
        return NetworkInterfaceModel(
            id=Value.known(resp.index),
            name=Value.known(resp.name),
            device=Value.known(resp.device),
            proto=Value.known(resp.proto),
            username=Value.known(resp.username),
            password=Value.known(resp.password),
        )
