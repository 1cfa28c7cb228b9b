"""Data sources exposed by the provider."""
from .base import DataSource, LifecycleState
from .board_info import BoardInfoDataSource, BoardInfoModel, BOARD_INFO_ID
from .network_interface import NetworkInterfaceDataSource, NetworkInterfaceModel

__all__ = [
    "DataSource",
    "LifecycleState",
    "BoardInfoDataSource",
    "BoardInfoModel",
    "BOARD_INFO_ID",
    "NetworkInterfaceDataSource",
    "NetworkInterfaceModel",
]

# Registration order is the order reported to the host
DATA_SOURCES: list[type[DataSource]] = [
    BoardInfoDataSource,
    NetworkInterfaceDataSource,
]
