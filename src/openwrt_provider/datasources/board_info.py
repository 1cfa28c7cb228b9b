"""Board information data source."""
from dataclasses import dataclass

from ..client.base import DeviceClient
from ..schema import Attribute, EntitySchema, STRING
from ..values import Value
from .base import DataSource

# The device exposes a single board, so its identity is a constant
BOARD_INFO_ID = "board-info"


@dataclass(frozen=True)
class BoardInfoModel:
    id: Value
    model_id: Value
    model_name: Value


class BoardInfoDataSource(DataSource):
    """Board model identity as reported by ``system.board``."""

    TYPE_SUFFIX = "board_info"
    NOUN = "board info"
    MODEL = BoardInfoModel
    SCHEMA = EntitySchema.of(
        "Board Information data source",
        [
            Attribute("id", STRING, computed=True),
            Attribute("model_id", STRING, optional=True, description="Model ID"),
            Attribute("model_name", STRING, optional=True, description="Model Name"),
        ],
    )

    def query_key(self, request: BoardInfoModel) -> str:
        return f"'{BOARD_INFO_ID}'"

    async def fetch(self, client: DeviceClient, request: BoardInfoModel) -> BoardInfoModel:
        resp = await client.get_board_info()
        return BoardInfoModel(
            id=Value.known(BOARD_INFO_ID),
            model_id=Value.known(resp.model.id),
            model_name=Value.known(resp.model.name),
        )
