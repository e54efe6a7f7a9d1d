from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from collaborations.utils.stream import StreamOutput


class BaseObjectData(BaseModel):
    """Common interface for every payload stored inside a collaboration document."""

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def write_to(self, output: StreamOutput) -> None:
        raise NotImplementedError
