import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from collaborations.exceptions import MissingField, ParseError
from collaborations.models.base import BaseObjectData
from collaborations.models.collaboration_object_doc import OBJECT_DATA_FIELD
from collaborations.models.fields import COLLABORATION_ID_FIELD, COLLABORATION_OBJECT_ID_FIELD, TYPE_FIELD
from collaborations.models.object_type import (
    CollaborationObjectType,
    create_object_data,
    get_object_data_properties,
    get_reader_for_object_type,
    resolve_object_type,
)
from collaborations.utils.stream import StreamInput, StreamOutput

logger = logging.getLogger(__name__)


class CreateCollaborationObjectRequest(BaseModel):
    """Request body for creating a collaboration object."""

    model_config = ConfigDict(frozen=True)

    collaboration_id: Optional[str] = None
    type: CollaborationObjectType
    object_data: BaseObjectData

    @model_validator(mode="after")
    def check_object_data_type(self) -> "CreateCollaborationObjectRequest":
        properties = get_object_data_properties(self.type)
        if properties is None:
            raise ValueError(f"No object data registered for type {self.type.tag}")
        if not isinstance(self.object_data, properties.object_class):
            raise ValueError(
                f"Object data {type(self.object_data).__name__} does not match type {self.type.tag}"
            )
        return self

    @classmethod
    def parse(cls, data: Any, use_id: Optional[str] = None) -> "CreateCollaborationObjectRequest":
        """
        Parse a request body.

        Args:
            data: Decoded JSON body
            use_id: Optional id to use if missing from the body

        Returns:
            Parsed create request
        """
        if not isinstance(data, dict):
            raise ParseError("Request body must be a JSON object")

        collaboration_id = use_id
        object_type: Optional[CollaborationObjectType] = None
        object_data: Optional[BaseObjectData] = None

        for field_name, value in data.items():
            if field_name == COLLABORATION_ID_FIELD:
                collaboration_id = None if value is None else str(value)
            else:
                object_type_for_tag = resolve_object_type(field_name)
                if object_type_for_tag is not CollaborationObjectType.NONE and object_data is None:
                    object_data = create_object_data(object_type_for_tag, value)
                    object_type = object_type_for_tag
                else:
                    logger.info(f"Unexpected field: {field_name}, while parsing CreateCollaborationObjectRequest")

        if object_type is None:
            raise MissingField(TYPE_FIELD)
        if object_data is None:
            raise MissingField(OBJECT_DATA_FIELD)
        return cls(collaboration_id=collaboration_id, type=object_type, object_data=object_data)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.collaboration_id is not None:
            result[COLLABORATION_ID_FIELD] = self.collaboration_id
        result[self.type.tag] = self.object_data.to_dict()
        return result

    def write_to(self, output: StreamOutput) -> None:
        output.write_optional_string(self.collaboration_id)
        output.write_enum(self.type)
        output.write_enum(self.type)
        output.write_optional_writeable(self.object_data)

    @classmethod
    def read_from(cls, stream: StreamInput) -> "CreateCollaborationObjectRequest":
        collaboration_id = stream.read_optional_string()
        object_type = stream.read_enum(CollaborationObjectType)
        object_data = stream.read_optional_writeable(
            get_reader_for_object_type(stream.read_enum(CollaborationObjectType))
        )
        return cls(collaboration_id=collaboration_id, type=object_type, object_data=object_data)


class CreateCollaborationObjectResponse(BaseModel):
    """Response for a created collaboration object."""

    model_config = ConfigDict(frozen=True)

    collaboration_object_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {COLLABORATION_OBJECT_ID_FIELD: self.collaboration_object_id}

    def write_to(self, output: StreamOutput) -> None:
        output.write_string(self.collaboration_object_id)

    @classmethod
    def read_from(cls, stream: StreamInput) -> "CreateCollaborationObjectResponse":
        return cls(collaboration_object_id=stream.read_string())
