"""
Collaboration document envelope.

A stored collaboration wraps its payload with tenant, access list and timestamps::

    {
      "lastUpdatedTimeMs": 1700000000000,
      "createdTimeMs": 1700000000000,
      "tenant": "",
      "access": ["User:admin", "BERole:admin", "Role:all_access"],
      "collaboration": {...}
    }

The payload is keyed by its object type tag, so the key itself tells which
schema the nested object follows. The document id lives outside the source and is
only emitted when explicitly requested.
"""
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from collaborations.config import DEFAULT_TENANT
from collaborations.exceptions import MissingField, ParseError
from collaborations.models.base import BaseObjectData
from collaborations.models.fields import (
    ACCESS_LIST_FIELD,
    COLLABORATION_ID_FIELD,
    CREATED_TIME_FIELD,
    TENANT_FIELD,
    TYPE_FIELD,
    UPDATED_TIME_FIELD,
)
from collaborations.models.object_type import (
    CollaborationObjectType,
    create_object_data,
    get_object_data_properties,
    get_reader_for_object_type,
    resolve_object_type,
)
from collaborations.utils.stream import EPOCH, StreamInput, StreamOutput

logger = logging.getLogger(__name__)

OBJECT_DATA_FIELD = "objectData"


def to_epoch_millis(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


def from_epoch_millis(value: Any, field_name: str) -> datetime:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ParseError(f"{field_name} must be epoch milliseconds")
    try:
        millis = int(value)
    except ValueError as exc:
        raise ParseError(f"{field_name} must be epoch milliseconds") from exc
    return EPOCH + timedelta(milliseconds=millis)


def truncate_millis(value: datetime) -> datetime:
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def now_millis() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    return truncate_millis(datetime.now(timezone.utc))


def parse_string_list(value: Any, field_name: str) -> List[str]:
    if not isinstance(value, list):
        raise ParseError(f"{field_name} must be a list of strings")
    return [str(item) for item in value]


class CollaborationObjectDoc(BaseModel):
    model_config = ConfigDict(frozen=True)

    collaboration_id: str
    updated_time: datetime
    created_time: datetime
    tenant: str = DEFAULT_TENANT
    access: List[str] = Field(default_factory=list)  # "User:user", "Role:sample_role", "BERole:sample_backend_role"
    type: CollaborationObjectType
    object_data: BaseObjectData

    @field_validator("updated_time", "created_time")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        # Stored as epoch milliseconds
        if value.tzinfo is None:
            return truncate_millis(value.replace(tzinfo=timezone.utc))
        return truncate_millis(value.astimezone(timezone.utc))

    @model_validator(mode="after")
    def check_object_data_type(self) -> "CollaborationObjectDoc":
        if self.type is CollaborationObjectType.NONE:
            raise ValueError("Collaboration document requires a registered object type")
        properties = get_object_data_properties(self.type)
        if properties is None:
            raise ValueError(f"No object data registered for type {self.type.tag}")
        if not isinstance(self.object_data, properties.object_class):
            raise ValueError(
                f"Object data {type(self.object_data).__name__} does not match type {self.type.tag}"
            )
        return self

    @classmethod
    def parse(cls, data: Any, use_id: Optional[str] = None) -> "CollaborationObjectDoc":
        """
        Parse a decoded JSON object into a document.

        Args:
            data: Decoded JSON object, fields are consumed in document order
            use_id: Document id known from elsewhere (e.g. the search hit); wins over the source field

        Returns:
            The parsed document

        Raises:
            MissingField: if id, timestamps, type or payload are absent
            ParseError: if the input is not an object or a field has the wrong shape
        """
        if not isinstance(data, Mapping):
            raise ParseError("Collaboration document must be an object")

        collaboration_id: Optional[str] = None
        updated_time: Optional[datetime] = None
        created_time: Optional[datetime] = None
        tenant: Optional[str] = None
        access: List[str] = []
        object_type: Optional[CollaborationObjectType] = None
        object_data: Optional[BaseObjectData] = None

        for field_name, value in data.items():
            if field_name == COLLABORATION_ID_FIELD:
                collaboration_id = None if value is None else str(value)
            elif field_name == UPDATED_TIME_FIELD:
                updated_time = from_epoch_millis(value, field_name)
            elif field_name == CREATED_TIME_FIELD:
                created_time = from_epoch_millis(value, field_name)
            elif field_name == TENANT_FIELD:
                tenant = None if value is None else str(value)
            elif field_name == ACCESS_LIST_FIELD:
                access = parse_string_list(value, field_name)
            else:
                object_type_for_tag = resolve_object_type(field_name)
                if object_type_for_tag is not CollaborationObjectType.NONE and object_data is None:
                    object_data = create_object_data(object_type_for_tag, value)
                    object_type = object_type_for_tag
                else:
                    logger.info(f"Unexpected field: {field_name}, while parsing CollaborationObjectDoc")

        if use_id is not None:
            collaboration_id = use_id
        if collaboration_id is None:
            raise MissingField(COLLABORATION_ID_FIELD)
        if updated_time is None:
            raise MissingField(UPDATED_TIME_FIELD)
        if created_time is None:
            raise MissingField(CREATED_TIME_FIELD)
        if object_type is None:
            raise MissingField(TYPE_FIELD)
        if object_data is None:
            raise MissingField(OBJECT_DATA_FIELD)

        return cls(
            collaboration_id=collaboration_id,
            updated_time=updated_time,
            created_time=created_time,
            tenant=tenant if tenant is not None else DEFAULT_TENANT,
            access=access,
            type=object_type,
            object_data=object_data,
        )

    @classmethod
    def from_json(cls, text: str, use_id: Optional[str] = None) -> "CollaborationObjectDoc":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc.msg}") from exc
        return cls.parse(data, use_id=use_id)

    def to_dict(self, include_id: bool = False, include_access: bool = True) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if include_id:
            result[COLLABORATION_ID_FIELD] = self.collaboration_id
        result[UPDATED_TIME_FIELD] = to_epoch_millis(self.updated_time)
        result[CREATED_TIME_FIELD] = to_epoch_millis(self.created_time)
        result[TENANT_FIELD] = self.tenant
        if include_access and self.access:
            result[ACCESS_LIST_FIELD] = list(self.access)
        result[self.type.tag] = self.object_data.to_dict()
        return result

    def to_json(self, include_id: bool = False, include_access: bool = True) -> str:
        return json.dumps(self.to_dict(include_id=include_id, include_access=include_access))

    def write_to(self, output: StreamOutput) -> None:
        output.write_string(self.collaboration_id)
        output.write_instant(self.updated_time)
        output.write_instant(self.created_time)
        output.write_string(self.tenant)
        output.write_string_collection(self.access)
        output.write_enum(self.type)
        # The type is written a second time; readers use it to pick the payload reader
        output.write_enum(self.type)
        output.write_optional_writeable(self.object_data)

    @classmethod
    def read_from(cls, stream: StreamInput) -> "CollaborationObjectDoc":
        collaboration_id = stream.read_string()
        updated_time = stream.read_instant()
        created_time = stream.read_instant()
        tenant = stream.read_string()
        access = stream.read_string_list()
        object_type = stream.read_enum(CollaborationObjectType)
        reader_type = stream.read_enum(CollaborationObjectType)
        object_data = stream.read_optional_writeable(get_reader_for_object_type(reader_type))
        return cls(
            collaboration_id=collaboration_id,
            updated_time=updated_time,
            created_time=created_time,
            tenant=tenant,
            access=access,
            type=object_type,
            object_data=object_data,
        )

    def to_bytes(self) -> bytes:
        output = StreamOutput()
        self.write_to(output)
        return output.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "CollaborationObjectDoc":
        return cls.read_from(StreamInput(data))
