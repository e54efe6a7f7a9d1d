import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from collaborations.models.base import BaseObjectData
from collaborations.models.collaboration import Collaboration
from collaborations.utils.stream import StreamInput

logger = logging.getLogger(__name__)


class CollaborationObjectType(Enum):
    """Wire discriminator for collaboration payloads; members are written by ordinal."""

    NONE = "none"
    COLLABORATION = "collaboration"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag_or_default(cls, tag: str) -> "CollaborationObjectType":
        for member in cls:
            if member.tag == tag:
                return member
        return cls.NONE


@dataclass(frozen=True)
class ObjectDataProperties:
    """How to build one payload kind from JSON and from a binary stream."""

    object_class: Type[BaseObjectData]
    parser: Callable[[Any], BaseObjectData]
    reader: Callable[[StreamInput], BaseObjectData]


OBJECT_DATA_PROPERTIES: Dict[CollaborationObjectType, ObjectDataProperties] = {
    CollaborationObjectType.COLLABORATION: ObjectDataProperties(
        object_class=Collaboration,
        parser=Collaboration.parse,
        reader=Collaboration.read_from,
    ),
}


def register_object_data(object_type: CollaborationObjectType, properties: ObjectDataProperties) -> None:
    if object_type is CollaborationObjectType.NONE:
        raise ValueError("NONE cannot carry object data")
    OBJECT_DATA_PROPERTIES[object_type] = properties
    logger.info(f"Registered object data for type {object_type.tag}")


def resolve_object_type(tag: str) -> CollaborationObjectType:
    """Return the registered type for a field name, or NONE if it is not a payload tag."""
    object_type = CollaborationObjectType.from_tag_or_default(tag)
    if object_type not in OBJECT_DATA_PROPERTIES:
        return CollaborationObjectType.NONE
    return object_type


def get_object_data_properties(object_type: CollaborationObjectType) -> Optional[ObjectDataProperties]:
    return OBJECT_DATA_PROPERTIES.get(object_type)


def create_object_data(object_type: CollaborationObjectType, data: Any) -> BaseObjectData:
    properties = get_object_data_properties(object_type)
    if properties is None:
        raise ValueError(f"No object data registered for type {object_type.tag}")
    return properties.parser(data)


def get_reader_for_object_type(object_type: CollaborationObjectType) -> Callable[[StreamInput], BaseObjectData]:
    properties = get_object_data_properties(object_type)
    if properties is None:
        raise ValueError(f"No object data reader registered for type {object_type.tag}")
    return properties.reader
