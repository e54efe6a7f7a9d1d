from .collaboration import Collaboration, CollaborationDataType
from .collaboration_object_doc import CollaborationObjectDoc
from .object_type import CollaborationObjectType, ObjectDataProperties, register_object_data
from .user import User

__all__ = [
    "Collaboration",
    "CollaborationDataType",
    "CollaborationObjectDoc",
    "CollaborationObjectType",
    "ObjectDataProperties",
    "register_object_data",
    "User",
]
