from .collaboration import CreateCollaborationObjectRequest, CreateCollaborationObjectResponse

__all__ = [
    "CreateCollaborationObjectRequest",
    "CreateCollaborationObjectResponse",
]
