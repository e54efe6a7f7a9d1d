from .actions import CollaborationActions

__all__ = ["CollaborationActions"]
