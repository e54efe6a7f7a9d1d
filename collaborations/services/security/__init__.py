from .user_access import UserAccessManager

__all__ = ["UserAccessManager"]
