import logging
from typing import List, Optional

from collaborations.config import DEFAULT_TENANT
from collaborations.exceptions import AuthenticationRequired
from collaborations.models.user import User

logger = logging.getLogger(__name__)

USER_TAG = "User:"
ROLE_TAG = "Role:"
BACKEND_ROLE_TAG = "BERole:"


class UserAccessManager:
    """
    Derives tenant and access tags from the caller identity.

    Pure functions over the user value; nothing here touches the store.
    """

    def __init__(self, default_tenant: str = DEFAULT_TENANT):
        self.default_tenant = default_tenant

    def validate_user(self, user: Optional[User]) -> None:
        """Raise AuthenticationRequired unless a named user is present."""
        if user is None:
            raise AuthenticationRequired("User identity not provided")
        if not user.name or not user.name.strip():
            raise AuthenticationRequired("User name not provided")

    def get_user_tenant(self, user: Optional[User]) -> str:
        if user is None or user.requested_tenant is None:
            return self.default_tenant
        return user.requested_tenant

    def get_all_access_info(self, user: Optional[User]) -> List[str]:
        """Access tags stamped onto every document the user creates."""
        if user is None:
            return []
        access = [f"{USER_TAG}{user.name}"]
        access.extend(f"{BACKEND_ROLE_TAG}{role}" for role in user.backend_roles)
        access.extend(f"{ROLE_TAG}{role}" for role in user.roles)
        return access

    def get_search_access_info(self, user: Optional[User]) -> List[str]:
        return self.get_all_access_info(user)

    def has_access(self, user: Optional[User], tenant: str, access: List[str]) -> bool:
        """Check whether the user may see a document with the given tenant and access list."""
        if user is None:
            return False
        if self.get_user_tenant(user) != tenant:
            return False
        if not access:
            return True
        return any(tag in access for tag in self.get_search_access_info(user))
