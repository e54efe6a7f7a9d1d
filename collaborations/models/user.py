import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


def _split_list(segment: str) -> List[str]:
    return [item.strip() for item in segment.split(",") if item.strip()]


class User(BaseModel):
    """Authenticated caller as forwarded by the security layer."""

    model_config = ConfigDict(frozen=True)

    name: str
    backend_roles: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    requested_tenant: Optional[str] = None

    @classmethod
    def parse(cls, user_info: Optional[str]) -> Optional["User"]:
        """
        Parse a user-info string of the form
        ``name|backend_role1,backend_role2|role1,role2|requested_tenant``.

        Returns None when the string is absent, blank or has no user name.
        """
        if user_info is None or not user_info.strip():
            return None

        segments = user_info.split("|")
        name = segments[0].strip()
        if not name:
            logger.warning("Ignoring user info without a user name")
            return None

        backend_roles = _split_list(segments[1]) if len(segments) > 1 else []
        roles = _split_list(segments[2]) if len(segments) > 2 else []
        tenant = segments[3].strip() if len(segments) > 3 and segments[3].strip() else None
        return cls(name=name, backend_roles=backend_roles, roles=roles, requested_tenant=tenant)

    def to_user_info(self) -> str:
        return "|".join(
            [self.name, ",".join(self.backend_roles), ",".join(self.roles), self.requested_tenant or ""]
        )
