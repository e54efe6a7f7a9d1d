from typing import Annotated, Optional

from fastapi import Depends, Request

from collaborations.config import Settings
from collaborations.models.user import User
from collaborations.services.collaboration.actions import CollaborationActions
from collaborations.services.opensearch.client import CollaborationIndex


def get_request_settings(request: Request) -> Settings:
    """Get settings from the request state."""
    return request.app.state.settings


def get_collaboration_index(request: Request) -> CollaborationIndex:
    """Get the process-wide index manager from app state."""
    return request.app.state.collaboration_index


def get_collaboration_actions(request: Request) -> CollaborationActions:
    """Get collaboration actions from app state."""
    return request.app.state.collaboration_actions


def get_current_user(request: Request, settings: Annotated[Settings, Depends(get_request_settings)]) -> Optional[User]:
    """Caller identity forwarded by the security layer, None if absent or malformed."""
    return User.parse(request.headers.get(settings.security.user_header))


# Dependency type aliases for better type hints
SettingsDep = Annotated[Settings, Depends(get_request_settings)]
CollaborationIndexDep = Annotated[CollaborationIndex, Depends(get_collaboration_index)]
CollaborationActionsDep = Annotated[CollaborationActions, Depends(get_collaboration_actions)]
CurrentUserDep = Annotated[Optional[User], Depends(get_current_user)]
