import logging
from typing import Optional

from collaborations.exceptions import StoreWriteFailed
from collaborations.models.collaboration_object_doc import CollaborationObjectDoc, now_millis
from collaborations.models.user import User
from collaborations.schemas.collaboration import (
    CreateCollaborationObjectRequest,
    CreateCollaborationObjectResponse,
)
from collaborations.services.opensearch.client import CollaborationIndex
from collaborations.services.security.user_access import UserAccessManager

logger = logging.getLogger(__name__)

# Placeholder id for new documents; the stored id comes back from the index
UNASSIGNED_ID = "ignore"


class CollaborationActions:
    """Collaboration object operations on top of the index manager."""

    def __init__(self, index: CollaborationIndex, access_manager: UserAccessManager):
        self.index = index
        self.access_manager = access_manager

    def create(self, request: CreateCollaborationObjectRequest, user: Optional[User]) -> CreateCollaborationObjectResponse:
        """
        Create a new collaboration object owned by the caller.

        Raises:
            AuthenticationRequired: if no caller identity is present
            StoreWriteFailed: if the store did not create the document
        """
        logger.info("CollaborationObject-create")
        self.access_manager.validate_user(user)
        current_time = now_millis()
        doc = CollaborationObjectDoc(
            collaboration_id=UNASSIGNED_ID,
            updated_time=current_time,
            created_time=current_time,
            tenant=self.access_manager.get_user_tenant(user),
            access=self.access_manager.get_all_access_info(user),
            type=request.type,
            object_data=request.object_data,
        )
        doc_id = self.index.create_collaboration_object(doc, request.collaboration_id)
        if doc_id is None:
            raise StoreWriteFailed("CollaborationObject Creation failed")
        return CreateCollaborationObjectResponse(collaboration_object_id=doc_id)

    def get(self, collaboration_id: str, user: Optional[User]) -> Optional[CollaborationObjectDoc]:
        """Internal read of a single object; None when missing or not visible to the caller."""
        self.access_manager.validate_user(user)
        doc = self.index.get_collaboration_object(collaboration_id)
        if doc is None:
            return None
        if not self.access_manager.has_access(user, doc.tenant, doc.access):
            logger.info(f"Collaboration object {collaboration_id} is not visible to user {user.name}")
            return None
        return doc
