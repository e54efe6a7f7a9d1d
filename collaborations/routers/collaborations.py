import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request
from opensearchpy.exceptions import TransportError
from starlette.concurrency import run_in_threadpool

from collaborations.dependencies import CollaborationActionsDep, CurrentUserDep
from collaborations.exceptions import AuthenticationRequired, OpenSearchException, ParseError
from collaborations.models.fields import COLLABORATION_ID_FIELD, COMMENT_ID_FIELD
from collaborations.schemas.collaboration import CreateCollaborationObjectRequest

logger = logging.getLogger(__name__)

BASE_COLLABORATION_URI = "/_plugins/_observability"
COLLABORATION_URL = "/collaborations"
COLLABORATION_ITEM_URL = f"{COLLABORATION_URL}/{{{COLLABORATION_ID_FIELD}}}"
COMMENT_URL = f"{COLLABORATION_ITEM_URL}/comment"
COMMENT_ITEM_URL = f"{COMMENT_URL}/{{{COMMENT_ID_FIELD}}}"

router = APIRouter(prefix=BASE_COLLABORATION_URI, tags=["collaborations"])


@router.post(COLLABORATION_URL)
async def create_collaboration(
    request: Request,
    actions: CollaborationActionsDep,
    user: CurrentUserDep,
) -> Dict[str, Any]:
    """
    Create a new collaboration.

    Request body: {"collaborationId": optional id, "<type tag>": {...payload}}
    Response body: {"collaborationObjectId": "<id>"}
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON") from exc

    try:
        create_request = CreateCollaborationObjectRequest.parse(body)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        response = await run_in_threadpool(actions.create, create_request, user)
    except AuthenticationRequired as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except (OpenSearchException, TransportError) as exc:
        logger.error(f"Collaboration creation failed: {exc}")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return response.to_dict()


async def method_not_allowed(request: Request) -> None:
    raise HTTPException(status_code=405, detail=f"{request.method} is not allowed")


# Known collaboration/comment routes that are not served yet; only creation is
NOT_ALLOWED_ROUTES = [
    (COLLABORATION_URL, ["GET"]),
    (COLLABORATION_ITEM_URL, ["PUT", "GET", "DELETE"]),
    (COMMENT_URL, ["POST", "GET"]),
    (COMMENT_ITEM_URL, ["PUT", "GET", "DELETE"]),
]

for route_path, route_methods in NOT_ALLOWED_ROUTES:
    router.add_api_route(route_path, method_not_allowed, methods=route_methods, include_in_schema=False)
