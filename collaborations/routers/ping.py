from typing import Dict

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from collaborations.dependencies import CollaborationIndexDep

router = APIRouter(tags=["health"])


@router.get("/ping")
async def ping(index: CollaborationIndexDep) -> Dict[str, str]:
    healthy = await run_in_threadpool(index.health_check)
    return {"status": "ok", "opensearch": "healthy" if healthy else "unhealthy"}
