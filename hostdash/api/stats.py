from typing import Any, Dict

from fastapi import APIRouter

from hostdash.services import snapshot

router = APIRouter()


@router.get("/stats", summary="Current host and container stats")
async def stats() -> Dict[str, Any]:
    """
    Return a freshly collected snapshot of host metrics.

    Always answers 200. Metrics whose source failed are left out; if the
    snapshot could not be assembled at all the body is {error, timestamp}.
    """
    result = await snapshot.collect_snapshot()
    return result.to_payload()
