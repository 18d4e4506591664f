from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("", summary="Liveness check")
async def health() -> Dict[str, str]:
    """Answer as long as the process serves requests; no dependency checks."""
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
