from fastapi import APIRouter, Depends

from ...session import OvertimeSession
from ..dependencies import get_session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", summary="Liveness probe")
async def healthcheck(session: OvertimeSession = Depends(get_session)) -> dict[str, str]:
    return {"status": "ok", "roster": "ready" if session.roster_ready else "unavailable"}
