from fastapi import HTTPException, Request

from ..session import OvertimeSession


async def get_session(request: Request) -> OvertimeSession:
    return request.app.state.session


async def get_ready_session(request: Request) -> OvertimeSession:
    session = await get_session(request)
    if not session.roster_ready:
        raise HTTPException(status_code=503, detail="The employee roster is not available")
    return session
