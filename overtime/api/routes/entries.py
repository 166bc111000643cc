from fastapi import APIRouter, Depends

from ...session import OvertimeSession
from ..dependencies import get_ready_session, get_session
from ..schemas import DeleteResult, EntryIn, EntryOut

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=list[EntryOut])
async def list_entries(session: OvertimeSession = Depends(get_session)):
    return [EntryOut.from_entry(entry) for entry in session.entries()]


@router.post("", response_model=EntryOut, status_code=201)
async def create_entry(payload: EntryIn, session: OvertimeSession = Depends(get_ready_session)):
    entry = session.submit(payload.to_candidate())
    return EntryOut.from_entry(entry)


@router.post("/delete", response_model=DeleteResult)
async def delete_entry(payload: EntryOut, session: OvertimeSession = Depends(get_session)):
    return DeleteResult(deleted=session.delete(payload.to_entry()))


@router.delete("", status_code=204)
async def clear_entries(session: OvertimeSession = Depends(get_session)):
    session.clear()
    return None
