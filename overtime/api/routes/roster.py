from fastapi import APIRouter, Depends, HTTPException

from ...session import OvertimeSession
from ..dependencies import get_ready_session, get_session
from ..schemas import EmployeeOut, RosterStatus

router = APIRouter(tags=["roster"])


@router.get("/roster/status", response_model=RosterStatus)
async def roster_status(session: OvertimeSession = Depends(get_session)):
    return RosterStatus(
        ready=session.roster_ready,
        employees=len(session.roster),
        error=str(session.roster_error) if session.roster_error else None,
    )


@router.get("/authorities", response_model=list[str])
async def list_authorities(session: OvertimeSession = Depends(get_ready_session)):
    return session.authorities()


@router.get("/employees", response_model=list[EmployeeOut])
async def list_employees(
    authority: str | None = None,
    search: str | None = None,
    session: OvertimeSession = Depends(get_ready_session),
):
    return [EmployeeOut.from_record(record) for record in session.candidates(authority, search)]


@router.get("/employees/{identifier}", response_model=EmployeeOut)
async def get_employee(identifier: str, authority: str, session: OvertimeSession = Depends(get_ready_session)):
    record = session.lookup(identifier, authority)
    if record is None:
        raise HTTPException(status_code=404, detail="Employee not found for this coordinator")
    return EmployeeOut.from_record(record)
