from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...exporter import export_filename
from ...session import OvertimeSession
from ..dependencies import get_session

router = APIRouter(prefix="/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/csv")
async def export_csv(session: OvertimeSession = Depends(get_session)):
    content = session.export_csv()
    return Response(
        content="\ufeff" + content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename("csv")),
    )


@router.get("/xlsx")
async def export_xlsx(session: OvertimeSession = Depends(get_session)):
    content = session.export_workbook()
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment(export_filename("xlsx")))
