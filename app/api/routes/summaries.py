# app/api/routes/summaries.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.summary import SummaryDetail, SummaryPage
from app.services.summary_queries import (
    DEFAULT_PAGE_SIZE,
    get_summary,
    get_summary_xlsx,
    list_summaries,
    to_detail,
)

router = APIRouter(prefix="/summaries", tags=["Summaries"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get(
    "",
    response_model=SummaryPage,
    summary="List attendance summaries",
    description=(
        "Return summaries created by previous upload batches, newest first.\n\n"
        "Out-of-range paging values are clamped: `page` below 1 becomes 1 and a "
        "`page_size` outside 1..100 falls back to 5."
    ),
)
async def list_attendance_summaries(
    page: int = Query(default=1, description="1-based page number.", examples=[1]),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, description="Items per page.", examples=[5]),
    search: str | None = Query(
        default=None,
        description="Only summaries containing a meeting whose title contains this text.",
    ),
    number: int | None = Query(default=None, description="Only the summary with this id."),
    sort_desc: bool = Query(default=True, description="Newest first when true."),
    db: AsyncSession = Depends(get_db),
) -> SummaryPage:
    return await list_summaries(
        db,
        page=page,
        page_size=page_size,
        search=search,
        number=number,
        sort_desc=sort_desc,
    )


@router.get(
    "/{summary_id}",
    response_model=SummaryDetail,
    summary="Get a single attendance summary",
    responses={404: {"description": "Summary not found."}},
)
async def get_attendance_summary(
    summary_id: int = Path(..., description="Summary identifier.", examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> SummaryDetail:
    summary = await get_summary(db, summary_id)
    if summary is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Summary with ID {summary_id} not found",
        )
    return to_detail(summary)


@router.get(
    "/{summary_id}/download",
    summary="Download a summary as an Excel workbook",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}},
        404: {"description": "Summary not found."},
    },
)
async def download_attendance_summary(
    summary_id: int = Path(..., description="Summary identifier.", examples=[1]),
    db: AsyncSession = Depends(get_db),
) -> Response:
    found = await get_summary_xlsx(db, summary_id)
    if found is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Summary with ID {summary_id} not found",
        )

    data, filename = found
    return Response(
        content=data,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
