"""
Analytics routes.

View and click tracking is public and fire-and-forget: the write runs as a
background task after the response is sent.
"""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from linkbio.api.deps import (
    get_current_owner_id,
    get_ingestion_service,
    get_reporting_service,
)
from linkbio.api.errors import raise_for_errors
from linkbio.api.schemas import (
    LinkClickCountResponse,
    RecordClickRequest,
    RecordViewRequest,
    StatsResponse,
    SuccessResponse,
)
from linkbio.components.analytics import (
    EventIngestionService,
    GetLinkClickCountInput,
    GetStatsInput,
    RecordClickInput,
    RecordViewInput,
    ReportingService,
    run_get_link_click_count,
    run_get_stats,
    run_record_click,
    run_record_view,
)

router = APIRouter()


@router.post("/analytics/view", response_model=SuccessResponse)
def record_view(
    data: RecordViewRequest,
    background_tasks: BackgroundTasks,
    service: EventIngestionService = Depends(get_ingestion_service),
) -> SuccessResponse:
    background_tasks.add_task(run_record_view, RecordViewInput(username=data.username), service)
    return SuccessResponse(success=True)


@router.post("/analytics/click", response_model=SuccessResponse)
def record_click(
    data: RecordClickRequest,
    background_tasks: BackgroundTasks,
    service: EventIngestionService = Depends(get_ingestion_service),
) -> SuccessResponse:
    background_tasks.add_task(run_record_click, RecordClickInput(link_id=data.link_id), service)
    return SuccessResponse(success=True)


@router.get("/analytics/stats", response_model=StatsResponse)
def get_stats(
    range_name: str | None = Query(None, alias="range"),
    date_from: date | None = Query(None, alias="from"),
    date_to: date | None = Query(None, alias="to"),
    owner_id: str = Depends(get_current_owner_id),
    service: ReportingService = Depends(get_reporting_service),
) -> StatsResponse:
    """Stats for a named range (default last7) or an explicit from/to pair."""
    result = run_get_stats(
        GetStatsInput(owner_id=owner_id, range=range_name, date_from=date_from, date_to=date_to),
        service,
    )
    if not result.success or result.report is None:
        raise_for_errors(result.errors)
    return StatsResponse.from_report(result.report)


@router.get("/analytics/links/{link_id}/clicks", response_model=LinkClickCountResponse)
def get_link_click_count(
    link_id: int,
    owner_id: str = Depends(get_current_owner_id),
    service: ReportingService = Depends(get_reporting_service),
) -> LinkClickCountResponse:
    result = run_get_link_click_count(
        GetLinkClickCountInput(owner_id=owner_id, link_id=link_id), service
    )
    if not result.success:
        raise_for_errors(result.errors)
    return LinkClickCountResponse(link_id=result.link_id, click_count=result.click_count)
