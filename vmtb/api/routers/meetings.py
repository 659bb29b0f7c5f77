"""REST router for MTB meetings."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError

from ...models.meeting import Meeting
from ...scheduling.recurrence import is_join_enabled, join_window
from ...utils.logging import get_logger
from ..dependencies import current_user_id, meeting_service, now
from ..schemas import JoinLinkResponse, JoinWindowResponse, MeetingView, ScheduleRequest

router = APIRouter(prefix="/api/meetings", tags=["meetings"])
logger = get_logger(__name__)


def _not_found(meeting_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Meeting {meeting_id} not found"
    )


@router.get("/upcoming", response_model=List[MeetingView])
async def list_upcoming(
    request: Request,
    mtb_id: List[str] = Query(..., description="MTBs the user belongs to"),
    user_id: str = Depends(current_user_id),
) -> List[MeetingView]:
    """Refresh from the store and return upcoming meetings in display order."""

    service = meeting_service(request, user_id)
    await service.refresh(mtb_id)
    moment = now(request)
    return [
        MeetingView(meeting=meeting, join_enabled=is_join_enabled(meeting, moment))
        for meeting in service.upcoming(moment)
    ]


@router.post("", response_model=List[Meeting], status_code=status.HTTP_201_CREATED)
async def schedule_meeting(
    payload: ScheduleRequest, request: Request, user_id: str = Depends(current_user_id)
) -> List[Meeting]:
    service = meeting_service(request, user_id)
    try:
        return await service.schedule(
            mtb_id=payload.mtb_id,
            scheduled_date=payload.scheduled_date,
            scheduled_time=payload.scheduled_time,
            schedule_type=payload.schedule_type,
            repeat_days=payload.repeat_days,
            explicit_dates=payload.explicit_dates,
        )
    except ValidationError as exc:
        logger.warning(f"Rejected meeting request for MTB {payload.mtb_id}: {exc.error_count()} error(s)")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[error["msg"] for error in exc.errors()],
        ) from exc


@router.get("/{meeting_id}/join-window", response_model=JoinWindowResponse)
async def read_join_window(
    meeting_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> JoinWindowResponse:
    meeting = meeting_service(request, user_id).feed.get(meeting_id)
    if meeting is None:
        raise _not_found(meeting_id)
    return JoinWindowResponse.from_window(meeting_id, join_window(meeting, now(request)))


@router.post("/{meeting_id}/join", response_model=JoinLinkResponse)
async def join_meeting(
    meeting_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> JoinLinkResponse:
    try:
        link = meeting_service(request, user_id).join_link(meeting_id, now(request))
    except KeyError as exc:
        raise _not_found(meeting_id) from exc
    return JoinLinkResponse(meeting_id=meeting_id, link=link)


@router.post("/{meeting_id}/end", response_model=Meeting)
async def end_meeting(
    meeting_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> Meeting:
    try:
        return await meeting_service(request, user_id).end(meeting_id)
    except KeyError as exc:
        raise _not_found(meeting_id) from exc


@router.post("/{meeting_id}/cancel", response_model=Meeting)
async def cancel_meeting(
    meeting_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> Meeting:
    try:
        return await meeting_service(request, user_id).cancel(meeting_id)
    except KeyError as exc:
        raise _not_found(meeting_id) from exc


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(
    meeting_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> None:
    if not await meeting_service(request, user_id).delete(meeting_id):
        raise _not_found(meeting_id)
