from dataclasses import asdict
from fastapi import APIRouter, Depends, Query

from app.core.analytics import DEFAULT_MOOD_WEIGHTS, Mood, TimeFilter, analyze, window_start
from app.core.time_utils import utc_now
from app.db.repository import find_entries_by_user_and_window
from app.models.stat import MoodAnalyticsResponse
from app.routers.auth_dependency import get_current_user_id

# Shares the /journals prefix, include it before journal_router so
# /journals/{entry_id} does not swallow this path
router = APIRouter(
    prefix="/journals",
    tags=["Statistics"],
    dependencies=[Depends(get_current_user_id)]
)


def get_clock():
    return utc_now


@router.get("/mood-analytics", response_model=MoodAnalyticsResponse)
async def get_mood_analytics(
    time_filter: TimeFilter = Query(TimeFilter.MONTH, alias="timeFilter"),
    user_id: str = Depends(get_current_user_id),
    clock=Depends(get_clock),
):
    now = clock()

    entries = find_entries_by_user_and_window(
        user_id,
        start=window_start(time_filter, now),
        end=now,
        exclude_moods=[Mood.OTHER.value],
    )

    result = analyze(entries, DEFAULT_MOOD_WEIGHTS, now, time_filter)
    return MoodAnalyticsResponse(**asdict(result))
