from pydantic import BaseModel
from typing import List, Dict, Optional

from app.core.analytics import TimeFilter


class ChartPointData(BaseModel):
    date: str
    mood_value: int  # 1 (sad) -> 5 (happy/excited), 3 when the mood has no weight
    mood: str


class MoodAnalyticsResponse(BaseModel):
    total_entries: int
    average_mood: float
    most_frequent_mood: Optional[str] = None

    current_streak: int
    longest_streak: int

    mood_frequency: Dict[str, int]

    # Last points for the line chart
    chart_data: List[ChartPointData]
    time_filter: TimeFilter
