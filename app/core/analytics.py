from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    ANXIOUS = "anxious"
    NEUTRAL = "neutral"
    EXCITED = "excited"
    CALM = "calm"
    OTHER = "other"


class TimeFilter(str, Enum):
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


WINDOW_DAYS = {
    TimeFilter.WEEK: 7,
    TimeFilter.MONTH: 30,
}

# angry and other carry no weight and are left out of the average
DEFAULT_MOOD_WEIGHTS: Mapping[str, int] = MappingProxyType({
    Mood.SAD.value: 1,
    Mood.ANXIOUS.value: 2,
    Mood.NEUTRAL.value: 3,
    Mood.CALM.value: 4,
    Mood.HAPPY.value: 5,
    Mood.EXCITED.value: 5,
})

NEUTRAL_CHART_VALUE = 3
CHART_POINTS = 10


@dataclass(frozen=True)
class MoodSample:
    mood: str
    created_at: datetime


@dataclass(frozen=True)
class ChartPoint:
    date: str
    mood_value: int
    mood: str


@dataclass(frozen=True)
class Streaks:
    current: int
    longest: int


@dataclass(frozen=True)
class AnalyticsResult:
    total_entries: int
    average_mood: float
    most_frequent_mood: Optional[str]
    current_streak: int
    longest_streak: int
    mood_frequency: Dict[str, int] = field(default_factory=dict)
    chart_data: List[ChartPoint] = field(default_factory=list)
    time_filter: str = TimeFilter.ALL.value


def window_start(time_filter: TimeFilter, now: datetime) -> Optional[datetime]:
    """Start of the analytics window, or None when unbounded."""
    days = WINDOW_DAYS.get(TimeFilter(time_filter))
    if days is None:
        return None
    return now - timedelta(days=days)


def compute_frequencies(entries: Sequence[MoodSample]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for entry in entries:
        counts[entry.mood] = counts.get(entry.mood, 0) + 1

    # Enumeration order first so tie-breaking never depends on entry order
    ordered = {mood.value: counts.pop(mood.value) for mood in Mood if mood.value in counts}
    ordered.update(counts)
    return ordered


def _round_display(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_average(entries: Sequence[MoodSample], weights: Mapping[str, int]) -> float:
    scores = [weights[entry.mood] for entry in entries if entry.mood in weights]
    if not scores:
        return 0.0
    return _round_display(sum(scores) / len(scores))


def most_frequent(frequencies: Mapping[str, int]) -> Optional[str]:
    best_mood = None
    best_count = 0
    for mood, count in frequencies.items():
        if count > best_count:
            best_mood, best_count = mood, count
    return best_mood


def _day_gap(earlier: datetime, later: datetime) -> int:
    return (later.date() - earlier.date()).days


def compute_streaks(entries: Sequence[MoodSample], now: datetime) -> Streaks:
    """
    Daily logging streaks over entries sorted by created_at ascending.

    Adjacent entries continue a streak only when their calendar days are
    exactly one apart. Two entries on the same day have a gap of 0 and
    therefore break the run, like any other gap.
    """
    if not entries:
        return Streaks(current=0, longest=0)

    current = 0
    if _day_gap(entries[-1].created_at, now) <= 1:
        current = 1
        for i in range(len(entries) - 1, 0, -1):
            if _day_gap(entries[i - 1].created_at, entries[i].created_at) != 1:
                break
            current += 1

    longest = 1
    run = 1
    for previous, following in zip(entries, entries[1:]):
        if _day_gap(previous.created_at, following.created_at) == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    return Streaks(current=current, longest=longest)


def chart_series(entries: Sequence[MoodSample], weights: Mapping[str, int]) -> List[ChartPoint]:
    return [
        ChartPoint(
            date=entry.created_at.date().isoformat(),
            mood_value=weights.get(entry.mood, NEUTRAL_CHART_VALUE),
            mood=entry.mood,
        )
        for entry in entries[-CHART_POINTS:]
    ]


def analyze(
    entries: Sequence[MoodSample],
    weights: Mapping[str, int],
    now: datetime,
    time_filter: TimeFilter = TimeFilter.ALL,
) -> AnalyticsResult:
    frequencies = compute_frequencies(entries)
    streaks = compute_streaks(entries, now)

    return AnalyticsResult(
        total_entries=len(entries),
        average_mood=compute_average(entries, weights),
        most_frequent_mood=most_frequent(frequencies),
        current_streak=streaks.current,
        longest_streak=streaks.longest,
        mood_frequency=frequencies,
        chart_data=chart_series(entries, weights),
        time_filter=TimeFilter(time_filter).value,
    )
