"""
Result types returned by the analytics engine.

Plain dataclasses, computed on demand and never stored. to_dict()
gives JSON-ready data (dates as ISO strings) for the read API and CLI.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class _Serializable:
    def to_dict(self) -> dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass
class AdherenceSlot(_Serializable):
    """One planned slot judged against the day's logged minutes."""

    slot_id: int
    start_time: str
    end_time: str
    activity_id: int
    activity_name: str
    activity_icon: str
    label: str | None
    planned_minutes: int
    logged_minutes: int
    status: str  # "done" | "partial" | "missed"


@dataclass
class AdherenceDay(_Serializable):
    date: date
    day_of_week: int  # 0 = Sunday
    planned_minutes: int = 0
    completed_minutes: int = 0
    adherence_pct: int = 0
    slots: list[AdherenceSlot] = field(default_factory=list)


@dataclass
class MomentumScore(_Serializable):
    score: int
    streak_component: float
    volume_component: float
    consistency_component: float
    deep_work_component: float
    trend: str  # "rising" | "stable" | "falling"


@dataclass
class BurnoutRisk(_Serializable):
    risk_score: int
    risk_level: str  # "low" | "medium" | "high"
    factors: list[str] = field(default_factory=list)


@dataclass
class BrainLoad(_Serializable):
    current_load: int
    status: str  # "optimal" | "high" | "overload"
    suggestion: str


@dataclass
class EnergyCurvePoint(_Serializable):
    """Hourly averages. 0 means no samples, not a rating of zero."""

    hour: int
    avg_focus: float = 0
    avg_energy: float = 0
    sample_size: int = 0


@dataclass
class TopicShare(_Serializable):
    topic: str
    minutes: int
    percentage: int


@dataclass
class ActivityStats(_Serializable):
    activity_id: int
    activity_name: str
    total_minutes: int = 0
    total_sessions: int = 0
    avg_session: int = 0
    best_day: int = 0
    current_streak: int = 0
    longest_streak: int = 0


@dataclass
class DeepWorkStats(_Serializable):
    deep_sessions_week: int = 0
    total_deep_minutes: int = 0
    avg_session_length: int = 0
    focus_consistency: int = 0
    longest_session: int = 0


@dataclass
class DiaryStats(_Serializable):
    total_entries: int = 0
    diary_streak: int = 0
    avg_mood: float = 0
    avg_energy: float = 0
    recent_moods: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ActivityMinutes(_Serializable):
    activity_id: int
    name: str
    minutes: int


@dataclass
class DailySummary(_Serializable):
    date: date
    today_minutes: int = 0
    week_minutes: int = 0
    month_minutes: int = 0
    current_streak: int = 0
    today_by_activity: list[ActivityMinutes] = field(default_factory=list)
    headline: str = ""
    message: str = ""


@dataclass
class WeeklyReview(_Serializable):
    first_day: date
    last_day: date
    deep_work_minutes: int = 0
    deep_work_sessions: int = 0
    total_minutes: int = 0
    avg_mood: float = 0
    avg_energy: float = 0


@dataclass
class ChartPoint(_Serializable):
    label: str
    value: int


@dataclass
class ChartSeries(_Serializable):
    """Minute totals per bucket. Only buckets with logged time appear."""

    chart_range: str  # "daily" | "weekly" | "monthly" | "all"
    activity_id: int | None = None
    points: list[ChartPoint] = field(default_factory=list)
    total: int = 0
    average: int = 0


@dataclass
class ScoreTrendPoint(_Serializable):
    date: date
    percentage: float
    marks_obtained: float
    total_marks: float
    subject: str


@dataclass
class SubjectScore(_Serializable):
    subject: str
    count: int
    avg_pct: float
    best_pct: float


@dataclass
class ScoreEntry(_Serializable):
    id: int
    test_type: str
    subject: str
    topic: str | None
    marks_obtained: float
    total_marks: float
    percentage: float
    date: date
    duration_minutes: int | None = None
    notes: str | None = None


@dataclass
class ScoreSummary(_Serializable):
    count: int = 0
    avg_percentage: float = 0
    best_percentage: float = 0
    worst_percentage: float = 0
    total_tests_prelims: int = 0
    total_tests_mains: int = 0
    by_subject: list[SubjectScore] = field(default_factory=list)
    recent: list[ScoreEntry] = field(default_factory=list)
