"""
Pydantic models for the analytics read API.

These mirror the engine's result dataclasses field for field so the
OpenAPI schema documents exactly what to_dict() produces.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field

from habitpulse.analytics import (
    ADHERENCE_STATUSES,
    CHART_RANGES,
    LOAD_STATUSES,
    MOMENTUM_TRENDS,
    RISK_LEVELS,
)
from habitpulse.store import TEST_TYPES


# =============================================================================
# Enums
# =============================================================================

# Built from the engine's vocabularies so the schema cannot drift from them
SlotStatus = Enum("SlotStatus", {v.upper(): v for v in ADHERENCE_STATUSES}, type=str)
Trend = Enum("Trend", {v.upper(): v for v in MOMENTUM_TRENDS}, type=str)
RiskLevel = Enum("RiskLevel", {v.upper(): v for v in RISK_LEVELS}, type=str)
LoadStatus = Enum("LoadStatus", {v.upper(): v for v in LOAD_STATUSES}, type=str)
ChartRange = Enum("ChartRange", {v.upper(): v for v in CHART_RANGES}, type=str)
ScoreType = Enum("ScoreType", {v.upper(): v for v in TEST_TYPES}, type=str)


# =============================================================================
# Core metrics
# =============================================================================


class HealthCheck(BaseModel):
    status: str = Field(default="ok")
    version: str = Field(default="0.1.0")
    timezone: str = Field(..., description="Engine timezone used for day bucketing")


class StreakResponse(BaseModel):
    current_streak: int = Field(..., ge=0, description="Consecutive active days")
    activity_id: int | None = None


class AdherenceSlotModel(BaseModel):
    slot_id: int
    start_time: str
    end_time: str
    activity_id: int
    activity_name: str
    activity_icon: str
    label: str | None = None
    planned_minutes: int
    logged_minutes: int
    status: SlotStatus


class AdherenceDayModel(BaseModel):
    date: dt.date
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    planned_minutes: int
    completed_minutes: int
    adherence_pct: int = Field(..., ge=0, le=100)
    slots: list[AdherenceSlotModel] = Field(default_factory=list)


class MomentumModel(BaseModel):
    score: int = Field(..., ge=0, le=100)
    streak_component: float
    volume_component: float
    consistency_component: float
    deep_work_component: float
    trend: Trend


class BurnoutModel(BaseModel):
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    factors: list[str] = Field(default_factory=list)


class BrainLoadModel(BaseModel):
    current_load: int = Field(..., ge=0, le=100)
    status: LoadStatus
    suggestion: str


class EnergyCurvePointModel(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    avg_focus: float = Field(..., description="0 means no samples")
    avg_energy: float = Field(..., description="0 means no samples")
    sample_size: int


class TopicShareModel(BaseModel):
    topic: str
    minutes: int
    percentage: int


# =============================================================================
# Supplementary statistics
# =============================================================================


class ActivityStatsModel(BaseModel):
    activity_id: int
    activity_name: str
    total_minutes: int
    total_sessions: int
    avg_session: int
    best_day: int
    current_streak: int
    longest_streak: int


class DeepWorkStatsModel(BaseModel):
    deep_sessions_week: int
    total_deep_minutes: int
    avg_session_length: int
    focus_consistency: int
    longest_session: int


class MoodPoint(BaseModel):
    date: dt.date
    mood: int


class DiaryStatsModel(BaseModel):
    total_entries: int
    diary_streak: int
    avg_mood: float
    avg_energy: float
    recent_moods: list[MoodPoint] = Field(default_factory=list)


class ActivityMinutesModel(BaseModel):
    activity_id: int
    name: str
    minutes: int


class DailySummaryModel(BaseModel):
    date: dt.date
    today_minutes: int
    week_minutes: int
    month_minutes: int
    current_streak: int
    today_by_activity: list[ActivityMinutesModel] = Field(default_factory=list)
    headline: str
    message: str


class WeeklyReviewModel(BaseModel):
    first_day: dt.date
    last_day: dt.date
    deep_work_minutes: int
    deep_work_sessions: int
    total_minutes: int
    avg_mood: float
    avg_energy: float


class DigestModel(BaseModel):
    text: str
    momentum: MomentumModel
    burnout: BurnoutModel
    brain_load: BrainLoadModel
    peak_hour: int | None = None
    topics: list[TopicShareModel] = Field(default_factory=list)


# =============================================================================
# Time series and test scores
# =============================================================================


class ChartPointModel(BaseModel):
    label: str
    value: int


class ChartSeriesModel(BaseModel):
    chart_range: ChartRange
    activity_id: int | None = None
    points: list[ChartPointModel] = Field(default_factory=list)
    total: int
    average: int = Field(..., description="Mean over buckets with logged time")


class ScoreTrendPointModel(BaseModel):
    date: dt.date
    percentage: float
    marks_obtained: float
    total_marks: float
    subject: str


class SubjectScoreModel(BaseModel):
    subject: str
    count: int
    avg_pct: float
    best_pct: float


class ScoreEntryModel(BaseModel):
    id: int
    test_type: ScoreType
    subject: str
    topic: str | None = None
    marks_obtained: float
    total_marks: float
    percentage: float
    date: dt.date
    duration_minutes: int | None = None
    notes: str | None = None


class ScoreSummaryModel(BaseModel):
    count: int
    avg_percentage: float
    best_percentage: float
    worst_percentage: float
    total_tests_prelims: int
    total_tests_mains: int
    by_subject: list[SubjectScoreModel] = Field(default_factory=list)
    recent: list[ScoreEntryModel] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    code: str | None = None
