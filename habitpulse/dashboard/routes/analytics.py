"""
Analytics Route - read-only behavioral metrics

Every endpoint accepts an optional `at` query parameter (ISO datetime)
used as "now"; without it the engine samples the clock once per request.
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from habitpulse.analytics.engine import AnalyticsEngine
from habitpulse.dashboard.dependencies import get_engine
from habitpulse.dashboard.models import (
    ActivityStatsModel,
    AdherenceDayModel,
    BrainLoadModel,
    BurnoutModel,
    ChartRange,
    ChartSeriesModel,
    DailySummaryModel,
    DeepWorkStatsModel,
    DiaryStatsModel,
    DigestModel,
    EnergyCurvePointModel,
    MomentumModel,
    ScoreSummaryModel,
    ScoreTrendPointModel,
    ScoreType,
    StreakResponse,
    TopicShareModel,
    WeeklyReviewModel,
)

router = APIRouter()

AT_QUERY = Query(None, description="Evaluate as of this instant (ISO 8601)")


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    activity_id: int | None = Query(None, description="Restrict to one activity"),
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Consecutive active days ending today, or yesterday if today is still empty."""
    return StreakResponse(
        current_streak=engine.get_streak(now=at, activity_id=activity_id),
        activity_id=activity_id,
    )


@router.get("/adherence", response_model=AdherenceDayModel)
async def get_adherence(
    day: date | None = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Planned timetable slots vs. logged minutes for one day."""
    return engine.get_adherence(day, now=at).to_dict()


@router.get("/adherence/weekly", response_model=list[AdherenceDayModel])
async def get_weekly_adherence(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    """The trailing seven days, oldest first."""
    return [d.to_dict() for d in engine.get_weekly_adherence(now=at)]


@router.get("/momentum", response_model=MomentumModel)
async def get_momentum(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_momentum(now=at).to_dict()


@router.get("/burnout", response_model=BurnoutModel)
async def get_burnout(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_burnout_risk(now=at).to_dict()


@router.get("/brain-load", response_model=BrainLoadModel)
async def get_brain_load(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_brain_load(now=at).to_dict()


@router.get("/energy-curve", response_model=list[EnergyCurvePointModel])
async def get_energy_curve(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    """24 hourly points; zeros mean no rated sessions in that hour."""
    return [p.to_dict() for p in engine.get_energy_curve(now=at)]


@router.get("/topics", response_model=list[TopicShareModel])
async def get_topics(
    days: int = Query(30, ge=1, le=3650, description="Trailing window in days"),
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Top 10 activities by minutes, with shares of the returned set."""
    try:
        shares = engine.get_topic_distribution(days=days, now=at)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return [t.to_dict() for t in shares]


@router.get("/activities/{activity_id}/stats", response_model=ActivityStatsModel)
async def get_activity_stats(
    activity_id: int,
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    try:
        return engine.get_activity_stats(activity_id, now=at).to_dict()
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/deep-work", response_model=DeepWorkStatsModel)
async def get_deep_work(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_deep_work_stats(now=at).to_dict()


@router.get("/diary", response_model=DiaryStatsModel)
async def get_diary(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_diary_stats(now=at).to_dict()


@router.get("/summary/daily", response_model=DailySummaryModel)
async def get_daily_summary(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_daily_summary(now=at).to_dict()


@router.get("/summary/weekly", response_model=WeeklyReviewModel)
async def get_weekly_review(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    return engine.get_weekly_review(now=at).to_dict()


@router.get("/digest", response_model=DigestModel)
async def get_digest(
    at: datetime | None = AT_QUERY, engine: AnalyticsEngine = Depends(get_engine)
):
    """Plain-text digest plus the structured metrics behind it."""
    return engine.get_insight_digest(now=at)


# ─────────────────────────────────────────────────────────────────────────────
# Time series and test scores
# ─────────────────────────────────────────────────────────────────────────────


@router.get("/chart", response_model=ChartSeriesModel)
async def get_chart(
    chart_range: ChartRange = Query(ChartRange.WEEKLY, alias="range"),
    activity_id: int | None = Query(None, description="Restrict to one activity"),
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Minutes per hour (daily), per day (weekly, monthly) or per week (all)."""
    return engine.get_chart(chart_range.value, activity_id=activity_id, now=at).to_dict()


@router.get("/heatmap", response_model=dict[str, int])
async def get_heatmap(
    activity_id: int | None = Query(None, description="Restrict to one activity"),
    days: int | None = Query(None, ge=1, le=3650, description="Trailing window, default 365"),
    at: datetime | None = AT_QUERY,
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Minutes per local date; days without sessions are omitted."""
    return engine.get_heatmap(activity_id=activity_id, days=days, now=at)


@router.get("/tests/trends", response_model=list[ScoreTrendPointModel])
async def get_score_trends(
    test_type: ScoreType | None = Query(None),
    subject: str | None = Query(None),
    engine: AnalyticsEngine = Depends(get_engine),
):
    """Test percentages, oldest first."""
    points = engine.get_score_trends(test_type.value if test_type else None, subject)
    return [p.to_dict() for p in points]


@router.get("/tests/summary", response_model=ScoreSummaryModel)
async def get_score_summary(
    test_type: ScoreType | None = Query(None),
    engine: AnalyticsEngine = Depends(get_engine),
):
    return engine.get_score_summary(test_type.value if test_type else None).to_dict()
