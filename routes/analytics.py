import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from loguru import logger

from models.kpi import KPI, KPICategory, record_kpi_value
from models.requests import (
    AIAnalysisIn,
    CompetitiveAnalysisIn,
    CustomerSegmentsIn,
    KPICreateIn,
    KPIRecommendationsIn,
    KPIValueIn,
    MetricsRecordIn,
    PredictionsIn,
)
from routes.common import generate, owned_or_404, require_business_profile
from tools.auth import current_user
from tools.documents import get_document_store

router = APIRouter(prefix="/analytics", tags=["analytics"])

METRICS = "business_metrics"
KPIS = "kpis"
ANALYSIS_WINDOW_DAYS = 30
PREDICTION_WINDOW_DAYS = 90


def _utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _metrics_between(user_id: str, start: datetime, end: Optional[datetime] = None,
                     period: Optional[str] = None) -> List[Dict[str, Any]]:
    """Recorded metrics of the user within [start, end], oldest first."""
    def in_range(doc: Dict[str, Any]) -> bool:
        date = _utc(datetime.fromisoformat(doc["date"]))
        if period and doc.get("period") != period:
            return False
        return start <= date and (end is None or date <= end)

    return get_document_store().find(METRICS, user_id, where=in_range, sort_by="date", descending=False)


def _series(metrics: List[Dict[str, Any]], name: str, *fields: str) -> List[Dict[str, Any]]:
    points = []
    for doc in metrics:
        entry = doc.get("metrics", {}).get(name) or {}
        value = next((entry[f] for f in fields if isinstance(entry, dict) and entry.get(f)), 0)
        points.append({"date": doc["date"], "value": value})
    return points


@router.post("/metrics/record")
def record_metrics(payload: MetricsRecordIn, user: Dict[str, Any] = Depends(current_user)):
    date = _utc(payload.date) if payload.date else datetime.now(timezone.utc)
    doc = get_document_store().insert(METRICS, {
        "user_id": user["id"],
        "metrics": payload.metrics,
        "period": payload.period.value,
        "date": date.isoformat()
    })
    return {"message": "Metrics recorded successfully", "metrics": doc}


@router.get("/metrics")
def list_metrics(start_date: Optional[datetime] = None, end_date: Optional[datetime] = None,
                 period: Optional[str] = "daily", limit: int = 100,
                 user: Dict[str, Any] = Depends(current_user)):
    if start_date and end_date:
        start, end = _utc(start_date), _utc(end_date)
    else:
        start, end = datetime.now(timezone.utc) - timedelta(days=ANALYSIS_WINDOW_DAYS), None

    metrics = list(reversed(_metrics_between(user["id"], start, end, period)))[:max(1, limit)]
    return {"message": "Metrics retrieved successfully", "metrics": metrics, "count": len(metrics)}


@router.post("/ai-analysis")
def ai_analysis(payload: AIAnalysisIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    now = datetime.now(timezone.utc)
    start = _utc(payload.date_range.start) if payload.date_range.start else now - timedelta(days=ANALYSIS_WINDOW_DAYS)
    end = _utc(payload.date_range.end) if payload.date_range.end else now

    metrics = _metrics_between(user["id"], start, end)
    days = max(1, math.ceil((end - start).total_seconds() / 86400))
    request = {
        "business_name": profile.get("business_name"),
        "industry": profile.get("industry"),
        "revenue": _series(metrics, "revenue", "amount"),
        "customers": _series(metrics, "customers", "total"),
        "website_traffic": _series(metrics, "website", "visitors"),
        "marketing_campaigns": [],
        "customer_feedback": [],
        "timeframe": f"{days}d",
        "date_range": {"start": start.isoformat(), "end": end.isoformat()}
    }

    state = generate("business_analysis", request, user, persist=True, failure="Failed to generate AI analysis")
    return {
        "message": "AI analysis completed successfully",
        "analysis": state["content"],
        "report_id": state["document_id"],
        "generated_at": now.isoformat()
    }


@router.post("/competitive-analysis")
def competitive_analysis(payload: CompetitiveAnalysisIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    request = {
        "business_name": profile.get("business_name"),
        "industry": profile.get("industry"),
        "market_position": payload.market_position,
        "competitors": payload.competitors
    }
    state = generate("competitive_analysis", request, user, persist=True,
                     failure="Failed to generate competitive analysis")
    return {
        "message": "Competitive analysis completed successfully",
        "analysis": state["content"],
        "analysis_id": state["document_id"]
    }


@router.post("/customer-segments")
def customer_segments(payload: CustomerSegmentsIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("customer_segments", payload.model_dump(), user, failure="Failed to analyze customer segments")
    return {"message": "Customer segmentation completed successfully", "segments": state["content"]}


@router.post("/predictions")
def predictions(payload: PredictionsIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    since = datetime.now(timezone.utc) - timedelta(days=PREDICTION_WINDOW_DAYS)
    history = _series(_metrics_between(user["id"], since), payload.metric, "amount", "total")

    request = {
        "historical_data": history,
        "industry": profile.get("industry"),
        "seasonality": True,
        "external_factors": []
    }
    state = generate("trend_forecast", request, user, failure="Failed to generate predictions")
    return {
        "message": "Predictions generated successfully",
        "predictions": state["content"],
        "metric": payload.metric,
        "timeframe": payload.timeframe
    }


@router.post("/kpi/recommendations")
def kpi_recommendations(payload: KPIRecommendationsIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    request = {"industry": profile.get("industry"), **payload.model_dump()}
    state = generate("kpi_recommendations", request, user, failure="Failed to generate KPI recommendations")
    return {"message": "KPI recommendations generated successfully", "recommendations": state["content"]}


@router.post("/kpi/create")
def create_kpi(payload: KPICreateIn, user: Dict[str, Any] = Depends(current_user)):
    kpi = KPI(user_id=user["id"], **payload.model_dump(exclude_none=True))
    doc = get_document_store().insert(KPIS, kpi.to_document())
    logger.info(f"KPI created for user {user['id']}: {kpi.name}")
    return {"message": "KPI created successfully", "kpi": doc}


@router.get("/kpi")
def list_kpis(category: Optional[KPICategory] = None, active: bool = True,
              user: Dict[str, Any] = Depends(current_user)):
    def matches(doc: Dict[str, Any]) -> bool:
        if category and doc.get("category") != category.value:
            return False
        return doc.get("is_active", True) == active

    kpis = get_document_store().find(KPIS, user["id"], where=matches)
    kpis.sort(key=lambda d: (d.get("category", ""), d.get("name", "")))
    return {"message": "KPIs retrieved successfully", "kpis": kpis, "count": len(kpis)}


@router.put("/kpi/{kpi_id}/update")
def update_kpi(kpi_id: str, payload: KPIValueIn, user: Dict[str, Any] = Depends(current_user)):
    kpi = KPI.from_document(owned_or_404(KPIS, kpi_id, user, "KPI"))
    record_kpi_value(kpi, payload.value, payload.note)
    doc = get_document_store().replace(KPIS, kpi.to_document())
    return {"message": "KPI updated successfully", "kpi": doc}
