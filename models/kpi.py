from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from pydantic import BaseModel, Field

from models.lead import utcnow

TREND_WINDOW = 3


class KPICategory(str, Enum):
    FINANCIAL = "financial"
    OPERATIONAL = "operational"
    CUSTOMER = "customer"
    MARKETING = "marketing"
    GROWTH = "growth"


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class KPITarget(BaseModel):
    value: Optional[float] = None
    period: Optional[Period] = None


class KPIHistoryPoint(BaseModel):
    date: datetime = Field(default_factory=utcnow)
    value: float
    note: Optional[str] = None


class KPI(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    name: str
    category: KPICategory
    description: Optional[str] = None
    target: Optional[KPITarget] = None
    current_value: Optional[float] = None
    unit: Optional[str] = None
    trend: Trend = Trend.STABLE
    history: List[KPIHistoryPoint] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def performance(self) -> Optional[Dict[str, Any]]:
        if not self.target or not self.target.value or not self.current_value:
            return None
        percentage = self.current_value / self.target.value * 100
        if percentage >= 100:
            status = "achieved"
        elif percentage >= 80:
            status = "on-track"
        else:
            status = "behind"
        return {"percentage": round(percentage, 2), "status": status}

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(mode="json")
        doc["performance"] = self.performance
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "KPI":
        return cls.model_validate({k: v for k, v in doc.items() if k != "performance"})


def classify_trend(history: Sequence[KPIHistoryPoint]) -> Trend:
    """
    Classify the short-term trend of a value history.

    Compares the most recent value with the earliest value of the last three
    points; this is an endpoint comparison, not a regression.
    """
    window = list(history)[-TREND_WINDOW:]
    if len(window) < 2:
        return Trend.STABLE
    first, last = window[0].value, window[-1].value
    if last > first:
        return Trend.INCREASING
    if last < first:
        return Trend.DECREASING
    return Trend.STABLE


def record_kpi_value(kpi: KPI, value: float, note: Optional[str] = None, now: Optional[datetime] = None) -> KPI:
    """Set the KPI's current value, append it to history and refresh the trend."""
    now = now or utcnow()
    kpi.current_value = value
    kpi.history.append(KPIHistoryPoint(date=now, value=value, note=note))
    kpi.trend = classify_trend(kpi.history)
    kpi.updated_at = now
    return kpi
