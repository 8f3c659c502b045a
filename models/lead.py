from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

EMAIL_WEIGHT = 40
CLICK_WEIGHT = 30
RECENCY_MAX = 20
RECENCY_DAYS_PER_POINT = 7
PROFILE_FIELDS = ("first_name", "last_name", "phone", "company", "job_title")
PROFILE_FIELD_POINTS = 2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityKind(str, Enum):
    EMAIL_SENT = "email_sent"
    EMAIL_OPENED = "email_opened"
    LINK_CLICKED = "link_clicked"
    FORM_SUBMITTED = "form_submitted"
    PAGE_VISITED = "page_visited"
    PURCHASE = "purchase"
    CALL = "call"
    MEETING = "meeting"
    NOTE_ADDED = "note_added"
    STATUS_CHANGE = "status_change"
    STAGE_CHANGE = "stage_change"
    IMPORT = "import"
    MANUAL_ADD = "manual_add"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


class LeadSource(str, Enum):
    WEBSITE = "website"
    SOCIAL_MEDIA = "social_media"
    EMAIL_CAMPAIGN = "email_campaign"
    REFERRAL = "referral"
    ADVERTISEMENT = "advertisement"
    EVENT = "event"
    MANUAL = "manual"
    IMPORT = "import"


class LifecycleStage(str, Enum):
    SUBSCRIBER = "subscriber"
    LEAD = "lead"
    MARKETING_QUALIFIED = "marketing_qualified"
    SALES_QUALIFIED = "sales_qualified"
    OPPORTUNITY = "opportunity"
    CUSTOMER = "customer"
    EVANGELIST = "evangelist"


class Activity(BaseModel):
    kind: ActivityKind
    description: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


class EngagementState(BaseModel):
    total_emails_sent: int = Field(default=0, ge=0)
    emails_opened: int = Field(default=0, ge=0)
    links_clicked: int = Field(default=0, ge=0)
    last_email_opened_at: Optional[datetime] = None
    last_link_clicked_at: Optional[datetime] = None
    engagement_score: float = Field(default=0.0, ge=0, le=100)


class Lifecycle(BaseModel):
    stage: LifecycleStage = LifecycleStage.SUBSCRIBER
    first_contact: datetime = Field(default_factory=utcnow)
    last_contact: Optional[datetime] = None
    last_activity: Optional[datetime] = None


class LeadValue(BaseModel):
    estimated_value: float = 0.0
    actual_value: float = 0.0
    currency: str = "USD"


class Note(BaseModel):
    content: str
    created_at: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None


class Lead(BaseModel):
    """A contact tracked by a business, owning its engagement state and activity log."""
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    status: LeadStatus = LeadStatus.NEW
    source: LeadSource = LeadSource.MANUAL
    tags: List[str] = Field(default_factory=list)
    custom_fields: Dict[str, str] = Field(default_factory=dict)
    lifecycle: Lifecycle = Field(default_factory=Lifecycle)
    value: LeadValue = Field(default_factory=LeadValue)
    notes: List[Note] = Field(default_factory=list)
    engagement: EngagementState = Field(default_factory=EngagementState)
    activities: List[Activity] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or self.email

    @property
    def engagement_rate(self) -> float:
        if self.engagement.total_emails_sent == 0:
            return 0.0
        rate = self.engagement.emails_opened / self.engagement.total_emails_sent * 100
        return round(rate, 2)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(mode="json")
        doc["full_name"] = self.full_name
        doc["engagement_rate"] = self.engagement_rate
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Lead":
        data = {k: v for k, v in doc.items() if k not in ("full_name", "engagement_rate")}
        return cls.model_validate(data)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_score(lead: Lead, now: Optional[datetime] = None) -> float:
    """
    Compute the engagement score of a lead.

    Open rate contributes up to 40 points, click-through on opens up to 30,
    recency of the last open up to 20 (losing one point per week), and
    profile completeness up to 10. The sum is clamped to [0, 100].

    Args:
        lead: Lead whose engagement counters and profile are scored
        now: Reference time for recency (defaults to current UTC time)

    Returns:
        Engagement score between 0 and 100
    """
    now = _as_utc(now or utcnow())
    engagement = lead.engagement
    score = 0.0

    if engagement.total_emails_sent > 0:
        score += engagement.emails_opened / engagement.total_emails_sent * EMAIL_WEIGHT

    if engagement.emails_opened > 0:
        score += engagement.links_clicked / engagement.emails_opened * CLICK_WEIGHT

    if engagement.last_email_opened_at:
        days_since_open = (now - _as_utc(engagement.last_email_opened_at)).total_seconds() / 86400
        score += max(0.0, RECENCY_MAX - days_since_open / RECENCY_DAYS_PER_POINT)

    score += sum(PROFILE_FIELD_POINTS for field in PROFILE_FIELDS if getattr(lead, field))

    return min(100.0, max(0.0, score))


def record_activity(
    lead: Lead,
    kind: ActivityKind,
    description: str,
    metadata: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Lead:
    """Append an activity to the lead, update counters and recompute its score."""
    now = now or utcnow()
    kind = ActivityKind(kind)

    lead.activities.append(Activity(
        kind=kind,
        description=description,
        metadata=metadata or {},
        timestamp=now,
    ))
    lead.lifecycle.last_activity = now

    engagement = lead.engagement
    if kind == ActivityKind.EMAIL_SENT:
        engagement.total_emails_sent += 1
    elif kind == ActivityKind.EMAIL_OPENED:
        engagement.emails_opened += 1
        engagement.last_email_opened_at = now
    elif kind == ActivityKind.LINK_CLICKED:
        engagement.links_clicked += 1
        engagement.last_link_clicked_at = now

    engagement.engagement_score = compute_score(lead, now)
    return lead
