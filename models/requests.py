"""Request bodies accepted by the HTTP API."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from models.kpi import KPICategory, KPITarget, Period
from models.lead import ActivityKind, LeadSource, LeadStatus, LeadValue, LifecycleStage


class BusinessProfileIn(BaseModel):
    business_name: Optional[str] = Field(None, min_length=1, max_length=100)
    industry: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    target_audience: Optional[str] = None
    key_services: Optional[List[str]] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


# Websites

class BusinessInfo(BaseModel):
    name: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    target_audience: Optional[str] = None
    key_services: List[str] = Field(default_factory=list)
    contact_info: Dict[str, Any] = Field(default_factory=dict)


class WebsiteGenerateIn(BaseModel):
    business_info: BusinessInfo
    preferences: Dict[str, Any] = Field(default_factory=dict)


class WebsiteUpdateIn(BaseModel):
    business_info: Optional[Dict[str, Any]] = None
    design: Optional[Dict[str, Any]] = None
    content: Optional[Dict[str, Any]] = None
    seo: Optional[Dict[str, Any]] = None


class WebsiteImagesIn(BaseModel):
    business_name: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    description: str = ""
    style: str = "professional"


# Marketing

class MarketingBusinessInfo(BaseModel):
    company: Optional[str] = None
    industry: Optional[str] = None


class CampaignBusinessInfo(MarketingBusinessInfo):
    company: str = Field(..., min_length=1)


class CampaignGenerateIn(BaseModel):
    campaign_type: str = Field(..., min_length=1)
    audience: str = Field(..., min_length=1)
    goals: Optional[str] = None
    tone: Optional[str] = None
    product_info: Optional[str] = None
    business_info: CampaignBusinessInfo


class CampaignUpdateIn(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    status: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    audience: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    schedule: Optional[Dict[str, Any]] = None
    analytics: Optional[Dict[str, Any]] = None


class CampaignOptimizeIn(BaseModel):
    open_rate: float = Field(..., ge=0, le=100)
    click_rate: float = Field(..., ge=0, le=100)
    conversion_rate: float = Field(0, ge=0, le=100)


class NewsletterIn(BaseModel):
    topics: List[str] = Field(..., min_length=1)
    audience: Optional[str] = None
    frequency: Optional[str] = None
    tone: Optional[str] = None
    business_info: MarketingBusinessInfo = Field(default_factory=MarketingBusinessInfo)


class SocialPostIn(BaseModel):
    platform: str = Field(..., min_length=1)
    topic: Optional[str] = None
    content_type: Optional[str] = None
    hashtags: Optional[str] = None
    tone: Optional[str] = None
    business_info: MarketingBusinessInfo = Field(default_factory=MarketingBusinessInfo)


class AutomationIn(BaseModel):
    trigger: str = Field(..., min_length=1)
    goals: Optional[str] = None
    audience_segment: Optional[str] = None
    sequence_length: int = Field(5, ge=1, le=20)
    business_info: MarketingBusinessInfo = Field(default_factory=MarketingBusinessInfo)


class LeadMagnetIn(BaseModel):
    topic: str = Field(..., min_length=1)
    format: Optional[str] = None
    target_audience: Optional[str] = None
    business_info: MarketingBusinessInfo = Field(default_factory=MarketingBusinessInfo)


# Leads

class LeadIn(BaseModel):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    status: LeadStatus = LeadStatus.NEW
    source: LeadSource = LeadSource.MANUAL
    tags: List[str] = Field(default_factory=list)
    custom_fields: Dict[str, str] = Field(default_factory=dict)
    value: Optional[LeadValue] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LeadUpdateIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    status: Optional[LeadStatus] = None
    stage: Optional[LifecycleStage] = None
    tags: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, str]] = None
    value: Optional[LeadValue] = None


class ActivityIn(BaseModel):
    kind: ActivityKind
    description: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class NoteIn(BaseModel):
    content: str = Field(..., min_length=1)


class LeadImportIn(BaseModel):
    leads: List[Dict[str, Any]] = Field(..., min_length=1)


# Chatbot

class ChatMessageIn(BaseModel):
    message: str = Field(..., min_length=1)
    session_id: Optional[str] = None


class TrainingDataIn(BaseModel):
    existing_faq: List[Dict[str, Any]] = Field(default_factory=list)


class ChatInteraction(BaseModel):
    user_message: str
    bot_response: str


class ChatAnalyzeIn(BaseModel):
    session_id: Optional[str] = None
    interactions: List[ChatInteraction] = Field(default_factory=list)


# Analytics

class DateRange(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class AIAnalysisIn(BaseModel):
    date_range: DateRange = Field(default_factory=DateRange)


class CompetitiveAnalysisIn(BaseModel):
    competitors: List[str] = Field(default_factory=list)
    market_position: str = "unknown"


class CustomerSegmentsIn(BaseModel):
    customers: List[Dict[str, Any]] = Field(default_factory=list)
    transactions: List[Dict[str, Any]] = Field(default_factory=list)
    demographics: Dict[str, Any] = Field(default_factory=dict)


class PredictionsIn(BaseModel):
    metric: str = "revenue"
    timeframe: str = "quarterly"


class KPIRecommendationsIn(BaseModel):
    business_stage: str = "growth"
    current_kpis: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)


class MetricsRecordIn(BaseModel):
    metrics: Dict[str, Any]
    period: Period = Period.DAILY
    date: Optional[datetime] = None


class KPICreateIn(BaseModel):
    name: str = Field(..., min_length=1)
    category: KPICategory
    description: Optional[str] = None
    target: Optional[KPITarget] = None
    unit: Optional[str] = None


class KPIValueIn(BaseModel):
    value: float
    note: Optional[str] = None


# Images

class ImageGenerateIn(BaseModel):
    prompt: str = Field(..., min_length=10, max_length=1000)
    aspect_ratio: str = "1:1"
    style: str = ""
    quality: str = "high"
    number_of_images: int = Field(1, ge=1, le=4)


class ImagePromptIn(BaseModel):
    requirements: Dict[str, Any]


class ImageConceptsIn(BaseModel):
    description: str = Field(..., min_length=1)
