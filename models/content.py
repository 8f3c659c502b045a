"""Response shapes expected from the model for each generation kind."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


# Websites

class Hero(Lenient):
    headline: str
    subheadline: str = ""
    ctaText: str = ""


class Section(Lenient):
    title: str
    content: str = ""


class Card(Lenient):
    title: str
    description: str = ""
    icon: Optional[str] = None


class Testimonial(Lenient):
    name: str
    company: Optional[str] = None
    content: str = ""
    rating: Optional[float] = None


class SEO(Lenient):
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)


class WebsiteContent(Lenient):
    hero: Hero
    about: Optional[Section] = None
    services: List[Card] = Field(default_factory=list)
    features: List[Card] = Field(default_factory=list)
    testimonials: List[Testimonial] = Field(default_factory=list)
    contact: Optional[Dict[str, Any]] = None
    seo: Optional[SEO] = None


# Marketing

class EmailCampaign(Lenient):
    subject: str
    previewText: str = ""
    html: str
    text: str = ""
    cta: List[str] = Field(default_factory=list)


class SocialPost(Lenient):
    content: str
    hashtags: List[str] = Field(default_factory=list)
    cta: Optional[str] = None
    imagePrompt: Optional[str] = None
    bestTimeToPost: Optional[str] = None
    engagementTips: List[str] = Field(default_factory=list)


class NewsletterSection(Lenient):
    title: str
    content: str = ""
    type: Optional[str] = None


class Newsletter(Lenient):
    subject: str
    html: str = ""
    text: str = ""
    sections: List[NewsletterSection] = Field(default_factory=list)


class SequenceEmail(Lenient):
    step: int
    subject: str
    delayHours: float = 0
    goal: Optional[str] = None
    html: str = ""
    text: str = ""


class AutomationSequence(Lenient):
    sequenceName: str
    description: str = ""
    emails: List[SequenceEmail]


class Recommendation(Lenient):
    category: Optional[str] = None
    priority: Optional[str] = None
    recommendation: str
    expectedImpact: Optional[str] = None


class CampaignOptimization(Lenient):
    overallScore: str
    recommendations: List[Recommendation] = Field(default_factory=list)
    nextSteps: List[str] = Field(default_factory=list)


class LeadMagnet(Lenient):
    title: str
    subtitle: str = ""
    outline: List[str] = Field(default_factory=list)
    landingPageCopy: Dict[str, Any] = Field(default_factory=dict)
    optinForm: Dict[str, Any] = Field(default_factory=dict)
    followUpSequence: List[Dict[str, Any]] = Field(default_factory=list)


# Analytics

class BusinessAnalysis(Lenient):
    overallPerformance: Dict[str, Any] = Field(default_factory=dict)
    keyInsights: List[Dict[str, Any]] = Field(default_factory=list)
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)
    predictions: Dict[str, Any] = Field(default_factory=dict)
    riskFactors: List[Dict[str, Any]] = Field(default_factory=list)
    opportunities: List[Dict[str, Any]] = Field(default_factory=list)


class CompetitiveAnalysis(Lenient):
    marketAnalysis: Dict[str, Any] = Field(default_factory=dict)
    competitivePosition: Dict[str, List[str]] = Field(default_factory=dict)
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)
    benchmarks: Dict[str, Any] = Field(default_factory=dict)


class CustomerSegments(Lenient):
    segments: List[Dict[str, Any]] = Field(default_factory=list)
    insights: List[Dict[str, Any]] = Field(default_factory=list)
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)


class TrendForecast(Lenient):
    predictions: Dict[str, Any] = Field(default_factory=dict)
    scenarios: List[Dict[str, Any]] = Field(default_factory=list)
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)


class KPIRecommendations(Lenient):
    recommendedKPIs: List[Dict[str, Any]] = Field(default_factory=list)
    dashboard: Dict[str, Any] = Field(default_factory=dict)
    implementation: List[Dict[str, Any]] = Field(default_factory=list)


# Chatbot

class FAQItem(Lenient):
    question: str
    answer: str


class FAQ(Lenient):
    faqs: List[FAQItem]


class TrainingExample(Lenient):
    userQuery: str
    expectedResponse: str


class TrainingData(Lenient):
    examples: List[TrainingExample]


class ChatAnalysis(Lenient):
    commonTopics: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    satisfactionIndicators: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    strengths: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    improvements: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    faqSuggestions: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)
    businessInsights: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)


# Images

class ConceptAnalysis(Lenient):
    mainConcepts: List[str] = Field(default_factory=list)
    styleVariations: List[str] = Field(default_factory=list)
    compositionIdeas: List[str] = Field(default_factory=list)
    colorPalettes: List[str] = Field(default_factory=list)
    moodSuggestions: List[str] = Field(default_factory=list)
    technicalTips: List[str] = Field(default_factory=list)
