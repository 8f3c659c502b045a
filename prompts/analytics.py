from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.content import (
    BusinessAnalysis,
    CompetitiveAnalysis,
    CustomerSegments,
    KPIRecommendations,
    TrendForecast,
)
from prompts.base import GenerationKind, joined

TREND_THRESHOLD_PCT = 5


def _point_value(point: Any) -> float:
    if isinstance(point, dict):
        return point.get("value") or 0
    return point or 0


def describe_series_trend(points: Optional[List[Any]]) -> str:
    """
    Describe a metric series by comparing its first and last values.

    More than 5% growth is "increasing", more than 5% decline is
    "decreasing", anything in between "stable". A series starting at zero
    is "increasing" if it ends above zero.
    """
    if not points or len(points) < 2:
        return "insufficient data"

    first = _point_value(points[0])
    last = _point_value(points[-1])
    if first == 0:
        return "increasing" if last > 0 else "stable"

    change = (last - first) / abs(first) * 100
    if change > TREND_THRESHOLD_PCT:
        return "increasing"
    if change < -TREND_THRESHOLD_PCT:
        return "decreasing"
    return "stable"


def build_business_analysis_prompt(request: Dict[str, Any]) -> str:
    revenue = request.get("revenue") or []
    customers = request.get("customers") or []
    traffic = request.get("website_traffic") or []
    return f"""You are an expert business analyst. Analyze the following business metrics and provide comprehensive insights:

Business Information:
- Name: {request.get('business_name')}
- Industry: {request.get('industry')}
- Analysis Period: {request.get('timeframe') or '30d'}

Metrics Data:
- Revenue Data Points: {len(revenue)} entries
- Customer Data Points: {len(customers)} entries
- Website Traffic Data Points: {len(traffic)} entries
- Marketing Campaigns: {len(request.get('marketing_campaigns') or [])} campaigns
- Customer Feedback: {len(request.get('customer_feedback') or [])} feedback items

Revenue Trend: {describe_series_trend(revenue)}
Customer Growth: {describe_series_trend(customers)}
Traffic Trend: {describe_series_trend(traffic)}

Provide analysis in JSON format:
{{
  "overallPerformance": {{"score": "number 1-100", "status": "excellent|good|average|poor", "summary": "brief overall assessment"}},
  "keyInsights": [
    {{"category": "revenue|customers|traffic|marketing|feedback", "insight": "detailed insight", "impact": "high|medium|low", "trend": "increasing|decreasing|stable"}}
  ],
  "recommendations": [
    {{"priority": "high|medium|low", "action": "specific recommendation", "expectedImpact": "description of expected results", "timeframe": "immediate|short-term|long-term"}}
  ],
  "predictions": {{
    "nextMonth": {{"revenue": "predicted change percentage", "customers": "predicted change percentage", "traffic": "predicted change percentage"}}
  }},
  "riskFactors": [
    {{"risk": "description of risk", "severity": "high|medium|low", "mitigation": "suggested mitigation strategy"}}
  ],
  "opportunities": [
    {{"opportunity": "description of opportunity", "potential": "high|medium|low", "requirements": "what's needed to capitalize"}}
  ]
}}"""


def build_competitive_prompt(request: Dict[str, Any]) -> str:
    return f"""Analyze the competitive landscape for this business:

Business: {request.get('business_name')}
Industry: {request.get('industry')}
Current Market Position: {request.get('market_position')}
Known Competitors: {joined(request.get('competitors'), default='None listed')}

Provide competitive analysis in JSON format:
{{
  "marketAnalysis": {{"marketSize": "description of market size", "growthRate": "estimated growth rate", "trends": ["trend1", "trend2", "trend3"]}},
  "competitivePosition": {{
    "strengths": ["strength1", "strength2"],
    "weaknesses": ["weakness1", "weakness2"],
    "opportunities": ["opportunity1", "opportunity2"],
    "threats": ["threat1", "threat2"]
  }},
  "recommendations": [
    {{"strategy": "strategic recommendation", "rationale": "why this strategy makes sense", "implementation": "how to implement"}}
  ],
  "benchmarks": {{
    "industryAverages": {{"customerAcquisitionCost": "estimated range", "customerLifetimeValue": "estimated range", "conversionRate": "estimated percentage"}}
  }}
}}"""


def build_segments_prompt(request: Dict[str, Any]) -> str:
    demographics = request.get("demographics") or {}
    return f"""Analyze customer data to identify segments and patterns:

Customer Data:
- Total Customers: {len(request.get('customers') or [])}
- Total Transactions: {len(request.get('transactions') or [])}
- Demographics Available: {joined(list(demographics.keys()), default='none')}

Provide customer segmentation analysis in JSON format:
{{
  "segments": [
    {{"name": "segment name", "size": "percentage of customer base", "characteristics": ["characteristic1", "characteristic2"], "value": "high|medium|low", "behavior": "description of buying behavior"}}
  ],
  "insights": [
    {{"segment": "segment name", "insight": "key insight about this segment", "actionable": "specific action to take"}}
  ],
  "recommendations": [
    {{"segment": "target segment", "strategy": "recommended strategy", "tactics": ["tactic1", "tactic2"]}}
  ]
}}"""


def build_forecast_prompt(request: Dict[str, Any]) -> str:
    history = request.get("historical_data") or []
    return f"""Predict business trends based on historical data:

Industry: {request.get('industry')}
Historical Data Points: {len(history)}
Seasonality Considered: {bool(request.get('seasonality'))}
External Factors: {joined(request.get('external_factors'), default='None')}

Historical Trend: {describe_series_trend(history)}

Provide trend predictions in JSON format:
{{
  "predictions": {{
    "nextQuarter": {{"trend": "increasing|decreasing|stable", "confidence": "high|medium|low", "expectedChange": "percentage change", "factors": ["factor1", "factor2"]}},
    "nextYear": {{"trend": "increasing|decreasing|stable", "confidence": "high|medium|low", "expectedChange": "percentage change", "factors": ["factor1", "factor2"]}}
  }},
  "scenarios": [
    {{"name": "optimistic", "probability": "percentage", "outcome": "description of outcome"}},
    {{"name": "realistic", "probability": "percentage", "outcome": "description of outcome"}},
    {{"name": "pessimistic", "probability": "percentage", "outcome": "description of outcome"}}
  ],
  "recommendations": [
    {{"timeframe": "immediate|short-term|long-term", "action": "recommended action", "rationale": "why this action is recommended"}}
  ]
}}"""


def build_kpi_prompt(request: Dict[str, Any]) -> str:
    return f"""Recommend KPIs for business tracking:

Industry: {request.get('industry')}
Business Stage: {request.get('business_stage')}
Current KPIs: {joined(request.get('current_kpis'), default='None')}
Business Goals: {joined(request.get('goals'), default='None')}

Provide KPI recommendations in JSON format:
{{
  "recommendedKPIs": [
    {{"category": "financial|operational|customer|marketing", "name": "KPI name", "description": "what this KPI measures", "importance": "high|medium|low", "frequency": "daily|weekly|monthly|quarterly", "target": "suggested target or benchmark"}}
  ],
  "dashboard": {{"primaryKPIs": ["most important KPIs to track"], "secondaryKPIs": ["supporting KPIs"], "layout": "suggested dashboard organization"}},
  "implementation": [
    {{"kpi": "KPI name", "dataSource": "where to get the data", "calculation": "how to calculate", "tools": ["recommended tools"]}}
  ]
}}"""


def analysis_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {"error": "Could not parse AI response", "rawResponse": raw_text}


def analysis_report_document(content: Dict[str, Any], request: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    generated_at = datetime.now(timezone.utc)
    return {
        "user_id": user["id"],
        "report_type": "performance",
        "title": f"AI Business Analysis - {generated_at.date().isoformat()}",
        "date_range": request.get("date_range"),
        "data": {
            "summary": content.get("overallPerformance"),
            "insights": content.get("keyInsights"),
            "recommendations": content.get("recommendations"),
            "metrics": {k: request.get(k) for k in ("revenue", "customers", "website_traffic", "timeframe")}
        },
        "ai_analysis": content,
        "status": "completed",
        "generated_at": generated_at.isoformat()
    }


def competitive_analysis_document(content: Dict[str, Any], request: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    position = content.get("competitivePosition") or {}
    return {
        "user_id": user["id"],
        "industry": request.get("industry"),
        "competitors": [{"name": name} for name in request.get("competitors") or []],
        "analysis": {
            "market_position": request.get("market_position"),
            "competitive_advantages": position.get("strengths", []),
            "threats": position.get("threats", []),
            "opportunities": position.get("opportunities", []),
            "recommendations": content.get("recommendations", [])
        }
    }


KINDS = [
    GenerationKind("business_analysis", build_business_analysis_prompt, analysis_fallback, BusinessAnalysis,
                   temperature=0.3, max_tokens=2500, collection="analytics_reports",
                   document=analysis_report_document),
    GenerationKind("competitive_analysis", build_competitive_prompt, analysis_fallback, CompetitiveAnalysis,
                   temperature=0.4, max_tokens=2000, collection="competitive_analyses",
                   document=competitive_analysis_document),
    GenerationKind("customer_segments", build_segments_prompt, analysis_fallback, CustomerSegments,
                   temperature=0.3, max_tokens=1800),
    GenerationKind("trend_forecast", build_forecast_prompt, analysis_fallback, TrendForecast,
                   temperature=0.4, max_tokens=2000),
    GenerationKind("kpi_recommendations", build_kpi_prompt, analysis_fallback, KPIRecommendations,
                   temperature=0.3, max_tokens=2000),
]
