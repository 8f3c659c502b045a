import html
import json
from datetime import date
from typing import Any, Dict

from models.content import (
    AutomationSequence,
    CampaignOptimization,
    EmailCampaign,
    LeadMagnet,
    Newsletter,
    SocialPost,
)
from prompts.base import GenerationKind, bullet_list, or_default

INDUSTRY_BENCHMARKS = {
    "open_rate": 21.33,
    "click_rate": 2.62,
    "conversion_rate": 1.33,
}


def _business_block(business: Dict[str, Any], tone: str) -> str:
    return f"""Business Information:
- Company: {or_default(business.get('company'), 'Our Company')}
- Industry: {or_default(business.get('industry'), 'General')}
- Brand Voice: {tone}"""


def build_email_campaign_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    return f"""You are an expert email marketing copywriter. Create a compelling email campaign with the following details:

{_business_block(business, or_default(request.get('tone'), 'Professional and friendly'))}

Campaign Details:
- Type: {or_default(request.get('campaign_type'), 'promotional')}
- Target Audience: {or_default(request.get('audience'), 'general customers')}
- Goals: {or_default(request.get('goals'), 'increase engagement')}
- Product/Service: {or_default(request.get('product_info'), 'our products and services')}

Please generate:
1. A compelling subject line (under 50 characters)
2. A preview text (under 90 characters)
3. HTML email content with proper structure
4. Plain text version
5. Call-to-action suggestions

Make the content engaging, personalized, and conversion-focused. Include proper email structure with header, body, and footer.

Format your response as JSON:
{{
  "subject": "subject line here",
  "previewText": "preview text here",
  "html": "full HTML email content here",
  "text": "plain text version here",
  "cta": ["CTA suggestion 1", "CTA suggestion 2", "CTA suggestion 3"]
}}"""


def build_social_post_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    platform = request.get("platform")
    return f"""You are a social media marketing expert. Create engaging {platform} content with these details:

{_business_block(business, or_default(request.get('tone'), 'Professional and engaging'))}

Content Details:
- Platform: {platform}
- Content Type: {or_default(request.get('content_type'), 'promotional post')}
- Topic: {or_default(request.get('topic'), 'general business update')}
- Suggested Hashtags: {or_default(request.get('hashtags'), 'relevant industry hashtags')}

Platform-specific requirements:
- LinkedIn: Professional, thought leadership
- Instagram: Visual, lifestyle-focused
- Twitter: Concise, trending topics
- Facebook: Community-building, storytelling

Format as JSON:
{{
  "content": "main post content here",
  "hashtags": ["hashtag1", "hashtag2", "hashtag3"],
  "cta": "call to action",
  "imagePrompt": "description for image/video content",
  "bestTimeToPost": "suggested posting time",
  "engagementTips": ["tip1", "tip2", "tip3"]
}}"""


def build_newsletter_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    company = or_default(business.get("company"), "Our Company")
    return f"""Create a comprehensive newsletter for {company} with these specifications:

Business Context:
- Company: {company}
- Industry: {or_default(business.get('industry'), 'General')}
- Audience: {or_default(request.get('audience'), 'customers and prospects')}
- Frequency: {or_default(request.get('frequency'), 'monthly')}
- Tone: {or_default(request.get('tone'), 'professional and informative')}

Newsletter Topics:
{bullet_list(request.get('topics') or [])}

Create a newsletter with a compelling subject line, a greeting, one section per topic, industry tips, company updates and a call-to-action. Include proper HTML structure for email clients.

Format as JSON:
{{
  "subject": "newsletter subject line",
  "html": "complete HTML newsletter content",
  "text": "plain text version",
  "sections": [
    {{"title": "section title", "content": "section content", "type": "main|update|tip|cta"}}
  ]
}}"""


def build_automation_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    company = or_default(business.get("company"), "Our Company")
    return f"""Create an automated email sequence for {company} with these parameters:

Business Information:
- Company: {company}
- Industry: {or_default(business.get('industry'), 'General')}

Automation Details:
- Trigger: {request.get('trigger')}
- Goal: {or_default(request.get('goals'), 'nurture leads and increase conversions')}
- Audience: {or_default(request.get('audience_segment'), 'new subscribers')}
- Sequence Length: {or_default(request.get('sequence_length'), 5)} emails
- Send Frequency: Every 2-3 days

For each email, provide the subject line, send delay (in hours from trigger), HTML and text content, and primary goal.

Format as JSON:
{{
  "sequenceName": "sequence name",
  "description": "sequence description",
  "emails": [
    {{"step": 1, "subject": "email subject", "delayHours": 0, "goal": "email goal", "html": "HTML content", "text": "plain text content"}}
  ]
}}"""


def build_optimization_prompt(request: Dict[str, Any]) -> str:
    campaign = request.get("campaign", {})
    analytics = campaign.get("analytics") or {}
    return f"""Analyze this email campaign performance and provide optimization recommendations:

Campaign Details:
- Subject: {campaign.get('subject')}
- Type: {campaign.get('type')}
- Audience: {', '.join((campaign.get('audience') or {}).get('segments', []))}

Performance Metrics:
- Open Rate: {request.get('open_rate')}%
- Click Rate: {request.get('click_rate')}%
- Conversion Rate: {request.get('conversion_rate')}%
- Sent: {analytics.get('sent', 0)}
- Delivered: {analytics.get('delivered', 0)}

Industry Benchmarks:
- Average Open Rate: {INDUSTRY_BENCHMARKS['open_rate']}%
- Average Click Rate: {INDUSTRY_BENCHMARKS['click_rate']}%
- Average Conversion Rate: {INDUSTRY_BENCHMARKS['conversion_rate']}%

Provide specific, actionable recommendations for subject lines, content, send time, audience segmentation and A/B testing.

Format as JSON:
{{
  "overallScore": "A-F grade",
  "recommendations": [
    {{"category": "subject_line|content|timing|audience|testing", "priority": "high|medium|low", "recommendation": "specific recommendation", "expectedImpact": "expected improvement"}}
  ],
  "nextSteps": ["action 1", "action 2", "action 3"]
}}"""


def build_lead_magnet_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    company = or_default(business.get("company"), "Our Company")
    return f"""Create a compelling lead magnet for {company}:

Business Context:
- Company: {company}
- Industry: {or_default(business.get('industry'), 'General')}
- Target Audience: {or_default(request.get('target_audience'), 'potential customers')}

Lead Magnet Details:
- Topic: {request.get('topic')}
- Format: {or_default(request.get('format'), 'PDF guide')}
- Goal: Capture leads and provide value

Format as JSON:
{{
  "title": "lead magnet title",
  "subtitle": "compelling subtitle",
  "outline": ["section 1", "section 2", "section 3"],
  "landingPageCopy": {{"headline": "main headline", "subheadline": "supporting text", "benefits": ["benefit 1", "benefit 2"], "cta": "call to action text"}},
  "optinForm": {{"headline": "form headline", "description": "form description", "buttonText": "button text"}},
  "followUpSequence": [{{"subject": "email subject", "content": "email content"}}]
}}"""


def marketing_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "subject": "AI-Generated Campaign",
        "html": f"<h1>AI-Generated Content</h1><p>{html.escape(raw_text)}</p>",
        "text": raw_text,
        "cta": ["Learn More", "Get Started", "Contact Us"]
    }


def campaign_document(content: Dict[str, Any], request: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    business = request.get("business_info", {})
    campaign_type = request.get("campaign_type") or "promotional"
    return {
        "user_id": user["id"],
        "name": f"{campaign_type} Campaign - {date.today().isoformat()}",
        "type": "email",
        "status": "draft",
        "subject": content.get("subject"),
        "content": {
            "html": content.get("html"),
            "text": content.get("text"),
            "ai_generated": True,
            "prompt": json.dumps(request, default=str)
        },
        "audience": {
            "segments": [request.get("audience")],
            "total_recipients": 0
        },
        "settings": {
            "from_name": business.get("company"),
            "from_email": user.get("email")
        },
        "analytics": {"sent": 0, "delivered": 0, "opened": 0, "clicked": 0}
    }


KINDS = [
    GenerationKind("email_campaign", build_email_campaign_prompt, marketing_fallback, EmailCampaign,
                   temperature=0.7, max_tokens=2000, collection="campaigns", document=campaign_document),
    GenerationKind("social_post", build_social_post_prompt, marketing_fallback, SocialPost,
                   temperature=0.8, max_tokens=1500),
    GenerationKind("newsletter", build_newsletter_prompt, marketing_fallback, Newsletter,
                   temperature=0.7, max_tokens=2500),
    GenerationKind("automation_sequence", build_automation_prompt, marketing_fallback, AutomationSequence,
                   temperature=0.7, max_tokens=3000),
    GenerationKind("campaign_optimization", build_optimization_prompt, marketing_fallback, CampaignOptimization,
                   temperature=0.6, max_tokens=1500),
    GenerationKind("lead_magnet", build_lead_magnet_prompt, marketing_fallback, LeadMagnet,
                   temperature=0.7, max_tokens=2000),
]
