import re
from datetime import datetime, timezone
from typing import Any, Dict

from models.content import WebsiteContent
from prompts.base import GenerationKind, joined, or_default

DEFAULT_COLOR_SCHEME = {
    "primary": "#2563eb",
    "secondary": "#64748b",
    "accent": "#f59e0b",
    "background": "#ffffff",
    "text": "#1f2937"
}
DEFAULT_FONTS = {"heading": "Inter", "body": "Inter"}


def build_website_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    return f"""Create comprehensive website content for a business with the following information:

Business Name: {business.get('name')}
Industry: {business.get('industry')}
Description: {business.get('description')}
Target Audience: {or_default(business.get('target_audience'), 'General public')}
Key Services: {joined(business.get('key_services'))}

Generate a complete website structure in JSON format with the following sections:
{{
  "hero": {{
    "headline": "Compelling main headline",
    "subheadline": "Supporting description",
    "ctaText": "Call to action button text"
  }},
  "about": {{
    "title": "About section title",
    "content": "2-3 paragraphs about the business"
  }},
  "services": [
    {{"title": "Service name", "description": "Service description", "icon": "briefcase"}}
  ],
  "features": [
    {{"title": "Feature name", "description": "Feature description"}}
  ],
  "testimonials": [
    {{"name": "Customer name", "company": "Customer company", "content": "Testimonial content", "rating": 5}}
  ],
  "contact": {{
    "title": "Contact section title",
    "description": "Contact description"
  }},
  "seo": {{
    "title": "SEO page title",
    "description": "Meta description",
    "keywords": ["keyword1", "keyword2", "keyword3"]
  }}
}}

Make the content professional, engaging, and tailored to the specific business and industry.
Return only valid JSON without markdown formatting or code blocks."""


def website_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    business = request.get("business_info", {})
    name = business.get("name") or "Our Business"
    services = business.get("key_services") or []
    return {
        "hero": {
            "headline": f"Welcome to {name}",
            "subheadline": business.get("description") or "",
            "ctaText": "Get in Touch"
        },
        "about": {"title": f"About {name}", "content": business.get("description") or ""},
        "services": [{"title": s, "description": "", "icon": "briefcase"} for s in services],
        "features": [],
        "testimonials": [],
        "contact": {"title": "Contact Us", "description": f"Reach out to {name} today."},
    }


def subdomain_for(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())


def username_for(user: Dict[str, Any]) -> str:
    """Public handle of a site owner: their name without whitespace, lower-cased."""
    return re.sub(r"\s+", "", user.get("name") or user["id"]).lower()


def default_seo(business: Dict[str, Any]) -> Dict[str, Any]:
    name = business.get("name") or ""
    industry = business.get("industry") or ""
    return {
        "title": f"{name} - {industry}",
        "description": business.get("description") or "",
        "keywords": [industry, name, *(business.get("key_services") or [])]
    }


def website_document(content: Dict[str, Any], request: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    business = request.get("business_info", {})
    preferences = request.get("preferences") or {}
    return {
        "user_id": user["id"],
        "owner": {"name": user.get("name"), "username": username_for(user)},
        "business_info": business,
        "design": {
            "template": preferences.get("template", "modern"),
            "color_scheme": preferences.get("color_scheme") or DEFAULT_COLOR_SCHEME,
            "fonts": preferences.get("fonts") or DEFAULT_FONTS,
            "layout": preferences.get("layout", "single-page")
        },
        "content": content,
        "seo": content.get("seo") or default_seo(business),
        "status": "draft",
        "domain": {"subdomain": subdomain_for(business.get("name") or "site")},
        "performance": {"last_generated": datetime.now(timezone.utc).isoformat()}
    }


KINDS = [
    GenerationKind(
        name="website",
        build=build_website_prompt,
        fallback=website_fallback,
        schema=WebsiteContent,
        temperature=0.7,
        max_tokens=2048,
        collection="websites",
        document=website_document,
    ),
]
