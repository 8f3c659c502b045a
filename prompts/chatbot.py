from typing import Any, Dict

from models.content import FAQ, ChatAnalysis, TrainingData
from prompts.base import GenerationKind, joined, or_default

APOLOGY = ("I apologize, but I'm experiencing technical difficulties. "
           "Please try again or contact our support team directly.")


def system_prompt(business: Dict[str, Any]) -> str:
    contact = business.get("contact_info") or {}
    return f"""You are an AI customer service assistant for {business.get('name')}, a business in the {business.get('industry')} industry.

Business Information:
- Name: {business.get('name')}
- Industry: {business.get('industry')}
- Description: {business.get('description')}
- Services: {joined(business.get('key_services'))}
- Contact: {or_default(contact.get('email'), 'Not provided')}

Your role:
1. Answer customer questions about the business
2. Provide information about services and products
3. Help with general inquiries
4. Be friendly, professional, and helpful
5. If you don't know something, politely say so and offer to connect them with a human

Always maintain a professional tone and stay focused on helping customers with their needs.
Keep your responses concise."""


def build_faq_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    return f"""Generate a comprehensive FAQ section for {business.get('name')}, a business in the {business.get('industry')} industry.

Business Details:
- Description: {business.get('description')}
- Services: {joined(business.get('key_services'))}
- Target Audience: {or_default(business.get('target_audience'), 'General public')}

Create 10-15 frequently asked questions and answers that customers would typically ask about this business.
Include questions about services offered, pricing and payment, business hours and contact, process and procedures, policies and guarantees.

Make answers helpful, detailed, and professional. Return JSON in this format:
{{
  "faqs": [
    {{"question": "question text", "answer": "answer text"}}
  ]
}}"""


def build_training_prompt(request: Dict[str, Any]) -> str:
    business = request.get("business_info", {})
    existing = request.get("existing_faq") or []
    known = "\n".join(f"- {item.get('question')}" for item in existing if isinstance(item, dict))
    return f"""Generate training data for a customer service chatbot for {business.get('name')}.

Business Information:
- Industry: {business.get('industry')}
- Description: {business.get('description')}
- Services: {joined(business.get('key_services'))}

Existing FAQ questions:
{known or '- None'}

Create 20-30 example customer queries and appropriate responses that cover service inquiries, pricing questions, booking and scheduling, general information, complaint handling and technical support (if applicable).
Make the queries realistic and varied in phrasing. Return JSON in this format:
{{
  "examples": [
    {{"userQuery": "customer question", "expectedResponse": "ideal answer"}}
  ]
}}"""


def build_chat_analysis_prompt(request: Dict[str, Any]) -> str:
    interactions = request.get("interactions") or []
    transcript = "\n\n".join(
        f"{i}. Customer: {item.get('user_message')}\n   Bot: {item.get('bot_response')}"
        for i, item in enumerate(interactions, start=1)
    )
    return f"""Analyze the following customer chat interactions to provide business insights:

Interactions:
{transcript}

Focus on actionable insights that can improve customer service and business operations.
Provide analysis in JSON format:
{{
  "commonTopics": ["common customer questions and topics"],
  "satisfactionIndicators": ["customer satisfaction indicators"],
  "strengths": ["areas where the chatbot performed well"],
  "improvements": ["areas needing improvement"],
  "faqSuggestions": ["suggestions for FAQ updates"],
  "businessInsights": ["business insights from customer inquiries"]
}}"""


def faq_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {"faqs": [], "rawResponse": raw_text}


def training_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {"examples": [], "rawResponse": raw_text}


def chat_analysis_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "commonTopics": [],
        "satisfactionIndicators": [],
        "strengths": [],
        "improvements": [],
        "faqSuggestions": [],
        "businessInsights": [],
        "rawResponse": raw_text
    }


KINDS = [
    GenerationKind("faq", build_faq_prompt, faq_fallback, FAQ, temperature=0.7, max_tokens=3000),
    GenerationKind("training_data", build_training_prompt, training_fallback, TrainingData,
                   temperature=0.8, max_tokens=4000),
    GenerationKind("chat_analysis", build_chat_analysis_prompt, chat_analysis_fallback, ChatAnalysis,
                   temperature=0.4, max_tokens=2000),
]
