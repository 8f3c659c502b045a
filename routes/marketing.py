from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from models.requests import (
    AutomationIn,
    CampaignGenerateIn,
    CampaignOptimizeIn,
    CampaignUpdateIn,
    LeadMagnetIn,
    NewsletterIn,
    SocialPostIn,
)
from routes.common import generate, owned_or_404
from tools.auth import current_user
from tools.documents import get_document_store

router = APIRouter(prefix="/marketing", tags=["marketing"])

COLLECTION = "campaigns"


@router.post("/campaigns/generate")
def generate_campaign(payload: CampaignGenerateIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("email_campaign", payload.model_dump(mode="json"), user, persist=True,
                     failure="Failed to generate campaign")
    return {
        "message": "Campaign generated successfully",
        "campaign": state["document"],
        "ai_content": state["content"],
        "suggestions": state["content"].get("cta") or []
    }


@router.get("/campaigns")
def list_campaigns(status: Optional[str] = None, type: Optional[str] = None, page: int = 1, limit: int = 10,
                   user: Dict[str, Any] = Depends(current_user)):
    store = get_document_store()

    def matches(doc: Dict[str, Any]) -> bool:
        return (not status or doc.get("status") == status) and (not type or doc.get("type") == type)

    campaigns, pagination = store.page(store.find(COLLECTION, user["id"], where=matches), page, limit)
    return {"campaigns": campaigns, "pagination": pagination}


@router.get("/campaigns/{campaign_id}")
def get_campaign(campaign_id: str, user: Dict[str, Any] = Depends(current_user)):
    return {"campaign": owned_or_404(COLLECTION, campaign_id, user, "Campaign")}


@router.put("/campaigns/{campaign_id}")
def update_campaign(campaign_id: str, payload: CampaignUpdateIn, user: Dict[str, Any] = Depends(current_user)):
    owned_or_404(COLLECTION, campaign_id, user, "Campaign")
    campaign = get_document_store().update(COLLECTION, campaign_id, payload.model_dump(exclude_unset=True), user["id"])
    return {"message": "Campaign updated successfully", "campaign": campaign}


@router.post("/campaigns/{campaign_id}/optimize")
def optimize_campaign(campaign_id: str, payload: CampaignOptimizeIn, user: Dict[str, Any] = Depends(current_user)):
    campaign = owned_or_404(COLLECTION, campaign_id, user, "Campaign")
    state = generate("campaign_optimization", {"campaign": campaign, **payload.model_dump()}, user,
                     failure="Failed to optimize campaign")
    return {"message": "Campaign optimization generated", "campaign_id": campaign_id, "optimization": state["content"]}


@router.post("/newsletter/generate")
def generate_newsletter(payload: NewsletterIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("newsletter", payload.model_dump(mode="json"), user)
    return {"message": "Newsletter generated successfully", "newsletter": state["content"]}


@router.post("/social/generate")
def generate_social_post(payload: SocialPostIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("social_post", payload.model_dump(mode="json"), user)
    return {"message": "Social media content generated successfully", "content": state["content"],
            "platform": payload.platform}


@router.post("/automation/generate")
def generate_automation(payload: AutomationIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("automation_sequence", payload.model_dump(mode="json"), user)
    return {"message": "Automation sequence generated successfully", "sequence": state["content"]}


@router.post("/lead-magnet/generate")
def generate_lead_magnet(payload: LeadMagnetIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("lead_magnet", payload.model_dump(mode="json"), user)
    return {"message": "Lead magnet generated successfully", "lead_magnet": state["content"]}
