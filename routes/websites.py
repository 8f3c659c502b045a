import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from models.requests import ImageGenerateIn, WebsiteGenerateIn, WebsiteImagesIn, WebsiteUpdateIn
from prompts.website import username_for
from routes.common import generate, owned_or_404
from tools.auth import current_user
from tools.documents import get_document_store
from tools.images import image_generator

router = APIRouter(prefix="/websites", tags=["websites"])

COLLECTION = "websites"


def public_url(user: Dict[str, Any]) -> str:
    return f"{os.getenv('CLIENT_URL', 'http://localhost:3001')}/websites/{username_for(user)}"


def _elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)


def _published_by(username: str) -> List[Dict[str, Any]]:
    """Published websites of the owner with this handle, newest first."""
    username = username.lower()
    owned = get_document_store().find(
        COLLECTION, where=lambda d: d.get("owner", {}).get("username") == username, sort_by="published_at"
    )
    if not owned:
        raise HTTPException(status_code=404, detail="User not found")
    return [d for d in owned if d.get("status") == "published"]


@router.post("/generate", status_code=201)
def generate_website(payload: WebsiteGenerateIn, user: Dict[str, Any] = Depends(current_user)):
    start = time.time()
    state = generate("website", payload.model_dump(mode="json"), user, persist=True)

    website = get_document_store().update(
        COLLECTION, state["document_id"],
        {"performance": {**state["document"]["performance"], "generation_time": _elapsed_ms(start)}}
    )
    return {
        "message": "Website generated successfully",
        "website": {**website, "public_url": public_url(user)},
        "generation_time": _elapsed_ms(start)
    }


@router.get("")
def list_websites(status: Optional[str] = None, page: int = 1, limit: int = 10,
                  user: Dict[str, Any] = Depends(current_user)):
    store = get_document_store()
    docs = store.find(COLLECTION, user["id"], where=(lambda d: d.get("status") == status) if status else None)
    websites, pagination = store.page(docs, page, limit)
    return {"websites": websites, "pagination": pagination}


@router.post("/generate-images")
async def generate_website_images(payload: WebsiteImagesIn, user: Dict[str, Any] = Depends(current_user)):
    outcomes = await image_generator.generate_website_images(
        payload.business_name, payload.industry, payload.description, payload.style
    )
    succeeded = sum(1 for o in outcomes if o.status == "success")
    logger.info(f"Generated {succeeded}/{len(outcomes)} website images for user {user['id']}")
    return {
        "message": "Website images generated",
        "images": [o.to_dict() for o in outcomes],
        "succeeded": succeeded,
        "failed": len(outcomes) - succeeded
    }


@router.post("/generate-single-image")
async def generate_single_image(payload: ImageGenerateIn, user: Dict[str, Any] = Depends(current_user)):
    result = await image_generator.generate_image(
        payload.prompt,
        aspect_ratio=payload.aspect_ratio,
        style=payload.style or "professional",
        quality=payload.quality,
        number_of_images=payload.number_of_images,
    )
    logger.info(f"Generated single website image for user {user['id']}")
    return {"message": "Image generated successfully", **result}


@router.get("/public/{username}")
def get_public_website(username: str):
    published = _published_by(username)
    if not published:
        raise HTTPException(status_code=404, detail="No published website found for this user")
    website = published[0]
    return {
        "website": {
            "id": website["id"],
            "business_info": website.get("business_info"),
            "content": website.get("content"),
            "design": website.get("design"),
            "seo": website.get("seo"),
            "published_at": website.get("published_at"),
            "owner": website["owner"]
        }
    }


@router.get("/user/{username}")
def list_public_websites(username: str):
    published = _published_by(username)
    owner = published[0]["owner"] if published else {"username": username.lower()}
    return {
        "user": owner,
        "websites": [
            {
                "id": w["id"],
                "business_info": w.get("business_info"),
                "template": w.get("design", {}).get("template"),
                "published_at": w.get("published_at"),
                "url": f"/websites/{w['owner']['username']}",
                "is_latest": i == 0
            }
            for i, w in enumerate(published)
        ]
    }


@router.delete("/images/{file_name}")
def delete_website_image(file_name: str, user: Dict[str, Any] = Depends(current_user)):
    try:
        deleted = image_generator.delete_image(file_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if not deleted:
        raise HTTPException(status_code=404, detail="Image not found")
    return {"message": "Image deleted successfully"}


@router.get("/{website_id}")
def get_website(website_id: str, user: Dict[str, Any] = Depends(current_user)):
    return {"website": owned_or_404(COLLECTION, website_id, user, "Website")}


@router.put("/{website_id}")
def update_website(website_id: str, payload: WebsiteUpdateIn, user: Dict[str, Any] = Depends(current_user)):
    owned_or_404(COLLECTION, website_id, user, "Website")
    website = get_document_store().update(COLLECTION, website_id, payload.model_dump(exclude_unset=True), user["id"])
    return {"message": "Website updated successfully", "website": website}


@router.delete("/{website_id}")
def delete_website(website_id: str, user: Dict[str, Any] = Depends(current_user)):
    if not get_document_store().delete(COLLECTION, website_id, user["id"]):
        raise HTTPException(status_code=404, detail="Website not found")
    return {"message": "Website deleted successfully"}


@router.post("/{website_id}/publish")
def publish_website(website_id: str, user: Dict[str, Any] = Depends(current_user)):
    owned_or_404(COLLECTION, website_id, user, "Website")
    website = get_document_store().update(COLLECTION, website_id, {
        "status": "published",
        "published_at": datetime.now(timezone.utc).isoformat()
    }, user["id"])
    url = public_url(user)
    return {"message": "Website published successfully", "website": {**website, "public_url": url}, "url": url}


@router.post("/{website_id}/unpublish")
def unpublish_website(website_id: str, user: Dict[str, Any] = Depends(current_user)):
    owned_or_404(COLLECTION, website_id, user, "Website")
    website = get_document_store().update(COLLECTION, website_id, {"status": "draft"}, user["id"])
    return {"message": "Website unpublished successfully", "website": website}


@router.post("/{website_id}/regenerate")
def regenerate_website(website_id: str, user: Dict[str, Any] = Depends(current_user)):
    website = owned_or_404(COLLECTION, website_id, user, "Website")
    start = time.time()
    state = generate("website", {"business_info": website["business_info"]}, user,
                     failure="Failed to regenerate website content")

    website["content"] = {**website.get("content", {}), **state["content"]}
    website["performance"] = {
        **website.get("performance", {}),
        "last_generated": datetime.now(timezone.utc).isoformat(),
        "generation_time": _elapsed_ms(start)
    }
    website = get_document_store().replace(COLLECTION, website)
    return {
        "message": "Website content regenerated successfully",
        "website": website,
        "generation_time": _elapsed_ms(start)
    }
