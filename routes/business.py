from typing import Any, Dict

from fastapi import APIRouter, Depends
from loguru import logger

from models.requests import BusinessProfileIn
from routes.common import PROFILES, business_profile
from tools.auth import current_user
from tools.documents import get_document_store

router = APIRouter(prefix="/business", tags=["business"])


@router.get("/profile")
def get_profile(user: Dict[str, Any] = Depends(current_user)):
    return {
        "message": "Business profile retrieved successfully",
        "business_profile": business_profile(user)
    }


@router.put("/profile")
def update_profile(payload: BusinessProfileIn, user: Dict[str, Any] = Depends(current_user)):
    store = get_document_store()
    changes = payload.model_dump(exclude_unset=True, mode="json")

    profile = store.get(PROFILES, user["id"], user["id"])
    if profile is None:
        profile = store.insert(PROFILES, {"id": user["id"], "user_id": user["id"], **changes})
    else:
        profile = store.update(PROFILES, user["id"], changes, user["id"])

    logger.info(f"Business profile updated for user {user['id']}")
    return {"message": "Business profile updated successfully", "business_profile": profile}
