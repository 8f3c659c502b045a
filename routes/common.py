from typing import Any, Dict

from fastapi import HTTPException
from loguru import logger

from graph.state import GenerationState
from graph.workflow import run_generation
from tools.documents import get_document_store

PROFILES = "business_profiles"


def generate(kind: str, request: Dict[str, Any], user: Dict[str, Any], persist: bool = False,
             failure: str = None) -> GenerationState:
    """Run a generation, turning a model failure into a 502."""
    state = run_generation(kind, request, user, persist=persist)
    if state.get("invoke_error"):
        logger.error(f"{kind} generation failed for user {user['id']}: {state['invoke_error']}")
        raise HTTPException(status_code=502, detail=failure or f"Failed to generate {kind.replace('_', ' ')}")
    return state


def business_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    return get_document_store().get(PROFILES, user["id"], user["id"]) or {}


def require_business_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    profile = business_profile(user)
    if not profile.get("business_name"):
        raise HTTPException(status_code=400, detail="Please complete your business profile first")
    return profile


def owned_or_404(collection: str, doc_id: str, user: Dict[str, Any], label: str) -> Dict[str, Any]:
    doc = get_document_store().get(collection, doc_id, user["id"])
    if doc is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return doc
