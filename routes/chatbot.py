import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from models.requests import ChatAnalyzeIn, ChatMessageIn, TrainingDataIn
from routes.common import generate, require_business_profile
from tools.auth import current_user
from tools.chatbot import SessionAccessError, chatbot

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


def _business_info(profile: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": profile.get("business_name"),
        "industry": profile.get("industry"),
        "description": profile.get("description"),
        "key_services": profile.get("key_services") or [],
        "target_audience": profile.get("target_audience"),
        "contact_info": {"email": profile.get("email")}
    }


@router.post("/message")
def send_message(payload: ChatMessageIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    session_id = payload.session_id or f"session_{user['id']}_{int(time.time() * 1000)}"

    try:
        result = chatbot.process_message(session_id, payload.message, _business_info(profile), user["id"])
    except SessionAccessError:
        raise HTTPException(status_code=403, detail="Access denied to this chat session")
    return {"message": "Message processed successfully", **result}


@router.get("/history/{session_id}")
def get_history(session_id: str, user: Dict[str, Any] = Depends(current_user)):
    history = chatbot.history(session_id, user["id"])
    return {"session_id": session_id, "history": history, "total_messages": len(history)}


@router.delete("/history/{session_id}")
def clear_history(session_id: str, user: Dict[str, Any] = Depends(current_user)):
    if not chatbot.history(session_id, user["id"]):
        raise HTTPException(status_code=404, detail="Session not found")
    try:
        chatbot.clear(session_id, user["id"])
    except SessionAccessError:
        raise HTTPException(status_code=403, detail="Access denied to this chat session")
    return {"message": "Chat history cleared successfully"}


@router.get("/sessions")
def list_sessions(user: Dict[str, Any] = Depends(current_user)):
    sessions = chatbot.sessions_for(user["id"])
    return {"sessions": sessions, "total_sessions": len(sessions)}


@router.post("/faq/generate")
def generate_faq(user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    state = generate("faq", {"business_info": _business_info(profile)}, user, failure="Failed to generate FAQ")
    return {"message": "FAQ generated successfully", "faqs": state["content"].get("faqs", [])}


@router.post("/training/generate")
def generate_training_data(payload: TrainingDataIn, user: Dict[str, Any] = Depends(current_user)):
    profile = require_business_profile(user)
    request = {"business_info": _business_info(profile), "existing_faq": payload.existing_faq}
    state = generate("training_data", request, user, failure="Failed to generate training data")
    examples = state["content"].get("examples", [])
    return {"message": "Training data generated successfully", "training_data": examples, "count": len(examples)}


@router.post("/analyze")
def analyze_interactions(payload: ChatAnalyzeIn, user: Dict[str, Any] = Depends(current_user)):
    interactions = [i.model_dump() for i in payload.interactions]
    if not interactions and payload.session_id:
        turns = chatbot.history(payload.session_id, user["id"])
        interactions = [
            {"user_message": question["content"], "bot_response": answer["content"]}
            for question, answer in zip(turns, turns[1:])
            if question["role"] == "user" and answer["role"] == "assistant"
        ]
    if not interactions:
        raise HTTPException(status_code=400, detail="No interactions to analyze")

    state = generate("chat_analysis", {"interactions": interactions}, user,
                     failure="Failed to analyze chat interactions")
    return {
        "message": "Chat analysis completed successfully",
        "analysis": state["content"],
        "interactions_analyzed": len(interactions)
    }
