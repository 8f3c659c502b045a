from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from models.requests import ImageConceptsIn, ImageGenerateIn, ImagePromptIn
from prompts.images import STYLE_CATEGORIES, STYLE_ENHANCEMENTS
from routes.common import generate
from tools.auth import current_user
from tools.images import ASPECT_RATIOS, QUALITY_MODIFIERS, STYLE_MODIFIERS, generate_prompt, image_generator
from tools.llm import ModelInvocationError

router = APIRouter(prefix="/images", tags=["images"])


@router.post("/generate")
async def generate_image(payload: ImageGenerateIn, user: Dict[str, Any] = Depends(current_user)):
    result = await image_generator.generate_image(
        payload.prompt,
        aspect_ratio=payload.aspect_ratio,
        style=payload.style,
        quality=payload.quality,
        number_of_images=payload.number_of_images,
    )
    return {"message": "Image generated successfully", **result}


@router.post("/generate-prompt")
def generate_image_prompt(payload: ImagePromptIn, user: Dict[str, Any] = Depends(current_user)):
    try:
        result = generate_prompt(payload.requirements)
    except ModelInvocationError as e:
        raise HTTPException(status_code=502, detail="Failed to generate image prompt") from e
    return {"message": "Image prompt generated successfully", **result}


@router.post("/generate-concepts")
def generate_concepts(payload: ImageConceptsIn, user: Dict[str, Any] = Depends(current_user)):
    state = generate("image_concepts", payload.model_dump(), user, failure="Failed to analyze image concept")
    return {
        "message": "Image concepts generated successfully",
        "analysis": state["content"],
        "original_description": payload.description
    }


@router.get("/styles")
def list_styles(user: Dict[str, Any] = Depends(current_user)):
    return {
        "prompt_styles": list(STYLE_ENHANCEMENTS),
        "generation_styles": list(STYLE_MODIFIERS),
        "qualities": list(QUALITY_MODIFIERS),
        "aspect_ratios": list(ASPECT_RATIOS),
        "categories": STYLE_CATEGORIES
    }
