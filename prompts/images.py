import json
from typing import Any, Dict

from models.content import ConceptAnalysis
from prompts.base import GenerationKind

STYLE_ENHANCEMENTS = {
    "realistic": "photorealistic, high quality, detailed, professional photography",
    "artistic": "artistic, creative, stylized, expressive",
    "cartoon": "cartoon style, animated, colorful, playful",
    "sketch": "pencil sketch, hand drawn, artistic, monochrome",
    "digital": "digital art, modern, clean, vector style",
    "vintage": "vintage, retro, aged, classic photography",
    "minimalist": "minimalist, clean, simple, elegant composition"
}

STYLE_CATEGORIES = {
    "photography": ["Portrait", "Landscape", "Street", "Macro", "Documentary"],
    "art": ["Oil painting", "Watercolor", "Digital art", "Sketch", "Abstract"],
    "design": ["Logo", "Icon", "Poster", "Banner", "Infographic"],
    "illustration": ["Character", "Concept art", "Children's book", "Technical", "Fashion"]
}


def build_image_prompt_request(requirements: Dict[str, Any]) -> str:
    return f"""You are an expert AI image prompt engineer. Create a detailed, specific prompt for AI image generation based on these requirements:

Requirements: {json.dumps(requirements, default=str)}

Generate a detailed prompt that includes:
- Main subject and composition
- Style and artistic direction
- Lighting and mood
- Technical specifications
- Quality descriptors

Return only the prompt text, no explanations."""


def style_enhanced(base_prompt: str, style: str = "realistic") -> str:
    enhancement = STYLE_ENHANCEMENTS.get(style) or STYLE_ENHANCEMENTS["realistic"]
    return f"{base_prompt}, {enhancement}, high resolution, masterpiece"


def build_concepts_prompt(request: Dict[str, Any]) -> str:
    return f"""Analyze this image concept and provide creative suggestions:

Description: "{request.get('description')}"

Provide a JSON response with:
{{
  "mainConcepts": ["concept1", "concept2", "concept3"],
  "styleVariations": ["style1", "style2", "style3"],
  "compositionIdeas": ["composition1", "composition2", "composition3"],
  "colorPalettes": ["palette1", "palette2", "palette3"],
  "moodSuggestions": ["mood1", "mood2", "mood3"],
  "technicalTips": ["tip1", "tip2", "tip3"]
}}"""


def concepts_fallback(raw_text: str, request: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "mainConcepts": ["Creative concept", "Artistic vision", "Visual storytelling"],
        "styleVariations": ["Realistic", "Artistic", "Abstract"],
        "compositionIdeas": ["Centered composition", "Rule of thirds", "Dynamic angle"],
        "colorPalettes": ["Warm tones", "Cool tones", "Monochromatic"],
        "moodSuggestions": ["Inspiring", "Peaceful", "Dynamic"],
        "technicalTips": ["High resolution", "Good lighting", "Sharp focus"]
    }


KINDS = [
    GenerationKind("image_concepts", build_concepts_prompt, concepts_fallback, ConceptAnalysis,
                   temperature=0.8, max_tokens=800),
]
