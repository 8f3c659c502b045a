import asyncio
import hashlib
import os
import random
import re
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote
from uuid import uuid4

import httpx
from loguru import logger

from prompts.images import build_image_prompt_request, style_enhanced
from tools import llm

POLLINATIONS_URL = "https://image.pollinations.ai/prompt"
FETCH_TIMEOUT = 60
IMAGES_SUBDIR = "generated-images"
DEFAULT_EXTENSION = "jpg"

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}

STYLE_MODIFIERS = {
    "professional": "professional, clean, modern, business-appropriate",
    "creative": "creative, artistic, innovative, visually striking",
    "minimal": "minimalist, clean, simple, elegant",
    "corporate": "corporate, formal, sophisticated, executive",
    "friendly": "friendly, approachable, warm, welcoming",
    "tech": "high-tech, futuristic, digital, innovative"
}

QUALITY_MODIFIERS = {
    "high": "high resolution, professional photography, studio lighting, sharp focus",
    "ultra": "ultra high resolution, award-winning photography, perfect lighting, exceptional detail",
    "standard": "good quality, well-lit, clear focus"
}

ASPECT_RATIOS = {
    "1:1": (512, 512),
    "16:9": (512, 288),
    "9:16": (288, 512),
    "4:3": (512, 384),
    "3:2": (512, 341)
}

FILE_NAME_RE = re.compile(r"^[\w.\-]+$")
UNSAFE_PROMPT_CHARS_RE = re.compile(r"[^\w\s\-.,]")


class ImageNotFoundError(Exception):
    """Raised when a generated image file does not exist."""


@dataclass
class ImageOutcome:
    """Result for one requested image: success with the image record, or failure with a reason."""
    key: str
    status: str
    image: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ImageRequest:
    key: str
    prompt: str
    aspect_ratio: str = "1:1"


def enhance_prompt(prompt: str, style: str = "", quality: str = "high") -> str:
    """Append style and quality modifiers plus the commercial-use suffix."""
    enhanced = prompt
    if style in STYLE_MODIFIERS:
        enhanced += f", {STYLE_MODIFIERS[style]}"
    if quality in QUALITY_MODIFIERS:
        enhanced += f", {QUALITY_MODIFIERS[quality]}"
    return enhanced + ", no text, no watermarks, commercial use"


def dimensions(aspect_ratio: str) -> Tuple[int, int]:
    return ASPECT_RATIOS.get(aspect_ratio, ASPECT_RATIOS["1:1"])


def color_from_prompt(prompt: str) -> str:
    """Stable placeholder colour derived from the prompt's md5 digest."""
    first_byte = hashlib.md5(prompt.encode("utf-8")).digest()[0]
    hue = first_byte * 360 / 255
    return f"hsl({hue:g}, 70%, 50%)"


def placeholder_svg(prompt: str, aspect_ratio: str = "1:1") -> bytes:
    width, height = dimensions(aspect_ratio)
    svg = (
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="100%" height="100%" fill="{color_from_prompt(prompt)}"/>'
        '<text x="50%" y="50%" font-family="Arial, sans-serif" font-size="16" fill="white" '
        'text-anchor="middle" dy=".3em">Generated Image</text>'
        '</svg>'
    )
    return svg.encode("utf-8")


def is_bare_file_name(file_name: str) -> bool:
    return bool(FILE_NAME_RE.match(file_name)) and file_name not in (".", "..")


class ImageGenerator:
    """Image generation via Pollinations with an SVG placeholder when the service is unreachable."""

    def __init__(self, uploads_dir: Optional[str] = None):
        base = uploads_dir or os.getenv("UPLOADS_DIR", "uploads")
        self.images_dir = os.path.join(base, IMAGES_SUBDIR)

    def _ensure_dir(self):
        os.makedirs(self.images_dir, exist_ok=True)

    async def fetch(self, prompt: str, aspect_ratio: str) -> Tuple[bytes, str]:
        """
        Fetch one image for the prompt.

        Returns:
            (image bytes, mime type); an SVG placeholder if the fetch fails
        """
        width, height = dimensions(aspect_ratio)
        clean_prompt = quote(UNSAFE_PROMPT_CHARS_RE.sub("", prompt).strip())
        seed = random.randint(0, 999999)
        url = f"{POLLINATIONS_URL}/{clean_prompt}"

        try:
            async with httpx.AsyncClient(timeout=FETCH_TIMEOUT, follow_redirects=True) as client:
                response = await client.get(
                    url,
                    params={"width": width, "height": height, "seed": seed, "model": "flux", "nologo": "true"}
                )
                response.raise_for_status()
                mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0]
                return response.content, mime_type
        except Exception as e:
            logger.error(f"Image fetch failed, using placeholder: {e}")
            return placeholder_svg(prompt, aspect_ratio), "image/svg+xml"

    def _save(self, data: bytes, mime_type: str, index: int) -> str:
        self._ensure_dir()
        extension = MIME_EXTENSIONS.get(mime_type, DEFAULT_EXTENSION)
        file_name = f"generated_{int(time.time() * 1000)}_{index}_{uuid4().hex[:8]}.{extension}"
        with open(os.path.join(self.images_dir, file_name), "wb") as f:
            f.write(data)
        return file_name

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1", style: str = "",
                             quality: str = "high", number_of_images: int = 1) -> Dict[str, Any]:
        """Generate and store images for a prompt."""
        enhanced = enhance_prompt(prompt, style, quality)
        logger.info(f"Generating {number_of_images} image(s): {enhanced[:100]}")

        images = []
        for index in range(number_of_images):
            data, mime_type = await self.fetch(enhanced, aspect_ratio)
            file_name = await asyncio.to_thread(self._save, data, mime_type, index)
            images.append({
                "url": f"/uploads/{IMAGES_SUBDIR}/{file_name}",
                "file_name": file_name,
                "prompt": enhanced,
                "aspect_ratio": aspect_ratio,
                "mime_type": mime_type,
                "size": len(data),
                "generated_at": datetime.now(timezone.utc).isoformat()
            })

        return {
            "images": images,
            "prompt": enhanced,
            "metadata": {
                "number_of_images": number_of_images,
                "aspect_ratio": aspect_ratio,
                "style": style,
                "quality": quality
            }
        }

    async def generate_website_images(self, business_name: str, industry: str,
                                      description: str = "", style: str = "") -> List[ImageOutcome]:
        """Generate the hero, about, services and contact images of a site, one outcome per key."""
        requests = [
            ImageRequest(
                key="hero",
                prompt=f"Professional hero image for {business_name}, a {industry} business. {description}. "
                       "Modern, clean, high-quality business photography style.",
                aspect_ratio="16:9"
            ),
            ImageRequest(
                key="about",
                prompt=f"About us section image for {business_name} in {industry}. "
                       "Professional team or workspace, welcoming and trustworthy atmosphere.",
                aspect_ratio="4:3"
            ),
            ImageRequest(
                key="services",
                prompt=f"Services illustration for {business_name}, {industry} company. "
                       "Clean, modern, professional representation of business services.",
                aspect_ratio="1:1"
            ),
            ImageRequest(
                key="contact",
                prompt=f"Contact section background for {business_name}. "
                       "Professional office or business environment, inviting and accessible.",
                aspect_ratio="16:9"
            ),
        ]

        outcomes = []
        for req in requests:
            try:
                result = await self.generate_image(req.prompt, aspect_ratio=req.aspect_ratio,
                                                   style=style or "professional", quality="high")
                outcomes.append(ImageOutcome(key=req.key, status="success", image=result["images"][0]))
            except Exception as e:
                logger.error(f"Failed to generate {req.key} image: {e}")
                outcomes.append(ImageOutcome(key=req.key, status="failure", reason=str(e)))
        return outcomes

    def _path(self, file_name: str) -> str:
        if not is_bare_file_name(file_name):
            raise ValueError(f"Invalid image file name: {file_name}")
        return os.path.join(self.images_dir, file_name)

    def delete_image(self, file_name: str) -> bool:
        """Delete a generated image. Returns False when the file does not exist."""
        path = self._path(file_name)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.info(f"Deleted image {file_name}")
        return True

    def image_info(self, file_name: str) -> Dict[str, Any]:
        path = self._path(file_name)
        try:
            stats = os.stat(path)
        except FileNotFoundError as e:
            raise ImageNotFoundError(f"Image not found: {file_name}") from e
        return {
            "file_name": file_name,
            "size": stats.st_size,
            "modified_at": datetime.fromtimestamp(stats.st_mtime, timezone.utc).isoformat(),
            "url": f"/uploads/{IMAGES_SUBDIR}/{file_name}"
        }


def generate_prompt(requirements: Dict[str, Any]) -> Dict[str, Any]:
    """
    Ask the model to write an image-generation prompt from free-form requirements.

    Raises:
        ModelInvocationError: If the model call fails
    """
    generated = llm.complete(build_image_prompt_request(requirements), temperature=0.7, max_tokens=500).strip()
    return {
        "prompt": generated,
        "enhanced_prompt": style_enhanced(generated, requirements.get("style") or "realistic"),
        "original_requirements": requirements,
        "metadata": {
            "model": llm.llm_client.model,
            "generated_at": datetime.now(timezone.utc).isoformat()
        }
    }


# Global image generator instance
image_generator = ImageGenerator()
