from typing import Dict

from prompts import analytics, chatbot, images, marketing, website
from prompts.base import GenerationKind

KINDS: Dict[str, GenerationKind] = {
    kind.name: kind
    for module in (website, marketing, analytics, chatbot, images)
    for kind in module.KINDS
}


def get_kind(name: str) -> GenerationKind:
    """Look up a generation kind by name. Raises KeyError for unknown kinds."""
    return KINDS[name]
